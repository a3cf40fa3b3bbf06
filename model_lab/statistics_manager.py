# model_lab/statistics_manager.py
import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
from pydantic import BaseModel

from .custom_exceptions import ModelNotFoundError, UnknownFieldError
from .schemas import (
    CorrelationBand,
    CorrelationCell,
    CorrelationMatrix,
    LegendEntry,
    ModelCandidate,
    ModelComparisonRow,
    ModelFamily,
    SummaryStatistics,
)
from .settings import settings

# Set up a logger for this module
logger = logging.getLogger(__name__)

SeriesLike = Union[pd.DataFrame, Sequence[Mapping[str, object]], Sequence[BaseModel]]

# Returned for an empty series instead of raising
ZERO_SUMMARY = SummaryStatistics(mean=0.0, std_dev=0.0, min=0.0, max=0.0, count=0)

CORRELATION_LEGEND: Tuple[Tuple[CorrelationBand, str], ...] = (
    (CorrelationBand.PERFECT, "Perfect (+1.0)"),
    (CorrelationBand.MODERATE_POSITIVE, "Mod. Pos (+0.5)"),
    (CorrelationBand.WEAK, "Weak (±0.5)"),
    (CorrelationBand.STRONG_NEGATIVE, "Strong Neg (-0.5)"),
)


def to_frame(series: SeriesLike) -> pd.DataFrame:
    """
    Normalizes a series into a DataFrame, preserving observation order.
    Accepts a DataFrame, a sequence of record mappings, or a sequence of pydantic models.
    """
    if isinstance(series, pd.DataFrame):
        return series
    records = [point.model_dump() if isinstance(point, BaseModel) else dict(point) for point in series]
    return pd.DataFrame.from_records(records)


def round_half_up(value: float, decimals: int) -> float:
    """
    Rounds exact halves away from zero, the way JavaScript's toFixed formats display values.
    Built-in round() sends 0.25 to 0.2; this sends it to 0.3.
    """
    if not math.isfinite(value):
        return float(value)
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _numeric_field(frame: pd.DataFrame, field: str) -> pd.Series:
    if field not in frame.columns:
        raise UnknownFieldError(f"Series has no field '{field}'. Available fields: {list(frame.columns)}")

    values = pd.to_numeric(frame[field], errors='coerce')
    # Infinities survive coercion but leave mean and std undefined
    values = values.replace([math.inf, -math.inf], math.nan)
    dropped = int(values.isna().sum())
    if dropped:
        logger.warning(f"Dropped {dropped} non-numeric or non-finite value(s) from field '{field}'.")
    return values.dropna()


def compute_summary(series: SeriesLike, field: str, decimals: Optional[int] = None) -> SummaryStatistics:
    """
    Computes mean, population standard deviation, min and max over one field of a series.

    An empty series (or one with no numeric values left for the field) yields the
    zero summary {0, 0, 0, 0}. This is a deliberate safe default so the ingest
    stage can render before any data arrives, not a swallowed error.

    Mean and standard deviation are rounded to `decimals` places (the configured
    display precision by default); min and max keep the series' own precision.
    The rounded mean is clamped into [min, max] so rounding never breaks
    min <= mean <= max.

    Nothing is cached: every call recomputes from the series it is given.
    """
    frame = to_frame(series)
    if frame.empty:
        logger.debug(f"Empty series for field '{field}'; returning the zero summary.")
        return ZERO_SUMMARY

    values = _numeric_field(frame, field)
    if values.empty:
        logger.debug(f"No numeric values in field '{field}'; returning the zero summary.")
        return ZERO_SUMMARY

    if decimals is None:
        decimals = settings.display_decimals

    minimum = float(values.min())
    maximum = float(values.max())
    # Population standard deviation: divide by N, not N - 1
    std_dev = float(values.std(ddof=0))
    mean = min(max(round_half_up(float(values.mean()), decimals), minimum), maximum)

    return SummaryStatistics(
        mean=mean,
        std_dev=round_half_up(std_dev, decimals),
        min=minimum,
        max=maximum,
        count=len(values),
    )


def summarize_fields(series: SeriesLike, fields: Iterable[str], decimals: Optional[int] = None) -> Dict[str, SummaryStatistics]:
    """Runs compute_summary for each named field of the same series."""
    frame = to_frame(series)
    return {field: compute_summary(frame, field, decimals) for field in fields}


def difference_series(series: SeriesLike, field: str, order: int = 1) -> List[float]:
    """
    Applies `order` rounds of first differencing to a field, as done before an
    ADF re-test. The result is `order` observations shorter than the input.
    """
    if order < 1:
        raise ValueError(f"Differencing order must be at least 1, got {order}.")

    frame = to_frame(series)
    if frame.empty:
        return []

    values = _numeric_field(frame, field).reset_index(drop=True)
    for _ in range(order):
        values = values.diff()
    return values.dropna().tolist()


# --- Correlations ---

def build_correlation_color(value: float) -> CorrelationBand:
    """
    Maps a correlation coefficient to its display band.
    Bands are tested in order and the first match wins, so exactly 0.5 is
    moderately positive and exactly -0.5 is strongly negative.
    """
    if value >= 1.0:
        return CorrelationBand.PERFECT
    if value >= 0.5:
        return CorrelationBand.MODERATE_POSITIVE
    if -0.5 < value < 0.5:
        return CorrelationBand.WEAK
    if value <= -0.5:
        return CorrelationBand.STRONG_NEGATIVE
    return CorrelationBand.UNDEFINED


def correlation_legend() -> List[LegendEntry]:
    return [LegendEntry(band=band, label=label) for band, label in CORRELATION_LEGEND]


def classify_matrix(matrix: CorrelationMatrix) -> List[CorrelationCell]:
    """Returns every cell of the matrix, row by row, tagged with its band."""
    return [
        CorrelationCell(row=row_label, column=column_label, value=value, band=build_correlation_color(value))
        for row_label, row in zip(matrix.labels, matrix.values)
        for column_label, value in zip(matrix.labels, row)
    ]


def strongest_pair(matrix: CorrelationMatrix) -> Optional[CorrelationCell]:
    """The off-diagonal pair with the largest absolute coefficient, or None for a 1x1 matrix."""
    best = None
    size = len(matrix.labels)
    for i in range(size):
        for j in range(i + 1, size):
            value = matrix.values[i][j]
            if best is None or abs(value) > abs(best.value):
                best = CorrelationCell(
                    row=matrix.labels[i],
                    column=matrix.labels[j],
                    value=value,
                    band=build_correlation_color(value),
                )
    return best


# --- Model comparison ---

def find_candidate(candidates: Sequence[ModelCandidate], family: ModelFamily) -> ModelCandidate:
    for candidate in candidates:
        if candidate.name == family:
            return candidate
    raise ModelNotFoundError(f"No model candidate found for family '{family.value}'.")


def best_model(candidates: Sequence[ModelCandidate]) -> ModelCandidate:
    """Picks the candidate with the lowest AIC."""
    if not candidates:
        raise ModelNotFoundError("Cannot pick a best model from an empty candidate list.")
    return min(candidates, key=lambda candidate: candidate.aic)


def build_model_comparison(
    candidates: Sequence[ModelCandidate],
    baseline: ModelFamily = ModelFamily.ARIMA,
    decimals: Optional[int] = None,
) -> List[ModelComparisonRow]:
    """
    Builds the training-stage comparison table, one row per candidate in input order.

    accuracy is 100 - WMAPE, aic_improvement_pct is the relative AIC drop versus
    the baseline family, and is_best flags the lowest AIC.
    """
    if not candidates:
        return []

    if decimals is None:
        decimals = settings.display_decimals

    baseline_aic = find_candidate(candidates, baseline).aic

    comparison_df = pd.DataFrame([candidate.model_dump() for candidate in candidates])
    comparison_df['accuracy'] = (100 - comparison_df['wmape']).map(lambda value: round_half_up(value, decimals))
    comparison_df['aic_improvement_pct'] = ((baseline_aic - comparison_df['aic']) / baseline_aic * 100).map(
        lambda value: round_half_up(value, decimals)
    )
    comparison_df['is_best'] = comparison_df['aic'] == comparison_df['aic'].min()

    rows = []
    for record in comparison_df.to_dict('records'):
        # A column with any missing MAE comes back as NaN
        if pd.isna(record['mae']):
            record['mae'] = None
        record['is_best'] = bool(record['is_best'])
        rows.append(ModelComparisonRow(**record))
    return rows
