# model_lab/dataset_manager.py
import math
import random
import logging
from typing import List, Optional

from .schemas import (
    AnalysisMetric,
    ComponentAnalysis,
    CorrelationMatrix,
    DecompositionPoint,
    EvaluationPoint,
    HistogramBucket,
    IngestPoint,
    LabDatasets,
    ModelCandidate,
    ModelFamily,
    StationarityResult,
)
from .settings import settings

# Set up a logger for this module
logger = logging.getLogger(__name__)

# --- Static Reference Data ---
CORRELATION_LABELS = ("Booking Date", "Rainfall", "Holiday")
CORRELATION_VALUES = (
    (1.0, -0.65, 0.42),
    (-0.65, 1.0, -0.08),
    (0.42, -0.08, 1.0),
)

RESIDUAL_HISTOGRAM = (
    ("-3σ", 2),
    ("-2σ", 6),
    ("-1σ", 10),
    ("0σ", 14),
    ("+1σ", 9),
    ("+2σ", 5),
    ("+3σ", 2),
)

MODEL_CANDIDATES = (
    {"name": ModelFamily.ARIMA, "order_label": "ARIMA (1,1,1)", "aic": 1285.3, "wmape": 8.7, "r2": 0.74,
     "rmse": 256.8, "mae": None, "training_time_seconds": 1.2},
    {"name": ModelFamily.SARIMA, "order_label": "SARIMA", "aic": 1198.7, "wmape": 5.9, "r2": 0.83,
     "rmse": 198.5, "mae": None, "training_time_seconds": 2.8},
    {"name": ModelFamily.SARIMAX, "order_label": "SARIMAX", "aic": 1142.1, "wmape": 4.2, "r2": 0.89,
     "rmse": 142.5, "mae": 118.3, "training_time_seconds": 3.5},
)


def _noise(rng: random.Random, width: float) -> float:
    """Uniform noise centred on zero, spanning `width`."""
    return (rng.random() - 0.5) * width


def build_ingest_series(points: int, rng: random.Random) -> List[IngestPoint]:
    """Generates the daily bookings and revenue series shown on the ingest stage."""
    return [
        IngestPoint(
            day=i + 1,
            bookings=80 + math.sin(i / 3) * 15 + _noise(rng, 10),
            revenue=120 + math.cos(i / 4) * 20 + _noise(rng, 15),
        )
        for i in range(points)
    ]


def build_decomposition_series(points: int, rng: random.Random) -> List[DecompositionPoint]:
    """Generates a linear trend, a 12-period seasonal wave and random residuals."""
    return [
        DecompositionPoint(
            t=i + 1,
            trend=100 + i * 2,
            seasonal=math.sin((i / 12) * math.pi * 2) * 10,
            residual=_noise(rng, 8),
        )
        for i in range(points)
    ]


def build_evaluation_series(points: int) -> List[EvaluationPoint]:
    """Actual values against a slightly phase-shifted forecast. Deterministic."""
    return [
        EvaluationPoint(
            period=i + 1,
            actual=110 + math.sin(i / 3) * 18,
            forecast=108 + math.sin(i / 3 + 0.1) * 17,
        )
        for i in range(points)
    ]


def build_residual_histogram() -> List[HistogramBucket]:
    return [HistogramBucket(bucket=bucket, count=count) for bucket, count in RESIDUAL_HISTOGRAM]


def build_correlation_matrix() -> CorrelationMatrix:
    return CorrelationMatrix(labels=CORRELATION_LABELS, values=CORRELATION_VALUES)


def build_stationarity_results() -> List[StationarityResult]:
    """ADF results before and after first differencing."""
    return [
        StationarityResult(
            label="Original Series",
            adf_statistic=-1.245,
            p_value=0.850,
            differencing_order=0,
            is_stationary=False,
        ),
        StationarityResult(
            label="After Differencing (d=1)",
            adf_statistic=-4.125,
            p_value=0.030,
            differencing_order=1,
            is_stationary=True,
            confidence=97.0,
        ),
    ]


def build_decomposition_analysis() -> List[ComponentAnalysis]:
    return [
        ComponentAnalysis(
            key="trend",
            label="Trend",
            metrics=(AnalysisMetric(title="Direction", value="Upward"), AnalysisMetric(title="Strength", value="Strong")),
            analysis=(
                "The trend component shows consistent upward growth over the observed period, "
                "indicating increasing sales performance over time with approximately 50 units per month growth rate."
            ),
        ),
        ComponentAnalysis(
            key="seasonality",
            label="Seasonality",
            metrics=(AnalysisMetric(title="Period", value="12 months"), AnalysisMetric(title="Amplitude", value="Moderate")),
            analysis=(
                "Clear seasonal pattern repeating every 12 months. Peak sales occur during mid-year (June) "
                "with moderate amplitude variation of ±200 units from the mean."
            ),
        ),
        ComponentAnalysis(
            key="residuals",
            label="Residuals",
            metrics=(AnalysisMetric(title="Distribution", value="Normal"), AnalysisMetric(title="Variance", value="Low")),
            analysis=(
                "Residuals appear random with no discernible pattern, suggesting the decomposition successfully "
                "captured the trend and seasonal components. Low variance indicates good model fit."
            ),
        ),
    ]


def build_model_candidates() -> List[ModelCandidate]:
    return [ModelCandidate(**candidate) for candidate in MODEL_CANDIDATES]


def build_default_datasets(seed: Optional[int] = None) -> LabDatasets:
    """
    Assembles every dataset the lab displays into one read-only bundle.
    The same seed always produces the same bundle; point counts come from settings.
    """
    if seed is None:
        seed = settings.dataset_seed
    rng = random.Random(seed)

    datasets = LabDatasets(
        ingest=build_ingest_series(settings.ingest_points, rng),
        decomposition=build_decomposition_series(settings.decomposition_points, rng),
        evaluation=build_evaluation_series(settings.evaluation_points),
        residual_histogram=build_residual_histogram(),
        correlations=build_correlation_matrix(),
        stationarity=build_stationarity_results(),
        decomposition_analysis=build_decomposition_analysis(),
        candidates=build_model_candidates(),
    )
    logger.info(
        f"Built lab datasets: {len(datasets.ingest)} ingest, {len(datasets.decomposition)} decomposition, "
        f"{len(datasets.evaluation)} evaluation points (seed={seed})."
    )
    return datasets
