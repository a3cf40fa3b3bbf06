# model_lab/view_manager.py
"""
Per-step view data.

Each stage of the lab has one pure builder taking the datasets and the selected
model family and returning that stage's read-only view model. STEP_VIEWS maps
every Step to its builder; build_view is the single dispatch point.
"""
import logging
from typing import Callable, Dict

from pydantic import BaseModel

from .custom_exceptions import InvalidStepIndexError
from .schemas import (
    CorrelationsView,
    DecompositionView,
    EvaluationView,
    IngestView,
    LabDatasets,
    ModelFamily,
    StationarityView,
    Step,
    TrainingView,
)
from .settings import settings
from .statistics_manager import (
    best_model,
    build_model_comparison,
    classify_matrix,
    compute_summary,
    correlation_legend,
    difference_series,
    find_candidate,
    round_half_up,
    strongest_pair,
    summarize_fields,
)

logger = logging.getLogger(__name__)

ViewBuilder = Callable[[LabDatasets, ModelFamily], BaseModel]

DECOMPOSITION_COMPONENTS = ("trend", "seasonal", "residual")


def build_ingest_view(datasets: LabDatasets, selected_model: ModelFamily) -> IngestView:
    summary = compute_summary(datasets.ingest, "bookings")
    return IngestView(
        series=datasets.ingest,
        summary=summary,
        observation_count=len(datasets.ingest),
        insight=(
            f"Time series data loaded. {len(datasets.ingest)} observation points detected "
            f"with a variation (Std Dev) of {summary.std_dev}."
        ),
    )


def build_correlations_view(datasets: LabDatasets, selected_model: ModelFamily) -> CorrelationsView:
    matrix = datasets.correlations
    return CorrelationsView(
        matrix=matrix,
        cells=classify_matrix(matrix),
        legend=correlation_legend(),
        strongest_pair=strongest_pair(matrix),
    )


def build_stationarity_view(datasets: LabDatasets, selected_model: ModelFamily) -> StationarityView:
    stationary = [result for result in datasets.stationarity if result.is_stationary]
    integration_order = min((result.differencing_order for result in stationary), default=0)
    if stationary:
        insight = "Trend successfully removed. Series is now stationary and ready for ARIMA modeling."
    else:
        insight = "Series is not stationary. Differencing is required before modeling."
    return StationarityView(
        series=datasets.decomposition,
        differenced=difference_series(datasets.decomposition, "trend", order=max(integration_order, 1)),
        results=datasets.stationarity,
        integration_order=integration_order,
        insight=insight,
    )


def build_decomposition_view(datasets: LabDatasets, selected_model: ModelFamily) -> DecompositionView:
    return DecompositionView(
        series=datasets.decomposition,
        components=summarize_fields(datasets.decomposition, DECOMPOSITION_COMPONENTS),
        analysis=datasets.decomposition_analysis,
    )


def build_training_view(datasets: LabDatasets, selected_model: ModelFamily) -> TrainingView:
    comparison = build_model_comparison(datasets.candidates)
    best = best_model(datasets.candidates)
    best_row = next(row for row in comparison if row.name == best.name)
    return TrainingView(
        comparison=comparison,
        best_model=best.name,
        selected_model=selected_model,
        insight=(
            f"{best.name.value} improves AIC by {best_row.aic_improvement_pct}% over the baseline and reaches "
            f"{best_row.accuracy}% accuracy ({best.wmape}% WMAPE), explaining {round(best.r2 * 100)}% of variance."
        ),
    )


def build_evaluation_view(datasets: LabDatasets, selected_model: ModelFamily) -> EvaluationView:
    selected = find_candidate(datasets.candidates, selected_model)
    return EvaluationView(
        series=datasets.evaluation,
        residual_histogram=datasets.residual_histogram,
        selected=selected,
        accuracy=round_half_up(100 - selected.wmape, settings.display_decimals),
    )


STEP_VIEWS: Dict[Step, ViewBuilder] = {
    Step.INGEST: build_ingest_view,
    Step.CORRELATIONS: build_correlations_view,
    Step.STATIONARITY: build_stationarity_view,
    Step.DECOMPOSITION: build_decomposition_view,
    Step.TRAINING: build_training_view,
    Step.EVALUATION: build_evaluation_view,
}


def build_view(step: int, datasets: LabDatasets, selected_model: ModelFamily) -> BaseModel:
    """Dispatches to the builder registered for `step`."""
    try:
        builder = STEP_VIEWS[Step(step)]
    except (ValueError, KeyError):
        raise InvalidStepIndexError(f"No view registered for step {step!r}.")

    logger.debug(f"Building view for step {step} ({builder.__name__}).")
    return builder(datasets, selected_model)
