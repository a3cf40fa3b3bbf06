# model_lab/schemas.py
import math
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Enumerations ---
class ModelFamily(str, Enum):
    """Forecasting model families the user can pick in the control panel."""
    ARIMA = "ARIMA"
    SARIMA = "SARIMA"
    SARIMAX = "SARIMAX"

class Step(IntEnum):
    """The six ordered stages of the lab."""
    INGEST = 1
    CORRELATIONS = 2
    STATIONARITY = 3
    DECOMPOSITION = 4
    TRAINING = 5
    EVALUATION = 6

    @property
    def label(self) -> str:
        return STEP_LABELS[self]

STEP_LABELS: Dict[Step, str] = {
    Step.INGEST: "Ingest",
    Step.CORRELATIONS: "Correlations",
    Step.STATIONARITY: "Stationarity",
    Step.DECOMPOSITION: "Decomposition",
    Step.TRAINING: "Training",
    Step.EVALUATION: "Evaluation",
}

FIRST_STEP = Step.INGEST
LAST_STEP = Step.EVALUATION

class CorrelationBand(str, Enum):
    """Display band of a correlation coefficient."""
    PERFECT = "perfect"
    MODERATE_POSITIVE = "moderatePositive"
    WEAK = "weak"
    STRONG_NEGATIVE = "strongNegative"
    # Only reachable for NaN, which fails every band comparison
    UNDEFINED = "undefined"


# --- Statistics Schemas ---
class SummaryStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    mean: float
    std_dev: float = Field(ge=0)
    min: float
    max: float
    count: int = Field(0, ge=0)

class ModelCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: ModelFamily
    order_label: str
    aic: float
    wmape: float = Field(ge=0, description="Weighted MAPE, in percent")
    r2: float = Field(le=1)
    rmse: float = Field(ge=0)
    mae: Optional[float] = Field(None, ge=0)
    training_time_seconds: float = Field(ge=0)

class ModelComparisonRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: ModelFamily
    order_label: str
    aic: float
    wmape: float
    r2: float
    rmse: float
    mae: Optional[float] = None
    training_time_seconds: float
    accuracy: float
    aic_improvement_pct: float
    is_best: bool = False


# --- Workflow Schemas ---
class WorkflowState(BaseModel):
    model_config = ConfigDict(frozen=True)

    active_step: Step = Step.INGEST
    selected_model: ModelFamily = ModelFamily.SARIMAX
    completed: bool = False


# --- Dataset Schemas ---
class IngestPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: int
    bookings: float
    revenue: float

class DecompositionPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    t: int
    trend: float
    seasonal: float
    residual: float

class EvaluationPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: int
    actual: float
    forecast: float

class HistogramBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: str
    count: int = Field(ge=0)

class StationarityResult(BaseModel):
    """Outcome of an augmented Dickey-Fuller test, as reported by the dataset provider."""
    model_config = ConfigDict(frozen=True)

    label: str
    adf_statistic: float
    p_value: float = Field(ge=0, le=1)
    differencing_order: int = Field(ge=0)
    is_stationary: bool
    confidence: Optional[float] = Field(None, ge=0, le=100)

class AnalysisMetric(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    value: str

class ComponentAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    metrics: Tuple[AnalysisMetric, ...]
    analysis: str

class CorrelationMatrix(BaseModel):
    """Square, symmetric coefficient matrix with a unit diagonal."""
    model_config = ConfigDict(frozen=True)

    labels: Tuple[str, ...]
    values: Tuple[Tuple[float, ...], ...]

    @model_validator(mode="after")
    def check_shape_and_values(self):
        size = len(self.labels)
        if len(self.values) != size or any(len(row) != size for row in self.values):
            raise ValueError(f"Correlation matrix must be {size}x{size} to match its labels.")
        for i, row in enumerate(self.values):
            for j, value in enumerate(row):
                if not -1.0 <= value <= 1.0:
                    raise ValueError(f"Coefficient {value} at ({i}, {j}) is outside [-1, 1].")
                if i == j and not math.isclose(value, 1.0):
                    raise ValueError(f"Diagonal entry ({i}, {i}) must be 1.0, got {value}.")
                if not math.isclose(value, self.values[j][i]):
                    raise ValueError(f"Matrix is not symmetric at ({i}, {j}).")
        return self

    def coefficient(self, row_label: str, column_label: str) -> float:
        return self.values[self.labels.index(row_label)][self.labels.index(column_label)]

class LabDatasets(BaseModel):
    """Everything the six stages display. Read-only once built."""
    model_config = ConfigDict(frozen=True)

    ingest: Tuple[IngestPoint, ...]
    decomposition: Tuple[DecompositionPoint, ...]
    evaluation: Tuple[EvaluationPoint, ...]
    residual_histogram: Tuple[HistogramBucket, ...]
    correlations: CorrelationMatrix
    stationarity: Tuple[StationarityResult, ...]
    decomposition_analysis: Tuple[ComponentAnalysis, ...]
    candidates: Tuple[ModelCandidate, ...]


# --- View Schemas ---
class CorrelationCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: str
    column: str
    value: float
    band: CorrelationBand

class LegendEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    band: CorrelationBand
    label: str

class IngestView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.INGEST
    series: Tuple[IngestPoint, ...]
    summary: SummaryStatistics
    observation_count: int
    insight: str

class CorrelationsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.CORRELATIONS
    matrix: CorrelationMatrix
    cells: Tuple[CorrelationCell, ...]
    legend: Tuple[LegendEntry, ...]
    strongest_pair: Optional[CorrelationCell] = None

class StationarityView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.STATIONARITY
    series: Tuple[DecompositionPoint, ...]
    differenced: Tuple[float, ...]
    results: Tuple[StationarityResult, ...]
    integration_order: int
    insight: str

class DecompositionView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.DECOMPOSITION
    series: Tuple[DecompositionPoint, ...]
    components: Dict[str, SummaryStatistics]
    analysis: Tuple[ComponentAnalysis, ...]

class TrainingView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.TRAINING
    comparison: Tuple[ModelComparisonRow, ...]
    best_model: ModelFamily
    selected_model: ModelFamily
    insight: str

class EvaluationView(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step = Step.EVALUATION
    series: Tuple[EvaluationPoint, ...]
    residual_histogram: Tuple[HistogramBucket, ...]
    selected: ModelCandidate
    accuracy: float
