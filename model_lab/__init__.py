# model_lab/__init__.py
from .custom_exceptions import InvalidStepIndexError, ModelNotFoundError, UnknownFieldError, UnknownModelFamilyError
from .dataset_manager import build_default_datasets
from .schemas import CorrelationBand, ModelFamily, Step, SummaryStatistics, WorkflowState
from .statistics_manager import build_correlation_color, build_model_comparison, compute_summary
from .workflow_manager import WorkflowController

__all__ = [
    "CorrelationBand",
    "InvalidStepIndexError",
    "ModelFamily",
    "ModelNotFoundError",
    "Step",
    "SummaryStatistics",
    "UnknownFieldError",
    "UnknownModelFamilyError",
    "WorkflowController",
    "WorkflowState",
    "build_correlation_color",
    "build_default_datasets",
    "build_model_comparison",
    "compute_summary",
]
