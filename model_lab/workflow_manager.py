# model_lab/workflow_manager.py
import logging
import operator
import threading
from typing import Callable, List, Optional, Tuple, Union

from pydantic import BaseModel

from .custom_exceptions import InvalidStepIndexError, UnknownModelFamilyError
from .dataset_manager import build_default_datasets
from .schemas import FIRST_STEP, LAST_STEP, LabDatasets, ModelCandidate, ModelFamily, Step, WorkflowState
from .settings import settings
from .statistics_manager import find_candidate
from .view_manager import build_view

# Set up a logger for this module
logger = logging.getLogger(__name__)

StateListener = Callable[[WorkflowState], None]

ANALYZE_LABEL = "Analyze"
REDO_LABEL = "Redo"


def parse_step(step: Union[int, Step]) -> Step:
    """
    Validates a step index. Out-of-range values are rejected, never clamped.
    Integer-like values such as numpy.int64 are accepted; floats and strings are not.
    Raises InvalidStepIndexError.
    """
    # bool is an int subclass; True would otherwise pass as step 1
    if isinstance(step, bool):
        raise InvalidStepIndexError(f"Step must be an integer between {int(FIRST_STEP)} and {int(LAST_STEP)}, got {step!r}.")
    try:
        index = operator.index(step)
    except TypeError:
        raise InvalidStepIndexError(f"Step must be an integer between {int(FIRST_STEP)} and {int(LAST_STEP)}, got {step!r}.")
    if not FIRST_STEP <= index <= LAST_STEP:
        raise InvalidStepIndexError(f"Step {index} is out of range. Choose a step between {int(FIRST_STEP)} and {int(LAST_STEP)}.")
    return Step(index)


def parse_model_family(model: Union[str, ModelFamily]) -> ModelFamily:
    """Accepts a ModelFamily or its name in any case. Raises UnknownModelFamilyError."""
    if isinstance(model, ModelFamily):
        return model
    if isinstance(model, str):
        try:
            return ModelFamily(model.strip().upper())
        except ValueError:
            pass
    choices = ", ".join(family.value for family in ModelFamily)
    raise UnknownModelFamilyError(f"Invalid model family {model!r}. Choose one of: {choices}.")


class WorkflowController:
    """
    Owns the lab's view state and enforces step sequencing.

    Each instance holds its own state and lock, so separate sessions never share
    a workflow. Transitions are synchronous; listeners registered with
    subscribe() are told about every new state.
    """

    def __init__(self, datasets: Optional[LabDatasets] = None, default_model: Optional[ModelFamily] = None):
        self._datasets = datasets if datasets is not None else build_default_datasets()
        self._default_model = parse_model_family(default_model or settings.default_model)
        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []
        self._state = WorkflowState(selected_model=self._default_model)

    # --- Read-only accessors ---

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def datasets(self) -> LabDatasets:
        return self._datasets

    @property
    def primary_action_label(self) -> str:
        return REDO_LABEL if self._state.completed else ANALYZE_LABEL

    @property
    def active_step_label(self) -> str:
        return self._state.active_step.label

    @property
    def selected_candidate(self) -> ModelCandidate:
        return find_candidate(self._datasets.candidates, self._state.selected_model)

    @staticmethod
    def steps() -> List[Tuple[Step, str]]:
        """Ordered (step, label) pairs for the tab control."""
        return [(step, step.label) for step in Step]

    def active_view(self) -> BaseModel:
        """View data for the active step only."""
        state = self._state
        return build_view(state.active_step, self._datasets, state.selected_model)

    # --- Transitions ---

    def select_step(self, step: Union[int, Step]) -> WorkflowState:
        """
        Jumps straight to `step`. Landing on the last step marks the story
        complete even if earlier steps were never visited; any other step clears it.
        """
        target = parse_step(step)
        with self._lock:
            new_state = self._state.model_copy(update={"active_step": target, "completed": target == LAST_STEP})
            return self._commit(new_state, f"select_step({int(target)})")

    def advance(self) -> WorkflowState:
        """
        The primary action. Restarts from the first step once the story is
        complete, otherwise moves forward one step, saturating at the last.
        """
        with self._lock:
            current = self._state
            if current.completed and current.active_step == LAST_STEP:
                new_state = current.model_copy(update={"active_step": FIRST_STEP, "completed": False})
                return self._commit(new_state, "advance (restart)")

            next_step = Step(min(current.active_step + 1, LAST_STEP))
            completed = current.completed or next_step == LAST_STEP
            new_state = current.model_copy(update={"active_step": next_step, "completed": completed})
            return self._commit(new_state, "advance")

    def select_model(self, model: Union[str, ModelFamily]) -> WorkflowState:
        family = parse_model_family(model)
        with self._lock:
            new_state = self._state.model_copy(update={"selected_model": family})
            return self._commit(new_state, f"select_model({family.value})")

    def reset(self) -> WorkflowState:
        """Returns to the mount-time state, as when the workflow is dismissed."""
        with self._lock:
            return self._commit(WorkflowState(selected_model=self._default_model), "reset")

    # --- Subscriptions ---

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Registers a listener and returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: WorkflowState, action: str) -> WorkflowState:
        previous = self._state
        self._state = new_state
        logger.info(
            f"Workflow {action}: step {int(previous.active_step)} -> {int(new_state.active_step)}, "
            f"model={new_state.selected_model.value}, completed={new_state.completed}"
        )
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                # State is already committed; keep notifying the rest
                logger.error(f"Workflow listener {listener!r} failed after {action}: {e}")
        return new_state
