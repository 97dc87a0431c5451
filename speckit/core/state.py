"""Workflow state persistence.

State lives in a single human-editable JSON file (``.speckit/state.json``)
that tracks the four workflow phases and implement-phase task progress.
Keys are written in camelCase (``workflowId``, ``currentPhase``,
``taskProgress``) so existing state files stay readable; snake_case keys
are accepted on load as well.
"""

import os
import re
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from speckit.core.exceptions import InvalidPhaseError, WorkflowStateError

STATE_FILE = "state.json"
STATE_VERSION = "1.0"


class Phase(str, Enum):
    """Workflow phases, in order."""

    CONSTITUTE = "constitute"
    SPECIFY = "specify"
    PLAN = "plan"
    IMPLEMENT = "implement"


class PhaseStatus(str, Enum):
    """Status of a phase or an implement-phase task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


PHASES: list[Phase] = list(Phase)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PhaseState(BaseModel):
    """Progress of one phase."""

    model_config = ConfigDict(frozen=False, alias_generator=to_camel, populate_by_name=True)

    status: PhaseStatus = PhaseStatus.PENDING
    quality: int | None = Field(default=None, ge=0, le=100)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    task_progress: dict[str, PhaseStatus] = Field(
        default_factory=dict,
        description="Task ID -> status (implement phase)",
    )


class WorkflowState(BaseModel):
    """Complete workflow state as stored on disk."""

    model_config = ConfigDict(frozen=False, alias_generator=to_camel, populate_by_name=True)

    workflow_id: str
    project_name: str
    version: str = STATE_VERSION
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    current_phase: Phase = Phase.CONSTITUTE
    phases: dict[Phase, PhaseState] = Field(
        default_factory=lambda: {phase: PhaseState() for phase in PHASES}
    )

    def phase(self, phase: Phase) -> PhaseState:
        """Get (creating if absent) the state of a phase."""
        return self.phases.setdefault(phase, PhaseState())

    @property
    def progress(self) -> int:
        """Percentage of completed phases."""
        completed = sum(
            1 for phase in PHASES if self.phase(phase).status == PhaseStatus.COMPLETED
        )
        return round(completed / len(PHASES) * 100)

    @property
    def is_complete(self) -> bool:
        return all(self.phase(phase).status == PhaseStatus.COMPLETED for phase in PHASES)


def make_workflow_id(project_name: str, today: date | None = None) -> str:
    """
    Build a workflow ID of the form ``YYYY-MM-DD-slug``.

    Example:
        >>> make_workflow_id("My Shop", date(2024, 5, 1))
        '2024-05-01-my-shop'
    """
    today = today or date.today()
    slug = re.sub(r"\s+", "-", project_name.strip().lower())
    return f"{today.isoformat()}-{slug}"


def _parse_phase(phase: str | Phase) -> Phase:
    try:
        return Phase(phase)
    except ValueError:
        names = ", ".join(p.value for p in PHASES)
        raise InvalidPhaseError(f"Invalid phase: {phase}. Must be one of: {names}") from None


def _parse_status(status: str | PhaseStatus) -> PhaseStatus:
    try:
        return PhaseStatus(status)
    except ValueError:
        names = ", ".join(s.value for s in PhaseStatus)
        raise InvalidPhaseError(f"Invalid status: {status}. Must be one of: {names}") from None


class WorkflowStore:
    """
    Read and write workflow state.

    Example:
        >>> store = WorkflowStore(".speckit")
        >>> store.init_workflow("2024-05-01-shop", "Shop")
        >>> store.update_phase("constitute", "completed", quality=92)
        >>> store.current_phase()
        <Phase.SPECIFY: 'specify'>
    """

    def __init__(self, base_dir: str | Path, filename: str = STATE_FILE) -> None:
        self.base_dir = Path(base_dir)
        self.path = self.base_dir / filename

    def exists(self) -> bool:
        return self.path.exists()

    def init_workflow(
        self,
        workflow_id: str,
        project_name: str,
        *,
        force: bool = False,
    ) -> WorkflowState:
        """
        Create a new workflow state file.

        Raises:
            WorkflowStateError: If a workflow already exists and ``force`` is False.
        """
        if self.exists() and not force:
            raise WorkflowStateError(
                f"Workflow already exists at {self.path}. Use reset to start over."
            )

        self.base_dir.mkdir(parents=True, exist_ok=True)
        state = WorkflowState(workflow_id=workflow_id, project_name=project_name)
        self.save(state)

        logger.info(f"Initialized workflow {workflow_id} at {self.path}")
        return state

    def load(self) -> WorkflowState:
        """
        Load the workflow state.

        Raises:
            WorkflowStateError: If the file is missing or corrupted.
        """
        if not self.exists():
            raise WorkflowStateError(
                f"No workflow state found at {self.path}. Run `speckit init` first."
            )

        try:
            return WorkflowState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise WorkflowStateError(f"Invalid state file {self.path}: {e}") from e

    def save(self, state: WorkflowState) -> None:
        """Save state atomically (temp file, then rename)."""
        state.updated_at = _now()
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(state.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug(f"Saved workflow state to {self.path}")

    def update_phase(
        self,
        phase: str | Phase,
        status: str | PhaseStatus,
        quality: int | None = None,
    ) -> WorkflowState:
        """
        Update a phase's status.

        Completing a phase records its quality score and moves
        ``current_phase`` on to the next phase.

        Raises:
            InvalidPhaseError: If the phase or status name is unknown.
        """
        phase = _parse_phase(phase)
        status = _parse_status(status)

        state = self.load()
        entry = state.phase(phase)
        now = _now()
        entry.status = status

        if status == PhaseStatus.IN_PROGRESS and entry.started_at is None:
            entry.started_at = now

        if status == PhaseStatus.COMPLETED:
            entry.completed_at = now
            if quality is not None:
                entry.quality = quality

            index = PHASES.index(phase)
            if index < len(PHASES) - 1:
                state.current_phase = PHASES[index + 1]

        self.save(state)
        logger.info(f"Phase {phase.value} -> {status.value}")
        return state

    def current_phase(self) -> Phase:
        return self.load().current_phase

    def progress(self) -> int:
        """Workflow progress percentage (0-100)."""
        return self.load().progress

    def is_complete(self) -> bool:
        return self.load().is_complete

    def reset(self) -> WorkflowState:
        """Reset every phase to pending."""
        state = self.load()
        state.phases = {phase: PhaseState() for phase in PHASES}
        state.current_phase = Phase.CONSTITUTE
        self.save(state)
        logger.info("Workflow reset")
        return state

    # =========================================================================
    # IMPLEMENT-PHASE TASKS
    # =========================================================================

    def update_task_status(self, task_id: str, status: str | PhaseStatus) -> WorkflowState:
        """Record the status of an implement-phase task."""
        status = _parse_status(status)
        state = self.load()
        state.phase(Phase.IMPLEMENT).task_progress[task_id] = status
        self.save(state)
        logger.info(f"Task {task_id} -> {status.value}")
        return state

    def completed_tasks(self) -> list[str]:
        """Task IDs marked completed, in the order they were recorded."""
        progress = self.load().phase(Phase.IMPLEMENT).task_progress
        return [tid for tid, status in progress.items() if status == PhaseStatus.COMPLETED]
