"""Core infrastructure - configuration, logging, errors and workflow state."""

from speckit.core.config import Settings, get_settings
from speckit.core.exceptions import (
    CircularDependencyError,
    InvalidPhaseError,
    SpeckitError,
    WorkflowStateError,
)
from speckit.core.state import Phase, PhaseStatus, WorkflowState, WorkflowStore

__all__ = [
    "Settings",
    "get_settings",
    "SpeckitError",
    "CircularDependencyError",
    "WorkflowStateError",
    "InvalidPhaseError",
    "Phase",
    "PhaseStatus",
    "WorkflowState",
    "WorkflowStore",
]
