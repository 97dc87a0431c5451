"""Exception hierarchy for SpecKit."""


class SpeckitError(Exception):
    """Base exception for SpecKit errors."""

    pass


class CircularDependencyError(SpeckitError, ValueError):
    """Task graph cannot be scheduled (cycle or unknown dependency)."""

    def __init__(self, remaining: list[str]) -> None:
        self.remaining = remaining
        super().__init__(
            "Circular dependency detected or invalid task references: "
            + ", ".join(remaining)
        )


class WorkflowStateError(SpeckitError):
    """Workflow state file is missing, duplicated or corrupted."""

    pass


class InvalidPhaseError(WorkflowStateError, ValueError):
    """Unknown phase or status name."""

    pass
