"""Pydantic models for plan analysis.

This module defines the data structures shared by the planning pipeline:
tasks extracted from a plan document, the task graph, validation reports
and parallelization metrics.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field


# =============================================================================
# TASKS
# =============================================================================


class Task(BaseModel):
    """A single task declared in a plan document.

    Example:
        >>> task = Task(
        ...     id="TASK-002",
        ...     name="User Model",
        ...     dependencies=["TASK-001"],
        ...     estimated_time=60,
        ... )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Task identifier (TASK-001 or T001)",
    )
    name: str = Field(
        default="",
        description="Task title",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Task IDs this task depends on",
    )
    estimated_time: float | None = Field(
        default=None,
        ge=0,
        description="Estimated duration in minutes",
    )
    description: str = Field(
        default="",
        description="Free text belonging to the task",
    )

    def is_ready(self, completed: set[str]) -> bool:
        """Check if all dependencies are in ``completed``."""
        return all(dep in completed for dep in self.dependencies)


# =============================================================================
# TASK GRAPH
# =============================================================================


class TaskGraph(BaseModel):
    """Task ID -> Task mapping in document order.

    Edges point from a task to each of its dependencies. The graph is
    read-only for validation, scheduling and metrics.

    Example:
        >>> graph = TaskGraph(tasks={"T1": Task(id="T1"), "T2": Task(id="T2", dependencies=["T1"])})
        >>> graph.dependents("T1")
        ['T2']
    """

    model_config = ConfigDict(frozen=True)

    tasks: dict[str, Task] = Field(
        default_factory=dict,
        description="Task ID -> Task mapping",
    )

    @classmethod
    def from_tasks(cls, tasks: list[Task]) -> "TaskGraph":
        """Build a graph from a task list (later duplicates win)."""
        mapping: dict[str, Task] = {}
        for task in tasks:
            mapping[task.id] = task
        return cls(tasks=mapping)

    @property
    def task_ids(self) -> list[str]:
        """Task IDs in graph order."""
        return list(self.tasks)

    @property
    def edges(self) -> dict[str, list[str]]:
        """Task ID -> dependency IDs."""
        return {tid: list(task.dependencies) for tid, task in self.tasks.items()}

    def get(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        return self.tasks.get(task_id)

    def dependents(self, task_id: str) -> list[str]:
        """Get tasks that depend on ``task_id``."""
        return [
            tid for tid, task in self.tasks.items()
            if task_id in task.dependencies
        ]

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.tasks

    def __getitem__(self, task_id: str) -> Task:
        return self.tasks[task_id]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {tid: task.model_dump() for tid, task in self.tasks.items()}


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationReport(BaseModel):
    """Outcome of validating a task graph."""

    errors: list[str] = Field(
        default_factory=list,
        description="Human-readable error messages",
    )
    missing_references: list[tuple[str, str]] = Field(
        default_factory=list,
        description="(task_id, missing dependency id) pairs",
    )
    cycles: list[list[str]] = Field(
        default_factory=list,
        description="Detected cycles, each closed on its first node",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        """True when no errors were found."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "missing_references": [list(pair) for pair in self.missing_references],
            "cycles": [list(cycle) for cycle in self.cycles],
        }


# =============================================================================
# METRICS
# =============================================================================


class PlanMetrics(BaseModel):
    """Parallelization metrics for a wave schedule. Times are in minutes."""

    model_config = ConfigDict(frozen=True)

    total_tasks: int = Field(default=0, ge=0)
    total_waves: int = Field(default=0, ge=0)
    parallelization_score: int = Field(default=0)
    sequential: float = Field(default=0.0, ge=0)
    parallel: float = Field(default=0.0, ge=0)
    saved: float = Field(default=0.0)
    percentage: float = Field(default=0.0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.model_dump()


# =============================================================================
# ANALYSIS
# =============================================================================


class PlanAnalysis(BaseModel):
    """Everything derived from one plan document."""

    graph: TaskGraph
    report: ValidationReport
    waves: list[list[str]] = Field(default_factory=list)
    metrics: PlanMetrics | None = None
    execution_plan: str | None = None

    @property
    def valid(self) -> bool:
        return self.report.valid

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "valid": self.valid,
            "errors": list(self.report.errors),
            "tasks": self.graph.to_dict(),
            "waves": [list(wave) for wave in self.waves],
            "metrics": self.metrics.to_dict() if self.metrics else None,
        }
