"""Dependency resolver - schedules validated task graphs into execution waves.

A wave is the maximal set of not-yet-scheduled tasks whose dependencies are
all scheduled in earlier waves. Tasks in the same wave can run in parallel.
"""

from loguru import logger

from speckit.core.exceptions import CircularDependencyError
from speckit.planning.models import Task, TaskGraph, ValidationReport
from speckit.planning.validator import validate_dependencies


def topological_sort(graph: TaskGraph) -> list[list[str]]:
    """
    Group tasks into execution waves.

    The graph must be validated first. A graph that cannot be scheduled
    (cycle or unknown dependency) raises instead of looping.

    Args:
        graph: Validated task graph.

    Returns:
        List of waves; members keep the graph's key order.

    Raises:
        CircularDependencyError: If some tasks can never become ready.

    Example:
        >>> topological_sort(graph)
        [['T1'], ['T2', 'T3']]
    """
    completed: set[str] = set()
    waves: list[list[str]] = []

    while len(completed) < len(graph):
        wave = [
            task_id
            for task_id, task in graph.tasks.items()
            if task_id not in completed and task.is_ready(completed)
        ]

        if not wave:
            remaining = [tid for tid in graph.tasks if tid not in completed]
            logger.error(f"Cannot schedule remaining tasks: {remaining}")
            raise CircularDependencyError(remaining)

        waves.append(wave)
        completed.update(wave)
        logger.debug(f"Wave {len(waves)}: {len(wave)} tasks")

    return waves


def get_next_wave(graph: TaskGraph, completed: list[str] | set[str] | None = None) -> list[str]:
    """
    Get tasks ready to start given the tasks already completed.

    Args:
        graph: Task graph.
        completed: Completed task IDs.

    Returns:
        Uncompleted task IDs whose dependencies are all completed, in graph order.
    """
    done = set(completed or [])
    return [
        task_id
        for task_id, task in graph.tasks.items()
        if task_id not in done and task.is_ready(done)
    ]


class DependencyResolver:
    """
    Resolve task dependencies and organize into execution waves.

    Wraps a single graph and caches its schedule.

    Example:
        >>> resolver = DependencyResolver(graph)
        >>> resolver.validate().valid
        True
        >>> resolver.total_waves
        2
        >>> resolver.get_wave(0)
        [Task(id='T1', ...)]
    """

    def __init__(self, graph: TaskGraph) -> None:
        """
        Initialize the resolver.

        Args:
            graph: Task graph to schedule.
        """
        self._graph = graph
        self._waves: list[list[str]] | None = None

    @property
    def graph(self) -> TaskGraph:
        return self._graph

    def validate(self) -> ValidationReport:
        """Validate the wrapped graph."""
        return validate_dependencies(self._graph)

    def resolve(self) -> list[list[str]]:
        """
        Compute (once) and return the wave schedule.

        Raises:
            CircularDependencyError: If the graph cannot be scheduled.
        """
        if self._waves is None:
            logger.info(f"Resolving dependencies for {len(self._graph)} tasks")
            self._waves = topological_sort(self._graph)
            logger.info(f"Resolved into {len(self._waves)} waves")
        return self._waves

    @property
    def total_waves(self) -> int:
        return len(self.resolve())

    def get_wave(self, wave_number: int) -> list[Task]:
        """
        Get tasks in a specific wave.

        Args:
            wave_number: Wave index (0-based).

        Returns:
            Tasks in that wave, empty when out of range.
        """
        waves = self.resolve()
        if wave_number < 0 or wave_number >= len(waves):
            return []
        return [self._graph[tid] for tid in waves[wave_number]]

    def wave_of(self, task_id: str) -> int | None:
        """Get the 0-based wave index of a task, or None if unknown."""
        for index, wave in enumerate(self.resolve()):
            if task_id in wave:
                return index
        return None

    def next_wave(self, completed: list[str] | set[str] | None = None) -> list[str]:
        """Tasks ready to start once ``completed`` are done."""
        return get_next_wave(self._graph, completed)

    def get_execution_order(self) -> list[str]:
        """Flat list of task IDs in wave order."""
        return [task_id for wave in self.resolve() for task_id in wave]
