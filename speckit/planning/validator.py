"""Task graph validation.

Two checks run on every graph and report together:

- Referential integrity: each dependency must name a task in the graph.
- Cycle detection: depth-first search over dependency edges.

Problems are returned as values in a ValidationReport, never raised.
"""

from loguru import logger

from speckit.planning.models import TaskGraph, ValidationReport

CYCLE_SEPARATOR = " → "


def find_missing_references(graph: TaskGraph) -> list[tuple[str, str]]:
    """
    List dependencies that point outside the graph.

    Returns:
        (task_id, missing_id) pairs in graph order.
    """
    missing: list[tuple[str, str]] = []
    for task_id, task in graph.tasks.items():
        for dep in task.dependencies:
            if dep not in graph:
                missing.append((task_id, dep))
    return missing


def find_cycles(graph: TaskGraph) -> list[list[str]]:
    """
    Detect cycles in the dependency graph using DFS.

    Every task is used as a start point in graph order. Dependencies missing
    from the graph are dead ends. A cycle is only reported when none of its
    tasks belongs to a cycle reported earlier, so overlapping cycles collapse
    into the first one found.

    Args:
        graph: Task graph to inspect.

    Returns:
        Cycle paths, each ending on the task it starts with.

    Example:
        >>> find_cycles(graph)  # A -> B -> C -> A
        [['A', 'B', 'C', 'A']]
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    colors: dict[str, int] = {task_id: WHITE for task_id in graph.tasks}
    cycles: list[list[str]] = []
    seen: set[str] = set()

    def dfs(task_id: str, path: list[str]) -> None:
        colors[task_id] = GRAY
        path.append(task_id)

        for dep in graph.tasks[task_id].dependencies:
            if dep not in colors:
                continue  # Missing references are reported separately
            if colors[dep] == GRAY:
                cycle = path[path.index(dep):] + [dep]
                if seen.isdisjoint(cycle):
                    cycles.append(cycle)
                    seen.update(cycle)
            elif colors[dep] == WHITE:
                dfs(dep, path)

        path.pop()
        colors[task_id] = BLACK

    for task_id in graph.tasks:
        if colors[task_id] == WHITE:
            dfs(task_id, [])

    return cycles


def detect_circular_dependencies(graph: TaskGraph) -> list[str]:
    """Return the first cycle found, or an empty list when the graph is acyclic."""
    cycles = find_cycles(graph)
    return cycles[0] if cycles else []


def format_cycle(cycle: list[str]) -> str:
    """Format a cycle path as an error message."""
    return f"Circular dependency detected: {CYCLE_SEPARATOR.join(cycle)}"


def validate_dependencies(graph: TaskGraph) -> ValidationReport:
    """
    Validate a task graph.

    Both checks always run so that every problem is reported at once.

    Args:
        graph: Task graph to validate.

    Returns:
        ValidationReport; ``valid`` is False when any error was found.

    Example:
        >>> report = validate_dependencies(graph)
        >>> report.errors
        ['Task TASK-002 depends on non-existent task TASK-009']
    """
    errors: list[str] = []

    missing = find_missing_references(graph)
    for task_id, dep in missing:
        errors.append(f"Task {task_id} depends on non-existent task {dep}")

    cycles = find_cycles(graph)
    for cycle in cycles:
        errors.append(format_cycle(cycle))

    report = ValidationReport(
        errors=errors,
        missing_references=missing,
        cycles=cycles,
    )

    if report.valid:
        logger.debug(f"Task graph with {len(graph)} tasks is valid")
    else:
        logger.warning(f"Task graph has {len(errors)} validation errors")

    return report
