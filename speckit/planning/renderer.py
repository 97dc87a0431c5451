"""Plain-text rendering of execution plans."""

from speckit.planning.dependency_resolver import topological_sort
from speckit.planning.metrics import compute_metrics, round_half_up
from speckit.planning.models import PlanMetrics, TaskGraph

RULE = "═" * 43


def format_time(minutes: float) -> str:
    """
    Format minutes as "2h 30m", "2h" or "45m".

    Example:
        >>> format_time(150)
        '2h 30m'
    """
    total = round_half_up(minutes)
    if total < 60:
        return f"{total}m"

    hours, mins = divmod(total, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def generate_execution_plan(
    graph: TaskGraph,
    waves: list[list[str]] | None = None,
    metrics: PlanMetrics | None = None,
) -> str:
    """
    Render the wave schedule and metrics as a report.

    The time block is left out when no task has an estimate.

    Args:
        graph: Validated task graph.
        waves: Precomputed schedule; computed when omitted.
        metrics: Precomputed metrics; computed when omitted.

    Returns:
        Multi-line report text.
    """
    if waves is None:
        waves = topological_sort(graph)
    if metrics is None:
        metrics = compute_metrics(graph, waves)

    lines = [
        RULE,
        "Parallel Execution Plan",
        RULE,
        "",
        f"Total Tasks: {metrics.total_tasks}",
        f"Execution Waves: {metrics.total_waves}",
        "",
    ]

    if metrics.sequential > 0:
        lines.extend([
            "Time Estimates:",
            f"  Sequential: {format_time(metrics.sequential)}",
            f"  Parallel: {format_time(metrics.parallel)}",
            f"  Time Saved: {format_time(metrics.saved)} ({metrics.percentage:.1f}%)",
            "",
        ])

    lines.extend([
        f"Parallelization Score: {metrics.parallelization_score}/100",
        "",
        "Execution Waves:",
        "",
    ])

    for index, wave in enumerate(waves, start=1):
        plural = "s" if len(wave) > 1 else ""
        lines.append(f"Wave {index} ({len(wave)} task{plural} in parallel):")
        for task_id in wave:
            task = graph[task_id]
            estimate = (
                f" [{format_time(task.estimated_time)}]" if task.estimated_time is not None else ""
            )
            lines.append(f"  • {task_id}: {task.name}{estimate}")
        lines.append("")

    return "\n".join(lines)
