"""Parallelization metrics for wave schedules.

- Parallelization score: 0-100, higher means more parallel work.
- Time savings: sequential total vs. the sum of each wave's longest task.
"""

import math
from typing import Any

from speckit.planning.dependency_resolver import topological_sort
from speckit.planning.models import PlanMetrics, TaskGraph


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return math.floor(value + 0.5)


def calculate_parallelization_score(
    graph: TaskGraph,
    waves: list[list[str]] | None = None,
) -> int:
    """
    Calculate the parallelization score (0-100).

    Half the score rewards needing few waves (1 wave is ideal, one wave per
    task is worst), the other half rewards packing many tasks per wave.

    Args:
        graph: Validated task graph.
        waves: Precomputed schedule; computed when omitted.

    Returns:
        Integer score. 0 for an empty graph, 50 for a single task.
    """
    total = len(graph)
    if total == 0:
        return 0
    if total == 1:
        return 50

    if waves is None:
        waves = topological_sort(graph)
    wave_count = len(waves)

    wave_score = (total - wave_count) / (total - 1) * 50
    parallelism_bonus = min(total / wave_count * 10, 50)

    return round_half_up(wave_score + parallelism_bonus)


def calculate_time_savings(
    graph: TaskGraph,
    waves: list[list[str]] | None = None,
) -> dict[str, Any]:
    """
    Calculate estimated time savings from running waves in parallel.

    Missing estimates count as 0 minutes.

    Returns:
        Dict with ``sequential``, ``parallel``, ``saved`` (minutes) and
        ``percentage`` (0 when there is no estimated time at all).

    Example:
        >>> calculate_time_savings(graph)
        {'sequential': 180.0, 'parallel': 150.0, 'saved': 30.0, 'percentage': 16.666...}
    """
    if waves is None:
        waves = topological_sort(graph)

    def minutes(task_id: str) -> float:
        return graph[task_id].estimated_time or 0.0

    sequential = sum((minutes(tid) for tid in graph.tasks), 0.0)
    parallel = sum((max((minutes(tid) for tid in wave), default=0.0) for wave in waves), 0.0)
    saved = sequential - parallel

    return {
        "sequential": sequential,
        "parallel": parallel,
        "saved": saved,
        "percentage": saved / sequential * 100 if sequential > 0 else 0.0,
    }


def compute_metrics(
    graph: TaskGraph,
    waves: list[list[str]] | None = None,
) -> PlanMetrics:
    """Compute all metrics for a validated graph."""
    if waves is None:
        waves = topological_sort(graph)

    savings = calculate_time_savings(graph, waves)

    return PlanMetrics(
        total_tasks=len(graph),
        total_waves=len(waves),
        parallelization_score=calculate_parallelization_score(graph, waves),
        **savings,
    )
