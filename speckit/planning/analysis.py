"""End-to-end plan analysis: parse, validate, schedule, measure, render."""

from loguru import logger

from speckit.planning.dependency_resolver import DependencyResolver
from speckit.planning.metrics import compute_metrics
from speckit.planning.models import PlanAnalysis
from speckit.planning.parser import parse_dependency_graph
from speckit.planning.renderer import generate_execution_plan


def analyze_plan(content: str | None) -> PlanAnalysis:
    """
    Analyze a plan document.

    Scheduling, metrics and rendering only happen when the graph is valid;
    an invalid plan comes back with its errors and no waves.

    Args:
        content: PLAN.md text.

    Returns:
        PlanAnalysis for the document.

    Example:
        >>> analysis = analyze_plan(plan_text)
        >>> if analysis.valid:
        ...     print(analysis.execution_plan)
    """
    graph = parse_dependency_graph(content)
    resolver = DependencyResolver(graph)
    report = resolver.validate()

    if not report.valid:
        logger.warning(f"Plan is invalid, skipping scheduling: {report.errors}")
        return PlanAnalysis(graph=graph, report=report)

    waves = resolver.resolve()
    metrics = compute_metrics(graph, waves)
    logger.info(
        f"Planned {metrics.total_tasks} tasks in {metrics.total_waves} waves "
        f"(score {metrics.parallelization_score})"
    )

    return PlanAnalysis(
        graph=graph,
        report=report,
        waves=waves,
        metrics=metrics,
        execution_plan=generate_execution_plan(graph, waves, metrics),
    )
