"""Plan analysis - from PLAN.md text to a parallel execution schedule.

This module provides the complete planning pipeline:
- Parsing (plan text -> task graph)
- Validation (missing references, cycles)
- Scheduling (task graph -> execution waves)
- Metrics (parallelization score, time savings)
- Rendering (waves + metrics -> report)
"""

from speckit.planning.analysis import analyze_plan
from speckit.planning.dependency_resolver import (
    DependencyResolver,
    get_next_wave,
    topological_sort,
)
from speckit.planning.metrics import (
    calculate_parallelization_score,
    calculate_time_savings,
    compute_metrics,
)
from speckit.planning.models import (
    PlanAnalysis,
    PlanMetrics,
    Task,
    TaskGraph,
    ValidationReport,
)
from speckit.planning.parser import (
    PlanParser,
    parse_dependency_graph,
    parse_estimated_time,
)
from speckit.planning.renderer import format_time, generate_execution_plan
from speckit.planning.validator import (
    detect_circular_dependencies,
    find_cycles,
    validate_dependencies,
)

__all__ = [
    # Models
    "Task",
    "TaskGraph",
    "ValidationReport",
    "PlanMetrics",
    "PlanAnalysis",
    # Parsing
    "PlanParser",
    "parse_dependency_graph",
    "parse_estimated_time",
    # Validation
    "validate_dependencies",
    "detect_circular_dependencies",
    "find_cycles",
    # Scheduling
    "DependencyResolver",
    "topological_sort",
    "get_next_wave",
    # Metrics
    "calculate_parallelization_score",
    "calculate_time_savings",
    "compute_metrics",
    # Rendering
    "format_time",
    "generate_execution_plan",
    # Pipeline
    "analyze_plan",
]
