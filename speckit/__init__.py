"""
SpecKit - specification-driven development workflow.

Guides a project through Constitute, Specify, Plan and Implement phases and
turns the plan's task list into a parallel execution schedule.
"""

__version__ = "0.1.0"
__author__ = "SpecKit Team"

from speckit.planning import analyze_plan, parse_dependency_graph

__all__ = ["analyze_plan", "parse_dependency_graph", "__version__"]
