"""Unit tests for execution plan rendering."""

import pytest

from speckit.planning.models import TaskGraph
from speckit.planning.parser import parse_dependency_graph
from speckit.planning.renderer import format_time, generate_execution_plan


class TestFormatTime:
    """Tests for format_time."""

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0, "0m"),
            (45, "45m"),
            (59.4, "59m"),
            (60, "1h"),
            (90, "1h 30m"),
            (150, "2h 30m"),
            (180, "3h"),
            (119.6, "2h"),
        ],
    )
    def test_formats(self, minutes: float, expected: str) -> None:
        assert format_time(minutes) == expected


class TestGenerateExecutionPlan:
    """Tests for generate_execution_plan."""

    def test_report_contents(self, sample_plan: str) -> None:
        """Test counts, time block and wave listing."""
        report = generate_execution_plan(parse_dependency_graph(sample_plan))

        assert "Parallel Execution Plan" in report
        assert "Total Tasks: 4" in report
        assert "Execution Waves: 3" in report
        assert "  Sequential: 5h" in report
        assert "  Parallel: 4h" in report
        assert "  Time Saved: 1h (20.0%)" in report
        assert "Parallelization Score: 30/100" in report
        assert "Wave 1 (1 task in parallel):" in report
        assert "Wave 2 (2 tasks in parallel):" in report
        assert "  • TASK-001: Database Schema [2h]" in report
        assert "  • TASK-003: Product Model [1h 30m]" in report
        assert "  • TASK-004: API Integration [30m]" in report

    def test_waves_listed_in_order(self, sample_plan: str) -> None:
        report = generate_execution_plan(parse_dependency_graph(sample_plan))

        assert report.index("Wave 1") < report.index("Wave 2") < report.index("Wave 3")
        assert report.index("TASK-002") < report.index("TASK-003")

    def test_time_block_omitted_without_estimates(self) -> None:
        """Test plans without estimates skip the time block."""
        graph = parse_dependency_graph("### T1: Setup\n### T2: Build\nDependencies: T1\n")

        report = generate_execution_plan(graph)

        assert "Time Estimates" not in report
        assert "  • T1: Setup" in report
        assert "[" not in report.split("Execution Waves:\n")[-1]

    def test_empty_graph(self) -> None:
        report = generate_execution_plan(TaskGraph())

        assert "Total Tasks: 0" in report
        assert "Execution Waves: 0" in report
        assert "Wave 1" not in report

    def test_zero_estimate_is_shown(self) -> None:
        """Test an explicit zero estimate is rendered, not treated as missing."""
        graph = parse_dependency_graph(
            "### T1: Setup\n**Estimated Time**: 0 min\n### T2: Build\n**Estimated Time**: 1 hour\n"
        )

        report = generate_execution_plan(graph)

        assert "  • T1: Setup [0m]" in report
        assert "  • T2: Build [1h]" in report
