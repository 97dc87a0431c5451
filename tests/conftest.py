"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Set test environment
os.environ.setdefault("SPECKIT_LOG_LEVEL", "ERROR")


@pytest.fixture(autouse=True)
def clean_settings() -> Generator:
    """Clear cached settings around every test."""
    from speckit.core.config import clear_settings_cache

    clear_settings_cache()

    yield

    clear_settings_cache()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_graph():
    """Build a TaskGraph from ``{id: (dependencies, minutes)}``."""
    from speckit.planning.models import Task, TaskGraph

    def _make(spec: dict[str, tuple[list[str], float | None]]) -> TaskGraph:
        return TaskGraph.from_tasks([
            Task(id=task_id, name=f"Task {task_id}", dependencies=deps, estimated_time=minutes)
            for task_id, (deps, minutes) in spec.items()
        ])

    return _make


@pytest.fixture
def sample_plan() -> str:
    """Provide a sample PLAN.md with a diamond-shaped dependency graph."""
    return """# Technical Plan

## Phase 1: Foundation

### TASK-001: Database Schema
Create database schema for users and products.
**Dependencies**: None
**Estimated Time**: 2 hours

### TASK-002: User Model
**Dependencies**: TASK-001
**Estimated Time**: 1 hour

### TASK-003: Product Model
**Dependencies**: TASK-001 (needs database schema)
**Estimated Time**: 90 minutes

## Phase 2: Integration

### TASK-004: API Integration
**Dependencies**: TASK-002, TASK-003
**Estimated Time**: 30 min
"""


@pytest.fixture
def cyclic_plan() -> str:
    """Provide a plan whose tasks depend on each other in a loop."""
    return """
### T1 - Setup
**Dependencies**: None

### T2 - Build
**Dependencies**: T1, T3

### T3 - Package
**Dependencies**: T2
"""


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
