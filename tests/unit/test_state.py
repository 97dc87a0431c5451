"""Unit tests for workflow state persistence."""

import json
from datetime import date
from pathlib import Path

import pytest

from speckit.core.exceptions import InvalidPhaseError, WorkflowStateError
from speckit.core.state import (
    Phase,
    PhaseStatus,
    WorkflowStore,
    make_workflow_id,
)


@pytest.fixture
def store(tmp_path: Path) -> WorkflowStore:
    """Provide a store with an initialized workflow."""
    store = WorkflowStore(tmp_path / ".speckit")
    store.init_workflow("2024-05-01-shop", "Shop")
    return store


class TestInitAndLoad:
    """Tests for creating and loading state."""

    def test_init_creates_file(self, tmp_path: Path) -> None:
        """Test the state file and directory are created."""
        store = WorkflowStore(tmp_path / "nested" / ".speckit")

        state = store.init_workflow("2024-05-01-shop", "Shop")

        assert store.path.exists()
        assert state.current_phase == Phase.CONSTITUTE
        assert all(state.phase(p).status == PhaseStatus.PENDING for p in Phase)

    def test_state_file_is_readable_json(self, store: WorkflowStore) -> None:
        """Test the on-disk format uses plain values."""
        data = json.loads(store.path.read_text(encoding="utf-8"))

        assert data["workflowId"] == "2024-05-01-shop"
        assert data["currentPhase"] == "constitute"
        assert data["phases"]["plan"]["status"] == "pending"
        assert data["phases"]["plan"]["startedAt"] is None

    def test_init_twice_fails(self, store: WorkflowStore) -> None:
        with pytest.raises(WorkflowStateError, match="already exists"):
            store.init_workflow("2024-05-02-shop", "Shop")

    def test_init_force_overwrites(self, store: WorkflowStore) -> None:
        store.init_workflow("2024-05-02-other", "Other", force=True)

        assert store.load().project_name == "Other"

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(WorkflowStateError, match="No workflow state"):
            WorkflowStore(tmp_path).load()

    def test_load_corrupted(self, store: WorkflowStore) -> None:
        store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(WorkflowStateError, match="Invalid state file"):
            store.load()

    def test_load_camel_case_file(self, tmp_path: Path) -> None:
        """Test a state file with camelCase keys and no task progress loads."""
        store = WorkflowStore(tmp_path)
        tmp_path.mkdir(exist_ok=True)
        pending = {"status": "pending", "quality": None, "startedAt": None, "completedAt": None}
        store.path.write_text(
            json.dumps({
                "workflowId": "2024-05-01-shop",
                "projectName": "Shop",
                "version": "1.0",
                "createdAt": "2024-05-01T10:00:00.000Z",
                "updatedAt": "2024-05-01T10:00:00.000Z",
                "currentPhase": "specify",
                "phases": {
                    "constitute": {
                        "status": "completed",
                        "quality": 91,
                        "startedAt": "2024-05-01T10:00:00.000Z",
                        "completedAt": "2024-05-01T11:00:00.000Z",
                    },
                    "specify": pending,
                    "plan": pending,
                    "implement": pending,
                },
            }),
            encoding="utf-8",
        )

        state = store.load()

        assert state.workflow_id == "2024-05-01-shop"
        assert state.current_phase == Phase.SPECIFY
        assert state.phase(Phase.CONSTITUTE).quality == 91
        assert store.completed_tasks() == []

    def test_load_snake_case_file(self, store: WorkflowStore) -> None:
        data = json.loads(store.path.read_text(encoding="utf-8"))
        data["project_name"] = data.pop("projectName")
        store.path.write_text(json.dumps(data), encoding="utf-8")

        assert store.load().project_name == "Shop"

    def test_save_leaves_no_temp_file(self, store: WorkflowStore) -> None:
        store.save(store.load())

        assert not store.path.with_name("state.json.tmp").exists()


class TestPhases:
    """Tests for phase updates."""

    def test_in_progress_sets_started_at(self, store: WorkflowStore) -> None:
        state = store.update_phase("constitute", "in_progress")

        entry = state.phase(Phase.CONSTITUTE)
        assert entry.status == PhaseStatus.IN_PROGRESS
        assert entry.started_at is not None
        assert state.current_phase == Phase.CONSTITUTE

    def test_started_at_is_kept(self, store: WorkflowStore) -> None:
        first = store.update_phase("specify", "in_progress").phase(Phase.SPECIFY).started_at

        second = store.update_phase("specify", "in_progress").phase(Phase.SPECIFY).started_at

        assert first == second

    def test_completed_advances_phase(self, store: WorkflowStore) -> None:
        """Test completion records quality and moves on."""
        state = store.update_phase(Phase.CONSTITUTE, PhaseStatus.COMPLETED, quality=92)

        entry = state.phase(Phase.CONSTITUTE)
        assert entry.quality == 92
        assert entry.completed_at is not None
        assert state.current_phase == Phase.SPECIFY
        assert store.current_phase() == Phase.SPECIFY

    def test_last_phase_stays_current(self, store: WorkflowStore) -> None:
        for phase in Phase:
            store.update_phase(phase, "completed")

        assert store.current_phase() == Phase.IMPLEMENT
        assert store.is_complete() is True
        assert store.progress() == 100

    def test_progress(self, store: WorkflowStore) -> None:
        assert store.progress() == 0

        store.update_phase("constitute", "completed")

        assert store.progress() == 25
        assert store.is_complete() is False

    def test_invalid_phase(self, store: WorkflowStore) -> None:
        with pytest.raises(InvalidPhaseError, match="Invalid phase: deploy"):
            store.update_phase("deploy", "completed")

    def test_invalid_status(self, store: WorkflowStore) -> None:
        with pytest.raises(InvalidPhaseError, match="Invalid status: done"):
            store.update_phase("plan", "done")

    def test_reset(self, store: WorkflowStore) -> None:
        store.update_phase("constitute", "completed", quality=90)
        store.update_task_status("T1", "completed")

        state = store.reset()

        assert state.current_phase == Phase.CONSTITUTE
        assert state.phase(Phase.CONSTITUTE).quality is None
        assert store.completed_tasks() == []


class TestTaskProgress:
    """Tests for implement-phase task tracking."""

    def test_completed_tasks(self, store: WorkflowStore) -> None:
        store.update_task_status("TASK-001", "completed")
        store.update_task_status("TASK-002", "in_progress")
        store.update_task_status("TASK-003", PhaseStatus.COMPLETED)

        assert store.completed_tasks() == ["TASK-001", "TASK-003"]

    def test_status_can_change(self, store: WorkflowStore) -> None:
        store.update_task_status("TASK-001", "in_progress")
        store.update_task_status("TASK-001", "completed")

        assert store.completed_tasks() == ["TASK-001"]


class TestWorkflowId:
    """Tests for make_workflow_id."""

    def test_slug(self) -> None:
        assert make_workflow_id("My  Online Shop", date(2024, 5, 1)) == "2024-05-01-my-online-shop"

    def test_defaults_to_today(self) -> None:
        assert make_workflow_id("shop").startswith(date.today().isoformat())
