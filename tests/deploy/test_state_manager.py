# -*- coding: utf-8 -*-
# pylint: disable=protected-access,redefined-outer-name
"""
Unit tests for LifecycleStateManager.
"""
import json
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from placement_deploy.engine.lifecycle.state import (
    LifecycleRecord,
    LifecycleState,
    LifecycleStateManager,
)
from placement_deploy.engine.lifecycle.state.schema import format_timestamp


@pytest.fixture
def temp_state_dir():
    """Create a temporary directory for state files."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def state_manager(temp_state_dir):
    return LifecycleStateManager(state_dir=str(temp_state_dir))


@pytest.fixture
def running_record():
    return LifecycleRecord(
        service="placement",
        state=LifecycleState.RUNNING.value,
        backend_mode="embedded_server",
        handle="placement-api",
        timings={"dbsync": 1.25},
    )


class TestLifecycleStateManagerBasic:
    def test_init_custom_dir(self, temp_state_dir):
        manager = LifecycleStateManager(state_dir=str(temp_state_dir))
        assert manager.state_dir == temp_state_dir
        assert manager.state_file == temp_state_dir / "lifecycle.json"
        assert manager.state_dir.exists()

    def test_init_creates_nested_dir(self, temp_state_dir):
        nested = temp_state_dir / "a" / "b"
        manager = LifecycleStateManager(state_dir=str(nested))
        assert manager.state_dir.is_dir()

    def test_save_and_get(self, state_manager, running_record):
        state_manager.save(running_record)

        retrieved = state_manager.get("placement")
        assert retrieved is not None
        assert retrieved.state == "running"
        assert retrieved.backend_mode == "embedded_server"
        assert retrieved.handle == "placement-api"
        assert retrieved.timings == {"dbsync": 1.25}
        assert retrieved.updated_at.endswith("Z")

    def test_get_nonexistent(self, state_manager):
        assert state_manager.get("nonexistent") is None

    def test_get_or_create_does_not_persist(self, state_manager):
        record = state_manager.get_or_create("placement")

        assert record.state == LifecycleState.UNINSTALLED.value
        assert record.handle is None
        assert not state_manager.state_file.exists()

    def test_save_overwrites(self, state_manager, running_record):
        state_manager.save(running_record)
        running_record.handle = None
        running_record.state = LifecycleState.STOPPED.value
        state_manager.save(running_record)

        retrieved = state_manager.get("placement")
        assert retrieved.handle is None
        assert retrieved.state == "stopped"
        assert retrieved.backend_mode == "embedded_server"

    def test_services_are_kept_apart(self, state_manager, running_record):
        state_manager.save(running_record)
        state_manager.save(
            LifecycleRecord(
                service="nova",
                state=LifecycleState.CONFIGURED.value,
            ),
        )

        assert state_manager.get("placement").state == "running"
        assert state_manager.get("nova").state == "configured"


class TestLifecycleStateFile:
    def test_file_format(self, state_manager, running_record):
        state_manager.save(running_record)

        with open(state_manager.state_file, encoding="utf-8") as f:
            data = json.load(f)

        assert data["version"] == "1.0"
        assert data["services"]["placement"]["handle"] == "placement-api"
        assert not state_manager.state_file.with_suffix(".tmp").exists()

    def test_corrupted_file_reads_as_empty(self, state_manager):
        state_manager.state_file.write_text("{not json", encoding="utf-8")

        assert state_manager.get("placement") is None

    def test_unknown_state_reads_as_empty(self, state_manager):
        state_manager.state_file.write_text(
            json.dumps(
                {
                    "version": "1.0",
                    "services": {
                        "placement": {
                            "service": "placement",
                            "state": "exploded",
                        },
                    },
                },
            ),
            encoding="utf-8",
        )

        assert state_manager.get("placement") is None

    def test_old_version_is_migrated(self, state_manager):
        state_manager.state_file.write_text(
            json.dumps(
                {
                    "version": "0.9",
                    "services": {
                        "placement": {
                            "service": "placement",
                            "state": "installed",
                        },
                    },
                },
            ),
            encoding="utf-8",
        )

        record = state_manager.get("placement")
        assert record.state == LifecycleState.INSTALLED.value
        assert record.backend_mode is None


class TestFormatTimestamp:
    def test_converts_to_utc(self):
        dt = datetime(2024, 1, 1, 12, 30, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(dt) == "2024-01-01T10:30:00Z"

    def test_now_is_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)

        stamp = format_timestamp()

        parsed = datetime.fromisoformat(stamp[:-1])
        assert stamp.endswith("Z")
        assert abs((parsed - before).total_seconds()) < 60
