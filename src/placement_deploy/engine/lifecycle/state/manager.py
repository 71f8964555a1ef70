# -*- coding: utf-8 -*-
"""Lifecycle state management."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

from placement_deploy.engine.lifecycle.state.schema import (
    LifecycleRecord,
    StateFileSchema,
    format_timestamp,
)

logger = logging.getLogger(__name__)


class LifecycleStateManager:
    """Manages lifecycle state persistence."""

    def __init__(self, state_dir: Optional[str] = None):
        """
        Initialize state manager.

        Args:
            state_dir: Custom state directory (defaults to
            ~/.placement-deploy)
        """
        if state_dir is None:
            state_dir = "~/.placement-deploy"

        self.state_dir = Path(os.path.expanduser(state_dir))
        self.state_file = self.state_dir / "lifecycle.json"
        self._ensure_state_dir()

    def _ensure_state_dir(self) -> None:
        """Ensure state directory exists."""
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _read_state(self) -> Dict[str, Any]:
        """Read state file with validation."""
        if not self.state_file.exists():
            return StateFileSchema.create_empty()

        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            data = StateFileSchema.migrate_if_needed(data)

            if not StateFileSchema.validate(data):
                raise ValueError("Invalid state file format")

            return data

        except (json.JSONDecodeError, ValueError) as e:
            # The corrupted file is kept as-is for manual recovery
            logger.warning(
                f"State file {self.state_file} is corrupted ({e}). Starting "
                f"with empty state.",
            )
            return StateFileSchema.create_empty()

    def _write_state(self, data: Dict[str, Any]) -> None:
        """Write state file atomically."""
        if not StateFileSchema.validate(data):
            raise ValueError("Invalid state data")

        temp_file = self.state_file.with_suffix(".tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)

        temp_file.replace(self.state_file)

    def save(self, record: LifecycleRecord) -> None:
        """
        Save a lifecycle record, stamping its update time.

        Args:
            record: LifecycleRecord instance to save
        """
        record.updated_at = format_timestamp()
        state = self._read_state()
        state["services"][record.service] = record.to_dict()
        self._write_state(state)

    def get(self, service: str) -> Optional[LifecycleRecord]:
        """
        Retrieve the record of a service.

        Args:
            service: Service name

        Returns:
            LifecycleRecord instance or None if not found
        """
        state = self._read_state()
        record_data = state["services"].get(service)

        if record_data is None:
            return None

        return LifecycleRecord.from_dict(record_data)

    def get_or_create(self, service: str) -> LifecycleRecord:
        return self.get(service) or LifecycleRecord(service=service)
