# -*- coding: utf-8 -*-
"""Lifecycle state schema definitions."""

from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional


class LifecycleState(str, Enum):
    """States a deployment moves through, one per completed phase."""

    UNINSTALLED = "uninstalled"
    INSTALLED = "installed"
    CONFIGURED = "configured"
    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class LifecycleRecord:
    """Represents the persisted lifecycle of one service."""

    service: str
    state: str = LifecycleState.UNINSTALLED.value
    backend_mode: Optional[str] = None
    handle: Optional[str] = None
    updated_at: str = ""
    timings: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LifecycleRecord":
        """Create from dictionary."""
        record = cls(**data)
        LifecycleState(record.state)
        return record


class StateFileSchema:
    """Schema for lifecycle state file."""

    VERSION = "1.0"

    @staticmethod
    def create_empty() -> Dict[str, Any]:
        """Create empty state file structure."""
        return {
            "version": StateFileSchema.VERSION,
            "services": {},
        }

    @staticmethod
    def validate(data: Dict[str, Any]) -> bool:
        """Validate state file structure."""
        required_keys = ["version", "services"]
        if not all(key in data for key in required_keys):
            return False

        if not isinstance(data["services"], dict):
            return False

        for _, record_data in data["services"].items():
            try:
                LifecycleRecord.from_dict(record_data)
            except (TypeError, KeyError, ValueError):
                return False

        return True

    @staticmethod
    def migrate_if_needed(data: Dict[str, Any]) -> Dict[str, Any]:
        """Migrate state file to current version if needed."""
        current_version = data.get("version", "0.0")

        if current_version == StateFileSchema.VERSION:
            return data

        data["version"] = StateFileSchema.VERSION
        return data


def format_timestamp(dt: datetime = None) -> str:
    """Format timestamp in ISO format, in UTC with a ``Z`` suffix.

    Naive datetimes are taken as local time.
    """
    if dt is None:
        dt = datetime.now(timezone.utc)
    return dt.astimezone(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
