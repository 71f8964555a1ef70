# -*- coding: utf-8 -*-
"""Lifecycle state management."""

from placement_deploy.engine.lifecycle.state.manager import (
    LifecycleStateManager,
)
from placement_deploy.engine.lifecycle.state.schema import (
    LifecycleRecord,
    LifecycleState,
)

__all__ = ["LifecycleStateManager", "LifecycleRecord", "LifecycleState"]
