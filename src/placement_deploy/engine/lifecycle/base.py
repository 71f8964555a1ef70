# -*- coding: utf-8 -*-
from abc import abstractmethod, ABC
from typing import Any, Dict


class LifecycleManager(ABC):
    """Phases an orchestrator invokes, one at a time, on a service."""

    def __init__(self, state_manager=None):
        if state_manager is None:
            from placement_deploy.engine.lifecycle.state import (
                LifecycleStateManager,
            )

            state_manager = LifecycleStateManager()
        self.state_manager = state_manager

    @abstractmethod
    async def install(self) -> None:
        """Install the packages the backend and the service need."""
        raise NotImplementedError

    @abstractmethod
    async def configure(self) -> None:
        """Write service and backend configuration."""
        raise NotImplementedError

    @abstractmethod
    async def init(self) -> Any:
        """Prepare storage and identity records."""
        raise NotImplementedError

    @abstractmethod
    async def start(self) -> Dict[str, str]:
        """Launch the service and wait until it answers.

        Returns:
            Dict with keys ``handle`` and ``url``
        """
        raise NotImplementedError

    @abstractmethod
    async def stop(self) -> bool:
        """Stop the service; return False when nothing was running."""
        raise NotImplementedError

    @abstractmethod
    async def cleanup(self) -> None:
        """Remove generated files; safe to call at any time."""
        raise NotImplementedError
