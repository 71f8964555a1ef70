# -*- coding: utf-8 -*-
import logging
from typing import Optional

from ...common.clients.database import DatabaseAdmin, MigrationRunner
from .utils.timing import PhaseTimer

logger = logging.getLogger(__name__)


class DatabaseBootstrapper:
    """Provisions the service's dedicated database."""

    def __init__(
        self,
        admin: DatabaseAdmin,
        migrations: MigrationRunner,
        timer: Optional[PhaseTimer] = None,
    ):
        self.admin = admin
        self.migrations = migrations
        self.timer = timer or PhaseTimer()

    def connection_url(self, name: str) -> str:
        return self.admin.connection_url(name)

    def reset_database(self, name: str) -> None:
        """Drop and create ``name``. Every row in it is lost."""
        logger.warning(f"Resetting database {name}, existing data is lost")
        self.admin.recreate(name)

    def ensure_schema(self) -> None:
        """Bring the schema up to date; blocks until the sync has exited."""
        with self.timer.measure("dbsync"):
            self.migrations.sync()

    def bootstrap(self, name: str) -> None:
        self.reset_database(name)
        self.ensure_schema()
