# -*- coding: utf-8 -*-
import logging
from abc import ABC, abstractmethod
from urllib.parse import quote

from ..utils.commands import run_command

logger = logging.getLogger(__name__)


class DatabaseAdmin(ABC):
    """Administrative access to the database server."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        user: str = "root",
        password: str = "",
    ):
        self.host = host
        self.user = user
        self.password = password

    @abstractmethod
    def recreate(self, name: str) -> None:
        """Drop the database if present, then create it empty."""

    @abstractmethod
    def connection_url(self, name: str) -> str:
        """SQLAlchemy URL the service uses to reach the database."""

    def _credentials(self) -> str:
        return f"{quote(self.user, safe='')}:{quote(self.password, safe='')}"


class MySQLAdmin(DatabaseAdmin):
    def recreate(self, name: str) -> None:
        logger.info(f"Recreating MySQL database {name}")
        run_command(
            [
                "mysql",
                f"--user={self.user}",
                f"--host={self.host}",
                "-e",
                f"DROP DATABASE IF EXISTS {name}; "
                f"CREATE DATABASE {name} CHARACTER SET utf8;",
            ],
            env={"MYSQL_PWD": self.password},
        )

    def connection_url(self, name: str) -> str:
        return (
            f"mysql+pymysql://{self._credentials()}@{self.host}/{name}"
            f"?charset=utf8"
        )


class PostgreSQLAdmin(DatabaseAdmin):
    def recreate(self, name: str) -> None:
        logger.info(f"Recreating PostgreSQL database {name}")
        env = {"PGPASSWORD": self.password}
        common = ["-h", self.host, "-U", self.user]
        run_command(["dropdb", *common, "--if-exists", name], env=env)
        run_command(["createdb", *common, "-E", "utf8", name], env=env)

    def connection_url(self, name: str) -> str:
        return (
            f"postgresql://{self._credentials()}@{self.host}/{name}"
            f"?client_encoding=utf8"
        )


def get_database_admin(
    db_type: str,
    host: str = "127.0.0.1",
    user: str = "root",
    password: str = "",
) -> DatabaseAdmin:
    if db_type == "mysql":
        return MySQLAdmin(host=host, user=user, password=password)
    elif db_type == "postgresql":
        return PostgreSQLAdmin(host=host, user=user, password=password)
    else:
        raise ValueError(f"Unsupported database type: {db_type}")


class MigrationRunner:
    """Runs the service's schema synchronization command."""

    def __init__(self, manage_binary: str):
        self.manage_binary = manage_binary

    def sync(self) -> None:
        logger.info("Synchronizing database schema")
        run_command([self.manage_binary, "db", "sync"])
