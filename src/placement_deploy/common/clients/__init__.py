# -*- coding: utf-8 -*-
from .database import (
    DatabaseAdmin,
    MigrationRunner,
    MySQLAdmin,
    PostgreSQLAdmin,
    get_database_admin,
)
from .identity import IdentityClient, OpenStackCLIClient
from .packages import PackageInstaller
from .web_server import ApacheController

__all__ = [
    "DatabaseAdmin",
    "MigrationRunner",
    "MySQLAdmin",
    "PostgreSQLAdmin",
    "get_database_admin",
    "IdentityClient",
    "OpenStackCLIClient",
    "PackageInstaller",
    "ApacheController",
]
