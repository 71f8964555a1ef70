# -*- coding: utf-8 -*-
"""Identity service access through the ``openstack`` command line client."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ...engine.exceptions import ExternalCommandError, IdentityConflictError
from ..utils.commands import run_command

logger = logging.getLogger(__name__)


class IdentityClient(ABC):
    """Find and create operations on identity records.

    ``find_*`` return None when the record does not exist; ``create_*``
    raise IdentityConflictError when it already does.
    """

    @abstractmethod
    def find_user(self, name: str, domain: str) -> Optional[str]:
        """Return the user id."""

    @abstractmethod
    def create_user(
        self,
        name: str,
        password: str,
        domain: str,
        project: str,
    ) -> str:
        """Create a user and return its id."""

    @abstractmethod
    def has_role(self, user_id: str, project: str, role: str) -> bool:
        """Check a role assignment on a project."""

    @abstractmethod
    def grant_role(self, user_id: str, project: str, role: str) -> None:
        """Assign a role on a project."""

    @abstractmethod
    def find_service(self, service_type: str) -> Optional[str]:
        """Return the catalog service id."""

    @abstractmethod
    def create_service(
        self,
        name: str,
        service_type: str,
        description: str,
    ) -> str:
        """Create a catalog service and return its id."""

    @abstractmethod
    def find_endpoint(
        self,
        service_id: str,
        interface: str,
        region: str,
    ) -> Optional[Dict[str, str]]:
        """Return ``{"id": ..., "url": ...}`` of the endpoint."""

    @abstractmethod
    def create_endpoint(
        self,
        service_id: str,
        interface: str,
        url: str,
        region: str,
    ) -> str:
        """Create an endpoint and return its id."""


class OpenStackCLIClient(IdentityClient):
    """IdentityClient backed by the ``openstack`` CLI with JSON output."""

    def __init__(
        self,
        cloud: str = "devstack-admin",
        binary: str = "openstack",
    ):
        self.cloud = cloud
        self.binary = binary

    def _run(self, *args: str) -> Any:
        cmd = [self.binary, "--os-cloud", self.cloud, *args, "-f", "json"]
        try:
            result = run_command(cmd)
        except ExternalCommandError as e:
            stderr = (e.stderr or "").lower()
            if "conflict" in stderr or "already exists" in stderr:
                raise IdentityConflictError(
                    e.command,
                    e.returncode,
                    e.stderr,
                ) from e
            raise
        output = result.stdout.strip()
        if not output:
            return None
        return json.loads(output)

    @staticmethod
    def _first(rows: List[Dict[str, Any]], **match) -> Optional[Dict]:
        for row in rows or []:
            if all(row.get(key) == value for key, value in match.items()):
                return row
        return None

    def find_user(self, name: str, domain: str) -> Optional[str]:
        row = self._first(
            self._run("user", "list", "--domain", domain),
            Name=name,
        )
        return row["ID"] if row else None

    def create_user(
        self,
        name: str,
        password: str,
        domain: str,
        project: str,
    ) -> str:
        created = self._run(
            "user",
            "create",
            name,
            "--password",
            password,
            "--domain",
            domain,
            "--project",
            project,
            "--project-domain",
            domain,
        )
        return created["id"]

    def has_role(self, user_id: str, project: str, role: str) -> bool:
        rows = self._run(
            "role",
            "assignment",
            "list",
            "--user",
            user_id,
            "--project",
            project,
            "--role",
            role,
        )
        return bool(rows)

    def grant_role(self, user_id: str, project: str, role: str) -> None:
        run_command(
            [
                self.binary,
                "--os-cloud",
                self.cloud,
                "role",
                "add",
                "--user",
                user_id,
                "--project",
                project,
                role,
            ],
        )

    def find_service(self, service_type: str) -> Optional[str]:
        row = self._first(self._run("service", "list"), Type=service_type)
        return row["ID"] if row else None

    def create_service(
        self,
        name: str,
        service_type: str,
        description: str,
    ) -> str:
        created = self._run(
            "service",
            "create",
            "--name",
            name,
            "--description",
            description,
            service_type,
        )
        return created["id"]

    def find_endpoint(
        self,
        service_id: str,
        interface: str,
        region: str,
    ) -> Optional[Dict[str, str]]:
        rows = self._run(
            "endpoint",
            "list",
            "--service",
            service_id,
            "--interface",
            interface,
            "--region",
            region,
        )
        if not rows:
            return None
        return {"id": rows[0]["ID"], "url": rows[0]["URL"]}

    def create_endpoint(
        self,
        service_id: str,
        interface: str,
        url: str,
        region: str,
    ) -> str:
        created = self._run(
            "endpoint",
            "create",
            "--region",
            region,
            service_id,
            interface,
            url,
        )
        return created["id"]
