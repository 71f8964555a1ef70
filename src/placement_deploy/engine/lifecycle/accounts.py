# -*- coding: utf-8 -*-
import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from ...common.clients.identity import IdentityClient
from ..exceptions import IdentityConflictError

T = TypeVar("T")

PUBLIC_INTERFACE = "public"


@dataclass(frozen=True)
class IdentityRegistration:
    """Identity records backing the service; never stored locally."""

    user_id: str
    service_id: str
    endpoint_id: str
    endpoint_url: str


class AccountProvisioner:
    """Converges the identity service on the desired registration.

    Each record is looked up before it is created, so any subset of records
    left by an earlier run is kept as is and only the missing ones are
    added.
    """

    def __init__(
        self,
        client: IdentityClient,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _get_or_create(
        find: Callable[[], Optional[T]],
        create: Callable[[], T],
    ) -> T:
        existing = find()
        if existing is not None:
            return existing
        try:
            return create()
        except IdentityConflictError:
            # Created by someone else between our lookup and create
            existing = find()
            if existing is None:
                raise
            return existing

    def ensure_service_user(
        self,
        name: str,
        password: str,
        role: str,
        project: str,
        domain: str,
    ) -> str:
        user_id = self._get_or_create(
            lambda: self.client.find_user(name, domain),
            lambda: self.client.create_user(name, password, domain, project),
        )
        if not self.client.has_role(user_id, project, role):
            self._logger.info(
                f"Granting role {role} on project {project} to {name}",
            )
            self.client.grant_role(user_id, project, role)
        return user_id

    def ensure_service(
        self,
        name: str,
        service_type: str,
        description: str,
    ) -> str:
        return self._get_or_create(
            lambda: self.client.find_service(service_type),
            lambda: self.client.create_service(
                name,
                service_type,
                description,
            ),
        )

    def ensure_endpoint(self, service_id: str, url: str, region: str) -> str:
        endpoint = self._get_or_create(
            lambda: self.client.find_endpoint(
                service_id,
                PUBLIC_INTERFACE,
                region,
            ),
            lambda: {
                "id": self.client.create_endpoint(
                    service_id,
                    PUBLIC_INTERFACE,
                    url,
                    region,
                ),
                "url": url,
            },
        )
        if endpoint["url"] != url:
            self._logger.warning(
                f"Existing {PUBLIC_INTERFACE} endpoint {endpoint['id']} "
                f"points at {endpoint['url']}, not {url}; leaving it "
                f"unchanged",
            )
        return endpoint["id"]

    def ensure_registration(
        self,
        service_name: str,
        role: str,
        endpoint_url: str,
        password: str,
        project: str = "service",
        domain: str = "Default",
        region: str = "RegionOne",
        service_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> IdentityRegistration:
        """Ensure user, catalog service and public endpoint exist."""
        service_type = service_type or service_name
        description = description or f"{service_name.capitalize()} Service"

        user_id = self.ensure_service_user(
            service_name,
            password,
            role,
            project,
            domain,
        )
        service_id = self.ensure_service(
            service_name,
            service_type,
            description,
        )
        endpoint_id = self.ensure_endpoint(service_id, endpoint_url, region)

        self._logger.info(
            f"Identity registration of {service_name} is at {endpoint_url}",
        )
        return IdentityRegistration(
            user_id=user_id,
            service_id=service_id,
            endpoint_id=endpoint_id,
            endpoint_url=endpoint_url,
        )
