# -*- coding: utf-8 -*-
"""Immutable deployment description shared by every lifecycle phase."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..config import Settings
from .backend import BackendMode, select_backend_mode


class ServiceDescriptor(BaseModel):
    """Identity of the deployed service."""

    model_config = ConfigDict(frozen=True)

    name: str = "placement"
    protocol: str = "http"
    host: str = "127.0.0.1"
    base_path: str = "placement"
    auth_strategy: str = "keystone"

    @property
    def public_url(self) -> str:
        return f"{self.protocol}://{self.host}/{self.base_path}"

    @property
    def url_prefix(self) -> str:
        return f"/{self.base_path}"

    @property
    def process_name(self) -> str:
        return f"{self.name}-api"


class ServiceCredentials(BaseModel):
    """Credentials the service uses to validate tokens."""

    model_config = ConfigDict(frozen=True)

    auth_type: str = "password"
    auth_url: str
    username: str
    password: str
    user_domain_name: str = "Default"
    project_name: str = "service"
    project_domain_name: str = "Default"
    region_name: str = "RegionOne"
    role: str = "admin"


class DatabaseSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "mysql"
    host: str = "127.0.0.1"
    user: str = "root"
    password: str = ""


class DeploymentSpec(BaseModel):
    """Everything a phase needs to know, fixed for one invocation."""

    model_config = ConfigDict(frozen=True)

    service: ServiceDescriptor
    backend_mode: BackendMode
    database_enabled: bool = True
    database: DatabaseSettings = DatabaseSettings()
    credentials: ServiceCredentials
    api_workers: int = 2
    worker_timeout: int = 90
    service_timeout: int = 60
    stack_user: str = "stack"
    venv_path: Optional[str] = None
    python_version: str = "python3"
    tls_enabled: bool = False
    ssl_cert_file: Optional[str] = None
    ssl_key_file: Optional[str] = None
    conf_dir: str = "/etc/placement"
    bin_dir: str = "/usr/local/bin"
    package_source: str = "openstack-placement"
    uwsgi_bin: str = "uwsgi"
    uwsgi_socket_dir: str = "/var/run/uwsgi"
    apache_name: str = "apache2"
    apache_sites_available: str = "/etc/apache2/sites-available"
    apache_sites_enabled: str = "/etc/apache2/sites-enabled"
    state_dir: str = "~/.placement-deploy"
    identity_cloud: str = "devstack-admin"
    debug: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeploymentSpec":
        """Build the description, selecting the backend mode exactly once."""
        tls_enabled = settings.TLS_PROXY_ENABLED
        protocol = settings.PLACEMENT_SERVICE_PROTOCOL or (
            "https" if tls_enabled else settings.SERVICE_PROTOCOL
        )
        host = settings.PLACEMENT_SERVICE_HOST or settings.SERVICE_HOST
        auth_url = settings.KEYSTONE_AUTH_URI or (
            f"{settings.SERVICE_PROTOCOL}://{settings.SERVICE_HOST}/identity"
        )

        venv_path = None
        if settings.USE_VENV:
            venv_path = settings.PLACEMENT_VENV or os.path.join(
                os.path.expanduser(settings.STATE_DIR),
                "venv",
            )

        return cls(
            service=ServiceDescriptor(
                protocol=protocol,
                host=host,
                auth_strategy=settings.PLACEMENT_AUTH_STRATEGY,
            ),
            backend_mode=select_backend_mode(settings.WSGI_MODE),
            database_enabled=settings.PLACEMENT_DB_ENABLED,
            database=DatabaseSettings(
                type=settings.DATABASE_TYPE,
                host=settings.DATABASE_HOST,
                user=settings.DATABASE_USER,
                password=settings.DATABASE_PASSWORD,
            ),
            credentials=ServiceCredentials(
                auth_url=auth_url,
                username="placement",
                password=settings.SERVICE_PASSWORD,
                user_domain_name=settings.SERVICE_DOMAIN_NAME,
                project_name=settings.SERVICE_PROJECT_NAME,
                project_domain_name=settings.SERVICE_DOMAIN_NAME,
                region_name=settings.REGION_NAME,
                role=settings.SERVICE_ROLE,
            ),
            api_workers=settings.API_WORKERS,
            worker_timeout=settings.WORKER_TIMEOUT,
            service_timeout=settings.SERVICE_TIMEOUT,
            stack_user=settings.STACK_USER,
            venv_path=venv_path,
            python_version=settings.PYTHON_VERSION,
            tls_enabled=tls_enabled,
            ssl_cert_file=settings.SSL_CERT_FILE,
            ssl_key_file=settings.SSL_KEY_FILE,
            conf_dir=settings.PLACEMENT_CONF_DIR,
            bin_dir=settings.PLACEMENT_BIN_DIR,
            package_source=settings.PLACEMENT_SOURCE,
            uwsgi_bin=settings.UWSGI_BIN,
            uwsgi_socket_dir=settings.UWSGI_SOCKET_DIR,
            apache_name=settings.APACHE_NAME,
            apache_sites_available=settings.APACHE_SITES_AVAILABLE,
            apache_sites_enabled=settings.APACHE_SITES_ENABLED,
            state_dir=settings.STATE_DIR,
            identity_cloud=settings.IDENTITY_CLOUD,
            debug=settings.DEBUG,
        )

    @property
    def conf_file(self) -> str:
        return os.path.join(self.conf_dir, f"{self.service.name}.conf")

    @property
    def uwsgi_conf(self) -> str:
        return os.path.join(self.conf_dir, f"{self.service.name}-uwsgi.ini")

    @property
    def uwsgi_socket(self) -> str:
        return os.path.join(
            self.uwsgi_socket_dir,
            f"{self.service.process_name}.socket",
        )

    @property
    def service_bin_dir(self) -> str:
        if self.venv_path:
            return os.path.join(self.venv_path, "bin")
        return self.bin_dir

    @property
    def wsgi_binary(self) -> str:
        return os.path.join(self.service_bin_dir, self.service.process_name)

    @property
    def manage_binary(self) -> str:
        return os.path.join(
            self.service_bin_dir,
            f"{self.service.name}-manage",
        )

    @property
    def venv_python_path(self) -> str:
        """mod_wsgi ``python-path`` option, empty without a virtualenv."""
        if not self.venv_path:
            return ""
        return (
            f"python-path={self.venv_path}/lib/{self.python_version}"
            f"/site-packages"
        )
