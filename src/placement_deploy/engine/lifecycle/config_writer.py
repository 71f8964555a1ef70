# -*- coding: utf-8 -*-
"""Generation of the service and backend configuration files."""

import logging
import os
from typing import Optional

from .descriptor import DeploymentSpec
from .utils.ini_file import IniFile
from .utils.templates import (
    SiteTemplateFields,
    TemplateManager,
    UwsgiConfigFields,
)

logger = logging.getLogger(__name__)


def write_file(path: str, content: str) -> None:
    """Replace ``path`` with ``content`` atomically."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    temp_file = f"{path}.tmp"
    with open(temp_file, "w", encoding="utf-8") as f:
        f.write(content)
    os.replace(temp_file, path)


def remove_file(path: str) -> bool:
    """Delete ``path`` if it exists; return whether anything was removed."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    logger.info(f"Removed {path}")
    return True


class ConfigWriter:
    """Renders the configuration derived from a DeploymentSpec."""

    def __init__(
        self,
        spec: DeploymentSpec,
        templates: Optional[TemplateManager] = None,
    ):
        self.spec = spec
        self.templates = templates or TemplateManager()
        self.service_config = IniFile(spec.conf_file)

    def write_service_config(self, database_url: Optional[str] = None) -> None:
        """Upsert the service's own options into its config file.

        Args:
            database_url: Connection URL, written only when given
        """
        spec = self.spec
        credentials = spec.credentials

        if database_url is not None:
            self.service_config.set(
                "placement_database",
                "connection",
                database_url,
            )
        elif self.service_config.get("placement_database", "connection"):
            logger.warning(
                f"{spec.conf_file} still sets a database connection although "
                f"the database is disabled; leaving it unchanged",
            )
        self.service_config.set(
            "api",
            "auth_strategy",
            spec.service.auth_strategy,
        )
        self.service_config.set_many(
            "keystone_authtoken",
            {
                "auth_type": credentials.auth_type,
                "interface": "public",
                "www_authenticate_uri": credentials.auth_url,
                "auth_url": credentials.auth_url,
                "username": credentials.username,
                "password": credentials.password,
                "user_domain_name": credentials.user_domain_name,
                "project_name": credentials.project_name,
                "project_domain_name": credentials.project_domain_name,
                "region_name": credentials.region_name,
            },
        )
        self.service_config.set("DEFAULT", "debug", spec.debug)
        logger.info(f"Wrote service configuration to {spec.conf_file}")

    def site_fields(self, apache_name: str) -> SiteTemplateFields:
        spec = self.spec
        ssl_engine = ssl_cert_file = ssl_key_file = ""
        if spec.tls_enabled and spec.ssl_cert_file and spec.ssl_key_file:
            ssl_engine = "SSLEngine On"
            ssl_cert_file = f"SSLCertificateFile {spec.ssl_cert_file}"
            ssl_key_file = f"SSLCertificateKeyFile {spec.ssl_key_file}"

        return SiteTemplateFields(
            apache_name=apache_name,
            public_wsgi=spec.wsgi_binary,
            ssl_engine=ssl_engine,
            ssl_cert_file=ssl_cert_file,
            ssl_key_file=ssl_key_file,
            user=spec.stack_user,
            virtualenv=spec.venv_python_path,
            api_workers=spec.api_workers,
        )

    def uwsgi_fields(self) -> UwsgiConfigFields:
        spec = self.spec
        return UwsgiConfigFields(
            name=spec.service.process_name,
            wsgi_file=spec.wsgi_binary,
            url_prefix=spec.service.url_prefix,
            processes=spec.api_workers,
            worker_timeout=spec.worker_timeout,
            socket=spec.uwsgi_socket,
        )

    def write_site_config(self, path: str) -> None:
        """Render the mod_wsgi site for the proxied-site backend."""
        content = self.templates.render_site_template(
            self.site_fields(self.spec.apache_name),
        )
        write_file(path, content)
        logger.info(f"Wrote site configuration to {path}")

    def write_app_server_config(self, proxy_path: str) -> None:
        """Render the uWSGI ini and the web-server snippet forwarding to it.

        Args:
            proxy_path: Site file receiving the proxy snippet
        """
        fields = self.uwsgi_fields()
        write_file(
            self.spec.uwsgi_conf,
            self.templates.render_uwsgi_config(fields),
        )
        write_file(proxy_path, self.templates.render_uwsgi_proxy(fields))
        logger.info(
            f"Wrote application server configuration to "
            f"{self.spec.uwsgi_conf}",
        )
