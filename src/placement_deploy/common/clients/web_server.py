# -*- coding: utf-8 -*-
import logging
import os

from ..utils.commands import run_command

logger = logging.getLogger(__name__)


class ApacheController:
    """Controls sites of the shared Apache web server."""

    def __init__(
        self,
        apache_name: str = "apache2",
        sites_available: str = "/etc/apache2/sites-available",
        sites_enabled: str = "/etc/apache2/sites-enabled",
    ):
        self.apache_name = apache_name
        self.sites_available = sites_available
        self.sites_enabled = sites_enabled

    def site_config_for(self, site: str) -> str:
        return os.path.join(self.sites_available, f"{site}.conf")

    def log_file_for(self, site: str) -> str:
        return os.path.join("/var/log", self.apache_name, f"{site}.log")

    def is_enabled(self, site: str) -> bool:
        return os.path.lexists(
            os.path.join(self.sites_enabled, f"{site}.conf"),
        )

    def enable_site(self, site: str) -> None:
        logger.info(f"Enabling site {site}")
        run_command(["a2ensite", site], sudo=True)

    def disable_site(self, site: str) -> None:
        if not self.is_enabled(site):
            logger.debug(f"Site {site} is not enabled")
            return
        logger.info(f"Disabling site {site}")
        run_command(["a2dissite", site], sudo=True)

    def restart(self) -> None:
        """Restart the web server; every site it serves is affected."""
        logger.info(f"Restarting {self.apache_name}")
        run_command(["systemctl", "restart", self.apache_name], sudo=True)

    def enable_module(self, module: str) -> None:
        run_command(["a2enmod", "-q", module], sudo=True)
