# -*- coding: utf-8 -*-
# pylint:disable=too-many-instance-attributes, too-many-arguments

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ...common.clients import (
    ApacheController,
    IdentityClient,
    MigrationRunner,
    OpenStackCLIClient,
    PackageInstaller,
    get_database_admin,
)
from ..exceptions import (
    BackendModeMismatchError,
    LifecycleException,
    ReadinessTimeoutError,
)
from .accounts import AccountProvisioner, IdentityRegistration
from .backend import BackendMode
from .base import LifecycleManager
from .config_writer import ConfigWriter, remove_file
from .database import DatabaseBootstrapper
from .descriptor import DeploymentSpec
from .state import LifecycleRecord, LifecycleState, LifecycleStateManager
from .utils import PhaseTimer, ProcessManager, wait_for_service

# Identity client plugin for the service's CLI commands
CLIENT_PLUGIN_PACKAGE = "osc-placement"

BACKEND_SYSTEM_PACKAGES = {
    BackendMode.EMBEDDED_SERVER: ["apache2", "libapache2-mod-proxy-uwsgi"],
    BackendMode.PROXIED_SITE: ["apache2", "libapache2-mod-wsgi-py3"],
}
BACKEND_APACHE_MODULES = {
    BackendMode.EMBEDDED_SERVER: ["proxy", "proxy_uwsgi"],
    BackendMode.PROXIED_SITE: ["wsgi"],
}


class LifecycleController(LifecycleManager):
    """Drives install, configure, init, start, stop and cleanup."""

    def __init__(
        self,
        spec: DeploymentSpec,
        identity: Optional[IdentityClient] = None,
        web_server: Optional[ApacheController] = None,
        packages: Optional[PackageInstaller] = None,
        process_manager: Optional[ProcessManager] = None,
        database: Optional[DatabaseBootstrapper] = None,
        config_writer: Optional[ConfigWriter] = None,
        state_manager: Optional[LifecycleStateManager] = None,
        timer: Optional[PhaseTimer] = None,
        readiness_interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize LifecycleController.

        Every collaborator defaults to the implementation that shells out
        to the real tool; tests pass in fakes.

        Args:
            spec: Deployment description shared by all phases
            identity: Identity service client
            web_server: Web-server site control
            packages: Package installer
            process_manager: Supervisor of the embedded server process
            database: Database bootstrapper
            config_writer: Renderer of the configuration files
            state_manager: Persistence of the lifecycle record
            timer: Collector of step durations
            readiness_interval: Seconds between readiness checks
            logger: Logger instance
        """
        super().__init__(
            state_manager=state_manager
            or LifecycleStateManager(spec.state_dir),
        )
        self.spec = spec
        self._logger = logger or logging.getLogger(__name__)
        self._readiness_interval = readiness_interval
        self.timer = timer or PhaseTimer()

        state_dir = os.path.expanduser(spec.state_dir)
        self.identity = identity or OpenStackCLIClient(
            cloud=spec.identity_cloud,
        )
        self.web_server = web_server or ApacheController(
            apache_name=spec.apache_name,
            sites_available=spec.apache_sites_available,
            sites_enabled=spec.apache_sites_enabled,
        )
        self.packages = packages or PackageInstaller(venv_path=spec.venv_path)
        self.process_manager = process_manager or ProcessManager(
            run_dir=os.path.join(state_dir, "run"),
        )
        self.database = database or DatabaseBootstrapper(
            admin=get_database_admin(
                spec.database.type,
                host=spec.database.host,
                user=spec.database.user,
                password=spec.database.password,
            ),
            migrations=MigrationRunner(spec.manage_binary),
            timer=self.timer,
        )
        self.config_writer = config_writer or ConfigWriter(spec)
        self.accounts = AccountProvisioner(self.identity, logger=self._logger)

    @property
    def name(self) -> str:
        """Key of the process, the web-server site and the log."""
        return self.spec.service.process_name

    @contextmanager
    def _phase(self, phase: str) -> Iterator[None]:
        service = self.spec.service.name
        self._logger.info(f"Running {phase} for {service}...")
        try:
            yield
        except LifecycleException as e:
            e.service = e.service or service
            e.phase = e.phase or phase
            self._logger.error(f"{phase} of {service} failed: {e}")
            raise
        self._logger.info(f"{phase} of {service} completed")

    def _record(self) -> LifecycleRecord:
        return self.state_manager.get_or_create(self.spec.service.name)

    def _save(self, record: LifecycleRecord, state: LifecycleState) -> None:
        record.state = state.value
        self.state_manager.save(record)

    def _recorded_mode(self, record: LifecycleRecord) -> BackendMode:
        """Backend mode to branch on, refusing a changed setting."""
        requested = self.spec.backend_mode
        if record.backend_mode is None:
            self._logger.warning(
                f"No backend mode recorded for {self.spec.service.name}; "
                f"using {requested.value}",
            )
            return requested
        if record.backend_mode != requested.value:
            raise BackendModeMismatchError(
                self.spec.service.name,
                record.backend_mode,
                requested.value,
            )
        return requested

    async def install(self) -> None:
        with self._phase("install"):
            mode = self.spec.backend_mode
            self.packages.system_install(*BACKEND_SYSTEM_PACKAGES[mode])
            for module in BACKEND_APACHE_MODULES[mode]:
                self.web_server.enable_module(module)
            if mode == BackendMode.EMBEDDED_SERVER:
                self.packages.pip_install("uwsgi")
            self.packages.pip_install(
                CLIENT_PLUGIN_PACKAGE,
                self.spec.package_source,
            )

            record = self._record()
            self._save(record, LifecycleState.INSTALLED)

    async def configure(self) -> None:
        with self._phase("configure"):
            spec = self.spec
            record = self._record()
            mode = spec.backend_mode
            if record.handle and record.backend_mode != mode.value:
                # The running backend could no longer be stopped
                raise BackendModeMismatchError(
                    spec.service.name,
                    record.backend_mode,
                    mode.value,
                )

            database_url = None
            if spec.database_enabled:
                database_url = self.database.connection_url(spec.service.name)
            self.config_writer.write_service_config(database_url)

            site_path = self.web_server.site_config_for(self.name)
            if mode == BackendMode.EMBEDDED_SERVER:
                self.config_writer.write_app_server_config(site_path)
                self.web_server.enable_site(self.name)
                self.web_server.restart()
            else:
                self.config_writer.write_site_config(site_path)
                remove_file(spec.uwsgi_conf)

            record.backend_mode = mode.value
            if record.handle:
                self.state_manager.save(record)
            else:
                self._save(record, LifecycleState.CONFIGURED)

    async def init(self) -> IdentityRegistration:
        with self._phase("init"):
            spec = self.spec
            if spec.database_enabled:
                self.database.bootstrap(spec.service.name)

            credentials = spec.credentials
            registration = self.accounts.ensure_registration(
                service_name=spec.service.name,
                role=credentials.role,
                endpoint_url=spec.service.public_url,
                password=credentials.password,
                project=credentials.project_name,
                domain=credentials.user_domain_name,
                region=credentials.region_name,
            )

            record = self._record()
            record.timings.update(self.timer.totals())
            self._save(record, LifecycleState.INITIALIZED)
            return registration

    async def _launch(self, mode: BackendMode) -> None:
        if mode == BackendMode.EMBEDDED_SERVER:
            if self.process_manager.is_running(self.name):
                self._logger.info(f"{self.name} is already running")
                return
            await self.process_manager.run(
                self.name,
                [
                    self.spec.uwsgi_bin,
                    "--procname-prefix",
                    self.spec.service.name,
                    "--ini",
                    self.spec.uwsgi_conf,
                ],
            )
        else:
            self.web_server.enable_site(self.name)
            self.web_server.restart()
            self.process_manager.tail_log(
                self.name,
                self.web_server.log_file_for(self.name),
            )

    async def _teardown(self, mode: BackendMode) -> None:
        if mode == BackendMode.EMBEDDED_SERVER:
            await self.process_manager.stop(self.name)
        else:
            self.web_server.disable_site(self.name)
            self.web_server.restart()

    async def start(self) -> Dict[str, str]:
        with self._phase("start"):
            record = self._record()
            mode = self._recorded_mode(record)
            url = self.spec.service.public_url
            timeout = self.spec.service_timeout

            await self._launch(mode)

            self._logger.info(f"Waiting for {self.name} to start...")
            with self.timer.measure("wait_for_service"):
                ready = await wait_for_service(
                    url,
                    timeout=timeout,
                    interval=self._readiness_interval,
                )
            if not ready:
                await self._teardown(mode)
                record.handle = None
                record.timings.update(self.timer.totals())
                self.state_manager.save(record)
                raise ReadinessTimeoutError(self.name, url, timeout)

            record.handle = self.name
            record.backend_mode = mode.value
            record.timings.update(self.timer.totals())
            self._save(record, LifecycleState.RUNNING)
            self._logger.info(f"{self.name} is serving at {url}")
            return {"handle": self.name, "url": url}

    async def stop(self) -> bool:
        with self._phase("stop"):
            record = self.state_manager.get(self.spec.service.name)
            if record is None or not record.handle:
                self._logger.info(f"{self.name} is not running")
                return False

            mode = self._recorded_mode(record)
            await self._teardown(mode)

            record.handle = None
            self._save(record, LifecycleState.STOPPED)
            return True

    async def cleanup(self) -> None:
        with self._phase("cleanup"):
            self.web_server.disable_site(self.name)
            remove_file(self.web_server.site_config_for(self.name))
            remove_file(self.spec.uwsgi_conf)

            record = self.state_manager.get(self.spec.service.name)
            if record is not None:
                # A still running service must remain stoppable
                if not record.handle:
                    record.backend_mode = None
                self._save(record, LifecycleState.UNINSTALLED)

    def status(self) -> Dict[str, Any]:
        """Get lifecycle information."""
        record = self._record()
        if record.backend_mode == BackendMode.EMBEDDED_SERVER.value:
            running = self.process_manager.is_running(self.name)
        elif record.backend_mode == BackendMode.PROXIED_SITE.value:
            running = bool(record.handle) and self.web_server.is_enabled(
                self.name,
            )
        else:
            running = False

        return {
            "service": record.service,
            "state": record.state,
            "backend_mode": record.backend_mode,
            "handle": record.handle,
            "url": self.spec.service.public_url,
            "is_running": running,
            "updated_at": record.updated_at,
            "timings": record.timings,
        }
