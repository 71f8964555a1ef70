# -*- coding: utf-8 -*-
# pylint: disable=redefined-outer-name
"""Fakes for the external collaborators of the lifecycle controller."""
import os
import uuid
from typing import Dict, List

import pytest

from placement_deploy.common.clients import (
    ApacheController,
    IdentityClient,
    PackageInstaller,
)
from placement_deploy.common.clients.database import (
    DatabaseAdmin,
    MigrationRunner,
)
from placement_deploy.engine.exceptions import IdentityConflictError
from placement_deploy.engine.lifecycle import (
    BackendMode,
    DatabaseBootstrapper,
    DeploymentSpec,
    LifecycleController,
    ServiceDescriptor,
)
from placement_deploy.engine.lifecycle.descriptor import ServiceCredentials
from placement_deploy.engine.lifecycle.state import LifecycleStateManager
from placement_deploy.engine.lifecycle.utils import (
    PhaseTimer,
    ProcessManager,
)


class FakeIdentityClient(IdentityClient):
    """In-memory identity service."""

    def __init__(self):
        self.users: Dict[str, str] = {}
        self.roles: List[tuple] = []
        self.services: Dict[str, str] = {}
        self.endpoints: List[Dict[str, str]] = []
        self.create_calls: List[str] = []
        self.conflict_next_create = False

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    def _maybe_conflict(self, kind: str, store_callback) -> None:
        if self.conflict_next_create:
            # Another writer wins the race and the create is rejected
            self.conflict_next_create = False
            store_callback()
            raise IdentityConflictError(
                ["openstack", kind, "create"],
                1,
                "Conflict occurred attempting to store",
            )

    def find_user(self, name, domain):
        return self.users.get(name)

    def create_user(self, name, password, domain, project):
        self.create_calls.append("user")
        self._maybe_conflict(
            "user",
            lambda: self.users.setdefault(name, self._new_id()),
        )
        self.users[name] = self._new_id()
        return self.users[name]

    def has_role(self, user_id, project, role):
        return (user_id, project, role) in self.roles

    def grant_role(self, user_id, project, role):
        self.roles.append((user_id, project, role))

    def find_service(self, service_type):
        return self.services.get(service_type)

    def create_service(self, name, service_type, description):
        self.create_calls.append("service")
        self._maybe_conflict(
            "service",
            lambda: self.services.setdefault(service_type, self._new_id()),
        )
        self.services[service_type] = self._new_id()
        return self.services[service_type]

    def find_endpoint(self, service_id, interface, region):
        for endpoint in self.endpoints:
            if (
                endpoint["service_id"] == service_id
                and endpoint["interface"] == interface
                and endpoint["region"] == region
            ):
                return {"id": endpoint["id"], "url": endpoint["url"]}
        return None

    def create_endpoint(self, service_id, interface, url, region):
        self.create_calls.append("endpoint")
        endpoint = {
            "id": self._new_id(),
            "service_id": service_id,
            "interface": interface,
            "url": url,
            "region": region,
        }
        self.endpoints.append(endpoint)
        return endpoint["id"]


class FakeWebServer(ApacheController):
    """Apache controller that manages enabled-site links in a temp dir."""

    def __init__(self, root: str):
        super().__init__(
            apache_name="apache2",
            sites_available=os.path.join(root, "sites-available"),
            sites_enabled=os.path.join(root, "sites-enabled"),
        )
        self.log_root = os.path.join(root, "log")
        self.restarts = 0
        self.modules: List[str] = []

    def log_file_for(self, site):
        return os.path.join(self.log_root, f"{site}.log")

    def enable_site(self, site):
        os.makedirs(self.sites_enabled, exist_ok=True)
        link = os.path.join(self.sites_enabled, f"{site}.conf")
        if not os.path.lexists(link):
            os.symlink(self.site_config_for(site), link)

    def disable_site(self, site):
        link = os.path.join(self.sites_enabled, f"{site}.conf")
        if os.path.lexists(link):
            os.remove(link)

    def restart(self):
        self.restarts += 1

    def enable_module(self, module):
        self.modules.append(module)


class FakePackageInstaller(PackageInstaller):
    def __init__(self):
        super().__init__()
        self.pip_packages: List[str] = []
        self.system_packages: List[str] = []

    def pip_install(self, *packages):
        self.pip_packages.extend(packages)

    def system_install(self, *packages):
        self.system_packages.extend(packages)


class FakeProcessManager(ProcessManager):
    """Tracks launched commands instead of spawning processes."""

    def __init__(self, run_dir: str):
        super().__init__(run_dir=run_dir)
        self.running: Dict[str, List[str]] = {}
        self.launches = 0

    async def run(self, name, command, env=None):
        self.launches += 1
        self.running[name] = list(command)
        return 4242

    async def stop(self, name, timeout=None):
        return self.running.pop(name, None) is not None

    def is_running(self, name):
        return name in self.running


class FakeDatabaseAdmin(DatabaseAdmin):
    def __init__(self, calls: List[str]):
        super().__init__(host="db", user="root", password="pw")
        self.calls = calls

    def recreate(self, name):
        self.calls.append(f"recreate:{name}")

    def connection_url(self, name):
        return f"mysql+pymysql://root:pw@db/{name}?charset=utf8"


class FakeMigrationRunner(MigrationRunner):
    def __init__(self, calls: List[str]):
        super().__init__("placement-manage")
        self.calls = calls

    def sync(self):
        self.calls.append("sync")


def make_spec(
    root: str,
    backend_mode: BackendMode = BackendMode.EMBEDDED_SERVER,
    database_enabled: bool = False,
    **overrides,
) -> DeploymentSpec:
    values = {
        "service": ServiceDescriptor(host="host"),
        "backend_mode": backend_mode,
        "database_enabled": database_enabled,
        "credentials": ServiceCredentials(
            auth_url="http://host/identity",
            username="placement",
            password="secret",
        ),
        "conf_dir": os.path.join(root, "etc", "placement"),
        "uwsgi_socket_dir": os.path.join(root, "run", "uwsgi"),
        "state_dir": os.path.join(root, "state"),
        "service_timeout": 1,
    }
    values.update(overrides)
    return DeploymentSpec(**values)


@pytest.fixture
def identity():
    return FakeIdentityClient()


@pytest.fixture
def db_calls():
    return []


@pytest.fixture
def make_controller(tmp_path, identity, db_calls):
    """Build controllers sharing fakes and state, like repeated hooks."""
    root = str(tmp_path)
    web_server = FakeWebServer(root)
    packages = FakePackageInstaller()
    process_manager = FakeProcessManager(os.path.join(root, "state", "run"))
    state_manager = LifecycleStateManager(os.path.join(root, "state"))

    def _make(
        backend_mode: BackendMode = BackendMode.EMBEDDED_SERVER,
        database_enabled: bool = False,
        **overrides,
    ) -> LifecycleController:
        spec = make_spec(root, backend_mode, database_enabled, **overrides)
        timer = PhaseTimer()
        controller = LifecycleController(
            spec,
            identity=identity,
            web_server=web_server,
            packages=packages,
            process_manager=process_manager,
            database=DatabaseBootstrapper(
                FakeDatabaseAdmin(db_calls),
                FakeMigrationRunner(db_calls),
                timer=timer,
            ),
            state_manager=state_manager,
            timer=timer,
            readiness_interval=0.01,
        )
        return controller

    return _make


@pytest.fixture
def spec_factory(tmp_path):
    """Build specs rooted in a temporary directory."""

    def _make(**kwargs) -> DeploymentSpec:
        return make_spec(str(tmp_path), **kwargs)

    return _make
