# -*- coding: utf-8 -*-
# pylint: disable=redefined-outer-name
import json
import subprocess
from unittest.mock import patch

import pytest

from placement_deploy.common.clients import OpenStackCLIClient
from placement_deploy.engine.exceptions import (
    ExternalCommandError,
    IdentityConflictError,
)

RUN_COMMAND = "placement_deploy.common.clients.identity.run_command"


def _completed(payload):
    stdout = json.dumps(payload) if payload is not None else ""
    return subprocess.CompletedProcess([], 0, stdout, "")


@pytest.fixture
def client():
    return OpenStackCLIClient(cloud="devstack-admin")


def test_find_user(client):
    rows = [
        {"ID": "u1", "Name": "nova"},
        {"ID": "u2", "Name": "placement"},
    ]
    with patch(RUN_COMMAND, return_value=_completed(rows)) as run:
        assert client.find_user("placement", "Default") == "u2"

    cmd = run.call_args.args[0]
    assert cmd[:3] == ["openstack", "--os-cloud", "devstack-admin"]
    assert cmd[-2:] == ["-f", "json"]
    assert "--domain" in cmd


def test_find_user_missing(client):
    with patch(RUN_COMMAND, return_value=_completed([])):
        assert client.find_user("placement", "Default") is None


def test_create_user(client):
    with patch(RUN_COMMAND, return_value=_completed({"id": "u9"})) as run:
        assert client.create_user("placement", "pw", "Default", "service") == (
            "u9"
        )

    cmd = run.call_args.args[0]
    assert cmd[3:6] == ["user", "create", "placement"]


def test_find_service_by_type(client):
    rows = [{"ID": "s1", "Name": "placement", "Type": "placement"}]
    with patch(RUN_COMMAND, return_value=_completed(rows)):
        assert client.find_service("placement") == "s1"
        assert client.find_service("compute") is None


def test_find_endpoint(client):
    rows = [{"ID": "e1", "URL": "http://host/placement"}]
    with patch(RUN_COMMAND, return_value=_completed(rows)) as run:
        endpoint = client.find_endpoint("s1", "public", "RegionOne")

    assert endpoint == {"id": "e1", "url": "http://host/placement"}
    cmd = run.call_args.args[0]
    assert ["--interface", "public"] == cmd[
        cmd.index("--interface") : cmd.index("--interface") + 2
    ]


def test_has_role(client):
    with patch(RUN_COMMAND, return_value=_completed([])):
        assert client.has_role("u1", "service", "admin") is False
    with patch(RUN_COMMAND, return_value=_completed([{"Role": "r1"}])):
        assert client.has_role("u1", "service", "admin") is True


def test_empty_output(client):
    with patch(RUN_COMMAND, return_value=_completed(None)):
        assert client.find_service("placement") is None


def test_conflict_is_translated(client):
    error = ExternalCommandError(
        ["openstack", "service", "create"],
        1,
        "Conflict occurred attempting to store service (HTTP 409)",
    )
    with patch(RUN_COMMAND, side_effect=error):
        with pytest.raises(IdentityConflictError) as excinfo:
            client.create_service("placement", "placement", "Placement")

    assert excinfo.value.returncode == 1


def test_other_failures_propagate(client):
    error = ExternalCommandError(["openstack"], 1, "Unauthorized (HTTP 401)")
    with patch(RUN_COMMAND, side_effect=error):
        with pytest.raises(ExternalCommandError) as excinfo:
            client.find_user("placement", "Default")

    assert not isinstance(excinfo.value, IdentityConflictError)


def test_failed_user_create_hides_password(client):
    failed = subprocess.CompletedProcess([], 1, "", "HTTP 500")
    with patch(
        "placement_deploy.common.utils.commands.subprocess.run",
        return_value=failed,
    ):
        with pytest.raises(ExternalCommandError) as excinfo:
            client.create_user("placement", "s3cr3t-pw", "Default", "service")

    assert "s3cr3t-pw" not in str(excinfo.value)
    assert "s3cr3t-pw" not in excinfo.value.details["command"]
    assert "user create placement --password ***" in str(excinfo.value)
