# -*- coding: utf-8 -*-
import logging
import subprocess
import sys
from unittest.mock import patch

import pytest

from placement_deploy.common.utils import redact_command, run_command
from placement_deploy.engine.exceptions import ExternalCommandError


def test_captures_output():
    result = run_command([sys.executable, "-c", "print('ok')"])

    assert result.returncode == 0
    assert result.stdout.strip() == "ok"


def test_non_zero_exit_raises():
    with pytest.raises(ExternalCommandError) as excinfo:
        run_command(
            [
                sys.executable,
                "-c",
                "import sys; sys.stderr.write('bad thing'); sys.exit(4)",
            ],
        )

    assert excinfo.value.returncode == 4
    assert excinfo.value.stderr == "bad thing"
    assert "bad thing" in excinfo.value.message
    assert excinfo.value.code == "EXTERNAL_COMMAND_FAILED"


def test_non_zero_exit_without_check():
    result = run_command(
        [sys.executable, "-c", "import sys; sys.exit(2)"],
        check=False,
    )

    assert result.returncode == 2


def test_missing_command_raises():
    with pytest.raises(ExternalCommandError, match="Command not found"):
        run_command(["definitely-not-a-command-xyz"])


def test_extra_environment():
    result = run_command(
        [sys.executable, "-c", "import os; print(os.environ['MYSQL_PWD'])"],
        env={"MYSQL_PWD": "pw"},
    )

    assert result.stdout.strip() == "pw"


def test_sudo_prefix_when_not_root():
    completed = subprocess.CompletedProcess(["x"], 0, "", "")
    with patch(
        "placement_deploy.common.utils.commands._needs_sudo",
        return_value=True,
    ), patch(
        "placement_deploy.common.utils.commands.subprocess.run",
        return_value=completed,
    ) as run:
        run_command(["a2ensite", "placement-api"], sudo=True)

    assert run.call_args.args[0] == ["sudo", "a2ensite", "placement-api"]


def test_no_sudo_prefix_as_root():
    completed = subprocess.CompletedProcess(["x"], 0, "", "")
    with patch(
        "placement_deploy.common.utils.commands._needs_sudo",
        return_value=False,
    ), patch(
        "placement_deploy.common.utils.commands.subprocess.run",
        return_value=completed,
    ) as run:
        run_command(["a2ensite", "placement-api"], sudo=True)

    assert run.call_args.args[0] == ["a2ensite", "placement-api"]


def test_sudo_passes_environment_through_env():
    completed = subprocess.CompletedProcess(["x"], 0, "", "")
    with patch(
        "placement_deploy.common.utils.commands._needs_sudo",
        return_value=True,
    ), patch(
        "placement_deploy.common.utils.commands.subprocess.run",
        return_value=completed,
    ) as run:
        run_command(
            ["apt-get", "install", "-y", "apache2"],
            sudo=True,
            env={"DEBIAN_FRONTEND": "noninteractive"},
        )

    assert run.call_args.args[0] == [
        "sudo",
        "env",
        "DEBIAN_FRONTEND=noninteractive",
        "apt-get",
        "install",
        "-y",
        "apache2",
    ]


@pytest.mark.parametrize(
    "cmd,expected",
    [
        (
            ["openstack", "user", "create", "--password", "pw", "placement"],
            ["openstack", "user", "create", "--password", "***", "placement"],
        ),
        (["openstack", "--password=pw"], ["openstack", "--password=***"]),
        (
            ["sudo", "env", "MYSQL_PWD=pw", "DEBIAN_FRONTEND=x", "mysql"],
            ["sudo", "env", "MYSQL_PWD=***", "DEBIAN_FRONTEND=x", "mysql"],
        ),
        (["a2ensite", "placement-api"], ["a2ensite", "placement-api"]),
    ],
)
def test_redact_command(cmd, expected):
    assert redact_command(cmd) == expected


def test_failure_does_not_expose_password(caplog):
    failed = subprocess.CompletedProcess(["x"], 1, "", "HTTP 500")
    with patch(
        "placement_deploy.common.utils.commands.subprocess.run",
        return_value=failed,
    ) as run:
        with caplog.at_level(
            logging.DEBUG,
            logger="placement_deploy.common.utils.commands",
        ):
            with pytest.raises(ExternalCommandError) as excinfo:
                run_command(
                    ["openstack", "user", "create", "--password", "s3cr3t"],
                )

    assert "s3cr3t" in run.call_args.args[0]
    assert "s3cr3t" not in str(excinfo.value)
    assert "s3cr3t" not in excinfo.value.details["command"]
    assert "s3cr3t" not in caplog.text
    assert "--password ***" in excinfo.value.command
