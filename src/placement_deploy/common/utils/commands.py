# -*- coding: utf-8 -*-
import logging
import os
import subprocess
from typing import Dict, List, Optional

from ...engine.exceptions import ExternalCommandError

logger = logging.getLogger(__name__)

# Flags whose following argument is a credential
SECRET_FLAGS = ("--password", "--os-password", "--db-password")
# ``env`` assignments whose value is a credential
SECRET_ENV_SUFFIXES = ("PASSWORD", "PWD")
REDACTED = "***"


def redact_command(cmd: List[str]) -> List[str]:
    """Copy of ``cmd`` with credential values masked, for logs and errors."""
    redacted = []
    hide_next = False
    for part in cmd:
        part = str(part)
        if hide_next:
            redacted.append(REDACTED)
            hide_next = False
            continue
        flag, sep, _ = part.partition("=")
        if flag in SECRET_FLAGS:
            if sep:
                redacted.append(f"{flag}={REDACTED}")
            else:
                redacted.append(part)
                hide_next = True
        elif sep and flag.upper().endswith(SECRET_ENV_SUFFIXES):
            redacted.append(f"{flag}={REDACTED}")
        else:
            redacted.append(part)
    return redacted


def _needs_sudo() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() != 0


def run_command(
    cmd: List[str],
    sudo: bool = False,
    env: Optional[Dict[str, str]] = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command and capture its output.

    Args:
        cmd: Command and arguments
        sudo: Prefix the command with ``sudo`` when not already root
        env: Extra environment variables for the command
        check: Raise on a non-zero exit status

    Returns:
        The completed process

    Raises:
        ExternalCommandError: If the command is missing or fails. The
            command line it carries has credentials masked.
    """
    if sudo and _needs_sudo():
        # sudo resets the environment; pass the extra variables through env
        assignments = [f"{key}={value}" for key, value in (env or {}).items()]
        if assignments:
            cmd = ["sudo", "env", *assignments, *cmd]
        else:
            cmd = ["sudo", *cmd]

    process_env = None
    if env:
        process_env = os.environ.copy()
        process_env.update(env)

    shown = redact_command(cmd)
    logger.debug(f"Running: {' '.join(shown)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=process_env,
            check=False,
        )
    except FileNotFoundError as e:
        raise ExternalCommandError(
            shown,
            message=f"Command not found: {shown[0]}",
        ) from e

    if check and result.returncode != 0:
        raise ExternalCommandError(shown, result.returncode, result.stderr)
    return result
