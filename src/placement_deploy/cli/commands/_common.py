# -*- coding: utf-8 -*-
"""Helpers shared by the lifecycle hook commands."""

import asyncio
import logging
import os
import sys
import traceback
from typing import Any, Callable, Coroutine

import click

from placement_deploy.cli.utils.console import echo_error
from placement_deploy.engine.config import get_settings
from placement_deploy.engine.exceptions import LifecycleException
from placement_deploy.engine.lifecycle import (
    DeploymentSpec,
    LifecycleController,
)

logger = logging.getLogger(__name__)


def build_controller(ctx: click.Context) -> LifecycleController:
    """Create a controller from the settings of this invocation."""
    settings = get_settings(ctx.obj.get("env_file"))
    spec = DeploymentSpec.from_settings(settings)
    return LifecycleController(spec)


def failure_location(exc: BaseException) -> str:
    """File and line where ``exc`` was raised."""
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return "unknown location"
    frame = frames[-1]
    return f"{os.path.basename(frame.filename)}:{frame.lineno}"


def run_phase(
    ctx: click.Context,
    phase: str,
    call: Callable[[LifecycleController], Coroutine[Any, Any, Any]],
) -> Any:
    """Run one lifecycle phase, exiting with status 1 on failure."""
    try:
        controller = build_controller(ctx)
        return asyncio.run(call(controller))
    except LifecycleException as e:
        echo_error(f"{e} (at {failure_location(e)})")
        logger.debug("Phase failure", exc_info=True)
        sys.exit(1)
    except Exception as e:
        echo_error(
            f"placement {phase} failed: {e} (at {failure_location(e)})",
        )
        logger.debug("Phase failure", exc_info=True)
        sys.exit(1)
