# -*- coding: utf-8 -*-
"""Lifecycle hook commands, one per phase."""
# pylint: disable=no-value-for-parameter

import click

from placement_deploy.cli.commands._common import run_phase
from placement_deploy.cli.utils.console import (
    echo_info,
    echo_success,
    echo_warning,
)


@click.command()
@click.pass_context
def install(ctx):
    """
    Install the web-server integration, the client plugin and the service.
    """
    run_phase(ctx, "install", lambda controller: controller.install())
    echo_success("placement installed")


@click.command()
@click.pass_context
def configure(ctx):
    """
    Write the service configuration and the backend configuration.

    The backend is chosen from WSGI_MODE and recorded; later phases refuse
    to run if WSGI_MODE selects a different backend.
    """
    run_phase(ctx, "configure", lambda controller: controller.configure())
    echo_success("placement configured")


@click.command(name="init")
@click.pass_context
def init_(ctx):
    """
    Prepare the database (when enabled) and register the service.

    WARNING: with PLACEMENT_DB_ENABLED the placement database is dropped and
    created again.
    """
    registration = run_phase(
        ctx,
        "init",
        lambda controller: controller.init(),
    )
    echo_success(
        f"placement registered at {registration.endpoint_url}",
    )


@click.command()
@click.pass_context
def start(ctx):
    """
    Start the service and wait until its public URL answers.
    """
    result = run_phase(ctx, "start", lambda controller: controller.start())
    echo_success(f"{result['handle']} is serving at {result['url']}")


@click.command()
@click.pass_context
def stop(ctx):
    """
    Stop the service. Stopping a service that is not running is a no-op.
    """
    stopped = run_phase(ctx, "stop", lambda controller: controller.stop())
    if stopped:
        echo_success("placement stopped")
    else:
        echo_warning("placement was not running")


@click.command()
@click.pass_context
def cleanup(ctx):
    """
    Remove generated backend configuration files.
    """
    run_phase(ctx, "cleanup", lambda controller: controller.cleanup())
    echo_info("placement configuration files removed")
