# -*- coding: utf-8 -*-
"""placement-deploy status command - Show lifecycle status."""
# pylint: disable=no-value-for-parameter

import sys

import click

from placement_deploy.cli.commands._common import build_controller
from placement_deploy.cli.utils.console import (
    echo_error,
    format_json,
    format_status_info,
)


@click.command()
@click.option(
    "--output-format",
    "-f",
    help="Output format: text or json",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
)
@click.pass_context
def status(ctx, output_format: str):
    """
    Show the recorded lifecycle state of the service.

    Examples:
    \b
    # Show status
    $ placement-deploy status

    # JSON output
    $ placement-deploy status --output-format json
    """
    try:
        info = build_controller(ctx).status()
    except Exception as e:
        echo_error(f"Failed to get lifecycle status: {e}")
        sys.exit(1)

    if output_format == "json":
        print(format_json(info))
    else:
        print(format_status_info(info))
