# -*- coding: utf-8 -*-
"""placement-deploy CLI - lifecycle hooks for the Placement API service."""
# pylint: disable=no-value-for-parameter

import logging

import click

from placement_deploy.cli.commands import phases, status
from placement_deploy.version import __version__

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="placement-deploy")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file loaded before the environment (default: .env)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, env_file, debug):
    """
    placement-deploy - install, configure, init, start, stop and clean up
    the Placement API service.

    Each sub-command is one lifecycle hook; the orchestrator calls them in
    order and may call stop or cleanup at any later time.
    """
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )


# Register commands
cli.add_command(phases.install)
cli.add_command(phases.configure)
cli.add_command(phases.init_)
cli.add_command(phases.start)
cli.add_command(phases.stop)
cli.add_command(phases.cleanup)
cli.add_command(status.status)


def main():
    """Entry point for console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
