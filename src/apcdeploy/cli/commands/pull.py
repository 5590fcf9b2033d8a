"""CLI command for pulling the live configuration into the local data file."""

from __future__ import annotations

import click

from apcdeploy.cli.commands.deploy import (
    build_deployer,
    config_option,
    handle_deployment_errors,
    quiet_option,
    verbose_option,
)
from apcdeploy.lib.logging_config import setup_logging


@click.command()
@config_option
@verbose_option
@quiet_option
def pull(config_file: str, verbose: bool, quiet: bool) -> None:
    """Update the local data file from the latest deployed version.

    Rolled back deployments are skipped, so this fetches what is live.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_deployment_errors():
        deployer = build_deployer(config_file)
        result = deployer.pull()

    if quiet:
        return
    if not result.updated:
        click.secho(
            f"No changes detected; {result.data_file} matches version "
            f"{result.version_number}.",
            fg="yellow",
        )
        return
    click.secho(
        f"Pulled version {result.version_number} "
        f"(deployment #{result.deployment_number}) into {result.data_file}",
        fg="green",
    )
