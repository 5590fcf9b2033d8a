"""CLI commands for deploying configuration to AWS AppConfig.

Implements 'apcdeploy run', 'apcdeploy status' and 'apcdeploy rollback', and
holds the error handling and options the other commands share.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from contextlib import contextmanager

import click

from apcdeploy.config.defaults import DEFAULT_CONFIG_FILE
from apcdeploy.config.loader import ConfigLoader
from apcdeploy.deploy.deployer import Deployer, create_deployer
from apcdeploy.lib.errors import (
    ApcDeployError,
    ConfigError,
    DeploymentError,
    RemoteCallError,
    ValidationError,
    format_user_friendly_error,
)
from apcdeploy.lib.logging_config import get_logger, setup_logging
from apcdeploy.models.config import Settings
from apcdeploy.models.deployment import DeployOptions

logger = get_logger(__name__)


@contextmanager
def handle_deployment_errors() -> Generator[None, None, None]:
    """Map apcdeploy errors to user feedback and exit codes.

    Exit codes:
        2: Configuration or validation error
        3: Deployment, resolution, or remote call error
    """
    try:
        yield
    except (ConfigError, ValidationError) as e:
        logger.error(f"Configuration error: {e}")
        click.secho("Error: Configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except DeploymentError as e:
        logger.error(f"Deployment error: {e}")
        click.secho(f"Error: {e.operation} failed", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)
    except RemoteCallError as e:
        logger.error(f"AppConfig error: {e}")
        click.secho(f"Error: {e.operation} failed", fg="red", err=True)
        click.echo(f"  {format_user_friendly_error(e, e.operation)}", err=True)
        sys.exit(3)
    except ApcDeployError as e:
        logger.error(f"Error: {e}")
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(3)


def build_deployer(config_file: str, timeout: float | None = None) -> Deployer:
    """Load the deployment config and create a Deployer for it."""
    config = ConfigLoader().load(config_file)
    settings = Settings.from_env(timeout=timeout)
    return create_deployer(config, settings)


config_option = click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path to the deployment config file",
)
verbose_option = click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose debug logging"
)
quiet_option = click.option("--quiet", "-q", is_flag=True, help="Only print errors")


@click.command()
@config_option
@click.option("--wait", is_flag=True, help="Wait for the deployment to complete")
@click.option(
    "--wait-deploy",
    is_flag=True,
    help="Wait only until the deploy phase ends (BAKING)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for the deployment",
)
@click.option("--force", is_flag=True, help="Deploy even if nothing changed")
@click.option("--description", type=str, default=None, help="Deployment description")
@verbose_option
@quiet_option
def run(
    config_file: str,
    wait: bool,
    wait_deploy: bool,
    timeout: float | None,
    force: bool,
    description: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Deploy the configured data file to AppConfig.

    Example:

        apcdeploy run --wait

        apcdeploy run -c apcdeploy.yml --wait --timeout 900
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_deployment_errors():
        deployer = build_deployer(config_file, timeout)
        result = deployer.run(
            DeployOptions(
                wait=wait or wait_deploy,
                wait_for_baking_only=wait_deploy,
                timeout=timeout,
                force=force,
                description=description,
            )
        )

    if quiet:
        return
    if result.skipped:
        click.secho("No changes detected; nothing deployed.", fg="yellow")
        return
    click.secho(
        f"Deployment #{result.deployment_number} started "
        f"(version {result.version_number})",
        fg="green",
    )
    if result.waited:
        click.secho("Deployment completed successfully.", fg="green")


@click.command()
@config_option
@click.option(
    "--skip-rolled-back",
    is_flag=True,
    help="Report the latest deployment that was not rolled back",
)
@verbose_option
def status(config_file: str, skip_rolled_back: bool, verbose: bool) -> None:
    """Show the latest deployment of the configured profile."""
    setup_logging(verbose=verbose)

    with handle_deployment_errors():
        deployer = build_deployer(config_file)
        result = deployer.status(include_rolled_back=not skip_rolled_back)

    if result.deployment is None:
        click.echo("No deployments found.")
        return

    record = result.deployment.record
    click.secho(f"Deployment #{record.deployment_number}", bold=True)
    click.echo(f"  State:    {record.state}")
    click.echo(f"  Version:  {record.configuration_version}")
    click.echo(
        f"  Strategy: {result.deployment.deployment_strategy_name or record.deployment_strategy_id}"
    )
    click.echo(f"  Progress: {record.percentage_complete:.0f}%")
    if record.description:
        click.echo(f"  Description: {record.description}")


@click.command()
@config_option
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@verbose_option
def rollback(config_file: str, yes: bool, verbose: bool) -> None:
    """Stop the ongoing deployment, rolling it back."""
    setup_logging(verbose=verbose)

    if not yes:
        click.confirm("Stop the ongoing deployment and roll it back?", abort=True)

    with handle_deployment_errors():
        deployer = build_deployer(config_file)
        number = deployer.rollback()

    click.secho(f"Deployment #{number} stopped and rolling back.", fg="green")
