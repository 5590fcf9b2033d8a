"""Click command for bootstrapping apcdeploy.yml from existing AppConfig resources."""

from __future__ import annotations

import click

from apcdeploy.aws.client import create_client
from apcdeploy.cli.commands.deploy import handle_deployment_errors, verbose_option
from apcdeploy.config.defaults import DEFAULT_CONFIG_FILE
from apcdeploy.deploy.initializer import Initializer
from apcdeploy.lib.logging_config import setup_logging
from apcdeploy.models.config import Settings
from apcdeploy.models.deployment import InitOptions


@click.command(name="init")
@click.option("--app", "application", required=True, help="Application name")
@click.option(
    "--profile",
    "configuration_profile",
    required=True,
    help="Configuration profile name",
)
@click.option("--env", "environment", required=True, help="Environment name")
@click.option(
    "--region",
    type=str,
    default=None,
    help="AWS region (defaults to AWS_REGION/AWS_DEFAULT_REGION)",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path of the config file to write",
)
@click.option(
    "--output-data",
    type=click.Path(),
    default=None,
    help="Data file name (derived from the content type by default)",
)
@click.option("--force", is_flag=True, help="Overwrite existing files")
@verbose_option
def init(
    application: str,
    configuration_profile: str,
    environment: str,
    region: str | None,
    config_file: str,
    output_data: str | None,
    force: bool,
    verbose: bool,
) -> None:
    """Generate apcdeploy.yml and a data file from an existing profile.

    Example:

        apcdeploy init --app demo --profile cfg --env prod

        apcdeploy init --app demo --profile cfg --env prod --output-data flags.json
    """
    setup_logging(verbose=verbose)

    with handle_deployment_errors():
        client = create_client(region, Settings.from_env())
        result = Initializer(client).run(
            InitOptions(
                application=application,
                configuration_profile=configuration_profile,
                environment=environment,
                config_file=config_file,
                data_file=output_data,
                force=force,
            )
        )

    click.secho(f"Created: {result.config_file}", fg="green")
    if result.data_written:
        click.secho(
            f"Created: {result.data_file} (version {result.version_number})", fg="green"
        )
    else:
        click.secho(
            "No configuration versions found; create the data file before deploying.",
            fg="yellow",
        )
    click.echo(f"Deployment strategy: {result.deployment_strategy}")
    click.echo("\nNext steps:")
    click.echo("  1. Review the generated files")
    click.echo("  2. Run 'apcdeploy diff' to preview changes")
    click.echo("  3. Run 'apcdeploy run' to deploy")
