"""CLI command for listing the AppConfig resources of a region."""

from __future__ import annotations

import click

from apcdeploy.aws.client import create_client
from apcdeploy.aws.inventory import list_resources
from apcdeploy.cli.commands.deploy import handle_deployment_errors, verbose_option
from apcdeploy.lib.logging_config import setup_logging
from apcdeploy.models.config import Settings
from apcdeploy.models.resources import ResourcesTree


def format_resources(tree: ResourcesTree) -> str:
    """Render a resource tree as indented text."""
    lines = [f"Region: {tree.region}", ""]

    if tree.deployment_strategies is not None:
        lines.append("Deployment Strategies:")
        if not tree.deployment_strategies:
            lines.append("  No deployment strategies found.")
        for strategy in tree.deployment_strategies:
            lines.append(f"  - {strategy.name} (ID: {strategy.id})")
            if strategy.description:
                lines.append(f"    Description: {strategy.description}")
            lines.append(
                f"    Deployment Duration: {strategy.deployment_duration_in_minutes} minutes"
            )
            lines.append(
                f"    Final Bake Time: {strategy.final_bake_time_in_minutes} minutes"
            )
            lines.append(f"    Growth Factor: {strategy.growth_factor:.1f}%")
            if strategy.growth_type:
                lines.append(f"    Growth Type: {strategy.growth_type}")
        lines.append("")

    lines.append("Applications:")
    if not tree.applications:
        lines.append("  No applications found.")

    for index, app in enumerate(tree.applications, start=1):
        if index > 1:
            lines.append("")
        lines.append(f"  [{index}] {app.name} (ID: {app.id})")
        lines.append("      Configuration Profiles:")
        if not app.configuration_profiles:
            lines.append("        - No configuration profiles")
        for profile in app.configuration_profiles:
            lines.append(f"        - {profile.name} (ID: {profile.id})")
        lines.append("      Environments:")
        if not app.environments:
            lines.append("        - No environments")
        for env in app.environments:
            lines.append(f"        - {env.name} (ID: {env.id})")

    return "\n".join(lines)


@click.command(name="ls-resources")
@click.option(
    "--region",
    type=str,
    default=None,
    help="AWS region (defaults to AWS_REGION/AWS_DEFAULT_REGION)",
)
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format")
@click.option(
    "--show-strategies",
    is_flag=True,
    help="Include deployment strategies in the output",
)
@verbose_option
def ls_resources(
    region: str | None, as_json: bool, show_strategies: bool, verbose: bool
) -> None:
    """List applications, configuration profiles and environments.

    Example:

        apcdeploy ls-resources --region us-east-1

        apcdeploy ls-resources --json --show-strategies
    """
    setup_logging(verbose=verbose)

    with handle_deployment_errors():
        client = create_client(region, Settings.from_env())
        tree = list_resources(client, include_strategies=show_strategies)

    if as_json:
        click.echo(tree.model_dump_json(indent=2, exclude_none=True))
    else:
        click.echo(format_resources(tree))
