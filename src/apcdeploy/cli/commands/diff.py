"""CLI command for comparing local configuration with the live deployment.

Metadata goes to stderr and the diff itself to stdout, so the output can be
piped.
"""

from __future__ import annotations

import sys

import click

from apcdeploy.cli.commands.deploy import (
    build_deployer,
    config_option,
    handle_deployment_errors,
    quiet_option,
    verbose_option,
)
from apcdeploy.lib.logging_config import setup_logging
from apcdeploy.models.deployment import DiffReport, DiffResult

_LINE_COLORS = (("+", "green"), ("-", "red"), ("@", "cyan"))


def echo_diff(result: DiffResult) -> None:
    """Print diff lines to stdout, colored by prefix."""
    for line in result.lines:
        color = next((fg for prefix, fg in _LINE_COLORS if line.startswith(prefix)), None)
        click.secho(line, fg=color)


def _echo_header(report: DiffReport) -> None:
    click.secho("Configuration Diff", bold=True, err=True)
    click.echo("==================", err=True)
    click.echo(f"Application ID: {report.target.application_id}", err=True)
    click.echo(
        f"Profile:        {report.target.profile.name} ({report.target.profile.id})",
        err=True,
    )
    click.echo(f"Environment ID: {report.target.environment_id}", err=True)
    if report.deployment is not None:
        click.echo(
            f"Remote Version: {report.deployment.configuration_version} "
            f"(Deployment #{report.deployment.deployment_number}, "
            f"{report.deployment.state})",
            err=True,
        )
    else:
        click.echo("Remote Version: (none)", err=True)
    click.echo("", err=True)


@click.command()
@config_option
@click.option(
    "--exit-nonzero",
    is_flag=True,
    help="Exit with code 1 when differences exist",
)
@verbose_option
@quiet_option
def diff(config_file: str, exit_nonzero: bool, verbose: bool, quiet: bool) -> None:
    """Show differences between the local data file and the live configuration.

    Example:

        apcdeploy diff

        apcdeploy diff --exit-nonzero --quiet
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_deployment_errors():
        deployer = build_deployer(config_file)
        report = deployer.diff()

    if report.diff is None:
        # Never deployed: everything local is new
        if not quiet:
            _echo_header(report)
            click.secho(
                "Warning: no deployment found; showing the local configuration",
                fg="yellow",
                err=True,
            )
        local = report.local_content.decode("utf-8", errors="replace")
        click.echo(local, nl=not local.endswith("\n"))
        if exit_nonzero:
            sys.exit(1)
        return

    if not quiet:
        _echo_header(report)
        if report.deployment is not None and report.deployment.is_ongoing:
            click.secho(
                f"Warning: deployment #{report.deployment.deployment_number} is "
                f"{report.deployment.state}; the remote side may change",
                fg="yellow",
                err=True,
            )

    if not report.diff.has_changes:
        if not quiet:
            click.secho("No changes detected.", fg="green", err=True)
        return

    echo_diff(report.diff)
    if not quiet:
        click.echo(
            f"\nSummary: +{report.diff.additions} additions, "
            f"-{report.diff.deletions} deletions",
            err=True,
        )
    if exit_nonzero:
        sys.exit(1)
