"""apcdeploy command line entry point."""

import click

from apcdeploy import __version__
from apcdeploy.cli.commands.deploy import rollback, run, status
from apcdeploy.cli.commands.diff import diff
from apcdeploy.cli.commands.init import init
from apcdeploy.cli.commands.pull import pull
from apcdeploy.cli.commands.resources import ls_resources


@click.group()
@click.version_option(__version__, prog_name="apcdeploy")
def cli() -> None:
    """Deploy configuration data to AWS AppConfig."""


cli.add_command(init)
cli.add_command(run)
cli.add_command(diff)
cli.add_command(status)
cli.add_command(pull)
cli.add_command(rollback)
cli.add_command(ls_resources)


def main() -> None:
    """Run the apcdeploy CLI."""
    cli()


if __name__ == "__main__":
    main()
