"""chronolint CLI - chronolint command."""

import click

from chronolint import __version__
from chronolint.cli.check import check_command
from chronolint.cli.init import init_command
from chronolint.cli.rules import rules_command
from chronolint.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="chronolint")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """chronolint - timestamp column conventions for PostgreSQL DDL."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(check_command, name="check")
cli.add_command(rules_command, name="rules")
cli.add_command(init_command, name="init")


if __name__ == "__main__":
    cli()
