"""chronolint init command - write a project config file."""

import sys
from pathlib import Path

import click

from chronolint.config.constants import CONFIG_FILENAME
from chronolint.config.user_config import write_user_config
from chronolint.core.progress import status


@click.command()
@click.argument(
    "path",
    default=".",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--force", "-f", is_flag=True, help=f"Overwrite an existing {CONFIG_FILENAME}")
def init_command(path: Path, force: bool) -> None:
    """Write a commented .chronolint.yaml template.

    PATH is the project root (default: current directory).
    """
    config_path = path / CONFIG_FILENAME

    if not write_user_config(config_path, force=force):
        status(f"Already exists: {config_path}", style="info")
        status("Use --force to overwrite", style="info")
        sys.exit(1)

    status(f"Wrote {config_path}", style="success")
