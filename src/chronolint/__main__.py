"""Allow `python -m chronolint`."""

from chronolint.cli.main import cli

if __name__ == "__main__":
    cli()
