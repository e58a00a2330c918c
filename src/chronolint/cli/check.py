"""chronolint check command - lint DDL files."""

import sys
from pathlib import Path

import click

from chronolint.config import load_config
from chronolint.core.errors import ConfigError, SourceError
from chronolint.core.logging import configure_logging, get_log_file_path, get_logger
from chronolint.core.progress import status
from chronolint.lint import default_rules, exit_code, lint_batch, render_json, render_text
from chronolint.lint.report import EXIT_UNANALYZABLE
from chronolint.sources import discover_sources, read_sources

log = get_logger("cli.check")


def _abort(error: Exception) -> None:
    status(str(error), style="error")
    if log_path := get_log_file_path():
        status(f"See log: {log_path}", style="info")
    sys.exit(EXIT_UNANALYZABLE)


@click.command()
@click.argument("paths", nargs=-1)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Report format (default: lint.format from config, else text)",
)
@click.option("--strict/--no-strict", default=None, help="Fail the run on warnings too")
@click.option("--disable", multiple=True, metavar="RULE", help="Skip a rule (repeatable)")
@click.option("--only", multiple=True, metavar="RULE", help="Run only these rules (repeatable)")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of ./.chronolint.yaml",
)
@click.option("--evidence", is_flag=True, help="Print the offending DDL under each finding")
@click.pass_context
def check_command(
    ctx: click.Context,
    paths: tuple[str, ...],
    fmt: str | None,
    strict: bool | None,
    disable: tuple[str, ...],
    only: tuple[str, ...],
    config_file: Path | None,
    evidence: bool,
) -> None:
    """Lint DDL scripts.

    PATHS are .sql files or directories (searched recursively). Use - to
    read from stdin. Defaults to the current directory.

    Exit status: 0 clean, 1 errors (or warnings with --strict),
    2 when an input could not be read or analyzed.
    """
    try:
        config = load_config(config_file=config_file)
    except ConfigError as e:
        _abort(e)
        return

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if not verbose:
        configure_logging(config=config.logging)

    rules = default_rules()
    unknown = sorted({r for r in (*disable, *only) if r not in rules})
    if unknown:
        raise click.BadParameter(
            f"unknown rule id(s): {', '.join(unknown)}. Run 'chronolint rules' to list them.",
            param_hint="--disable/--only",
        )
    if only:
        rules = rules.only(only)
    rules = rules.without([*config.lint.disabled_rules, *disable])

    try:
        names = discover_sources(paths or (".",))
        texts = read_sources(names)
    except SourceError as e:
        log.error("source_read_failed", error=e.error_name, **e.details)
        _abort(e)
        return

    if not texts:
        status("No .sql files found", style="warning")
        return

    results = lint_batch(
        texts,
        max_workers=config.lint.max_workers,
        rules=rules,
        conventions=config.conventions,
        evidence_max_chars=config.lint.evidence_max_chars,
    )

    fmt = fmt or config.lint.format
    if fmt == "json":
        click.echo(render_json(results), nl=False)
    else:
        click.echo(render_text(results, show_evidence=evidence), nl=False)

    strict = config.lint.strict if strict is None else strict
    sys.exit(exit_code(results, strict=strict))
