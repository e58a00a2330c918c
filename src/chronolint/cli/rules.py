"""chronolint rules command - list the built-in rules."""

import json

import click
from rich.console import Console
from rich.table import Table

from chronolint.lint import default_rules


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def rules_command(as_json: bool) -> None:
    """List rules in evaluation order."""
    rules = default_rules().all()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "rule_id": r.rule_id,
                        "severity": r.severity.value,
                        "scope": r.scope.value,
                        "title": r.title,
                        "rationale": r.rationale,
                    }
                    for r in rules
                ],
                indent=2,
            )
        )
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Rule", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Checks")
    for rule in rules:
        table.add_row(rule.rule_id, rule.severity.label, rule.title)
    Console(highlight=False).print(table)
