"""Reporter - ordering, summaries, text/JSON rendering and exit codes."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from chronolint.core.formatting import pluralize
from chronolint.lint.models import Finding, Severity, SourceResult, Summary

# Exit codes
EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_UNANALYZABLE = 2


def _sort_key(finding: Finding) -> tuple[str, str, int, str]:
    return (
        finding.source or "",
        finding.table_name or "",
        -finding.severity.rank,
        finding.column_name or "",
    )


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Group by source and table, then descending severity, then column.

    The sort is stable: findings that tie keep rule registration order.
    Script-level findings (no table) sort first within a source.
    """
    return sorted(findings, key=_sort_key)


def summarize(findings: Iterable[Finding]) -> Summary:
    counts = {Severity.ERROR: 0, Severity.WARNING: 0, Severity.INFO: 0}
    for finding in findings:
        counts[finding.severity] += 1
    return Summary(
        errors=counts[Severity.ERROR],
        warnings=counts[Severity.WARNING],
        infos=counts[Severity.INFO],
    )


def format_finding(finding: Finding) -> str:
    """One line: `table.column: [SEVERITY] rule_id: message`."""
    if finding.table_name is None:
        location = "(script)"
    elif finding.column_name is None:
        location = finding.table_name
    else:
        location = f"{finding.table_name}.{finding.column_name}"
    return f"{location}: [{finding.severity.label}] {finding.rule_id}: {finding.message}"


def format_summary(summary: Summary) -> str:
    return ", ".join(
        [
            pluralize(summary.errors, "error"),
            pluralize(summary.warnings, "warning"),
            pluralize(summary.infos, "info"),
        ]
    )


def render_text(results: Sequence[SourceResult], *, show_evidence: bool = False) -> str:
    """Human-readable report.

    A `# <source>` header precedes each source when more than one is rendered.
    The last line is the summary.
    """
    lines: list[str] = []
    batch = len(results) > 1
    all_findings: list[Finding] = []
    for result in results:
        if batch:
            if lines:
                lines.append("")
            lines.append(f"# {result.name}")
        for finding in sort_findings(result.findings):
            lines.append(format_finding(finding))
            if show_evidence and finding.evidence:
                lines.append(f"    {finding.evidence}")
        all_findings.extend(result.findings)
    if lines:
        lines.append("")
    lines.append(format_summary(summarize(all_findings)))
    return "\n".join(lines) + "\n"


def render_json(results: Sequence[SourceResult]) -> str:
    """Machine-readable report: a JSON array of finding objects."""
    findings = [f for result in results for f in sort_findings(result.findings)]
    return json.dumps([f.to_dict() for f in findings], indent=2) + "\n"


def exit_code(results: Sequence[SourceResult], *, strict: bool = False) -> int:
    """0 clean, 1 errors (or warnings when strict), 2 when an input could not be analyzed."""
    if any(not r.analyzed for r in results):
        return EXIT_UNANALYZABLE
    summary = summarize(f for r in results for f in r.findings)
    if summary.errors or (strict and summary.warnings):
        return EXIT_FINDINGS
    return EXIT_OK
