"""Lint operations - the pipeline from DDL text to findings.

split -> parse -> build model -> classify -> evaluate rules

Only SourceError escapes. Lex and parse failures become findings at the
statement where they occur and processing continues with the next one.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

from chronolint.config.constants import DEFAULT_SOURCE_NAME, EVIDENCE_MAX_CHARS_DEFAULT
from chronolint.config.models import ConventionsConfig
from chronolint.core.errors import LexError, ParseError
from chronolint.core.formatting import excerpt
from chronolint.core.logging import get_logger, get_run_id, run_context
from chronolint.core.progress import progress
from chronolint.ddl.lexer import StatementSplitter
from chronolint.ddl.models import Declaration, Statement
from chronolint.ddl.parser import parse_statement
from chronolint.lint.definitions import default_rules
from chronolint.lint.models import Finding, Severity, SourceResult
from chronolint.lint.rules import RuleSet, classify_model, evaluate
from chronolint.schema.builder import SchemaModel, build_schema
from chronolint.schema.classifier import classify
from chronolint.sources import decode_source

log = get_logger("lint.ops")

UNTERMINATED_LITERAL = "UnterminatedLiteral"
PARSE_ERROR = "ParseError"

__all__ = ["PARSE_ERROR", "UNTERMINATED_LITERAL", "classify", "lint", "lint_batch"]


def _lex_finding(statement: Statement, error: LexError, max_chars: int) -> Finding:
    return Finding(
        rule_id=UNTERMINATED_LITERAL,
        severity=Severity.ERROR,
        table_name=None,
        column_name=None,
        message=f"{error.message}; the rest of the script was scanned after the opening {error.opener}",
        evidence=excerpt(statement.text, max_chars),
        line=statement.line,
    )


def _parse_finding(statement: Statement, error: ParseError, max_chars: int) -> Finding:
    return Finding(
        rule_id=PARSE_ERROR,
        severity=Severity.ERROR,
        table_name=error.table,
        column_name=None,
        message=f"{error.message}; statement skipped",
        evidence=excerpt(statement.text, max_chars),
        line=statement.line,
    )


def _parse_script(text: str, max_chars: int) -> tuple[list[Declaration], list[Finding], int]:
    """Split and parse a script, salvaging after unterminated literals."""
    splitter = StatementSplitter(text)
    declarations: list[Declaration] = []
    findings: list[Finding] = []
    failures = 0

    pending = iter(splitter)
    while True:
        statement = next(pending, None)
        if statement is None:
            break
        if statement.lex_error is not None:
            log.debug("unterminated_literal", line=statement.line, offset=statement.lex_error.offset)
            findings.append(_lex_finding(statement, statement.lex_error, max_chars))
            pending = splitter.salvage(statement)
            continue
        try:
            decl = parse_statement(statement)
        except ParseError as e:
            failures += 1
            log.debug("statement_skipped", line=statement.line, reason=e.reason)
            findings.append(_parse_finding(statement, e, max_chars))
            continue
        if decl is None:
            log.debug("statement_ignored", kind=statement.kind.value, line=statement.line)
            continue
        declarations.append(decl)

    return declarations, findings, failures


def lint(
    source_text: str | bytes,
    *,
    source: str | None = None,
    rules: RuleSet | None = None,
    conventions: ConventionsConfig | None = None,
    evidence_max_chars: int = EVIDENCE_MAX_CHARS_DEFAULT,
) -> tuple[SchemaModel, list[Finding]]:
    """Lint one DDL script.

    Args:
        source_text: The script. Bytes must be UTF-8.
        source: Name attached to every finding (file path, "<stdin>").
        rules: Rules to evaluate. Defaults to default_rules().
        conventions: Naming heuristics. Defaults to ConventionsConfig().
        evidence_max_chars: Evidence excerpt length.

    Returns:
        The schema model and findings: lex/parse findings first, then rule
        findings in rule registration order.

    Raises:
        SourceError: bytes input is not valid UTF-8.
    """
    name = source or DEFAULT_SOURCE_NAME
    text = decode_source(name, source_text) if isinstance(source_text, bytes) else source_text
    rules = rules if rules is not None else default_rules()
    conventions = conventions or ConventionsConfig()

    declarations, findings, failures = _parse_script(text, evidence_max_chars)
    model = build_schema(declarations, parse_failures=failures)
    classification = classify_model(model, conventions)
    findings.extend(
        evaluate(
            model,
            rules,
            classification=classification,
            conventions=conventions,
            evidence_max_chars=evidence_max_chars,
        )
    )

    if source is not None:
        findings = [f.with_source(source) for f in findings]

    log.debug(
        "lint_complete",
        source=name,
        tables=len(model.tables),
        findings=len(findings),
        parse_failures=failures,
    )
    return model, findings


def lint_batch(
    sources: Mapping[str, str | bytes],
    *,
    max_workers: int = 4,
    rules: RuleSet | None = None,
    conventions: ConventionsConfig | None = None,
    evidence_max_chars: int = EVIDENCE_MAX_CHARS_DEFAULT,
) -> list[SourceResult]:
    """Lint independent inputs in parallel.

    Each input gets its own schema model. Results come back in input order.

    Raises:
        SourceError: a bytes input is not valid UTF-8.
    """
    rules = rules if rules is not None else default_rules()
    conventions = conventions or ConventionsConfig()
    start = time.perf_counter()

    with run_context(get_run_id()) as run_id:

        def _one(name: str, text: str | bytes) -> SourceResult:
            with run_context(run_id):
                model, findings = lint(
                    text,
                    source=name,
                    rules=rules,
                    conventions=conventions,
                    evidence_max_chars=evidence_max_chars,
                )
            return SourceResult(name=name, model=model, findings=findings)

        items = list(sources.items())
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items) or 1))) as pool:
            futures = [pool.submit(_one, name, text) for name, text in items]
            results = [future.result() for future in progress(futures, desc="Linting", unit="files")]

        log.info(
            "batch_complete",
            sources=len(results),
            findings=sum(len(r.findings) for r in results),
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
    return results
