"""Rule definitions - the built-in timestamp convention rules.

default_rules() builds a fresh RuleSet in evaluation order. Each check is a
generator over Violations; it never modifies the table it inspects.
"""

from __future__ import annotations

from collections.abc import Iterator

from chronolint.config.constants import CALENDAR_TYPES
from chronolint.core.errors import ModelError, RuleEvaluationError
from chronolint.ddl.models import ColumnDecl, TriggerEvent, TriggerTiming, normalize_type
from chronolint.lint.expressions import Ordering, best_ordering
from chronolint.lint.models import Severity
from chronolint.lint.rules import (
    ModelContext,
    Rule,
    RuleScope,
    RuleSet,
    TableContext,
    Violation,
    review_violation,
)
from chronolint.schema.classifier import (
    EVENT_CATEGORIES,
    ColumnCategory,
    event_parts,
    is_current_time_default,
    is_null_default,
)

# =============================================================================
# R1 - R4: column shape
# =============================================================================


def check_type_affinity(ctx: TableContext) -> Iterator[Violation]:
    accepted = {"timestamptz", *CALENDAR_TYPES}
    accepted.update(normalize_type(t) for t in ctx.conventions.zone_exempt_types)
    for column in ctx.table.temporal_columns:
        if column.normalized_type in accepted:
            continue
        yield Violation(
            column=column.name,
            message=f"type '{column.declared_type}' stores no time zone; use timestamptz",
            evidence=column.raw,
        )


def _has_column(ctx: TableContext, name: str, category: ColumnCategory) -> bool:
    if ctx.columns_in(category):
        return True
    column = ctx.table.column(name)
    return column is not None and column.is_temporal


def check_audit_presence(ctx: TableContext) -> Iterator[Violation]:
    if ctx.short_name.endswith(tuple(ctx.conventions.history_suffixes)):
        return
    if not _has_column(ctx, "created_at", ColumnCategory.AUDIT_CREATED):
        yield Violation(
            column=None,
            message="missing audit column created_at timestamptz NOT NULL DEFAULT CURRENT_TIMESTAMP",
            evidence=ctx.table.raw,
        )
    if not _has_column(ctx, "updated_at", ColumnCategory.AUDIT_UPDATED):
        yield Violation(
            column=None,
            message="missing audit column updated_at timestamptz NOT NULL DEFAULT CURRENT_TIMESTAMP",
            evidence=ctx.table.raw,
        )


def check_default_presence(ctx: TableContext) -> Iterator[Violation]:
    audited = ctx.columns_in(ColumnCategory.AUDIT_CREATED, ColumnCategory.AUDIT_UPDATED)
    for column in ctx.table.temporal_columns:
        if column.name in ("created_at", "updated_at") and column not in audited:
            audited.append(column)
    for column in sorted(audited, key=ctx.table.columns.index):
        problems: list[str] = []
        if column.nullable:
            problems.append("is nullable")
        if not is_current_time_default(column.default_expr, ctx.conventions):
            problems.append("has no CURRENT_TIMESTAMP default")
        if problems:
            yield Violation(
                column=column.name,
                message=f"audit column {' and '.join(problems)}; declare NOT NULL DEFAULT CURRENT_TIMESTAMP",
                evidence=column.raw,
            )


def check_soft_delete_nullable(ctx: TableContext) -> Iterator[Violation]:
    for column in ctx.columns_in(ColumnCategory.SOFT_DELETE):
        problems: list[str] = []
        if not column.nullable:
            problems.append("is NOT NULL")
        if not is_null_default(column.default_expr):
            problems.append(f"has DEFAULT {column.default_expr}")
        if problems:
            yield Violation(
                column=column.name,
                message=f"soft-delete column {' and '.join(problems)}; it must be nullable with DEFAULT NULL",
                evidence=column.raw,
            )


# =============================================================================
# R5 - R6: constraints between columns
# =============================================================================


def _decide_order(ctx: TableContext, rule_id: str, earlier: ColumnDecl, later: ColumnDecl) -> Ordering:
    """Best ordering among parsed checks.

    Raises:
        RuleEvaluationError: no parsed check decides it but an unparsed one might.
    """
    found, _check = best_ordering(ctx.table.checks, earlier.name, later.name)
    if found is Ordering.NONE:
        unparsed = [c for c in ctx.table.checks if c.unparsed]
        if unparsed:
            raise RuleEvaluationError.undecidable(
                rule_id,
                f"cannot tell whether CHECK ({unparsed[0].raw_expression}) orders "
                f"{later.name} after {earlier.name}",
                column=later.name,
                evidence=unparsed[0].raw_expression,
            )
    return found


def _event_pairs(ctx: TableContext) -> Iterator[tuple[ColumnDecl, ColumnDecl]]:
    """Adjacent (earlier, later) event columns that share a noun prefix."""
    groups: dict[str, dict[str, ColumnDecl]] = {}
    for column in ctx.columns_in(*EVENT_CATEGORIES):
        parts = event_parts(column.name)
        if parts is not None:
            prefix, verb = parts
            groups.setdefault(prefix, {})[verb] = column
    seen: set[tuple[str, str]] = set()
    for prefix in groups:
        by_verb = groups[prefix]
        for sequence in ctx.conventions.chronology_sequences:
            present = [by_verb[v] for v in sequence if v in by_verb]
            for earlier, later in zip(present, present[1:], strict=False):
                key = (earlier.name, later.name)
                if key not in seen:
                    seen.add(key)
                    yield earlier, later


def check_chronology_constraint(ctx: TableContext) -> Iterator[Violation]:
    for earlier, later in _event_pairs(ctx):
        try:
            found = _decide_order(ctx, "R5-ChronologyConstraint", earlier, later)
        except RuleEvaluationError as e:
            yield review_violation(e)
            continue
        if found in (Ordering.STRICT, Ordering.NON_STRICT):
            continue
        if found is Ordering.REVERSED:
            message = f"CHECK orders {later.name} before {earlier.name}; expected {later.name} >= {earlier.name}"
        else:
            message = f"no CHECK constraint enforces {later.name} >= {earlier.name}"
        yield Violation(column=later.name, message=message, evidence=later.raw)


def _end_candidates(name: str) -> list[str]:
    if name.endswith("_from"):
        base = name[: -len("_from")]
        return [f"{base}_to", f"{base}_until"]
    for prefix in ("valid_from", "effective_from"):
        if name.startswith(prefix):
            head = prefix[: -len("_from")]
            tail = name[len(prefix) :]
            return [f"{head}_to{tail}", f"{head}_until{tail}"]
    return []


def _matching_end(ctx: TableContext, start: ColumnDecl) -> tuple[ColumnDecl | None, list[str]]:
    candidates = _end_candidates(start.name)
    ends = ctx.columns_in(ColumnCategory.VALIDITY_END)
    for end in ends:
        if end.name in candidates:
            return end, candidates
    starts = ctx.columns_in(ColumnCategory.VALIDITY_START)
    if len(starts) == 1 and len(ends) == 1:
        return ends[0], candidates
    return None, candidates


def check_validity_pairing(ctx: TableContext) -> Iterator[Violation]:
    for start in ctx.columns_in(ColumnCategory.VALIDITY_START):
        end, candidates = _matching_end(ctx, start)
        if end is None:
            expected = " or ".join(candidates) if candidates else "a *_to column"
            yield Violation(
                column=start.name,
                message=f"validity start has no matching end column ({expected})",
                evidence=start.raw,
            )
            continue
        try:
            found = _decide_order(ctx, "R6-ValidityPairing", start, end)
        except RuleEvaluationError as e:
            yield review_violation(e)
            continue
        if found is Ordering.STRICT:
            continue
        if found is Ordering.NON_STRICT:
            message = f"CHECK allows empty periods; use {end.name} > {start.name}"
        elif found is Ordering.REVERSED:
            message = f"CHECK orders {end.name} before {start.name}; expected {end.name} > {start.name}"
        else:
            message = f"no CHECK constraint enforces {end.name} > {start.name}"
        yield Violation(column=end.name, message=message, evidence=end.raw)


# =============================================================================
# R7 - R8: indexes and triggers
# =============================================================================


def check_index_coverage(ctx: TableContext) -> Iterator[Violation]:
    leading = {index.leading_column for index in ctx.table.indexes}
    for column in ctx.columns_in(ColumnCategory.AUDIT_CREATED, ColumnCategory.SCHEDULING):
        if column.name not in leading:
            yield Violation(
                column=column.name,
                message=f"no index has {column.name} as its leading column",
                evidence=column.raw,
            )


def check_trigger_for_updated_at(ctx: TableContext) -> Iterator[Violation]:
    updated = ctx.columns_in(ColumnCategory.AUDIT_UPDATED)
    if not updated:
        return
    for trigger in ctx.table.triggers:
        if trigger.timing is TriggerTiming.BEFORE and TriggerEvent.UPDATE in trigger.events:
            return
    column = updated[0]
    yield Violation(
        column=column.name,
        message=f"no BEFORE UPDATE trigger maintains {column.name}",
        evidence=column.raw,
    )


# =============================================================================
# R9 - R10: structure and review
# =============================================================================


def check_duplicate_table(ctx: ModelContext) -> Iterator[Violation]:
    for duplicate in ctx.model.duplicates:
        first = ctx.model.tables[duplicate.name]
        error = ModelError.duplicate_table(duplicate.name)
        yield Violation(
            column=None,
            message=f"{error.message}; the declaration at line {first.line} is used",
            evidence=duplicate.raw,
            line=duplicate.line,
            table=duplicate.name,
        )


def check_dangling_reference(ctx: ModelContext) -> Iterator[Violation]:
    for ref in ctx.model.dangling:
        if ref.column is not None and ref.table_name in ctx.model.tables:
            message = f"{ref.kind} '{ref.name}' references undeclared column '{ref.target}'"
        else:
            message = ModelError.dangling_reference(ref.kind, ref.name, ref.table_name).message
        yield Violation(
            column=ref.column,
            message=message,
            evidence=ref.raw,
            line=ref.line,
            table=ref.table_name,
        )


def check_review_unclassified(ctx: TableContext) -> Iterator[Violation]:
    for column in ctx.columns_in(ColumnCategory.UNCLASSIFIED):
        yield Violation(
            column=column.name,
            message="temporal column matches no naming pattern; review its role",
            evidence=column.raw,
        )


# =============================================================================
# Registry
# =============================================================================


def default_rules() -> RuleSet:
    """A fresh RuleSet with every built-in rule in evaluation order."""
    rules = RuleSet()

    rules.register(
        Rule(
            rule_id="R1-TypeAffinity",
            title="Temporal columns use timestamptz",
            severity=Severity.ERROR,
            rationale="timestamp and time without zone store wall-clock values that shift meaning across sessions.",
        ),
        check=check_type_affinity,
    )
    rules.register(
        Rule(
            rule_id="R2-AuditPresence",
            title="Tables carry created_at and updated_at",
            severity=Severity.WARNING,
            rationale="Audit columns answer when a row appeared and last changed. Log and history tables are exempt.",
        ),
        check=check_audit_presence,
    )
    rules.register(
        Rule(
            rule_id="R3-DefaultPresence",
            title="Audit columns are NOT NULL with a current-time default",
            severity=Severity.ERROR,
            rationale="Audit timestamps must be set by the database, never left to the application.",
        ),
        check=check_default_presence,
    )
    rules.register(
        Rule(
            rule_id="R4-SoftDeleteNullable",
            title="Soft-delete columns are nullable with DEFAULT NULL",
            severity=Severity.ERROR,
            rationale="NULL means not deleted; any other default marks every new row as deleted.",
        ),
        check=check_soft_delete_nullable,
    )
    rules.register(
        Rule(
            rule_id="R5-ChronologyConstraint",
            title="Event sequences are enforced by CHECK constraints",
            severity=Severity.WARNING,
            rationale="A later lifecycle step must not precede an earlier one (placed, confirmed, shipped, delivered).",
        ),
        check=check_chronology_constraint,
    )
    rules.register(
        Rule(
            rule_id="R6-ValidityPairing",
            title="Validity periods are paired and ordered",
            severity=Severity.ERROR,
            rationale="Every valid_from needs a valid_to and a CHECK that the period is not empty.",
        ),
        check=check_validity_pairing,
    )
    rules.register(
        Rule(
            rule_id="R7-IndexCoverage",
            title="created_at and scheduling columns are indexed",
            severity=Severity.WARNING,
            rationale="Range scans over creation time and due dates need a leading-key index.",
        ),
        check=check_index_coverage,
    )
    rules.register(
        Rule(
            rule_id="R8-TriggerForUpdatedAt",
            title="updated_at is maintained by a BEFORE UPDATE trigger",
            severity=Severity.WARNING,
            rationale="A default only fires on INSERT; updates need a trigger.",
        ),
        check=check_trigger_for_updated_at,
    )
    rules.register(
        Rule(
            rule_id="R9-DuplicateTable",
            title="Each table is declared once",
            severity=Severity.ERROR,
            scope=RuleScope.MODEL,
            rationale="A re-declared table hides which definition is real.",
        ),
        check=check_duplicate_table,
    )
    rules.register(
        Rule(
            rule_id="R9-DanglingReference",
            title="Indexes, triggers, ALTERs and comments target declared tables",
            severity=Severity.ERROR,
            scope=RuleScope.MODEL,
            rationale="A reference to an undeclared table is usually a typo.",
        ),
        check=check_dangling_reference,
    )
    rules.register(
        Rule(
            rule_id="R10-ReviewUnclassified",
            title="Unclassified temporal columns are reviewed",
            severity=Severity.INFO,
            rationale="A temporal column outside the naming taxonomy may be misnamed.",
        ),
        check=check_review_unclassified,
    )

    return rules
