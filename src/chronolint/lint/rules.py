"""Rule registry and engine.

A Rule is a self-contained check. Rules live in an explicit, ordered
RuleSet that is passed to the engine, so subsets can be evaluated
deterministically. Evaluation is rule-major: every table is checked by
R1 before any table is checked by R2.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chronolint.config.constants import EVIDENCE_MAX_CHARS_DEFAULT
from chronolint.config.models import ConventionsConfig
from chronolint.core.errors import RuleEvaluationError
from chronolint.core.formatting import excerpt
from chronolint.core.logging import get_logger
from chronolint.ddl.models import ColumnDecl, TableDecl
from chronolint.lint.models import Finding, Severity
from chronolint.schema.builder import SchemaModel
from chronolint.schema.classifier import ColumnCategory, classify

log = get_logger("lint.rules")

Classification = dict[str, dict[str, ColumnCategory]]


class RuleScope(Enum):
    """What a rule inspects."""

    TABLE = "table"
    MODEL = "model"


@dataclass(frozen=True)
class Violation:
    """Raw rule output. The engine turns it into a Finding.

    severity=None means the rule's own severity. table is only set by
    model-scope rules.
    """

    column: str | None
    message: str
    evidence: str = ""
    severity: Severity | None = None
    line: int | None = None
    table: str | None = None


@dataclass
class TableContext:
    """Everything a table-scope rule may consult."""

    table: TableDecl
    categories: dict[str, ColumnCategory]
    conventions: ConventionsConfig

    def columns_in(self, *categories: ColumnCategory) -> list[ColumnDecl]:
        """Temporal columns in any of the categories, in declaration order."""
        wanted = set(categories)
        return [c for c in self.table.columns if self.categories.get(c.name) in wanted]

    @property
    def short_name(self) -> str:
        return self.table.name.rsplit(".", 1)[-1]


@dataclass
class ModelContext:
    """Everything a model-scope rule may consult."""

    model: SchemaModel
    conventions: ConventionsConfig


@dataclass
class Rule:
    """Definition of one lint rule."""

    rule_id: str
    title: str
    severity: Severity
    scope: RuleScope = RuleScope.TABLE
    rationale: str = ""

    # Check function (set by register)
    _check: Callable[[Any], Iterable[Violation]] | None = field(default=None, repr=False)

    def check(self, ctx: TableContext | ModelContext) -> Iterable[Violation]:
        if self._check is None:
            return ()
        return self._check(ctx)


class RuleSet:
    """Ordered collection of rules. Registration order is evaluation order."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.register(rule)

    def register(
        self,
        rule: Rule,
        check: Callable[[Any], Iterable[Violation]] | None = None,
    ) -> None:
        """Register a rule. Re-registering an id replaces it in place."""
        if check is not None:
            rule._check = check
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def all(self) -> list[Rule]:
        return list(self._rules.values())

    def ids(self) -> list[str]:
        return list(self._rules)

    def without(self, rule_ids: Iterable[str]) -> RuleSet:
        """A new set without the given ids (unknown ids are ignored)."""
        skip = set(rule_ids)
        return RuleSet(r for r in self._rules.values() if r.rule_id not in skip)

    def only(self, rule_ids: Iterable[str]) -> RuleSet:
        """A new set with just the given ids, in registration order."""
        keep = set(rule_ids)
        return RuleSet(r for r in self._rules.values() if r.rule_id in keep)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


def classify_model(model: SchemaModel, conventions: ConventionsConfig | None = None) -> Classification:
    """Classification of every table, keyed by table name."""
    return {name: classify(table, conventions) for name, table in model.tables.items()}


def evaluate(
    model: SchemaModel,
    rules: RuleSet,
    *,
    classification: Classification | None = None,
    conventions: ConventionsConfig | None = None,
    evidence_max_chars: int = EVIDENCE_MAX_CHARS_DEFAULT,
) -> list[Finding]:
    """Run every rule over the model. Pure: the model is not modified."""
    conventions = conventions or ConventionsConfig()
    if classification is None:
        classification = classify_model(model, conventions)

    findings: list[Finding] = []
    for rule in rules:
        if rule.scope is RuleScope.MODEL:
            findings.extend(_run(rule, ModelContext(model, conventions), None, evidence_max_chars))
            continue
        for name, table in model.tables.items():
            ctx = TableContext(table, classification.get(name, {}), conventions)
            findings.extend(_run(rule, ctx, table, evidence_max_chars))
    return findings


def _run(
    rule: Rule,
    ctx: TableContext | ModelContext,
    table: TableDecl | None,
    evidence_max_chars: int,
) -> list[Finding]:
    table_name = table.name if table is not None else None
    findings: list[Finding] = []

    def make(v: Violation) -> Finding:
        return Finding(
            rule_id=rule.rule_id,
            severity=v.severity or rule.severity,
            table_name=v.table or table_name,
            column_name=v.column,
            message=v.message,
            evidence=excerpt(v.evidence, evidence_max_chars),
            line=v.line if v.line is not None else (table.line if table is not None else None),
        )

    try:
        for violation in rule.check(ctx):
            findings.append(make(violation))
    except RuleEvaluationError as e:
        log.debug("rule_undecidable", rule=rule.rule_id, table=table_name, reason=e.message)
        findings.append(make(review_violation(e, evidence=table.raw if table else "")))
    except Exception as e:  # noqa: BLE001
        log.error("rule_evaluation_failed", rule=rule.rule_id, table=table_name, error=str(e))
        findings.append(
            make(
                Violation(
                    column=None,
                    message=f"needs manual review: rule failed with {type(e).__name__}: {e}",
                    evidence=table.raw if table else "",
                    severity=Severity.INFO,
                )
            )
        )
    return findings


def review_violation(error: RuleEvaluationError, *, evidence: str = "") -> Violation:
    """Degrade an undecidable rule outcome to an Info 'needs manual review'."""
    return Violation(
        column=error.details.get("column"),
        message=f"needs manual review: {error.message}",
        evidence=error.details.get("evidence", evidence),
        severity=Severity.INFO,
    )
