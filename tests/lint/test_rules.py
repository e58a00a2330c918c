"""Tests for the rule registry and evaluation engine."""

from collections.abc import Iterator

from chronolint.config.models import ConventionsConfig
from chronolint.core.errors import RuleEvaluationError
from chronolint.ddl.models import ColumnDecl, TableDecl
from chronolint.lint.definitions import default_rules
from chronolint.lint.models import Severity
from chronolint.lint.rules import (
    ModelContext,
    Rule,
    RuleScope,
    RuleSet,
    TableContext,
    Violation,
    evaluate,
)
from chronolint.schema.builder import SchemaModel


def _model(*names: str) -> SchemaModel:
    tables = {
        name: TableDecl(name=name, columns=[ColumnDecl("id", "bigint")], line=i + 1, raw=f"CREATE TABLE {name}")
        for i, name in enumerate(names)
    }
    return SchemaModel(tables=tables)


def _per_table(rule_id: str) -> Rule:
    def check(ctx: TableContext) -> Iterator[Violation]:
        yield Violation(column=None, message=f"{rule_id} saw {ctx.table.name}")

    rule = Rule(rule_id=rule_id, title=rule_id, severity=Severity.WARNING)
    rule._check = check
    return rule


class TestRuleSet:
    def test_registration_order(self) -> None:
        rules = RuleSet([_per_table("B"), _per_table("A")])
        assert rules.ids() == ["B", "A"]
        assert "A" in rules
        assert len(rules) == 2

    def test_register_replaces_in_place(self) -> None:
        rules = RuleSet([_per_table("A"), _per_table("B")])
        replacement = Rule(rule_id="A", title="new", severity=Severity.ERROR)
        rules.register(replacement)
        assert rules.ids() == ["A", "B"]
        assert rules.get("A") is replacement

    def test_only_keeps_registration_order(self) -> None:
        rules = default_rules()
        subset = rules.only(["R7-IndexCoverage", "R1-TypeAffinity"])
        assert subset.ids() == ["R1-TypeAffinity", "R7-IndexCoverage"]
        assert len(rules) == 11

    def test_without(self) -> None:
        rules = default_rules().without(["R10-ReviewUnclassified", "unknown"])
        assert "R10-ReviewUnclassified" not in rules
        assert len(rules) == 10

    def test_default_rules_are_fresh(self) -> None:
        assert default_rules() is not default_rules()
        assert default_rules().ids()[0] == "R1-TypeAffinity"

    def test_rule_without_check_yields_nothing(self) -> None:
        rule = Rule(rule_id="X", title="x", severity=Severity.INFO)
        assert list(rule.check(ModelContext(SchemaModel(), ConventionsConfig()))) == []


class TestEvaluate:
    def test_rule_major_order(self) -> None:
        # Given two rules and two tables
        rules = RuleSet([_per_table("R-a"), _per_table("R-b")])
        # When evaluated
        findings = evaluate(_model("t1", "t2"), rules)
        # Then every table is checked by the first rule before the second
        assert [f.message for f in findings] == [
            "R-a saw t1",
            "R-a saw t2",
            "R-b saw t1",
            "R-b saw t2",
        ]

    def test_finding_defaults(self) -> None:
        findings = evaluate(_model("t1"), RuleSet([_per_table("R-a")]))
        finding = findings[0]
        assert finding.table_name == "t1"
        assert finding.severity is Severity.WARNING
        assert finding.line == 1

    def test_model_scope_runs_once(self) -> None:
        calls: list[int] = []

        def check(ctx: ModelContext) -> Iterator[Violation]:
            calls.append(len(ctx.model.tables))
            yield Violation(column=None, message="model", table="t2", line=9)

        rule = Rule(rule_id="M", title="m", severity=Severity.ERROR, scope=RuleScope.MODEL)
        rules = RuleSet()
        rules.register(rule, check=check)
        findings = evaluate(_model("t1", "t2"), rules)
        assert calls == [2]
        assert (findings[0].table_name, findings[0].line) == ("t2", 9)

    def test_undecidable_becomes_info(self) -> None:
        def check(ctx: TableContext) -> Iterator[Violation]:
            raise RuleEvaluationError.undecidable("U", "cannot tell", column="id")
            yield  # pragma: no cover

        rules = RuleSet()
        rules.register(Rule(rule_id="U", title="u", severity=Severity.ERROR), check=check)
        findings = evaluate(_model("t1"), rules)
        assert len(findings) == 1
        assert findings[0].severity is Severity.INFO
        assert findings[0].column_name == "id"
        assert findings[0].message == "needs manual review: cannot tell"

    def test_rule_crash_is_isolated(self) -> None:
        """A failing rule yields one Info finding per table; other rules still run."""

        def boom(ctx: TableContext) -> Iterator[Violation]:
            raise ValueError("boom")

        rules = RuleSet()
        rules.register(Rule(rule_id="Crash", title="c", severity=Severity.ERROR), check=boom)
        rules.register(_per_table("After"))
        findings = evaluate(_model("t1"), rules)
        assert [f.rule_id for f in findings] == ["Crash", "After"]
        assert findings[0].severity is Severity.INFO
        assert findings[0].message == "needs manual review: rule failed with ValueError: boom"
        assert findings[0].evidence == "CREATE TABLE t1"

    def test_model_is_not_modified(self) -> None:
        model = _model("t1")
        before = [c.name for c in model.tables["t1"].columns]
        evaluate(model, default_rules())
        assert [c.name for c in model.tables["t1"].columns] == before
