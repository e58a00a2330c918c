"""Tests for temporal column classification."""

import pytest

from chronolint.config.models import ConventionsConfig
from chronolint.ddl.models import ColumnDecl, TableDecl
from chronolint.schema.classifier import (
    ColumnCategory,
    classify,
    event_parts,
    is_current_time_default,
    is_null_default,
)


def _category(name: str, declared_type: str = "timestamptz", default: str | None = None) -> ColumnCategory:
    table = TableDecl(name="t", columns=[ColumnDecl(name, declared_type, default_expr=default)])
    return classify(table)[name]


class TestClassify:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("updated_at", ColumnCategory.AUDIT_UPDATED),
            ("deleted_at", ColumnCategory.SOFT_DELETE),
            ("valid_from", ColumnCategory.VALIDITY_START),
            ("effective_from_ts", ColumnCategory.VALIDITY_START),
            ("available_from", ColumnCategory.VALIDITY_START),
            ("valid_to", ColumnCategory.VALIDITY_END),
            ("valid_until", ColumnCategory.VALIDITY_END),
            ("effective_to_date", ColumnCategory.VALIDITY_END),
            ("scheduled_for", ColumnCategory.SCHEDULING),
            ("due_at", ColumnCategory.SCHEDULING),
            ("deadline_at", ColumnCategory.SCHEDULING),
            ("order_shipped_at", ColumnCategory.BUSINESS_EVENT),
            ("shipped_at", ColumnCategory.LIFECYCLE_EVENT),
            ("placed_at", ColumnCategory.LIFECYCLE_EVENT),
            ("last_login_at", ColumnCategory.UNCLASSIFIED),
            ("birthday", ColumnCategory.UNCLASSIFIED),
        ],
    )
    def test_name_patterns(self, name: str, expected: ColumnCategory) -> None:
        assert _category(name) is expected

    def test_created_at_needs_current_time_default(self) -> None:
        assert _category("created_at", default="CURRENT_TIMESTAMP") is ColumnCategory.AUDIT_CREATED
        assert _category("created_at", default="now()") is ColumnCategory.AUDIT_CREATED
        assert _category("created_at") is not ColumnCategory.AUDIT_CREATED

    def test_quoted_mixed_case_names_are_distinct(self) -> None:
        assert _category("Updated_At") is ColumnCategory.UNCLASSIFIED
        assert _category("Created_At", default="now()") is ColumnCategory.UNCLASSIFIED

    def test_only_temporal_columns_are_classified(self) -> None:
        table = TableDecl(
            name="t",
            columns=[
                ColumnDecl("id", "bigint"),
                ColumnDecl("created_by", "text"),
                ColumnDecl("due_on", "date"),
                ColumnDecl("updated_at", "timestamptz"),
            ],
        )
        assert list(classify(table)) == ["due_on", "updated_at"]

    def test_custom_verbs(self) -> None:
        conventions = ConventionsConfig(event_verbs=["logged"])
        table = TableDecl(name="t", columns=[ColumnDecl("logged_at", "timestamptz")])
        assert classify(table, conventions)["logged_at"] is ColumnCategory.LIFECYCLE_EVENT
        assert classify(table)["logged_at"] is ColumnCategory.UNCLASSIFIED

    def test_is_pure(self) -> None:
        table = TableDecl(name="t", columns=[ColumnDecl("shipped_at", "timestamp")])
        assert classify(table) == classify(table)


class TestDefaults:
    @pytest.mark.parametrize("expr", [None, "NULL", "null", "(NULL)", "NULL::timestamptz"])
    def test_null_defaults(self, expr: str | None) -> None:
        assert is_null_default(expr)

    @pytest.mark.parametrize("expr", ["now()", "'epoch'", "nullif(a, b)"])
    def test_non_null_defaults(self, expr: str) -> None:
        assert not is_null_default(expr)

    @pytest.mark.parametrize(
        "expr",
        ["CURRENT_TIMESTAMP", "current_timestamp(3)", "now ( )", "NOW()", "clock_timestamp()"],
    )
    def test_current_time(self, expr: str) -> None:
        assert is_current_time_default(expr)

    @pytest.mark.parametrize("expr", [None, "NULL", "'2000-01-01'", "CURRENT_DATE"])
    def test_not_current_time(self, expr: str | None) -> None:
        assert not is_current_time_default(expr)


class TestEventParts:
    def test_split(self) -> None:
        assert event_parts("order_shipped_at") == ("order", "shipped")
        assert event_parts("shipped_at") == ("", "shipped")

    def test_not_an_event_name(self) -> None:
        assert event_parts("shipped_on") is None
        assert event_parts("_at") is None
