"""Tests for CHECK expression ordering."""

import pytest

from chronolint.ddl.models import CheckConstraint
from chronolint.lint.expressions import Ordering, best_ordering, normalize_expression, ordering


class TestNormalizeExpression:
    def test_lowercases_and_unquotes(self) -> None:
        assert normalize_expression('"Ended_At"  >\n "Started_At"') == "ended_at > started_at"

    def test_unwraps_bare_identifiers(self) -> None:
        assert normalize_expression("((ended_at)) > (started_at)") == "ended_at > started_at"

    def test_keeps_function_calls(self) -> None:
        assert normalize_expression("coalesce(ended_at) > now()") == "coalesce(ended_at) > now()"


class TestOrdering:
    @pytest.mark.parametrize(
        ("expr", "expected"),
        [
            ("ended_at > started_at", Ordering.STRICT),
            ("started_at < ended_at", Ordering.STRICT),
            ("ended_at >= started_at", Ordering.NON_STRICT),
            ("started_at <= ended_at", Ordering.NON_STRICT),
            ("started_at > ended_at", Ordering.REVERSED),
            ("ended_at <= started_at", Ordering.REVERSED),
            ("ended_at <> started_at", Ordering.NONE),
            ("ended_at IS NULL", Ordering.NONE),
            ("ended_at > started_at_utc", Ordering.NONE),
        ],
    )
    def test_operators(self, expr: str, expected: Ordering) -> None:
        assert ordering(expr, "started_at", "ended_at") is expected

    def test_qualified_and_quoted(self) -> None:
        expr = 'orders."shipped_at" >= orders.placed_at'
        assert ordering(expr, "placed_at", "shipped_at") is Ordering.NON_STRICT

    def test_inside_larger_expression(self) -> None:
        expr = "shipped_at IS NULL OR shipped_at >= placed_at"
        assert ordering(expr, "placed_at", "shipped_at") is Ordering.NON_STRICT


class TestBestOrdering:
    def test_prefers_strongest(self) -> None:
        refs = frozenset({"valid_from", "valid_to"})
        weak = CheckConstraint("valid_to >= valid_from", refs)
        strong = CheckConstraint("valid_to > valid_from", refs)
        found, check = best_ordering([weak, strong], "valid_from", "valid_to")
        assert found is Ordering.STRICT
        assert check is strong

    def test_ignores_unparsed_and_unrelated(self) -> None:
        checks = [
            CheckConstraint("valid_to > valid_from", frozenset({"valid_from", "valid_to"}), unparsed=True),
            CheckConstraint("amount > 0", frozenset({"amount"})),
        ]
        assert best_ordering(checks, "valid_from", "valid_to") == (Ordering.NONE, None)
