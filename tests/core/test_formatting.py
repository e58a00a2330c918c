"""Tests for formatting helpers."""

from chronolint.core.formatting import excerpt, pluralize, truncate_at_word


class TestPluralize:
    def test_singular(self) -> None:
        assert pluralize(1, "error") == "1 error"

    def test_plural(self) -> None:
        assert pluralize(0, "warning") == "0 warnings"
        assert pluralize(3, "info") == "3 infos"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "index", "indexes") == "2 indexes"


class TestTruncateAtWord:
    def test_short_text_unchanged(self) -> None:
        assert truncate_at_word("created_at", 40) == "created_at"

    def test_cuts_at_word_boundary(self) -> None:
        text = "created_at timestamptz NOT NULL DEFAULT now()"
        assert truncate_at_word(text, 30) == "created_at timestamptz NOT..."

    def test_no_space_hard_cut(self) -> None:
        assert truncate_at_word("a" * 50, 10) == "aaaaaaa..."


class TestExcerpt:
    def test_collapses_whitespace(self) -> None:
        assert excerpt("CREATE TABLE users (\n    id bigint\n)") == "CREATE TABLE users ( id bigint )"

    def test_truncates(self) -> None:
        result = excerpt("word " * 100, 40)
        assert len(result) <= 40
        assert result.endswith("...")
