"""Tests for the tokenizer and statement splitter."""

from chronolint.core.errors import LexError
from chronolint.ddl.lexer import (
    StatementSplitter,
    TokenKind,
    classify_statement,
    split_statements,
    tokenize,
)
from chronolint.ddl.models import StatementKind


class TestTokenize:
    def test_words_and_punctuation(self) -> None:
        tokens = list(tokenize("CREATE TABLE t (id int);"))
        assert [t.value for t in tokens] == ["CREATE", "TABLE", "t", "(", "id", "int", ")", ";"]
        assert tokens[0].kind is TokenKind.WORD

    def test_comments_skipped(self) -> None:
        tokens = list(tokenize("a -- line; comment\n/* block; */ b"))
        assert [t.value for t in tokens] == ["a", "b"]

    def test_strings_and_casts(self) -> None:
        tokens = list(tokenize("DEFAULT '9999-12-31'::timestamptz"))
        assert tokens[1].kind is TokenKind.STRING
        assert tokens[1].value == "'9999-12-31'"
        assert tokens[2].is_punct("::")

    def test_quoted_identifier(self) -> None:
        tokens = list(tokenize('"Created At" timestamptz'))
        assert tokens[0].kind is TokenKind.QUOTED_IDENT
        assert tokens[0].is_identifier

    def test_escape_string(self) -> None:
        tokens = list(tokenize(r"E'it\'s' x"))
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[1].value == "x"

    def test_two_char_operators(self) -> None:
        tokens = list(tokenize("a >= b <> c"))
        assert [t.value for t in tokens if t.kind is TokenKind.PUNCT] == [">=", "<>"]

    def test_offsets(self) -> None:
        text = "  foo  bar"
        tokens = list(tokenize(text))
        assert text[tokens[1].start : tokens[1].end] == "bar"


class TestClassifyStatement:
    def test_kinds(self) -> None:
        assert classify_statement("CREATE TABLE t (id int)") is StatementKind.CREATE_TABLE
        assert classify_statement("create unlogged table t (id int)") is StatementKind.CREATE_TABLE
        assert classify_statement("ALTER TABLE t ADD COLUMN x int") is StatementKind.ALTER_TABLE
        assert classify_statement("CREATE UNIQUE INDEX i ON t (x)") is StatementKind.CREATE_INDEX
        assert classify_statement("CREATE OR REPLACE TRIGGER tr BEFORE UPDATE ON t") is StatementKind.CREATE_TRIGGER
        assert classify_statement("COMMENT ON TABLE t IS 'x'") is StatementKind.COMMENT
        assert classify_statement("CREATE FUNCTION f() RETURNS int") is StatementKind.OTHER
        assert classify_statement("INSERT INTO t VALUES (1)") is StatementKind.OTHER

    def test_leading_comment_ignored(self) -> None:
        assert classify_statement("-- users\nCREATE TABLE users (id int)") is StatementKind.CREATE_TABLE

    def test_tables_without_column_list(self) -> None:
        assert classify_statement("CREATE TABLE t2 AS SELECT * FROM t") is StatementKind.OTHER
        assert classify_statement("CREATE TABLE p1 PARTITION OF p FOR VALUES IN (1)") is StatementKind.OTHER
        assert classify_statement("CREATE TABLE IF NOT EXISTS s.t AS SELECT 1") is StatementKind.OTHER


class TestSplitStatements:
    def test_splits_on_semicolons(self) -> None:
        statements = list(split_statements("CREATE TABLE a (id int);\nCREATE TABLE b (id int);"))
        assert [s.text for s in statements] == ["CREATE TABLE a (id int)", "CREATE TABLE b (id int)"]
        assert [s.line for s in statements] == [1, 2]

    def test_semicolons_inside_literals_do_not_split(self) -> None:
        script = (
            "COMMENT ON TABLE a IS 'x; y';\n"
            'CREATE TABLE "we;ird" (id int);\n'
            "-- a comment; with semicolon\n"
            "/* block; comment */\n"
            "CREATE FUNCTION f() RETURNS trigger AS $fn$ BEGIN NEW.x := 1; RETURN NEW; END; $fn$ LANGUAGE plpgsql;\n"
        )
        statements = list(split_statements(script))
        assert len(statements) == 3
        assert statements[2].kind is StatementKind.OTHER
        assert statements[2].text.endswith("LANGUAGE plpgsql")

    def test_dollar_tags_do_not_nest(self) -> None:
        script = "DO $outer$ SELECT $$; $$; $outer$; CREATE TABLE t (id int);"
        statements = list(split_statements(script))
        assert len(statements) == 2
        assert statements[1].kind is StatementKind.CREATE_TABLE

    def test_round_trip_spans(self) -> None:
        """Re-joining statement spans with `;` reproduces the boundaries."""
        script = "CREATE TABLE a (id int);\n\nCREATE INDEX i ON a (id);\nALTER TABLE a ADD COLUMN x int;"
        statements = list(split_statements(script))
        assert all(script[s.start : s.end] == s.text for s in statements)
        rejoined = ";".join(s.text for s in statements) + ";"
        again = list(split_statements(rejoined))
        assert [s.text for s in again] == [s.text for s in statements]
        assert [s.kind for s in again] == [s.kind for s in statements]

    def test_restartable(self) -> None:
        splitter = StatementSplitter("CREATE TABLE a (id int); CREATE TABLE b (id int);")
        assert [s.text for s in splitter] == [s.text for s in splitter]

    def test_empty_statements_skipped(self) -> None:
        assert list(split_statements(";;  ;\n-- only a comment\n")) == []


class TestUnterminated:
    def test_unterminated_dollar_block(self) -> None:
        script = "CREATE FUNCTION f() RETURNS int AS $$ BEGIN RETURN 1; END;\nCREATE TABLE t (id int);"
        statements = list(split_statements(script))
        assert len(statements) == 1
        error = statements[0].lex_error
        assert isinstance(error, LexError)
        assert error.opener == "$$"
        assert error.offset == script.index("$$")

    def test_unterminated_string(self) -> None:
        statements = list(split_statements("COMMENT ON TABLE t IS 'oops;"))
        assert statements[0].lex_error is not None
        assert statements[0].lex_error.opener == "'"

    def test_salvage_resumes_after_opener(self) -> None:
        script = (
            "CREATE FUNCTION f() RETURNS int AS $$ BEGIN RETURN 1; END;\n"
            "CREATE TABLE a (id int);\n"
            "CREATE TABLE b (id int);\n"
        )
        splitter = StatementSplitter(script)
        broken = next(iter(splitter))
        salvaged = list(splitter.salvage(broken))
        tables = [s.text for s in salvaged if s.kind is StatementKind.CREATE_TABLE]
        assert tables == ["CREATE TABLE a (id int)", "CREATE TABLE b (id int)"]

    def test_salvage_of_clean_statement_is_empty(self) -> None:
        splitter = StatementSplitter("CREATE TABLE a (id int);")
        statement = next(iter(splitter))
        assert list(splitter.salvage(statement)) == []
