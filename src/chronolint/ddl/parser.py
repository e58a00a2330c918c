"""DDL parser - turns split statements into declarations.

This is a best-effort document scanner, not a SQL compiler. It recognizes
the top-level grammar of CREATE TABLE / CREATE INDEX / CREATE TRIGGER /
ALTER TABLE / COMMENT ON and raises ParseError only when that grammar
cannot be found. Anything it does not understand inside a recognized
statement (column options, ALTER actions, storage parameters) is skipped.
Default expressions are kept verbatim and never evaluated.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from chronolint.config.constants import (
    COLUMN_CONSTRAINT_KEYWORDS,
    SQL_KEYWORDS,
    SUBQUERY_KEYWORDS,
    TABLE_CONSTRAINT_KEYWORDS,
)
from chronolint.core.errors import ParseError
from chronolint.core.logging import get_logger
from chronolint.ddl.lexer import Token, TokenKind, tokenize
from chronolint.ddl.models import (
    AlterAction,
    AlterActionKind,
    AlterTablePatch,
    CheckConstraint,
    ColumnDecl,
    CommentDecl,
    Declaration,
    ForeignKeyDecl,
    IndexDecl,
    Statement,
    StatementKind,
    TableDecl,
    TriggerDecl,
    TriggerEvent,
    TriggerTiming,
)

log = get_logger("ddl.parser")

_SPACES = re.compile(r"\s+")

# Words that end a DEFAULT expression (NULL only after the first token)
_DEFAULT_TERMINATORS = COLUMN_CONSTRAINT_KEYWORDS

_FK_ACTIONS = frozenset({"cascade", "restrict"})


def _collapse(text: str) -> str:
    return _SPACES.sub(" ", text).strip()


def ident(token: Token) -> str:
    """Identifier value: unquoted names fold to lower case, quoted names keep case."""
    if token.kind is TokenKind.QUOTED_IDENT:
        inner = token.value[1:-1] if token.value.endswith('"') and len(token.value) > 1 else token.value[1:]
        return inner.replace('""', '"')
    return token.value.lower()


def unquote_string(token: Token) -> str:
    """Literal value of a string token ('...', E'...', $tag$...$tag$)."""
    value = token.value
    if value.startswith("$"):
        delimiter = value[: value.index("$", 1) + 1]
        return value[len(delimiter) : -len(delimiter)] if value.endswith(delimiter) else value
    if value[:1] in ("E", "e"):
        value = value[1:]
    inner = value[1:-1] if len(value) > 1 and value.endswith("'") else value[1:]
    return inner.replace("''", "'")


def _matching_paren(tokens: list[Token], open_idx: int) -> int:
    """Index of the `)` closing the `(` at open_idx, or -1."""
    depth = 0
    for idx in range(open_idx, len(tokens)):
        tok = tokens[idx]
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
            if depth == 0:
                return idx
    return -1


def split_top_level(tokens: list[Token], sep: str = ",") -> list[list[Token]]:
    """Split tokens on separators outside parentheses."""
    parts: list[list[Token]] = [[]]
    depth = 0
    for tok in tokens:
        if tok.is_punct("(", "["):
            depth += 1
        elif tok.is_punct(")", "]"):
            depth -= 1
        elif depth == 0 and tok.is_punct(sep):
            parts.append([])
            continue
        parts[-1].append(tok)
    return parts


class _Cursor:
    """Forward-only cursor over a token list."""

    def __init__(self, statement: Statement, tokens: list[Token]) -> None:
        self.statement = statement
        self.tokens = tokens
        self.pos = 0

    @property
    def done(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self, k: int = 0) -> Token | None:
        idx = self.pos + k
        return self.tokens[idx] if idx < len(self.tokens) else None

    def next(self) -> Token | None:
        tok = self.peek()
        if tok is not None:
            self.pos += 1
        return tok

    def at_word(self, *words: str) -> bool:
        tok = self.peek()
        return tok is not None and tok.is_word(*words)

    def accept_word(self, *words: str) -> Token | None:
        if self.at_word(*words):
            return self.next()
        return None

    def accept_words(self, *sequence: str) -> bool:
        """Accept an exact keyword sequence, or nothing."""
        for k, word in enumerate(sequence):
            tok = self.peek(k)
            if tok is None or not tok.is_word(word):
                return False
        self.pos += len(sequence)
        return True

    def accept_punct(self, *chars: str) -> Token | None:
        tok = self.peek()
        if tok is not None and tok.is_punct(*chars):
            return self.next()
        return None

    def group(self) -> list[Token] | None:
        """Consume a parenthesized group and return its inner tokens."""
        tok = self.peek()
        if tok is None or not tok.is_punct("("):
            return None
        close = _matching_paren(self.tokens, self.pos)
        if close < 0:
            return None
        inner = self.tokens[self.pos + 1 : close]
        self.pos = close + 1
        return inner

    def rest(self) -> list[Token]:
        tokens = self.tokens[self.pos :]
        self.pos = len(self.tokens)
        return tokens

    def text_of(self, tokens: list[Token]) -> str:
        if not tokens:
            return ""
        return self.statement.text[tokens[0].start : tokens[-1].end]

    def error(self, reason: str, token: Token | None = None, *, table: str | None = None) -> ParseError:
        if token is None:
            token = self.peek()
        rel = token.start if token is not None else len(self.statement.text)
        return ParseError.unrecognized(reason, self.statement.start + rel, table=table)

    def expect_word(self, word: str, reason: str) -> Token:
        tok = self.accept_word(word)
        if tok is None:
            raise self.error(reason)
        return tok

    def sub(self, tokens: list[Token]) -> _Cursor:
        return _Cursor(self.statement, tokens)


def _qualified_parts(cur: _Cursor) -> list[str]:
    tok = cur.peek()
    if tok is None or not tok.is_identifier:
        return []
    parts = [ident(cur.next())]  # type: ignore[arg-type]
    while cur.peek() is not None and cur.peek().is_punct("."):  # type: ignore[union-attr]
        nxt = cur.peek(1)
        if nxt is None or not nxt.is_identifier:
            break
        cur.pos += 2
        parts.append(ident(nxt))
    return parts


def table_key(parts: list[str]) -> str:
    """Normalized table key: the default `public` schema is dropped."""
    if len(parts) > 1 and parts[0] == "public":
        parts = parts[1:]
    return ".".join(parts)


def _qualified_name(cur: _Cursor) -> str | None:
    parts = _qualified_parts(cur)
    return table_key(parts) if parts else None


def _short_name(table_name: str) -> str:
    return table_name.rsplit(".", 1)[-1]


def _ident_list(tokens: list[Token]) -> list[str]:
    return [ident(part[0]) for part in split_top_level(tokens) if part and part[0].is_identifier]


# =============================================================================
# CHECK Expressions
# =============================================================================


def make_check(cur: _Cursor, tokens: list[Token], name: str | None = None) -> CheckConstraint:
    """Build a CheckConstraint by scanning its expression for identifiers."""
    raw = _collapse(cur.text_of(tokens))
    unparsed = not tokens
    depth = 0
    refs: set[str] = set()
    for idx, tok in enumerate(tokens):
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
            if depth < 0:
                unparsed = True
        elif tok.kind is TokenKind.STRING:
            if len(tok.value) < 2 or tok.value[-1] not in "'$":
                unparsed = True
        elif tok.kind is TokenKind.QUOTED_IDENT:
            refs.add(ident(tok))
        elif tok.kind is TokenKind.WORD:
            word = tok.lower
            if word in SUBQUERY_KEYWORDS:
                unparsed = True
                continue
            if word in SQL_KEYWORDS:
                continue
            prev = tokens[idx - 1] if idx > 0 else None
            nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
            if nxt is not None and nxt.is_punct("(", "."):
                continue  # function call or qualifier
            if prev is not None and prev.is_punct("::"):
                continue  # cast target type
            refs.add(word)
    if depth != 0:
        unparsed = True
    return CheckConstraint(
        raw_expression=raw,
        referenced_columns=frozenset(refs),
        unparsed=unparsed,
        name=name,
    )


# =============================================================================
# Column Definitions and Table Constraints
# =============================================================================


def _implicit_index(table: TableDecl, columns: list[str], *, primary: bool) -> IndexDecl:
    short = _short_name(table.name)
    name = f"{short}_pkey" if primary else f"{short}_{'_'.join(columns)}_key"
    return IndexDecl(
        name=name,
        table_name=table.name,
        columns=list(columns),
        is_unique=True,
        implicit=True,
        line=table.line,
    )


def _skip_unique_options(cur: _Cursor) -> None:
    if cur.accept_word("nulls"):
        cur.accept_word("not")
        cur.accept_word("distinct")


def _parse_references(
    cur: _Cursor, columns: tuple[str, ...], table: TableDecl, name: str | None
) -> None:
    """Parse `REFERENCES t [(cols)] [ON ... action] [MATCH x]` after the keyword."""
    ref_table = _qualified_name(cur)
    if ref_table is None:
        log.debug("references_without_table", table=table.name)
        return
    group = cur.group()
    ref_columns = tuple(_ident_list(group)) if group else ()
    while not cur.done:
        if cur.accept_word("on"):
            cur.accept_word("delete", "update")
            if cur.accept_word("set"):
                cur.accept_word("null", "default")
                cur.group()
            elif cur.accept_word("no"):
                cur.accept_word("action")
            else:
                cur.accept_word(*_FK_ACTIONS)
        elif cur.accept_word("match"):
            cur.next()
        elif cur.accept_words("not", "deferrable") or cur.accept_word("deferrable"):
            continue
        elif cur.accept_word("initially"):
            cur.next()
        else:
            break
    table.foreign_keys.append(
        ForeignKeyDecl(columns=columns, ref_table=ref_table, ref_columns=ref_columns, name=name)
    )


def _skip_generated(cur: _Cursor) -> None:
    """Skip `GENERATED {ALWAYS | BY DEFAULT} AS {IDENTITY [(...)] | (expr) STORED}`."""
    if not cur.accept_word("always"):
        cur.accept_words("by", "default")
    cur.accept_word("as")
    cur.accept_word("identity")
    cur.group()
    cur.accept_word("stored", "virtual")


def _default_expression(cur: _Cursor) -> str | None:
    """Consume a DEFAULT expression and return it verbatim (whitespace collapsed)."""
    start = cur.pos
    depth = 0
    while not cur.done:
        tok = cur.peek()
        assert tok is not None
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
        elif depth == 0 and cur.pos > start and tok.is_word(*_DEFAULT_TERMINATORS):
            break
        cur.pos += 1
    expr = cur.tokens[start : cur.pos]
    return _collapse(cur.text_of(expr)) if expr else None


def _parse_column(cur: _Cursor, table: TableDecl) -> ColumnDecl | None:
    """Parse `name type [constraints...]` from a cursor over one table element."""
    element = cur.tokens
    name_tok = cur.next()
    if name_tok is None or not name_tok.is_identifier:
        log.debug("column_skipped", table=table.name, element=cur.text_of(element))
        return None

    type_start = cur.pos
    depth = 0
    while not cur.done:
        tok = cur.peek()
        assert tok is not None
        if tok.is_punct("("):
            depth += 1
        elif tok.is_punct(")"):
            depth -= 1
        elif depth == 0 and tok.is_word(*COLUMN_CONSTRAINT_KEYWORDS):
            break
        cur.pos += 1

    column = ColumnDecl(
        name=ident(name_tok),
        declared_type=_collapse(cur.text_of(element[type_start : cur.pos])),
        raw=cur.text_of(element),
    )

    constraint_name: str | None = None
    while not cur.done:
        if cur.accept_word("constraint"):
            tok = cur.next()
            constraint_name = ident(tok) if tok is not None and tok.is_identifier else None
        elif cur.accept_words("not", "null"):
            column.nullable = False
        elif cur.accept_words("not", "deferrable") or cur.accept_word("deferrable"):
            pass
        elif cur.accept_word("null"):
            column.nullable = True
        elif cur.accept_word("default"):
            column.default_expr = _default_expression(cur)
        elif cur.accept_words("primary", "key"):
            column.is_primary_key = True
            column.nullable = False
            table.indexes.append(_implicit_index(table, [column.name], primary=True))
        elif cur.accept_word("unique"):
            _skip_unique_options(cur)
            table.indexes.append(_implicit_index(table, [column.name], primary=False))
        elif cur.accept_word("check"):
            group = cur.group()
            if group is not None:
                table.checks.append(make_check(cur, group, constraint_name))
            cur.accept_words("no", "inherit")
            constraint_name = None
        elif cur.accept_word("references"):
            _parse_references(cur, (column.name,), table, constraint_name)
            constraint_name = None
        elif cur.accept_word("generated"):
            _skip_generated(cur)
        elif cur.accept_word("collate"):
            _qualified_parts(cur)
        elif cur.accept_word("initially"):
            cur.next()
        else:
            cur.next()
    return column


def _parse_table_constraint(cur: _Cursor, table: TableDecl) -> None:
    """Parse a table-level constraint element (CHECK, PRIMARY KEY, UNIQUE, FOREIGN KEY)."""
    name: str | None = None
    if cur.accept_word("constraint"):
        tok = cur.next()
        name = ident(tok) if tok is not None and tok.is_identifier else None

    if cur.accept_word("check"):
        group = cur.group()
        if group is not None:
            table.checks.append(make_check(cur, group, name))
    elif cur.accept_words("primary", "key"):
        columns = _ident_list(cur.group() or [])
        for col_name in columns:
            col = table.column(col_name)
            if col is not None:
                col.is_primary_key = True
                col.nullable = False
        if columns:
            table.indexes.append(_implicit_index(table, columns, primary=True))
    elif cur.accept_word("unique"):
        _skip_unique_options(cur)
        columns = _ident_list(cur.group() or [])
        if columns:
            table.indexes.append(_implicit_index(table, columns, primary=False))
    elif cur.accept_words("foreign", "key"):
        columns = tuple(_ident_list(cur.group() or []))
        if cur.accept_word("references"):
            _parse_references(cur, columns, table, name)
    else:
        # EXCLUDE / LIKE: nothing to lint
        log.debug("table_element_skipped", table=table.name, element=cur.text_of(cur.tokens))


def _is_table_constraint(element: list[Token]) -> bool:
    return bool(element) and element[0].is_word(*TABLE_CONSTRAINT_KEYWORDS)


# =============================================================================
# Statement Parsers
# =============================================================================


def parse_create_table(statement: Statement) -> TableDecl:
    """Parse CREATE TABLE into a TableDecl.

    Raises:
        ParseError: table name or parenthesized element list not found.
    """
    tokens = list(tokenize(statement.text))
    cur = _Cursor(statement, tokens)
    cur.expect_word("create", "expected CREATE")
    while cur.accept_word("global", "local", "temp", "temporary", "unlogged"):
        pass
    cur.expect_word("table", "expected TABLE")
    cur.accept_words("if", "not", "exists")

    name = _qualified_name(cur)
    if name is None:
        raise cur.error("missing table name")

    open_tok = cur.peek()
    if open_tok is None or not open_tok.is_punct("("):
        raise cur.error(f"expected column list after table name '{name}'", table=name)
    elements = cur.group()
    if elements is None:
        raise cur.error("unbalanced parentheses in column list", open_tok, table=name)

    table = TableDecl(name=name, line=statement.line, raw=statement.text)
    for element in split_top_level(elements):
        if not element:
            continue
        sub = cur.sub(element)
        if _is_table_constraint(element):
            _parse_table_constraint(sub, table)
        else:
            column = _parse_column(sub, table)
            if column is not None:
                table.columns.append(column)
    return table


def _index_element(cur: _Cursor, element: list[Token]) -> str:
    """Bare column name of an index element, else its expression text."""
    if len(element) == 3 and element[0].is_punct("(") and element[2].is_punct(")"):
        element = element[1:2]
    first = element[0]
    second = element[1] if len(element) > 1 else None
    if first.is_identifier and (second is None or second.kind is TokenKind.WORD):
        return ident(first)
    return _collapse(cur.text_of(element))


def parse_create_index(statement: Statement) -> IndexDecl:
    """Parse CREATE INDEX into an IndexDecl.

    Raises:
        ParseError: ON <table> or the column list not found.
    """
    cur = _Cursor(statement, list(tokenize(statement.text)))
    cur.expect_word("create", "expected CREATE")
    is_unique = cur.accept_word("unique") is not None
    cur.expect_word("index", "expected INDEX")
    cur.accept_word("concurrently")

    name: str | None = None
    if cur.accept_words("if", "not", "exists") or not cur.at_word("on"):
        name = _qualified_name(cur)
    cur.expect_word("on", "expected ON <table>")
    cur.accept_word("only")
    table_name = _qualified_name(cur)
    if table_name is None:
        raise cur.error("missing table name after ON")
    if cur.accept_word("using"):
        cur.next()
    elements = cur.group()
    if elements is None:
        raise cur.error("expected index column list", table=table_name)
    columns = [_index_element(cur, el) for el in split_top_level(elements) if el]

    predicate: str | None = None
    while not cur.done:
        if cur.accept_word("include", "with"):
            cur.group()
        elif cur.accept_word("nulls"):
            cur.accept_word("not")
            cur.accept_word("distinct")
        elif cur.accept_word("tablespace"):
            cur.next()
        elif cur.accept_word("where"):
            predicate = _collapse(cur.text_of(cur.rest()))
        else:
            cur.next()

    if name is None:
        name = f"{_short_name(table_name)}_{'_'.join(c for c in columns if c.isidentifier())}_idx"
    return IndexDecl(
        name=name,
        table_name=table_name,
        columns=columns,
        is_partial=predicate is not None,
        predicate=predicate,
        is_unique=is_unique,
        line=statement.line,
        raw=statement.text,
    )


_TIMINGS = {"before": TriggerTiming.BEFORE, "after": TriggerTiming.AFTER}
_EVENTS = {
    "insert": TriggerEvent.INSERT,
    "update": TriggerEvent.UPDATE,
    "delete": TriggerEvent.DELETE,
}


def parse_create_trigger(statement: Statement) -> TriggerDecl:
    """Parse CREATE TRIGGER into a TriggerDecl.

    Raises:
        ParseError: timing, events, ON <table> or EXECUTE clause not found.
    """
    cur = _Cursor(statement, list(tokenize(statement.text)))
    cur.expect_word("create", "expected CREATE")
    if cur.accept_word("or"):
        cur.expect_word("replace", "expected OR REPLACE")
    cur.accept_word("constraint")
    cur.expect_word("trigger", "expected TRIGGER")

    name_tok = cur.next()
    if name_tok is None or not name_tok.is_identifier:
        raise cur.error("missing trigger name", name_tok)

    timing_tok = cur.accept_word("before", "after")
    if timing_tok is not None:
        timing = _TIMINGS[timing_tok.lower]
    elif cur.accept_words("instead", "of"):
        timing = TriggerTiming.INSTEAD_OF
    else:
        raise cur.error("expected BEFORE, AFTER or INSTEAD OF")

    events: set[TriggerEvent] = set()
    while True:
        tok = cur.accept_word("insert", "update", "delete", "truncate")
        if tok is None:
            raise cur.error("expected trigger event")
        if tok.lower in _EVENTS:
            events.add(_EVENTS[tok.lower])
        if tok.lower == "update" and cur.accept_word("of"):
            while cur.peek() is not None and cur.peek().is_identifier and not cur.at_word("on", "or"):  # type: ignore[union-attr]
                cur.next()
                if not cur.accept_punct(","):
                    break
        if not cur.accept_word("or"):
            break

    cur.expect_word("on", "expected ON <table>")
    table_name = _qualified_name(cur)
    if table_name is None:
        raise cur.error("missing table name after ON")

    while not cur.done and not cur.at_word("execute"):
        cur.next()
    cur.expect_word("execute", "expected EXECUTE FUNCTION")
    cur.accept_word("function", "procedure")
    function_parts = _qualified_parts(cur)
    if not function_parts:
        raise cur.error("missing trigger function name", table=table_name)

    return TriggerDecl(
        name=ident(name_tok),
        table_name=table_name,
        timing=timing,
        events=frozenset(events),
        function_name=".".join(function_parts),
        line=statement.line,
        raw=statement.text,
    )


def _parse_alter_action(cur: _Cursor, table_name: str, line: int) -> AlterAction | None:
    if cur.accept_word("add"):
        fragment = TableDecl(name=table_name, line=line)
        cur.accept_word("column")
        if _is_table_constraint(cur.tokens[cur.pos :]):
            _parse_table_constraint(cur, fragment)
            return AlterAction(kind=AlterActionKind.ADD_CONSTRAINT, fragment=fragment)
        cur.accept_words("if", "not", "exists")
        column = _parse_column(cur.sub(cur.rest()), fragment)
        if column is None:
            return None
        return AlterAction(
            kind=AlterActionKind.ADD_COLUMN,
            column=column.name,
            column_decl=column,
            fragment=fragment,
        )

    if cur.accept_word("alter"):
        cur.accept_word("column")
        col_tok = cur.next()
        if col_tok is None or not col_tok.is_identifier:
            return None
        column_name = ident(col_tok)
        if cur.accept_words("set", "data", "type") or cur.accept_word("type"):
            start = cur.pos
            while not cur.done and not cur.at_word("using", "collate"):
                cur.pos += 1
            value = _collapse(cur.text_of(cur.tokens[start : cur.pos]))
            return AlterAction(kind=AlterActionKind.SET_TYPE, column=column_name, value=value)
        if cur.accept_words("set", "default"):
            value = _collapse(cur.text_of(cur.rest()))
            return AlterAction(kind=AlterActionKind.SET_DEFAULT, column=column_name, value=value)
        if cur.accept_words("drop", "default"):
            return AlterAction(kind=AlterActionKind.DROP_DEFAULT, column=column_name)
        if cur.accept_words("set", "not", "null"):
            return AlterAction(kind=AlterActionKind.SET_NOT_NULL, column=column_name)
        if cur.accept_words("drop", "not", "null"):
            return AlterAction(kind=AlterActionKind.DROP_NOT_NULL, column=column_name)
        return None

    if cur.accept_word("drop"):
        if cur.at_word("constraint"):
            return None
        cur.accept_word("column")
        cur.accept_words("if", "exists")
        col_tok = cur.next()
        if col_tok is None or not col_tok.is_identifier:
            return None
        return AlterAction(kind=AlterActionKind.DROP_COLUMN, column=ident(col_tok))

    if cur.accept_words("rename", "to"):
        new_tok = cur.next()
        if new_tok is None or not new_tok.is_identifier:
            return None
        # the new name stays in the schema of the old one
        schema, _, _ = table_name.rpartition(".")
        new_name = f"{schema}.{ident(new_tok)}" if schema else ident(new_tok)
        return AlterAction(kind=AlterActionKind.RENAME_TABLE, value=new_name)

    if cur.accept_word("set"):
        group = cur.group()
        pairs = split_top_level(group) if group is not None else [cur.rest()]
        options: dict[str, str] = {}
        for pair in pairs:
            if len(pair) >= 3 and pair[0].is_identifier and (pair[1].is_punct("=") or pair[1].is_word("to")):
                value_tokens = pair[2:]
                value = (
                    unquote_string(value_tokens[0])
                    if len(value_tokens) == 1 and value_tokens[0].kind is TokenKind.STRING
                    else _collapse(cur.text_of(value_tokens))
                )
                options[ident(pair[0])] = value
        if options:
            return AlterAction(kind=AlterActionKind.SET_OPTIONS, options=options)
    return None


def parse_alter_table(statement: Statement) -> AlterTablePatch:
    """Parse ALTER TABLE into an incremental patch.

    Raises:
        ParseError: the target table name is missing.
    """
    cur = _Cursor(statement, list(tokenize(statement.text)))
    cur.expect_word("alter", "expected ALTER")
    cur.expect_word("table", "expected TABLE")
    cur.accept_words("if", "exists")
    cur.accept_word("only")
    table_name = _qualified_name(cur)
    if table_name is None:
        raise cur.error("missing table name")
    cur.accept_punct("*")

    patch = AlterTablePatch(table_name=table_name, line=statement.line, raw=statement.text)
    for action_tokens in split_top_level(cur.rest()):
        if not action_tokens:
            continue
        action = _parse_alter_action(cur.sub(action_tokens), table_name, statement.line)
        if action is None:
            log.debug(
                "alter_action_skipped",
                table=table_name,
                action=_collapse(cur.text_of(action_tokens)),
            )
            continue
        patch.actions.append(action)
    return patch


def parse_comment(statement: Statement) -> CommentDecl | None:
    """Parse COMMENT ON TABLE / COLUMN. Other comment targets return None."""
    cur = _Cursor(statement, list(tokenize(statement.text)))
    cur.expect_word("comment", "expected COMMENT")
    cur.expect_word("on", "expected ON")
    if cur.accept_word("table"):
        parts = _qualified_parts(cur)
        if not parts:
            raise cur.error("missing table name")
        table_name, column_name = table_key(parts), None
    elif cur.accept_word("column"):
        parts = _qualified_parts(cur)
        if len(parts) < 2:
            raise cur.error("expected <table>.<column>")
        table_name, column_name = table_key(parts[:-1]), parts[-1]
    else:
        return None
    cur.expect_word("is", "expected IS")
    value_tok = cur.next()
    if value_tok is None:
        raise cur.error("missing comment text")
    text = unquote_string(value_tok) if value_tok.kind is TokenKind.STRING else None
    return CommentDecl(
        table_name=table_name,
        column_name=column_name,
        text=text,
        line=statement.line,
        raw=statement.text,
    )


_PARSERS: dict[StatementKind, Callable[[Statement], Declaration | None]] = {
    StatementKind.CREATE_TABLE: parse_create_table,
    StatementKind.CREATE_INDEX: parse_create_index,
    StatementKind.CREATE_TRIGGER: parse_create_trigger,
    StatementKind.ALTER_TABLE: parse_alter_table,
    StatementKind.COMMENT: parse_comment,
}


def parse_statement(statement: Statement) -> Declaration | None:
    """Parse one statement. Returns None for kinds that carry nothing to lint.

    Raises:
        ParseError: the statement's top-level grammar cannot be recognized.
    """
    parser = _PARSERS.get(statement.kind)
    if parser is None:
        return None
    return parser(statement)
