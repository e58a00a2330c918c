"""Tokenizer and statement splitter for PostgreSQL DDL scripts.

Splitting happens on `;` outside of string literals, quoted identifiers,
line and block comments, and dollar-quoted blocks. Dollar-quote tags do
not nest: inside `$fn$ ... $fn$` a bare `$$` is ordinary text.

An unterminated literal ends the scan. The rest of the buffer is emitted
as one statement carrying a LexError, and `StatementSplitter.salvage`
resumes splitting right after the opening delimiter so that statements
following a broken function body are still linted.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from itertools import islice

from chronolint.core.errors import LexError
from chronolint.ddl.models import Statement, StatementKind

_DOLLAR_TAG = re.compile(r"\$([A-Za-z_\u0080-\uffff][A-Za-z0-9_\u0080-\uffff]*)?\$")
_TWO_CHAR_OPS = frozenset({"::", ">=", "<=", "<>", "!=", "||", "=>"})


class TokenKind(Enum):
    WORD = "word"
    QUOTED_IDENT = "quoted_ident"
    STRING = "string"
    NUMBER = "number"
    PUNCT = "punct"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token. start/end are offsets into the tokenized text."""

    kind: TokenKind
    value: str
    start: int
    end: int

    @property
    def lower(self) -> str:
        return self.value.lower()

    def is_word(self, *words: str) -> bool:
        return self.kind is TokenKind.WORD and self.value.lower() in words

    def is_punct(self, *chars: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.value in chars

    @property
    def is_identifier(self) -> bool:
        return self.kind in (TokenKind.WORD, TokenKind.QUOTED_IDENT)


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c in "_$"


def _skip_line_comment(text: str, i: int) -> int:
    end = text.find("\n", i)
    return len(text) if end < 0 else end + 1


def _skip_block_comment(text: str, i: int) -> int:
    """Return the offset after the comment closing at i, or -1. Block comments nest."""
    depth = 0
    n = len(text)
    while i < n:
        if text.startswith("/*", i):
            depth += 1
            i += 2
        elif text.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return -1


def _skip_quoted(text: str, i: int, quote: str, backslash: bool = False) -> int:
    """Return the offset after the quoted run opening at i, or -1.

    A doubled quote is an escaped quote. With backslash=True (E'' strings)
    a backslash escapes the next character.
    """
    n = len(text)
    j = i + 1
    while j < n:
        c = text[j]
        if backslash and c == "\\":
            j += 2
            continue
        if c == quote:
            if j + 1 < n and text[j + 1] == quote:
                j += 2
                continue
            return j + 1
        j += 1
    return -1


def _dollar_tag(text: str, i: int) -> str | None:
    """Return the full delimiter (e.g. `$fn$`) if a dollar quote opens at i."""
    if i > 0 and _is_ident_char(text[i - 1]):
        return None
    m = _DOLLAR_TAG.match(text, i)
    return m.group(0) if m else None


def _skip_dollar(text: str, i: int, delimiter: str) -> int:
    end = text.find(delimiter, i + len(delimiter))
    return -1 if end < 0 else end + len(delimiter)


def _is_escape_string(text: str, i: int) -> bool:
    """Whether the quote at i opens an E'' string."""
    if i == 0 or text[i - 1] not in "eE":
        return False
    return i < 2 or not _is_ident_char(text[i - 2])


# =============================================================================
# Tokenizer
# =============================================================================


def tokenize(text: str, start: int = 0, end: int | None = None) -> Iterator[Token]:
    """Yield tokens of text[start:end], skipping whitespace and comments.

    Tolerant: an unterminated literal becomes one token running to `end`.
    """
    n = len(text) if end is None else end
    i = start
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue
        if text.startswith("--", i):
            i = min(_skip_line_comment(text, i), n)
            continue
        if text.startswith("/*", i):
            j = _skip_block_comment(text, i)
            i = n if j < 0 or j > n else j
            continue
        if c == "'":
            j = _skip_quoted(text, i, "'")
            j = n if j < 0 or j > n else j
            yield Token(TokenKind.STRING, text[i:j], i, j)
            i = j
            continue
        if c == '"':
            j = _skip_quoted(text, i, '"')
            j = n if j < 0 or j > n else j
            yield Token(TokenKind.QUOTED_IDENT, text[i:j], i, j)
            i = j
            continue
        if c == "$":
            delimiter = _dollar_tag(text, i)
            if delimiter is not None:
                j = _skip_dollar(text, i, delimiter)
                j = n if j < 0 or j > n else j
                yield Token(TokenKind.STRING, text[i:j], i, j)
                i = j
                continue
        if c.isdigit() or (c == "." and i + 1 < n and text[i + 1].isdigit()):
            j = i + 1
            while j < n and (text[j].isdigit() or text[j] == "."):
                j += 1
            if j < n and text[j] in "eE" and j + 1 < n and (text[j + 1].isdigit() or text[j + 1] in "+-"):
                j += 2
                while j < n and text[j].isdigit():
                    j += 1
            yield Token(TokenKind.NUMBER, text[i:j], i, j)
            i = j
            continue
        if c.isalpha() or c == "_":
            j = i + 1
            while j < n and _is_ident_char(text[j]):
                j += 1
            if j < n and text[j] == "'" and text[i:j] in ("E", "e"):
                k = _skip_quoted(text, j, "'", backslash=True)
                k = n if k < 0 or k > n else k
                yield Token(TokenKind.STRING, text[i:k], i, k)
                i = k
                continue
            yield Token(TokenKind.WORD, text[i:j], i, j)
            i = j
            continue
        if text[i : i + 2] in _TWO_CHAR_OPS:
            yield Token(TokenKind.PUNCT, text[i : i + 2], i, i + 2)
            i += 2
            continue
        yield Token(TokenKind.PUNCT, c, i, i + 1)
        i += 1


# =============================================================================
# Statement Classification
# =============================================================================

_CREATE_MODIFIERS = frozenset(
    {"or", "replace", "global", "local", "temp", "temporary", "unlogged", "unique", "constraint"}
)


def classify_statement(text: str) -> StatementKind:
    """Determine the statement kind from its leading keywords."""
    tokens = list(islice(tokenize(text), 24))
    if not tokens or tokens[0].kind is not TokenKind.WORD:
        return StatementKind.OTHER

    head = tokens[0].lower
    if head == "alter":
        if len(tokens) > 1 and tokens[1].is_word("table"):
            return StatementKind.ALTER_TABLE
        return StatementKind.OTHER
    if head == "comment":
        if len(tokens) > 1 and tokens[1].is_word("on"):
            return StatementKind.COMMENT
        return StatementKind.OTHER
    if head != "create":
        return StatementKind.OTHER

    idx = 1
    while idx < len(tokens) and tokens[idx].is_word(*_CREATE_MODIFIERS):
        idx += 1
    if idx >= len(tokens):
        return StatementKind.OTHER
    obj = tokens[idx]
    if obj.is_word("index"):
        return StatementKind.CREATE_INDEX
    if obj.is_word("trigger"):
        return StatementKind.CREATE_TRIGGER
    if not obj.is_word("table"):
        return StatementKind.OTHER
    return _classify_create_table(tokens, idx + 1)


def _classify_create_table(tokens: list[Token], idx: int) -> StatementKind:
    """CREATE TABLE without a column list (AS / PARTITION OF / OF type) is not linted."""
    if idx + 2 < len(tokens) and tokens[idx].is_word("if"):
        idx += 3
    # qualified name: ident (. ident)*
    if idx < len(tokens) and tokens[idx].is_identifier:
        idx += 1
        while idx + 1 < len(tokens) and tokens[idx].is_punct("."):
            idx += 2
    if idx < len(tokens) and tokens[idx].is_word("as", "partition", "of"):
        return StatementKind.OTHER
    return StatementKind.CREATE_TABLE


# =============================================================================
# Statement Splitter
# =============================================================================


class StatementSplitter:
    """Lazy, restartable splitter over one DDL buffer.

    Each iteration starts a fresh scan from the beginning of the buffer.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._newlines = [i for i, c in enumerate(text) if c == "\n"]

    @property
    def text(self) -> str:
        return self._text

    def __iter__(self) -> Iterator[Statement]:
        return self._scan(0)

    def salvage(self, statement: Statement) -> Iterator[Statement]:
        """Continue splitting after the opener of an unterminated literal.

        The opener is treated as plain text, so statements after a broken
        literal are recovered. Yields nothing for statements without a
        LexError.
        """
        error = statement.lex_error
        if error is None:
            return iter(())
        return self._scan(error.offset + max(len(error.opener), 1))

    def line_of(self, offset: int) -> int:
        """1-based line number of an offset."""
        return bisect.bisect_left(self._newlines, offset) + 1

    def _scan(self, pos: int) -> Iterator[Statement]:
        text = self._text
        n = len(text)
        first_sig: int | None = None
        i = pos
        while i < n:
            c = text[i]
            if c == "-" and text.startswith("--", i):
                i = _skip_line_comment(text, i)
                continue
            if c == "/" and text.startswith("/*", i):
                j = _skip_block_comment(text, i)
                if j < 0:
                    yield self._unterminated(first_sig, i, "block comment", "/*")
                    return
                i = j
                continue
            if first_sig is None and not c.isspace():
                first_sig = i
            if c == "'":
                j = _skip_quoted(text, i, "'", backslash=_is_escape_string(text, i))
                if j < 0:
                    yield self._unterminated(first_sig, i, "string literal", "'")
                    return
                i = j
                continue
            if c == '"':
                j = _skip_quoted(text, i, '"')
                if j < 0:
                    yield self._unterminated(first_sig, i, "quoted identifier", '"')
                    return
                i = j
                continue
            if c == "$":
                delimiter = _dollar_tag(text, i)
                if delimiter is not None:
                    j = _skip_dollar(text, i, delimiter)
                    if j < 0:
                        yield self._unterminated(first_sig, i, "dollar-quoted block", delimiter)
                        return
                    i = j
                    continue
            if c == ";":
                stmt = self._make(first_sig, i)
                if stmt is not None:
                    yield stmt
                first_sig = None
            i += 1

        stmt = self._make(first_sig, n)
        if stmt is not None:
            yield stmt

    def _make(self, start: int | None, end: int) -> Statement | None:
        if start is None:
            return None
        raw = self._text[start:end].rstrip()
        if not raw:
            return None
        return Statement(
            kind=classify_statement(raw),
            text=raw,
            start=start,
            end=start + len(raw),
            line=self.line_of(start),
        )

    def _unterminated(self, first_sig: int | None, at: int, literal: str, opener: str) -> Statement:
        error = LexError.unterminated(literal, at, opener)
        start = at if first_sig is None else first_sig
        raw = self._text[start:].rstrip()
        return Statement(
            kind=classify_statement(raw),
            text=raw,
            start=start,
            end=start + len(raw),
            line=self.line_of(start),
            lex_error=error,
        )


def split_statements(text: str) -> Iterator[Statement]:
    """Split a DDL script into top-level statements."""
    return iter(StatementSplitter(text))
