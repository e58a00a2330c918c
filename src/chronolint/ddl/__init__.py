"""DDL handling: tokenizing, statement splitting and declaration parsing."""

from chronolint.ddl.lexer import StatementSplitter, classify_statement, split_statements, tokenize
from chronolint.ddl.models import (
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
    normalize_type,
)
from chronolint.ddl.parser import parse_statement

__all__ = [
    "AlterTablePatch",
    "CheckConstraint",
    "ColumnDecl",
    "CommentDecl",
    "Declaration",
    "ForeignKeyDecl",
    "IndexDecl",
    "Statement",
    "StatementKind",
    "StatementSplitter",
    "TableDecl",
    "TriggerDecl",
    "TriggerEvent",
    "TriggerTiming",
    "classify_statement",
    "normalize_type",
    "parse_statement",
    "split_statements",
    "tokenize",
]
