"""DDL models - statements and parsed declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from chronolint.config.constants import CANONICAL_TYPES, TEMPORAL_TYPES
from chronolint.core.errors import LexError

_PRECISION = re.compile(r"\(\s*\d+\s*\)")
_ARRAY = re.compile(r"(\[\s*\d*\s*\])+$")
_SPACES = re.compile(r"\s+")


class StatementKind(Enum):
    """Top-level statement kinds recognized by the splitter."""

    CREATE_TABLE = "CreateTable"
    ALTER_TABLE = "AlterTable"
    CREATE_INDEX = "CreateIndex"
    CREATE_TRIGGER = "CreateTrigger"
    COMMENT = "Comment"
    OTHER = "Other"


@dataclass(frozen=True)
class Statement:
    """A single top-level statement and its span in the source buffer."""

    kind: StatementKind
    text: str
    start: int
    end: int
    line: int = 1
    lex_error: LexError | None = None


def normalize_type(declared_type: str) -> str:
    """Normalize a declared type for lookup.

    Lower-cases, drops precision and array brackets, collapses whitespace
    and maps long-form aliases to their short names.

    Examples:
        "TIMESTAMP(3) WITH TIME ZONE" -> "timestamptz"
        "timestamp without time zone[]" -> "timestamp"
        "INTERVAL DAY TO SECOND" -> "interval"
    """
    text = _SPACES.sub(" ", declared_type.strip().lower())
    text = _ARRAY.sub("", text).strip()
    text = _SPACES.sub(" ", _PRECISION.sub(" ", text)).strip()
    if text.startswith("interval"):
        return "interval"
    if text.startswith("pg_catalog."):
        text = text[len("pg_catalog.") :]
    return CANONICAL_TYPES.get(text, text)


def is_temporal_type(declared_type: str) -> bool:
    """Whether a declared type stores date, time or duration information."""
    return normalize_type(declared_type) in TEMPORAL_TYPES


@dataclass
class ColumnDecl:
    """A column definition. Belongs to exactly one TableDecl."""

    name: str
    declared_type: str
    nullable: bool = True
    default_expr: str | None = None
    is_primary_key: bool = False
    raw: str = ""
    comment: str | None = None

    @property
    def normalized_type(self) -> str:
        return normalize_type(self.declared_type)

    @property
    def is_temporal(self) -> bool:
        return is_temporal_type(self.declared_type)


@dataclass(frozen=True)
class CheckConstraint:
    """A CHECK constraint.

    referenced_columns comes from identifier scanning. When the expression
    cannot be fully scanned it is kept with unparsed=True.
    """

    raw_expression: str
    referenced_columns: frozenset[str] = frozenset()
    unparsed: bool = False
    name: str | None = None


@dataclass(frozen=True)
class ForeignKeyDecl:
    """A foreign key, inline or table-level."""

    columns: tuple[str, ...]
    ref_table: str
    ref_columns: tuple[str, ...] = ()
    name: str | None = None


@dataclass
class IndexDecl:
    """An index on a table.

    columns holds bare column names, or the raw expression text for
    expression index elements. implicit marks indexes created by PRIMARY
    KEY and UNIQUE constraints.
    """

    name: str
    table_name: str
    columns: list[str] = field(default_factory=list)
    is_partial: bool = False
    predicate: str | None = None
    is_unique: bool = False
    implicit: bool = False
    line: int | None = None
    raw: str = ""

    @property
    def leading_column(self) -> str | None:
        return self.columns[0] if self.columns else None


class TriggerTiming(Enum):
    BEFORE = "Before"
    AFTER = "After"
    INSTEAD_OF = "InsteadOf"


class TriggerEvent(Enum):
    INSERT = "Insert"
    UPDATE = "Update"
    DELETE = "Delete"


@dataclass
class TriggerDecl:
    """A row or statement trigger on a table."""

    name: str
    table_name: str
    timing: TriggerTiming
    events: frozenset[TriggerEvent]
    function_name: str
    line: int | None = None
    raw: str = ""


@dataclass
class TableDecl:
    """A table and everything attached to it.

    Created from CREATE TABLE; later ALTER/INDEX/TRIGGER/COMMENT statements
    are attached by the schema builder. Column order is declaration order.
    """

    name: str
    columns: list[ColumnDecl] = field(default_factory=list)
    checks: list[CheckConstraint] = field(default_factory=list)
    indexes: list[IndexDecl] = field(default_factory=list)
    triggers: list[TriggerDecl] = field(default_factory=list)
    foreign_keys: list[ForeignKeyDecl] = field(default_factory=list)
    options: dict[str, str] = field(default_factory=dict)
    comment: str | None = None
    line: int | None = None
    raw: str = ""

    def column(self, name: str) -> ColumnDecl | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def temporal_columns(self) -> list[ColumnDecl]:
        return [c for c in self.columns if c.is_temporal]


class AlterActionKind(Enum):
    ADD_COLUMN = "add_column"
    ADD_CONSTRAINT = "add_constraint"
    SET_TYPE = "set_type"
    SET_DEFAULT = "set_default"
    DROP_DEFAULT = "drop_default"
    SET_NOT_NULL = "set_not_null"
    DROP_NOT_NULL = "drop_not_null"
    DROP_COLUMN = "drop_column"
    SET_OPTIONS = "set_options"
    RENAME_TABLE = "rename_table"


@dataclass
class AlterAction:
    """One action of an ALTER TABLE statement.

    fragment carries constraints, implicit indexes and foreign keys declared
    by the action, to be merged into the target table.
    """

    kind: AlterActionKind
    column: str | None = None
    column_decl: ColumnDecl | None = None
    value: str | None = None
    options: dict[str, str] = field(default_factory=dict)
    fragment: TableDecl | None = None


@dataclass
class AlterTablePatch:
    """Incremental change to a table, applied in pass 2 of model building."""

    table_name: str
    actions: list[AlterAction] = field(default_factory=list)
    line: int | None = None
    raw: str = ""


@dataclass
class CommentDecl:
    """COMMENT ON TABLE / COMMENT ON COLUMN."""

    table_name: str
    column_name: str | None
    text: str | None
    line: int | None = None
    raw: str = ""


Declaration = TableDecl | AlterTablePatch | IndexDecl | TriggerDecl | CommentDecl
