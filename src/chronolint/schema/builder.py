"""Schema model builder.

Two passes over the parsed declarations of one input:

1. Register every CREATE TABLE. The first declaration of a name wins,
   later ones are kept in `duplicates`.
2. Attach indexes, triggers, ALTER patches and comments to their table
   by name. Unknown targets are kept in `dangling`. `ALTER TABLE ... RENAME
   TO` re-keys the table, so later statements must use the new name.

Declaration order is never changed. Columns keep their declaration order
and ALTER patches are applied in script order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from chronolint.core.logging import get_logger
from chronolint.ddl.models import (
    AlterAction,
    AlterActionKind,
    AlterTablePatch,
    CommentDecl,
    Declaration,
    IndexDecl,
    TableDecl,
    TriggerDecl,
)

log = get_logger("schema.builder")


@dataclass(frozen=True)
class DanglingReference:
    """A declaration whose target table (or column) was never declared."""

    kind: str  # "index", "trigger", "alter", "comment"
    name: str
    table_name: str
    column: str | None = None
    line: int | None = None
    raw: str = ""

    @property
    def target(self) -> str:
        return f"{self.table_name}.{self.column}" if self.column else self.table_name


@dataclass
class SchemaModel:
    """Per-input schema: tables by name plus structural problems."""

    tables: dict[str, TableDecl] = field(default_factory=dict)
    duplicates: list[TableDecl] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)
    parse_failures: int = 0

    def table(self, name: str) -> TableDecl | None:
        return self.tables.get(name)

    @property
    def analyzable(self) -> bool:
        """False when parsing failed and nothing could be modeled."""
        return bool(self.tables) or self.parse_failures == 0


def build_schema(
    declarations: Iterable[Declaration],
    *,
    parse_failures: int = 0,
) -> SchemaModel:
    """Assemble declarations into a SchemaModel."""
    decls = list(declarations)
    model = SchemaModel(parse_failures=parse_failures)

    # Pass 1: tables
    for decl in decls:
        if not isinstance(decl, TableDecl):
            continue
        if decl.name in model.tables:
            model.duplicates.append(decl)
            log.debug("duplicate_table", table=decl.name, line=decl.line)
            continue
        model.tables[decl.name] = decl
        log.debug("table_registered", table=decl.name, columns=len(decl.columns))

    # Pass 2: attachments
    for decl in decls:
        if isinstance(decl, IndexDecl):
            _attach_index(model, decl)
        elif isinstance(decl, TriggerDecl):
            _attach_trigger(model, decl)
        elif isinstance(decl, AlterTablePatch):
            _apply_patch(model, decl)
        elif isinstance(decl, CommentDecl):
            _attach_comment(model, decl)

    return model


def _dangle(model: SchemaModel, ref: DanglingReference) -> None:
    model.dangling.append(ref)
    log.debug("dangling_reference", kind=ref.kind, name=ref.name, target=ref.target)


def _attach_index(model: SchemaModel, index: IndexDecl) -> None:
    table = model.table(index.table_name)
    if table is None:
        _dangle(
            model,
            DanglingReference("index", index.name, index.table_name, line=index.line, raw=index.raw),
        )
        return
    table.indexes.append(index)


def _attach_trigger(model: SchemaModel, trigger: TriggerDecl) -> None:
    table = model.table(trigger.table_name)
    if table is None:
        _dangle(
            model,
            DanglingReference(
                "trigger", trigger.name, trigger.table_name, line=trigger.line, raw=trigger.raw
            ),
        )
        return
    table.triggers.append(trigger)


def _attach_comment(model: SchemaModel, comment: CommentDecl) -> None:
    table = model.table(comment.table_name)
    name = f"COMMENT ON {'COLUMN' if comment.column_name else 'TABLE'}"
    if table is None:
        _dangle(
            model,
            DanglingReference(
                "comment",
                name,
                comment.table_name,
                column=comment.column_name,
                line=comment.line,
                raw=comment.raw,
            ),
        )
        return
    if comment.column_name is None:
        table.comment = comment.text
        return
    column = table.column(comment.column_name)
    if column is None:
        _dangle(
            model,
            DanglingReference(
                "comment",
                name,
                comment.table_name,
                column=comment.column_name,
                line=comment.line,
                raw=comment.raw,
            ),
        )
        return
    column.comment = comment.text


def _apply_patch(model: SchemaModel, patch: AlterTablePatch) -> None:
    table = model.table(patch.table_name)
    if table is None:
        _dangle(
            model,
            DanglingReference("alter", "ALTER TABLE", patch.table_name, line=patch.line, raw=patch.raw),
        )
        return
    for action in patch.actions:
        if action.kind is AlterActionKind.RENAME_TABLE and action.value:
            _rename_table(model, table, action.value)
            continue
        if not _apply_action(table, action):
            _dangle(
                model,
                DanglingReference(
                    "alter",
                    "ALTER TABLE",
                    patch.table_name,
                    column=action.column,
                    line=patch.line,
                    raw=patch.raw,
                ),
            )


def _rename_table(model: SchemaModel, table: TableDecl, new_name: str) -> None:
    """Re-key a table in place. Renaming onto a declared name is a duplicate."""
    old_name = table.name
    if new_name == old_name:
        return
    table.name = new_name
    if new_name in model.tables:
        del model.tables[old_name]
        model.duplicates.append(table)
        log.debug("duplicate_table", table=new_name, line=table.line)
        return
    model.tables = {(new_name if name == old_name else name): t for name, t in model.tables.items()}
    log.debug("table_renamed", table=old_name, new_name=new_name)


def _apply_action(table: TableDecl, action: AlterAction) -> bool:
    """Apply one ALTER action. Returns False when it names an unknown column."""
    kind = action.kind

    if kind is AlterActionKind.ADD_COLUMN:
        if action.column_decl is not None and table.column(action.column_decl.name) is None:
            table.columns.append(action.column_decl)
        _merge_fragment(table, action.fragment)
        return True

    if kind is AlterActionKind.ADD_CONSTRAINT:
        _merge_fragment(table, action.fragment)
        return True

    if kind is AlterActionKind.SET_OPTIONS:
        table.options.update(action.options)
        return True

    column = table.column(action.column) if action.column else None
    if column is None:
        return False

    if kind is AlterActionKind.SET_TYPE and action.value:
        column.declared_type = action.value
    elif kind is AlterActionKind.SET_DEFAULT:
        column.default_expr = action.value
    elif kind is AlterActionKind.DROP_DEFAULT:
        column.default_expr = None
    elif kind is AlterActionKind.SET_NOT_NULL:
        column.nullable = False
    elif kind is AlterActionKind.DROP_NOT_NULL:
        column.nullable = True
    elif kind is AlterActionKind.DROP_COLUMN:
        table.columns.remove(column)
    return True


def _merge_fragment(table: TableDecl, fragment: TableDecl | None) -> None:
    """Merge constraints declared by an ALTER action into the table."""
    if fragment is None:
        return
    table.checks.extend(fragment.checks)
    table.foreign_keys.extend(fragment.foreign_keys)
    for index in fragment.indexes:
        table.indexes.append(index)
        if index.implicit and index.name.endswith("_pkey"):
            for name in index.columns:
                column = table.column(name)
                if column is not None:
                    column.is_primary_key = True
                    column.nullable = False
