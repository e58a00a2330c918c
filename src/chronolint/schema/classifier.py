"""Column classifier - assigns a semantic category to temporal columns.

Name-pattern heuristics, first match wins:

1. created_at with a current-time default   -> AuditCreated
2. updated_at                               -> AuditUpdated
3. deleted_at                               -> SoftDelete
4. *_from, valid_from*, effective_from*     -> ValidityStart
   *_to, *_until, valid_to*, effective_to*  -> ValidityEnd
5. scheduling names and suffixes            -> Scheduling
6. {noun}_{verb}_at                         -> BusinessEvent
7. {verb}_at                                -> LifecycleEvent
8. anything else                            -> Unclassified

classify() is pure: no I/O, no state between calls.
"""

from __future__ import annotations

import re
from enum import Enum

from chronolint.config.models import ConventionsConfig
from chronolint.ddl.models import ColumnDecl, TableDecl

_DEFAULT_CONVENTIONS = ConventionsConfig()

_VALIDITY_START = re.compile(r"^(valid|effective)_from(_|$)")
_VALIDITY_END = re.compile(r"^(valid|effective)_(to|until)(_|$)")
_NULL_DEFAULT = re.compile(r"^\(*\s*null\s*\)*(::.*)?$", re.IGNORECASE)
_SPACES = re.compile(r"\s+")


class ColumnCategory(Enum):
    """Semantic role of a temporal column."""

    AUDIT_CREATED = "AuditCreated"
    AUDIT_UPDATED = "AuditUpdated"
    SOFT_DELETE = "SoftDelete"
    LIFECYCLE_EVENT = "LifecycleEvent"
    BUSINESS_EVENT = "BusinessEvent"
    VALIDITY_START = "ValidityStart"
    VALIDITY_END = "ValidityEnd"
    SCHEDULING = "Scheduling"
    UNCLASSIFIED = "Unclassified"


EVENT_CATEGORIES = frozenset({ColumnCategory.LIFECYCLE_EVENT, ColumnCategory.BUSINESS_EVENT})


def is_null_default(expr: str | None) -> bool:
    """Whether a default expression is absent or an explicit (possibly cast) NULL."""
    return expr is None or bool(_NULL_DEFAULT.match(expr.strip()))


def is_current_time_default(expr: str | None, conventions: ConventionsConfig | None = None) -> bool:
    """Whether a default expression stamps the current time.

    Matching is case-insensitive and ignores whitespace, so `now ( )` and
    `CURRENT_TIMESTAMP(3)` both count.
    """
    if expr is None or is_null_default(expr):
        return False
    conventions = conventions or _DEFAULT_CONVENTIONS
    text = _SPACES.sub("", expr).lower()
    return any(_SPACES.sub("", default).lower() in text for default in conventions.current_time_defaults)


def event_parts(name: str) -> tuple[str, str] | None:
    """Split `{noun}_{verb}_at` into (noun, verb); `{verb}_at` gives ("", verb)."""
    if not name.endswith("_at") or len(name) <= 3:
        return None
    stem = name[:-3]
    prefix, _, verb = stem.rpartition("_")
    if not verb:
        return None
    return prefix, verb


def _classify_column(column: ColumnDecl, conventions: ConventionsConfig) -> ColumnCategory:
    name = column.name

    if name == "created_at" and is_current_time_default(column.default_expr, conventions):
        return ColumnCategory.AUDIT_CREATED
    if name == "updated_at":
        return ColumnCategory.AUDIT_UPDATED
    if name == "deleted_at":
        return ColumnCategory.SOFT_DELETE

    if name.endswith("_from") or _VALIDITY_START.match(name):
        return ColumnCategory.VALIDITY_START
    if name.endswith(("_to", "_until")) or _VALIDITY_END.match(name):
        return ColumnCategory.VALIDITY_END

    if name in conventions.scheduling_names or name.endswith(tuple(conventions.scheduling_suffixes)):
        return ColumnCategory.SCHEDULING

    parts = event_parts(name)
    if parts is not None:
        prefix, verb = parts
        if verb in conventions.event_verbs:
            return ColumnCategory.BUSINESS_EVENT if prefix else ColumnCategory.LIFECYCLE_EVENT

    return ColumnCategory.UNCLASSIFIED


def classify(
    table: TableDecl,
    conventions: ConventionsConfig | None = None,
) -> dict[str, ColumnCategory]:
    """Map every temporal column of a table to its category.

    Non-temporal columns are not included. Keys follow column declaration order.
    """
    conventions = conventions or _DEFAULT_CONVENTIONS
    return {
        column.name: _classify_column(column, conventions)
        for column in table.columns
        if column.is_temporal
    }
