"""CHECK expression matching.

CHECK bodies are never evaluated. Comparisons between two columns are
recognized with patterns over a normalized expression text: lower case,
double quotes removed, whitespace collapsed, redundant parentheses around
bare identifiers dropped and an optional `table.` qualifier ignored.
"""

from __future__ import annotations

import re
from enum import Enum

from chronolint.ddl.models import CheckConstraint

_SPACES = re.compile(r"\s+")
_WRAPPED_IDENT = re.compile(r"(?<![a-z0-9_$])\(\s*([a-z_][a-z0-9_$.]*)\s*\)")
_QUALIFIER = r"(?:[a-z_][a-z0-9_$]*\.)?"


class Ordering(Enum):
    """How a CHECK orders two columns."""

    STRICT = "strict"  # later > earlier
    NON_STRICT = "non_strict"  # later >= earlier
    REVERSED = "reversed"  # earlier > later, earlier >= later
    NONE = "none"


def normalize_expression(expr: str) -> str:
    text = _SPACES.sub(" ", expr.replace('"', "").lower()).strip()
    prev = None
    while prev != text:
        prev = text
        text = _WRAPPED_IDENT.sub(r"\1", text)
    return text


def _compares(text: str, left: str, op: str, right: str) -> bool:
    pattern = (
        rf"(?<![a-z0-9_$.]){_QUALIFIER}{re.escape(left)}\s*{op}\s*"
        rf"{_QUALIFIER}{re.escape(right)}(?![a-z0-9_$(])"
    )
    return re.search(pattern, text) is not None


def ordering(expr: str, earlier: str, later: str) -> Ordering:
    """Classify how an expression orders `later` relative to `earlier`."""
    text = normalize_expression(expr)
    earlier, later = earlier.lower(), later.lower()
    if _compares(text, later, r">(?!=)", earlier) or _compares(text, earlier, r"<(?![=>])", later):
        return Ordering.STRICT
    if _compares(text, later, ">=", earlier) or _compares(text, earlier, "<=", later):
        return Ordering.NON_STRICT
    if _compares(text, earlier, ">=?", later) or _compares(text, later, "<(?!>)=?", earlier):
        return Ordering.REVERSED
    return Ordering.NONE


def best_ordering(
    checks: list[CheckConstraint], earlier: str, later: str
) -> tuple[Ordering, CheckConstraint | None]:
    """Strongest ordering any parsed check establishes between two columns.

    Only checks whose scanned identifiers include both columns are examined.
    Preference: STRICT, NON_STRICT, REVERSED, NONE.
    """
    rank = [Ordering.STRICT, Ordering.NON_STRICT, Ordering.REVERSED, Ordering.NONE]
    best: tuple[Ordering, CheckConstraint | None] = (Ordering.NONE, None)
    for check in checks:
        if check.unparsed or not {earlier, later} <= check.referenced_columns:
            continue
        found = ordering(check.raw_expression, earlier, later)
        if rank.index(found) < rank.index(best[0]):
            best = (found, check)
    return best
