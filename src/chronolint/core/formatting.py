"""Formatting utilities for consistent terminal output.

Design principles:
- Every finding fits on one line
- Evidence excerpts are single-line with collapsed whitespace
- Grammatically correct (1 error vs 2 errors)
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "error")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 error" or "3 errors"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def truncate_at_word(text: str, max_len: int = 40, suffix: str = "...") -> str:
    """Truncate text at word boundary.

    Examples:
        "created_at timestamptz NOT NULL DEFAULT now()" (max 30)
            -> "created_at timestamptz NOT..."
    """
    if len(text) <= max_len:
        return text

    cut_at = max_len - len(suffix)
    if cut_at <= 0:
        return suffix

    space_idx = text.rfind(" ", 0, cut_at)
    if space_idx > 0:
        return text[:space_idx] + suffix

    return text[:cut_at] + suffix


def excerpt(text: str, max_len: int = 160) -> str:
    """Collapse whitespace and truncate raw DDL for use as finding evidence.

    Examples:
        "CREATE TABLE users (\\n    id bigint\\n)" -> "CREATE TABLE users ( id bigint )"
    """
    return truncate_at_word(_WHITESPACE.sub(" ", text).strip(), max_len)
