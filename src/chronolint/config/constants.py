"""Configuration constants.

This module contains values that should NOT be user-configurable: the
PostgreSQL type vocabulary and the grammar keywords the parser relies on.

For configurable naming heuristics, see models.py (ConventionsConfig).
"""

# =============================================================================
# Temporal Type Vocabulary
# =============================================================================
# Declared types are normalized (lower case, single spaces, precision and
# array brackets removed) before lookup.

ZONED_TYPES = frozenset(
    {
        "timestamptz",
        "timestamp with time zone",
        "timetz",
        "time with time zone",
    }
)
"""Temporal types that carry a time zone."""

ZONE_FREE_TYPES = frozenset(
    {
        "timestamp",
        "timestamp without time zone",
        "time",
        "time without time zone",
    }
)
"""Temporal types without a time zone. Flagged by R1."""

CALENDAR_TYPES = frozenset({"date"})
"""Calendar dates. Temporal, but carry no instant and are never flagged by R1."""

DURATION_TYPES = frozenset({"interval"})
"""Durations. `interval` may be followed by a field restriction (e.g. `day to second`)."""

TEMPORAL_TYPES = ZONED_TYPES | ZONE_FREE_TYPES | CALENDAR_TYPES | DURATION_TYPES
"""Every type that makes a column temporal."""

CANONICAL_TYPES = {
    "timestamp with time zone": "timestamptz",
    "timestamp without time zone": "timestamp",
    "time with time zone": "timetz",
    "time without time zone": "time",
}
"""Long-form aliases mapped to their short names."""

# =============================================================================
# Grammar Keywords
# =============================================================================

COLUMN_CONSTRAINT_KEYWORDS = frozenset(
    {
        "constraint",
        "not",
        "null",
        "default",
        "primary",
        "unique",
        "check",
        "references",
        "generated",
        "collate",
        "deferrable",
        "initially",
    }
)
"""Keywords that end a column's type and start its constraint list."""

TABLE_CONSTRAINT_KEYWORDS = frozenset(
    {"constraint", "check", "foreign", "primary", "unique", "exclude", "like"}
)
"""Keywords that mark a table-element as a table-level constraint."""

SQL_KEYWORDS = frozenset(
    {
        "and",
        "or",
        "not",
        "is",
        "null",
        "true",
        "false",
        "in",
        "between",
        "like",
        "ilike",
        "case",
        "when",
        "then",
        "else",
        "end",
        "interval",
        "current_timestamp",
        "current_date",
        "current_time",
        "localtimestamp",
        "at",
        "time",
        "zone",
        "distinct",
        "from",
        "any",
        "all",
        "array",
        "cast",
        "as",
    }
)
"""Words ignored when scanning CHECK expressions for column references."""

SUBQUERY_KEYWORDS = frozenset({"select", "exists"})
"""A CHECK containing any of these is kept but marked unparsed."""

EVIDENCE_MAX_CHARS_DEFAULT = 160
"""Default evidence excerpt length."""

DEFAULT_SOURCE_NAME = "<input>"
"""Source name used when linting an in-memory string."""

CONFIG_FILENAME = ".chronolint.yaml"
"""Project config file name, looked up in the project root."""
