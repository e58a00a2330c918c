"""chronolint - timestamp column convention linter for PostgreSQL DDL."""

__version__ = "0.1.0"
