"""Schema model building and column classification."""

from chronolint.schema.builder import DanglingReference, SchemaModel, build_schema
from chronolint.schema.classifier import ColumnCategory, classify, event_parts

__all__ = [
    "ColumnCategory",
    "DanglingReference",
    "SchemaModel",
    "build_schema",
    "classify",
    "event_parts",
]
