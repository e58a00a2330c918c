"""Lint models - findings and per-source results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chronolint.schema.builder import SchemaModel


class Severity(Enum):
    """Finding severity level."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Higher is more severe."""
        return _RANKS[self]

    @property
    def label(self) -> str:
        return self.value.upper()


_RANKS = {Severity.ERROR: 2, Severity.WARNING: 1, Severity.INFO: 0}


@dataclass(frozen=True)
class Finding:
    """A single rule outcome, immutable once produced."""

    rule_id: str
    severity: Severity
    table_name: str | None
    column_name: str | None
    message: str
    evidence: str = ""
    line: int | None = None
    source: str | None = None

    def with_source(self, source: str) -> Finding:
        return replace(self, source=source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "source": self.source,
            "table": self.table_name,
            "column": self.column_name,
            "line": self.line,
            "message": self.message,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class Summary:
    """Finding counts by severity."""

    errors: int = 0
    warnings: int = 0
    infos: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.infos

    def to_dict(self) -> dict[str, int]:
        return {"errors": self.errors, "warnings": self.warnings, "infos": self.infos}


@dataclass
class SourceResult:
    """Result of linting one input unit."""

    name: str
    model: SchemaModel
    findings: list[Finding] = field(default_factory=list)

    @property
    def analyzed(self) -> bool:
        return self.model.analyzable

    @property
    def has_errors(self) -> bool:
        return any(f.severity is Severity.ERROR for f in self.findings)
