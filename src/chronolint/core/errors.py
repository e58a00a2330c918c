"""chronolint error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Source (input read)
- 4xxx: Lex / Parse
- 5xxx: Model
- 6xxx: Rule evaluation

Only source and config errors abort a run. Everything else is converted
into a Finding at the stage where it is raised.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Source (3xxx)
    SOURCE_NOT_FOUND = 3001
    SOURCE_UNREADABLE = 3002
    SOURCE_NOT_UTF8 = 3003

    # Lex / Parse (4xxx)
    UNTERMINATED_LITERAL = 4001
    PARSE_UNRECOGNIZED = 4101

    # Model (5xxx)
    DUPLICATE_TABLE = 5001
    DANGLING_REFERENCE = 5002

    # Rule evaluation (6xxx)
    RULE_UNDECIDABLE = 6001


@dataclass(frozen=True, slots=True)
class ChronolintError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_UNRECOGNIZED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ChronolintError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SourceError(ChronolintError):
    """DDL source could not be read. Fatal: aborts before parsing."""

    @classmethod
    def not_found(cls, path: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"DDL source not found: {path}",
            details={"path": path},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_UNREADABLE,
            message=f"Cannot read DDL source {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def not_utf8(cls, path: str, offset: int) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_NOT_UTF8,
            message=f"DDL source {path} is not valid UTF-8 (byte {offset})",
            details={"path": path, "offset": offset},
        )


class LexError(ChronolintError):
    """Unterminated quote, comment or dollar-quoted block."""

    @classmethod
    def unterminated(cls, literal: str, offset: int, opener: str) -> "LexError":
        return cls(
            code=ErrorCode.UNTERMINATED_LITERAL,
            message=f"Unterminated {literal} starting at offset {offset}",
            details={"literal": literal, "offset": offset, "opener": opener},
        )

    @property
    def offset(self) -> int:
        return int(self.details.get("offset", 0))

    @property
    def opener(self) -> str:
        return str(self.details.get("opener", ""))


class ParseError(ChronolintError):
    """Statement grammar could not be recognized."""

    @classmethod
    def unrecognized(cls, reason: str, offset: int, table: str | None = None) -> "ParseError":
        details: dict[str, Any] = {"reason": reason, "offset": offset}
        if table is not None:
            details["table"] = table
        return cls(
            code=ErrorCode.PARSE_UNRECOGNIZED,
            message=f"Cannot parse statement: {reason}",
            details=details,
        )

    @property
    def table(self) -> str | None:
        return self.details.get("table")

    @property
    def reason(self) -> str:
        return str(self.details.get("reason", ""))

    @property
    def offset(self) -> int:
        return int(self.details.get("offset", 0))


class ModelError(ChronolintError):
    """Structural problems found while assembling the schema model."""

    @classmethod
    def duplicate_table(cls, table: str) -> "ModelError":
        return cls(
            code=ErrorCode.DUPLICATE_TABLE,
            message=f"Table '{table}' is declared more than once",
            details={"table": table},
        )

    @classmethod
    def dangling_reference(cls, kind: str, name: str, table: str) -> "ModelError":
        return cls(
            code=ErrorCode.DANGLING_REFERENCE,
            message=f"{kind} '{name}' references undeclared table '{table}'",
            details={"kind": kind, "name": name, "table": table},
        )


class RuleEvaluationError(ChronolintError):
    """A rule cannot decide pass or fail (e.g. an unparsed CHECK)."""

    @classmethod
    def undecidable(cls, rule_id: str, reason: str, **details: Any) -> "RuleEvaluationError":
        return cls(
            code=ErrorCode.RULE_UNDECIDABLE,
            message=reason,
            details={"rule_id": rule_id, **details},
        )
