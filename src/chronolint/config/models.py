"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CHRONOLINT__SECTION__KEY)
3. Project YAML (.chronolint.yaml)
4. Global YAML (~/.config/chronolint/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CHRONOLINT__<SECTION>__<KEY>=<VALUE>

Examples:
    CHRONOLINT__LOGGING__LEVEL=DEBUG
    CHRONOLINT__LINT__STRICT=true
    CHRONOLINT__LINT__MAX_WORKERS=8
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from chronolint.config.constants import EVIDENCE_MAX_CHARS_DEFAULT

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ReportFormat = Literal["text", "json"]

DEFAULT_EVENT_VERBS = [
    "created",
    "updated",
    "started",
    "ended",
    "placed",
    "confirmed",
    "shipped",
    "delivered",
    "cancelled",
    "published",
    "archived",
    "verified",
    "approved",
    "rejected",
    "submitted",
    "completed",
    "failed",
    "sent",
    "received",
    "expired",
]

DEFAULT_CHRONOLOGY_SEQUENCES = [
    ["placed", "confirmed", "shipped", "delivered"],
    ["submitted", "approved"],
    ["submitted", "rejected"],
    ["started", "ended"],
    ["started", "completed"],
    ["started", "failed"],
    ["sent", "received"],
    ["published", "archived"],
]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CHRONOLINT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Findings are the report, not log output.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LintConfig(BaseModel):
    """Run behaviour.

    Env vars:
        CHRONOLINT__LINT__STRICT: Treat warnings as failures
        CHRONOLINT__LINT__FORMAT: Report format (text, json)
        CHRONOLINT__LINT__MAX_WORKERS: Parallel workers for batch runs
    """

    strict: bool = Field(
        default=False,
        description="Exit non-zero when warnings are present.",
    )
    format: ReportFormat = Field(default="text", description="Report rendering.")
    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Rule ids to skip, e.g. ['R7-IndexCoverage'].",
    )
    max_workers: int = Field(
        default=4,
        description="Worker threads for batch runs. One schema model per input.",
    )
    evidence_max_chars: int = Field(
        default=EVIDENCE_MAX_CHARS_DEFAULT,
        description="Maximum length of the raw DDL excerpt attached to each finding.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("evidence_max_chars")
    @classmethod
    def validate_evidence_max_chars(cls, v: int) -> int:
        if v < 20:
            raise ValueError(f"evidence_max_chars must be >= 20, got {v}")
        return v


class ConventionsConfig(BaseModel):
    """Naming heuristics used by the classifier and rules.

    Names are compared in lower case.
    """

    event_verbs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_VERBS),
        description="Closed verb list for `{verb}_at` and `{noun}_{verb}_at` columns.",
    )
    scheduling_names: list[str] = Field(
        default_factory=lambda: ["scheduled_for", "due_at", "deadline_at"],
        description="Exact names classified as scheduling columns.",
    )
    scheduling_suffixes: list[str] = Field(
        default_factory=lambda: ["_for"],
        description="Name suffixes classified as scheduling columns.",
    )
    history_suffixes: list[str] = Field(
        default_factory=lambda: ["_log", "_history"],
        description="Table name suffixes exempt from audit-column presence.",
    )
    current_time_defaults: list[str] = Field(
        default_factory=lambda: [
            "CURRENT_TIMESTAMP",
            "NOW()",
            "transaction_timestamp()",
            "statement_timestamp()",
            "clock_timestamp()",
        ],
        description="Default expressions that stamp the current time.",
    )
    chronology_sequences: list[list[str]] = Field(
        default_factory=lambda: [list(s) for s in DEFAULT_CHRONOLOGY_SEQUENCES],
        description="Ordered verb lists; each adjacent pair present needs a CHECK.",
    )
    zone_exempt_types: list[str] = Field(
        default_factory=lambda: ["time with time zone", "interval"],
        description="Types accepted by R1 besides timestamptz.",
    )

    @field_validator("chronology_sequences")
    @classmethod
    def validate_sequences(cls, v: list[list[str]]) -> list[list[str]]:
        for seq in v:
            if len(seq) < 2:
                raise ValueError(f"Chronology sequence needs at least two verbs: {seq}")
        return v


class ChronolintConfig(BaseModel):
    """Root config model for type hints."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    lint: LintConfig = Field(default_factory=LintConfig)
    conventions: ConventionsConfig = Field(default_factory=ConventionsConfig)
