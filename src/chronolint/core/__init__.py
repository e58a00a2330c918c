"""Core module exports."""

from chronolint.core.errors import (
    ChronolintError,
    ConfigError,
    ErrorCode,
    LexError,
    ModelError,
    ParseError,
    RuleEvaluationError,
    SourceError,
)
from chronolint.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    run_context,
)
from chronolint.core.progress import progress, status

__all__ = [
    # Errors
    "ChronolintError",
    "ConfigError",
    "ErrorCode",
    "LexError",
    "ModelError",
    "ParseError",
    "RuleEvaluationError",
    "SourceError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_context",
    # Progress
    "progress",
    "status",
]
