"""Config module exports."""

from chronolint.config.loader import ChronolintSettings, load_config
from chronolint.config.models import (
    ChronolintConfig,
    ConventionsConfig,
    LintConfig,
    LoggingConfig,
)

__all__ = [
    "load_config",
    "ChronolintConfig",
    "ChronolintSettings",
    "ConventionsConfig",
    "LintConfig",
    "LoggingConfig",
]
