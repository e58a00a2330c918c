"""Tests for config/models.py."""

import pytest
from pydantic import ValidationError

from chronolint.config.models import (
    DEFAULT_EVENT_VERBS,
    ChronolintConfig,
    ConventionsConfig,
    LintConfig,
    LoggingConfig,
)


class TestDefaults:
    def test_root_defaults(self) -> None:
        config = ChronolintConfig()
        assert config.logging.level == "WARNING"
        assert config.lint.strict is False
        assert config.lint.format == "text"
        assert config.lint.max_workers == 4

    def test_default_verbs_cover_documented_list(self) -> None:
        for verb in ("created", "shipped", "delivered", "expired", "placed"):
            assert verb in DEFAULT_EVENT_VERBS

    def test_scheduling_names(self) -> None:
        conventions = ConventionsConfig()
        assert conventions.scheduling_names == ["scheduled_for", "due_at", "deadline_at"]

    def test_default_factories_are_independent(self) -> None:
        a = ConventionsConfig()
        b = ConventionsConfig()
        a.event_verbs.append("audited")
        assert "audited" not in b.event_verbs


class TestValidation:
    def test_max_workers_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LintConfig(max_workers=0)

    def test_evidence_max_chars_minimum(self) -> None:
        with pytest.raises(ValidationError):
            LintConfig(evidence_max_chars=5)

    def test_format_choice(self) -> None:
        with pytest.raises(ValidationError):
            LintConfig(format="xml")  # type: ignore[arg-type]

    def test_sequence_needs_two_verbs(self) -> None:
        with pytest.raises(ValidationError):
            ConventionsConfig(chronology_sequences=[["placed"]])

    def test_log_level_choice(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")  # type: ignore[arg-type]
