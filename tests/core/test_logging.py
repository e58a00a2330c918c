"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest

from chronolint.config.models import LoggingConfig, LogOutputConfig
from chronolint.core.logging import (
    ConsoleSuppressingFilter,
    configure_logging,
    get_log_file_path,
    get_logger,
    get_run_id,
    run_context,
)
from chronolint.core.progress import suppress_console_logs
from chronolint.lint.ops import lint_batch


class TestRunContext:
    """Run ID context variable tests."""

    def test_given_run_id_when_bound_then_can_retrieve(self) -> None:
        """Run ID is visible inside the block and gone after it."""
        # When
        with run_context("run-123") as rid:
            # Then
            assert rid == "run-123"
            assert get_run_id() == "run-123"
        assert get_run_id() is None

    def test_given_no_id_when_bound_then_generates_hex(self) -> None:
        with run_context() as rid:
            assert len(rid) == 12
            int(rid, 16)

    def test_nested_blocks_restore_outer_id(self) -> None:
        with run_context("outer"):
            with run_context("inner"):
                assert get_run_id() == "inner"
            assert get_run_id() == "outer"


class TestConfigureLogging:
    """Logging configuration tests."""

    def teardown_method(self) -> None:
        logging.getLogger().handlers.clear()

    def test_simple_level_sets_root_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_default_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_file_output_writes_json(self, tmp_path: Path) -> None:
        """A JSON file output receives events with their context."""
        # Given
        log_file = tmp_path / "logs" / "chronolint.log"
        config = LoggingConfig(
            level="INFO",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When
        configure_logging(config=config)
        with run_context("abc123"):
            get_logger("test").info("batch_complete", sources=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        assert get_log_file_path() == log_file
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "batch_complete"
        assert record["sources"] == 2
        assert record["run_id"] == "abc123"

    def test_console_only_has_no_log_file(self) -> None:
        configure_logging(config=LoggingConfig())
        assert get_log_file_path() is None

    def test_batch_workers_share_one_run_id(self, tmp_path: Path) -> None:
        # Given a debug-level JSON log file
        log_file = tmp_path / "chronolint.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        # When two inputs are linted on worker threads
        with run_context("batch-1"):
            lint_batch({"a.sql": "CREATE TABLE a (id int);", "b.sql": "CREATE TABLE b (id int);"}, max_workers=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then every event carries the caller's run id
        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        registered = [r for r in records if r["event"] == "table_registered"]
        assert sorted(r["table"] for r in registered) == ["a", "b"]
        assert {r["run_id"] for r in records} == {"batch-1"}


class TestConsoleSuppressingFilter:
    def test_passes_when_not_suppressed(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert ConsoleSuppressingFilter().filter(record) is True

    def test_blocks_while_suppressed(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        with suppress_console_logs():
            assert ConsoleSuppressingFilter().filter(record) is False


class TestLogOutputConfig:
    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValueError):
            LogOutputConfig(destination="relative/file.log")
