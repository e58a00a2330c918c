"""Tests for progress and status helpers."""

import importlib

import pytest

from chronolint.core.progress import is_console_suppressed, progress, status, suppress_console_logs

progress_module = importlib.import_module("chronolint.core.progress")


class TestProgress:
    def test_non_tty_yields_all_items(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(progress_module, "_is_tty", lambda: False)
        assert list(progress([1, 2, 3], desc="Linting")) == [1, 2, 3]

    def test_small_batch_skips_bar_on_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(progress_module, "_is_tty", lambda: True)
        assert list(progress(range(5), desc="Linting")) == [0, 1, 2, 3, 4]

    def test_generator_without_length(self) -> None:
        items = (i for i in range(3))
        assert list(progress(items)) == [0, 1, 2]


class TestSuppressConsoleLogs:
    def test_flag_is_scoped(self) -> None:
        assert is_console_suppressed() is False
        with suppress_console_logs():
            assert is_console_suppressed() is True
        assert is_console_suppressed() is False


class TestStatus:
    def test_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("No .sql files found", style="warning")
        assert "No .sql files found" in capsys.readouterr().err
