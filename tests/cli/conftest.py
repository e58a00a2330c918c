"""Shared fixtures for CLI tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """An empty project directory as cwd, with no global config."""
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    for name in ("CHRONOLINT__LINT__STRICT", "CHRONOLINT__LINT__FORMAT"):
        monkeypatch.delenv(name, raising=False)
    with patch("chronolint.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml"):
        yield root
