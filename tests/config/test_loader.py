"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and errors
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from chronolint.config.loader import _deep_merge, _load_yaml, load_config
from chronolint.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path):
    """Point the global config at a file that does not exist."""
    with patch("chronolint.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("lint:\n  strict: true\n")
        assert _load_yaml(yaml_file) == {"lint": {"strict": True}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("lint:\n  strict:\n    - invalid: [unclosed")
        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge(self) -> None:
        base = {"lint": {"strict": False, "format": "text"}}
        override = {"lint": {"strict": True}}
        assert _deep_merge(base, override) == {"lint": {"strict": True, "format": "text"}}

    def test_base_not_mutated(self) -> None:
        base = {"lint": {"strict": False}}
        _deep_merge(base, {"lint": {"strict": True}})
        assert base == {"lint": {"strict": False}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.lint.strict is False
        assert config.conventions.history_suffixes == ["_log", "_history"]

    def test_project_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".chronolint.yaml").write_text(
            "lint:\n  strict: true\n  disabled_rules: [R7-IndexCoverage]\n"
        )
        config = load_config(tmp_path)
        assert config.lint.strict is True
        assert config.lint.disabled_rules == ["R7-IndexCoverage"]

    def test_project_overrides_global(self, tmp_path: Path) -> None:
        global_path = tmp_path / "global.yaml"
        global_path.write_text("lint:\n  format: json\n  max_workers: 2\n")
        (tmp_path / ".chronolint.yaml").write_text("lint:\n  max_workers: 8\n")
        with patch("chronolint.config.loader.GLOBAL_CONFIG_PATH", global_path):
            config = load_config(tmp_path)
        assert config.lint.format == "json"
        assert config.lint.max_workers == 8

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".chronolint.yaml").write_text("lint:\n  strict: false\n")
        monkeypatch.setenv("CHRONOLINT__LINT__STRICT", "true")
        config = load_config(tmp_path)
        assert config.lint.strict is True

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHRONOLINT__LINT__MAX_WORKERS", "3")
        config = load_config(tmp_path, lint={"max_workers": 6})
        assert config.lint.max_workers == 6

    def test_explicit_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("conventions:\n  history_suffixes: [_audit]\n")
        config = load_config(config_file=config_file)
        assert config.conventions.history_suffixes == ["_audit"]

    def test_missing_explicit_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file=tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / ".chronolint.yaml").write_text("lint:\n  max_workers: 0\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "max_workers" in exc_info.value.details["field"]
