"""Tests for specslice.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from specslice.config import (
    _atomic_write,
    config_keys,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from specslice.exceptions import ConfigError
from specslice.models import DtoLanguage, EncodingFormat, GlobalConfig, TagSort


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specslice.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "specslice"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specslice.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "custom"))

        assert get_config_dir() == tmp_path / "custom" / "specslice"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specslice.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "specslice"
        assert result.is_dir()

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specslice.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".specslice"
        assert get_data_dir() == tmp_path / ".specslice" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "config.json"
        _atomic_write(target, "{}")
        assert target.read_text(encoding="utf-8") == "{}"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        target.write_text("old", encoding="utf-8")
        _atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        with patch("specslice.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.encoding.format is EncodingFormat.TABULAR
        assert config.dto.language is DtoLanguage.TYPESCRIPT
        assert config.tags.sort is TagSort.DOCUMENT

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        config = GlobalConfig.model_validate({"dto": {"language": "go"}})
        save_global_config(config)
        assert global_config_path() == isolated_config / "config" / "specslice" / "config.json"
        assert load_global_config().dto.language is DtoLanguage.GO

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        global_config_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_value_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"dto": {"language": "cobol"}})
        with pytest.raises(ConfigError):
            load_global_config()


class TestSetConfigValue:
    def test_sets_nested_value(self) -> None:
        config = set_config_value(GlobalConfig(), "encoding.format", "json")
        assert config.encoding.format is EncodingFormat.TREE

    def test_original_is_unchanged(self) -> None:
        original = GlobalConfig()
        set_config_value(original, "tags.sort", "count")
        assert original.tags.sort is TagSort.DOCUMENT

    @pytest.mark.parametrize("key", ["dto", "dto.colour", "nope.language", ""])
    def test_unknown_key(self, key: str) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value(GlobalConfig(), key, "x")

    def test_invalid_value(self) -> None:
        with pytest.raises(ConfigError, match="Invalid value for dto.language"):
            set_config_value(GlobalConfig(), "dto.language", "cobol")

    def test_config_keys(self) -> None:
        keys = config_keys()
        assert "encoding.format" in keys
        assert "encoding.json_indent" in keys
        assert "dto.language" in keys
        assert "tags.sort" in keys


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_returns_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specslice.json", {"dto": {"language": "kotlin"}})
        assert load_project_config() == {"dto": {"language": "kotlin"}}

    def test_rejects_non_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specslice.json", ["kotlin"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()

    def test_rejects_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "specslice.json").write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > project > global > defaults."""

    @pytest.fixture(autouse=True)
    def _isolate(self, isolated_config: Path) -> None:
        self.root = isolated_config

    def test_defaults(self) -> None:
        assert resolve_config() == GlobalConfig()

    def test_global_applies(self) -> None:
        save_global_config(GlobalConfig.model_validate({"tags": {"sort": "name"}}))
        assert resolve_config().tags.sort is TagSort.NAME

    def test_project_overrides_global(self) -> None:
        save_global_config(GlobalConfig.model_validate({"dto": {"language": "go"}}))
        _write_json(self.root / "specslice.json", {"dto": {"language": "kotlin"}})
        config = resolve_config()
        assert config.dto.language is DtoLanguage.KOTLIN
        assert config.encoding.format is EncodingFormat.TABULAR

    def test_env_overrides_project(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(self.root / "specslice.json", {"encoding": {"format": "toon"}})
        monkeypatch.setenv("SPECSLICE_FORMAT", "JSON")
        assert resolve_config().encoding.format is EncodingFormat.TREE

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECSLICE_LANGUAGE", "dart")
        monkeypatch.setenv("SPECSLICE_TAG_SORT", "count")
        config = resolve_config(cli_language="java", cli_sort="name")
        assert config.dto.language is DtoLanguage.JAVA
        assert config.tags.sort is TagSort.NAME

    def test_empty_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECSLICE_FORMAT", "")
        assert resolve_config().encoding.format is EncodingFormat.TABULAR

    def test_project_ignores_unknown_sections(self) -> None:
        _write_json(self.root / "specslice.json", {"extra": {"a": 1}, "tags": "name"})
        assert resolve_config() == GlobalConfig()

    def test_invalid_env_raises_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECSLICE_TAG_SORT", "random")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config()
