"""Tests for configuration management."""

from pathlib import Path

import pytest

from figma_sync.config import (
    EnvConfig,
    EnvVar,
    LoaderConfig,
    get_environment,
    get_environment_info,
    list_environment_variables,
    loader_config_from_environment,
)


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("FIGMA_SYNC_TEMPLATES_DIR", raising=False)
        result = get_environment(EnvVar.TEMPLATES_DIR)
        assert result == Path("figma-sync/templates")

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("FIGMA_SYNC_SCHEMA_PATH", "from-env.json")
        result = get_environment(EnvVar.SCHEMA_PATH, override=Path("override.json"))
        assert result == Path("override.json")

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch):
        """Path values are converted from strings."""
        monkeypatch.setenv("FIGMA_SYNC_MANIFEST_PATH", "docs/manifest.json")
        result = get_environment(EnvVar.MANIFEST_PATH)
        assert result == Path("docs/manifest.json")
        assert isinstance(result, Path)

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean conversion accepts the usual spellings."""
        for value in ("true", "1", "yes", "TRUE"):
            monkeypatch.setenv("FIGMA_SYNC_STRICT", value)
            assert get_environment(EnvVar.STRICT) is True
        for value in ("false", "0", "no"):
            monkeypatch.setenv("FIGMA_SYNC_STRICT", value)
            assert get_environment(EnvVar.STRICT) is False

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean values fall back to the default."""
        monkeypatch.setenv("FIGMA_SYNC_STRICT", "maybe")
        assert get_environment(EnvVar.STRICT) is False


class TestIntrospection:
    """Tests for metadata helpers."""

    @pytest.mark.unit
    def test_get_environment_info(self):
        """Info exposes the underlying EnvConfig."""
        info = get_environment_info(EnvVar.LOG_LEVEL)
        assert isinstance(info, EnvConfig)
        assert info.name == "FIGMA_SYNC_LOG_LEVEL"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Filtering by category returns only matching members."""
        paths = list_environment_variables("paths")
        assert EnvVar.SCHEMA_PATH in paths
        assert EnvVar.STRICT not in paths
        assert len(list_environment_variables()) == len(EnvVar)


class TestLoaderConfig:
    """Tests for LoaderConfig construction."""

    @pytest.mark.unit
    def test_default_ignores_unknown_keys(self):
        """Default config is forward-compatible."""
        assert LoaderConfig().ignore_unknown_keys is True

    @pytest.mark.unit
    def test_from_environment_strict(self, monkeypatch):
        """FIGMA_SYNC_STRICT turns off unknown-key tolerance."""
        monkeypatch.setenv("FIGMA_SYNC_STRICT", "1")
        assert loader_config_from_environment() == LoaderConfig(ignore_unknown_keys=False)

    @pytest.mark.unit
    def test_from_environment_override(self, monkeypatch):
        """Explicit strict flag wins over the environment."""
        monkeypatch.setenv("FIGMA_SYNC_STRICT", "1")
        config = loader_config_from_environment(strict=False)
        assert config.ignore_unknown_keys is True
