"""
Unit tests for configuration loader.

Tests multi-layer config merging, environment variable overrides,
caching, XDG directory handling and API key resolution.
"""

import json
from pathlib import Path

import pytest

from astrograph.core.config import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
    resolve_api_key,
)
from astrograph.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from astrograph.core.config.models import AstrographConfig
from astrograph.core.errors import ConfigurationError

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        """Nested dicts are merged, not replaced."""
        base = {"backend": {"name": "gemini", "model": "a"}, "quiz": {"question_count": 3}}
        override = {"backend": {"model": "b"}}
        result = deep_merge(base, override)
        assert result == {
            "backend": {"name": "gemini", "model": "b"},
            "quiz": {"question_count": 3},
        }

    def test_override_replaces_non_dict(self):
        """Non-dict values are replaced outright."""
        result = deep_merge({"a": [1, 2, 3]}, {"a": [4]})
        assert result == {"a": [4]}

    def test_base_is_not_mutated(self):
        base = {"a": 1}
        deep_merge(base, {"a": 2})
        assert base == {"a": 1}


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_load_existing_file(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"quiz": {"question_count": 5}}))
        assert load_json_file(config_file) == {"quiz": {"question_count": 5}}

    def test_load_nonexistent_file(self, tmp_path):
        assert load_json_file(tmp_path / "missing.json") is None

    def test_load_invalid_json_returns_none(self, tmp_path, caplog):
        """Invalid JSON is logged and skipped."""
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        assert load_json_file(bad) is None
        assert "Failed to parse config" in caplog.text

    def test_load_non_object_returns_none(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestPaths:
    """Test XDG and project path helpers."""

    def test_xdg_config_home_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        assert get_xdg_config_home() == tmp_path / "cfg"

    def test_xdg_config_home_default(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_user_config_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_user_config_path() == tmp_path / "astrograph" / "config.json"

    def test_project_config_path(self, tmp_path):
        assert get_project_config_path(tmp_path) == tmp_path / ".astrograph.json"


# ==============================================================================
# Environment Override Tests
# ==============================================================================


class TestApplyEnvOverrides:
    """Test ASTROGRAPH_* environment variable overrides."""

    def test_model_and_backend(self, monkeypatch):
        monkeypatch.setenv("ASTROGRAPH_BACKEND", "other")
        monkeypatch.setenv("ASTROGRAPH_MODEL", "gemini-2.5-flash")
        result = apply_env_overrides(get_default_config())
        assert result["backend"]["name"] == "other"
        assert result["backend"]["model"] == "gemini-2.5-flash"

    def test_quiz_questions(self, monkeypatch):
        monkeypatch.setenv("ASTROGRAPH_QUIZ_QUESTIONS", "5")
        assert apply_env_overrides(get_default_config())["quiz"]["question_count"] == 5

    def test_invalid_quiz_questions_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("ASTROGRAPH_QUIZ_QUESTIONS", "many")
        result = apply_env_overrides(get_default_config())
        assert result["quiz"]["question_count"] == 3
        assert "Invalid ASTROGRAPH_QUIZ_QUESTIONS" in caplog.text

    def test_timeout(self, monkeypatch):
        monkeypatch.setenv("ASTROGRAPH_TIMEOUT", "12.5")
        assert apply_env_overrides(get_default_config())["backend"]["timeout_seconds"] == 12.5

    def test_non_positive_timeout_ignored(self, monkeypatch):
        monkeypatch.setenv("ASTROGRAPH_TIMEOUT", "0")
        assert "timeout_seconds" not in apply_env_overrides(get_default_config())["backend"]

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("1", True)])
    def test_journal(self, monkeypatch, value, expected):
        monkeypatch.setenv("ASTROGRAPH_JOURNAL", value)
        assert apply_env_overrides(get_default_config())["journal"]["enabled"] is expected


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test layered loading and caching."""

    def test_defaults(self, tmp_path):
        config = load_config(project_dir=tmp_path, use_cache=False)
        assert isinstance(config, AstrographConfig)
        assert config.backend.name == "gemini"
        assert config.backend.model == "gemini-3-flash-preview"
        assert config.quiz.question_count == 3
        assert config.journal.enabled is True

    def test_precedence(self, tmp_path, monkeypatch):
        """env > project > user > defaults."""
        user_path = get_user_config_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text(
            json.dumps({"backend": {"model": "user-model"}, "quiz": {"question_count": 4}})
        )
        (tmp_path / ".astrograph.json").write_text(json.dumps({"quiz": {"question_count": 6}}))
        monkeypatch.setenv("ASTROGRAPH_MODEL", "env-model")

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.backend.model == "env-model"
        assert config.quiz.question_count == 6

    def test_backend_as_string(self, tmp_path):
        (tmp_path / ".astrograph.json").write_text(json.dumps({"backend": "gemini"}))
        config = load_config(project_dir=tmp_path, use_cache=False)
        assert config.backend.name == "gemini"

    def test_invalid_config_raises_configuration_error(self, tmp_path):
        (tmp_path / ".astrograph.json").write_text(json.dumps({"quiz": {"question_count": 0}}))
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(project_dir=tmp_path, use_cache=False)

    def test_cache(self, tmp_path):
        first = load_config(project_dir=tmp_path)
        (tmp_path / ".astrograph.json").write_text(json.dumps({"quiz": {"question_count": 7}}))
        assert load_config(project_dir=tmp_path) is first

        clear_cache()
        assert load_config(project_dir=tmp_path).quiz.question_count == 7


class TestResolveApiKey:
    """Test credential lookup."""

    def test_first_set_variable_wins(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        monkeypatch.setenv("API_KEY", "generic-key")
        assert resolve_api_key(AstrographConfig()) == "google-key"

    def test_gemini_key_preferred(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("API_KEY", "generic-key")
        assert resolve_api_key(AstrographConfig()) == "gemini-key"

    def test_blank_value_is_missing(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "   ")
        with pytest.raises(ConfigurationError, match="No API key found"):
            resolve_api_key(AstrographConfig())

    def test_missing_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_api_key(AstrographConfig())
        assert "GEMINI_API_KEY" in str(exc_info.value)
