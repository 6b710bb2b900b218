"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from astrograph.core.errors import ConfigurationError

from .models import AstrographConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: AstrographConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Get path to ~/.config/astrograph/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "astrograph" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .astrograph.json in the given directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".astrograph.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence. Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object, or None if missing, unreadable, or not an object
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(config_dict.get(section), dict):
        config_dict[section] = {}
    config_dict[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        ASTROGRAPH_BACKEND - overrides backend.name
        ASTROGRAPH_MODEL - overrides backend.model
        ASTROGRAPH_TIMEOUT - overrides backend.timeout_seconds
        ASTROGRAPH_QUIZ_QUESTIONS - overrides quiz.question_count
        ASTROGRAPH_JOURNAL - overrides journal.enabled

    Invalid values are reported and ignored.

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if backend_name := os.environ.get("ASTROGRAPH_BACKEND"):
        _set_nested(result, "backend", "name", backend_name)

    if model := os.environ.get("ASTROGRAPH_MODEL"):
        _set_nested(result, "backend", "model", model)

    if timeout_str := os.environ.get("ASTROGRAPH_TIMEOUT"):
        try:
            timeout = float(timeout_str)
            if timeout <= 0:
                logger.warning("ASTROGRAPH_TIMEOUT must be > 0, got %s, ignoring", timeout_str)
            else:
                _set_nested(result, "backend", "timeout_seconds", timeout)
        except ValueError:
            logger.warning("Invalid ASTROGRAPH_TIMEOUT value '%s', ignoring", timeout_str)

    if count_str := os.environ.get("ASTROGRAPH_QUIZ_QUESTIONS"):
        try:
            _set_nested(result, "quiz", "question_count", int(count_str))
        except ValueError:
            logger.warning("Invalid ASTROGRAPH_QUIZ_QUESTIONS value '%s', ignoring", count_str)

    if journal_str := os.environ.get("ASTROGRAPH_JOURNAL"):
        enabled = journal_str.lower() not in ("false", "0", "off", "")
        _set_nested(result, "journal", "enabled", enabled)

    return result


def get_default_config() -> dict[str, Any]:
    """Hardcoded defaults; the lowest configuration layer."""
    return {
        "backend": {"name": "gemini", "model": "gemini-3-flash-preview"},
        "quiz": {"question_count": 3},
        "journal": {"enabled": True},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> AstrographConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (ASTROGRAPH_*)
        2. Project config (.astrograph.json)
        3. User config (~/.config/astrograph/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .astrograph.json from (defaults to cwd)
        use_cache: If True, return cached config from a previous load

    Returns:
        Validated AstrographConfig instance

    Raises:
        ConfigurationError: If the merged config fails validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    try:
        config = AstrographConfig(**merged)
    except ValueError as e:
        # pydantic's ValidationError subclasses ValueError
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    _config_cache = config
    return config


def resolve_api_key(config: AstrographConfig) -> str:
    """
    Find the backend API key in the environment.

    Args:
        config: Loaded configuration naming the env vars to search

    Returns:
        The first non-empty key found

    Raises:
        ConfigurationError: If none of the configured variables is set
    """
    for name in config.backend.api_key_env:
        if value := os.environ.get(name, "").strip():
            return value
    names = ", ".join(config.backend.api_key_env)
    raise ConfigurationError(f"No API key found. Set one of: {names}")


def clear_cache() -> None:
    """Clear the cached configuration (useful in tests)."""
    global _config_cache
    _config_cache = None
