"""
Configuration models and loading.

Pydantic models for astrograph configuration with multi-layer merging:
defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
    resolve_api_key,
)
from .models import AstrographConfig, BackendConfig, JournalConfig, QuizConfig

__all__ = [
    # Models
    "AstrographConfig",
    "BackendConfig",
    "JournalConfig",
    "QuizConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
    "resolve_api_key",
]
