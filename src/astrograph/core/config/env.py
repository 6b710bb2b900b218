"""
Layered .env loading for API keys and ASTROGRAPH_* overrides.

Files are applied lowest layer first:

    user   $XDG_CONFIG_HOME/astrograph/.env
    project ./.env, then ./.env.local

A later file replaces a value an earlier file set. Nothing replaces a
variable that was already in the process environment before loading.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def default_user_env_paths() -> list[Path]:
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return [xdg_home / "astrograph" / ".env"]


def default_project_env_paths(project_dir: Path) -> list[Path]:
    return [project_dir / ".env", project_dir / ".env.local"]


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, Path]:
    """
    Apply user and project .env files to os.environ.

    Args:
        project_dir: Base directory for the project files (defaults to cwd)
        user_env_paths: Override the user-level files
        project_env_paths: Override the project-level files

    Returns:
        Each variable this call set, mapped to the file its value came from.
        Values are never returned so callers can log the result safely.
    """
    if user_env_paths is None:
        user_env_paths = default_user_env_paths()
    if project_env_paths is None:
        project_env_paths = default_project_env_paths(project_dir or Path.cwd())

    preexisting = set(os.environ)
    sources: dict[str, Path] = {}

    for path in [*map(Path, user_env_paths), *map(Path, project_env_paths)]:
        if not path.is_file():
            continue
        for name, value in dotenv_values(path).items():
            if name is None or value is None or name in preexisting:
                continue
            os.environ[name] = value
            sources[name] = path

    for name, path in sorted(sources.items()):
        logger.debug("Loaded %s from %s", name, path)
    return sources
