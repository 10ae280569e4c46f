"""
Environment + project-root helpers.

Local runs keep overrides such as `CONTEXTSCORE_LOG_LEVEL` or `CONTEXTSCORE_CONFIG_PATH`
in a repo-local `.env`, and the CLI takes relative file paths (`--places data/places.json`).
Both need a stable notion of "the project root" that does not depend on the directory the
API server or CLI happens to be started from.

Resolution order for the root:
1. `CONTEXTSCORE_PROJECT_ROOT`
2. the directory of `CONTEXTSCORE_ENV_FILE`
3. the nearest parent of the working directory holding `.env`, `.git` or `pyproject.toml`
4. the working directory
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", ".git", "pyproject.toml")


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value).expanduser().resolve() if value else None


@lru_cache
def get_project_root() -> Path:
    """Return the best-guess project root directory (cached)."""
    root = _env_path("CONTEXTSCORE_PROJECT_ROOT")
    if root is not None:
        return root
    env_file = _env_path("CONTEXTSCORE_ENV_FILE")
    if env_file is not None:
        return env_file.parent

    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present; returns the loaded path (or None).

    Variables already set in the process environment always win.
    """
    env_path = _env_path("CONTEXTSCORE_ENV_FILE") or get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
