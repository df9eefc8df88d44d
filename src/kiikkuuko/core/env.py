"""
Project-root and `.env` helpers.

Relative settings paths (`storage.dir`, `snapshot.path`) resolve against the project
root, not the working directory, so the CLI and the API server share one storage dir.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


@lru_cache
def _project_root() -> Path:
    override = os.getenv("KIIKKUUKO_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / "pyproject.toml").is_file() or (candidate / ".env").is_file():
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<project root>/.env` once, without overriding variables already set."""
    env_path = _project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else (_project_root() / p).resolve()
