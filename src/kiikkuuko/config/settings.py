# src/kiikkuuko/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/kiikkuuko/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `KIIKKUUKO_CONFIG_PATH`
- a small whitelist of environment variables (e.g., `KIIKKUUKO_LOG_LEVEL`)

Design rule:
- Endpoints, query parameters and storage locations live in YAML, not in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from kiikkuuko.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `kiikkuuko.config`."""
    text = resources.files("kiikkuuko.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Kiikkuuko"
    language: str = "fi"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class ServiceMapSettings(BaseModel):
    base_url: str = "https://api.hel.fi/servicemap/v2/unit/"
    params: dict[str, Any] = Field(default_factory=dict)
    max_pages: int = Field(1, ge=1)
    refresh_on_start: bool = True


class SnapshotSettings(BaseModel):
    path: str | None = None


class StorageSettings(BaseModel):
    dir: str = ".kiikkuuko"
    favorites_key: str = "favorites"


class LocationSettings(BaseModel):
    stop_after_first_fix: bool = True


class MapSettings(BaseModel):
    span_delta: float = Field(0.05, gt=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    servicemap: ServiceMapSettings = Field(default_factory=ServiceMapSettings)
    snapshot: SnapshotSettings = Field(default_factory=SnapshotSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    map: MapSettings = Field(default_factory=MapSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small; everything else belongs in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)
    storage_dir = os.getenv("KIIKKUUKO_STORAGE_DIR")
    if storage_dir:
        data.setdefault("storage", {})["dir"] = storage_dir

    snapshot_path = os.getenv("KIIKKUUKO_SNAPSHOT_PATH")
    if snapshot_path:
        data.setdefault("snapshot", {})["path"] = snapshot_path

    log_level = os.getenv("KIIKKUUKO_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("KIIKKUUKO_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
