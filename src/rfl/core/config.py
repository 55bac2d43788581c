from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from rfl.core.errors import ConfigError

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_STORAGE_KEY = "rfl90-lineups"
DEFAULT_FORMATION_ID = "2-3-1"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class RuntimePaths:
    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def storage_path(self) -> Path:
        return self.root / "data" / "local_storage.sqlite3"

    @property
    def duckdb_path(self) -> Path:
        return self.root / "data" / "analytics.duckdb"

    @property
    def export_dir(self) -> Path:
        return self.root / "exports"

    @property
    def log_dir(self) -> Path:
        return self.root / "logs"


@dataclass(slots=True)
class RuntimeSettings:
    root: Path
    api_url: str = DEFAULT_API_URL
    http_timeout: float = 10.0
    storage_key: str = DEFAULT_STORAGE_KEY
    min_filled_slots: int = 7
    default_formation: str = DEFAULT_FORMATION_ID
    suggestion_count: int = 5
    log_level: str = "INFO"
    seed: int | None = None

    @property
    def paths(self) -> RuntimePaths:
        return RuntimePaths(self.root)

    def validate(self) -> None:
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"api_url must be an http(s) URL, got '{self.api_url}'")
        if self.http_timeout <= 0:
            raise ConfigError("http_timeout must be positive")
        if not self.storage_key:
            raise ConfigError("storage_key must not be empty")
        if self.min_filled_slots < 1:
            raise ConfigError("min_filled_slots must be at least 1")
        if self.suggestion_count < 0:
            raise ConfigError("suggestion_count must not be negative")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log level '{self.log_level}'")

    def with_overrides(self, **overrides: object) -> RuntimeSettings:
        updated = replace(self, **{k: v for k, v in overrides.items() if v is not None})
        updated.validate()
        return updated

    @classmethod
    def from_env(cls, root: Path, environ: Mapping[str, str] | None = None) -> RuntimeSettings:
        env = os.environ if environ is None else environ
        settings = cls(
            root=root,
            api_url=env.get("RFL_API_URL", DEFAULT_API_URL).rstrip("/"),
            http_timeout=_parse_number(env, "RFL_HTTP_TIMEOUT", 10.0, float),
            storage_key=env.get("RFL_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            min_filled_slots=_parse_number(env, "RFL_MIN_FILLED_SLOTS", 7, int),
            default_formation=env.get("RFL_DEFAULT_FORMATION", DEFAULT_FORMATION_ID),
            log_level=env.get("RFL_LOG_LEVEL", "INFO").upper(),
        )
        settings.validate()
        return settings


def _parse_number(env: Mapping[str, str], key: str, default, kind):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a {kind.__name__}, got '{raw}'") from exc
