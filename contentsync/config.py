"""Configuration loading for contentsync (.contentsync.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .normalizers.dates import DEFAULT_DATE_PATTERN, DEFAULT_TIMEZONE
from .queries import QueryContext

CONFIG_FILENAME = ".contentsync.yml"
DEFAULT_FRESHNESS_SECONDS = 300.0


@dataclass
class ServerConfig:
    """Content server endpoint settings."""

    url: Optional[str] = None
    health_url: Optional[str] = None
    request_timeout: float = 30.0
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class CacheConfig:
    """Where responses and refresh timestamps are persisted."""

    directory: Path = Path(".contentsync")
    responses_file: str = "responses.json"
    staleness_file: str = "refresh_times.json"

    @property
    def responses_path(self) -> Path:
        return self.directory / self.responses_file

    @property
    def staleness_path(self) -> Path:
        return self.directory / self.staleness_file


@dataclass
class FreshnessConfig:
    """Freshness windows, in seconds, per resource key."""

    default_seconds: float = DEFAULT_FRESHNESS_SECONDS
    windows: Dict[str, float] = field(default_factory=dict)

    def window_for(self, resource_key: str) -> timedelta:
        seconds = self.windows.get(resource_key, self.default_seconds)
        return timedelta(seconds=seconds)


@dataclass
class FilterConfig:
    """Feature flags for list filter facets."""

    news: bool = False
    events: bool = True

    def to_context(self) -> QueryContext:
        return QueryContext(show_news_filter=self.news, show_events_filter=self.events)


@dataclass
class LocaleConfig:
    """Date formatting for subtitles."""

    date_pattern: str = DEFAULT_DATE_PATTERN
    timezone: str = DEFAULT_TIMEZONE


@dataclass
class SyncConfig:
    """Represents the settings defined in .contentsync.yml."""

    root: Path
    server: ServerConfig = field(default_factory=ServerConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    freshness: FreshnessConfig = field(default_factory=FreshnessConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    locale: LocaleConfig = field(default_factory=LocaleConfig)


def load_config(config_path: Path) -> SyncConfig:
    """Load configuration from disk, applying environment overrides."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    server_data = _as_dict(data.get("server"))
    server = ServerConfig(
        url=_as_str(server_data.get("url")),
        health_url=_as_str(server_data.get("health_url")),
        request_timeout=_as_float(server_data.get("request_timeout")) or 30.0,
        headers={
            str(key): str(value)
            for key, value in _as_dict(server_data.get("headers")).items()
            if value is not None
        },
    )

    cache_data = _as_dict(data.get("cache"))
    cache = CacheConfig()
    directory = _as_str(cache_data.get("directory"))
    cache.directory = root / (directory or ".contentsync")
    cache.responses_file = _as_str(cache_data.get("responses_file")) or cache.responses_file
    cache.staleness_file = _as_str(cache_data.get("staleness_file")) or cache.staleness_file

    freshness_data = _as_dict(data.get("freshness"))
    freshness = FreshnessConfig()
    default_seconds = _as_float(freshness_data.get("default_seconds"))
    if default_seconds is not None:
        freshness.default_seconds = default_seconds
    for key, value in _as_dict(freshness_data.get("windows")).items():
        seconds = _as_float(value)
        if seconds is not None:
            freshness.windows[str(key)] = seconds

    filter_data = _as_dict(data.get("filters"))
    filters = FilterConfig()
    news = _as_bool(filter_data.get("news"))
    events = _as_bool(filter_data.get("events"))
    if news is not None:
        filters.news = news
    if events is not None:
        filters.events = events

    locale_data = _as_dict(data.get("locale"))
    locale = LocaleConfig(
        date_pattern=_as_str(locale_data.get("date_pattern")) or DEFAULT_DATE_PATTERN,
        timezone=_as_str(locale_data.get("timezone")) or DEFAULT_TIMEZONE,
    )

    config = SyncConfig(
        root=root,
        server=server,
        cache=cache,
        freshness=freshness,
        filters=filters,
        locale=locale,
    )
    _apply_env_overrides(config)
    return config


def _apply_env_overrides(config: SyncConfig) -> None:
    url = os.getenv("CONTENTSYNC_SERVER_URL")
    if url:
        config.server.url = url
    seconds = _as_float(os.getenv("CONTENTSYNC_FRESHNESS_SECONDS"))
    if seconds is not None:
        config.freshness.default_seconds = seconds


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None
