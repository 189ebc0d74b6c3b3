from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BASE_URL = "http://localhost:5000"


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


@dataclass(slots=True)
class ApiSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 30
    cookies: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class AppConfig:
    api: ApiSettings = field(default_factory=ApiSettings)
    log_level: str = "INFO"


def _as_int(value: Any, *, field_name: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer")

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _as_string_mapping(value: Any, *, field_name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{field_name} must be a mapping")
    return {str(key): str(item) for key, item in value.items()}


def _as_base_url(value: Any) -> str:
    base_url = str(value or "").strip()
    if not base_url:
        return DEFAULT_BASE_URL
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(f"api.base_url must be an http(s) URL, got: {base_url!r}")
    return base_url.rstrip("/")


def load_config(path: str | Path) -> AppConfig:
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle) or {}

    if not isinstance(parsed, dict):
        raise ConfigError("Config root must be a mapping")

    raw_api = parsed.get("api", {}) or {}
    if not isinstance(raw_api, dict):
        raise ConfigError("api must be a mapping")

    api_settings = ApiSettings(
        base_url=_as_base_url(raw_api.get("base_url")),
        timeout_seconds=_as_int(
            raw_api.get("timeout_seconds", 30),
            field_name="api.timeout_seconds",
            minimum=1,
        ),
        cookies=_as_string_mapping(raw_api.get("cookies"), field_name="api.cookies"),
    )

    return AppConfig(
        api=api_settings,
        log_level=str(parsed.get("log_level", "INFO")).upper(),
    )
