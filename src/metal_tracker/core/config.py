"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from metal_tracker.core.exceptions import ConfigError
from metal_tracker.core.models import SourceProvider


class SourceConfig(BaseModel):
    """Price source configuration."""

    model_config = ConfigDict(frozen=True)

    provider: SourceProvider = SourceProvider.MOCK
    currency: str = "INR"
    api_key: str | None = None
    base_url: str = "https://www.goldapi.io/api"
    request_timeout: float = 15.0
    quote_delay: float = 0.8
    history_delay: float = 0.4

    @field_validator("currency")
    @classmethod
    def currency_is_iso_code(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError(f"currency must be a 3-letter ISO code, got {v!r}")
        return v.upper()

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    @field_validator("quote_delay", "history_delay")
    @classmethod
    def delay_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("mock delays must be >= 0")
        return v

    @model_validator(mode="after")
    def api_key_required_for_goldapi(self) -> SourceConfig:
        if self.provider == SourceProvider.GOLDAPI and not self.api_key:
            raise ValueError("api_key is required when provider is 'goldapi'")
        return self


class CacheConfig(BaseModel):
    """Quote cache configuration."""

    model_config = ConfigDict(frozen=True)

    # Share one in-flight fetch per key between concurrent callers.
    single_flight: bool = False


class TrackerConfig(BaseModel):
    """Root configuration for the entire metal-tracker system."""

    model_config = ConfigDict(frozen=True)

    source: SourceConfig = SourceConfig()
    cache: CacheConfig = CacheConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "METAL_TRACKER_",
) -> TrackerConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (METAL_TRACKER_SOURCE__PROVIDER, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        METAL_TRACKER_SOURCE__QUOTE_DELAY=0  ->  source.quote_delay = 0
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return TrackerConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("METAL_TRACKER_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from METAL_TRACKER_CONFIG not found: {env_path}",
                context={"field": "METAL_TRACKER_CONFIG", "value": env_path},
            )
        return p

    default = Path("metal-tracker.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


# Settings that are always text, even when the value looks numeric
_TEXT_SETTINGS = {
    ("source", "api_key"),
    ("source", "currency"),
    ("source", "base_url"),
}


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels. Values are auto-cast
    ("true"/"false" -> bool, numeric strings -> int/float) except for the
    text settings, which are passed through verbatim.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        # METAL_TRACKER_CONFIG points at the file, it is not a setting
        if parts == ["config"]:
            continue

        if tuple(parts) in _TEXT_SETTINGS:
            cast_value: str | int | float | bool = value
        else:
            cast_value = _auto_cast(value)

        target = result
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = dict(target.get(part) or {})
            target = target[part]
        target[parts[-1]] = cast_value

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
