"""Configuration loader for the extraction engine.

Reads YAML configuration, applies environment variable overrides, and returns typed
dataclasses consumed across the package.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .fields import FieldSpec


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    return value


def _merge_dicts(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any], prefix: str = "XTRACT") -> Dict[str, Any]:
    """Override config using env vars like XTRACT_FETCH__TIMEOUT=5."""
    overrides: Dict[str, Any] = {}
    for env_key, env_val in os.environ.items():
        if not env_key.startswith(prefix + "_"):
            continue
        trimmed = env_key[len(prefix) + 1 :]
        keys = trimmed.lower().split("__")
        cursor = overrides
        for key in keys[:-1]:
            cursor = cursor.setdefault(key, {})
        cursor[keys[-1]] = _coerce_env_value(env_val)
    return _merge_dicts(config, overrides)


def _coerce_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in {"true", "1", "yes"}:
        return True
    if lowered in {"false", "0", "no"}:
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if "," in value:
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


@dataclass
class FetchSettings:
    user_agent: str = "xtract/0.1"
    timeout: float = 20.0
    max_retries: int = 2
    backoff_base: float = 0.6
    follow_redirects: bool = True


@dataclass
class ExtractionSettings:
    parser: str = "lxml"  # lxml | html.parser
    max_text_length: int = 0  # 0 disables the cap
    fields: List[Any] = field(default_factory=list)


@dataclass
class LoggingSettings:
    verbose: bool = True
    level: str = "INFO"


@dataclass
class ExportSettings:
    default_format: str = "json"  # json | csv | xlsx


@dataclass
class Config:
    fetch: FetchSettings = field(default_factory=FetchSettings)
    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    export: ExportSettings = field(default_factory=ExportSettings)


def load_config(path: Optional[Path | str] = None, env_prefix: str = "XTRACT") -> Config:
    """Load YAML config and merge env overrides."""
    config_path = Path(path) if path else Path("xtract.yaml")
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            data = _expand_env(yaml.safe_load(f) or {})
    else:
        data = {}
    merged_dict = _apply_env_overrides(data, prefix=env_prefix)
    return map_dict_to_config(merged_dict)


def map_dict_to_config(data: Dict[str, Any]) -> Config:
    try:
        fetch = FetchSettings(**data.get("fetch", {}))
        extraction = ExtractionSettings(**data.get("extraction", {}))
        logging_settings = LoggingSettings(**data.get("logging", {}))
        export = ExportSettings(**data.get("export", {}))
    except TypeError as exc:
        raise ConfigError(f"unknown configuration key: {exc}") from exc
    return Config(
        fetch=fetch,
        extraction=extraction,
        logging=logging_settings,
        export=export,
    )


def load_field_specs(config: Config) -> List[FieldSpec]:
    return [FieldSpec.from_dict(item) for item in config.extraction.fields]


__all__ = [
    "Config",
    "FetchSettings",
    "ExtractionSettings",
    "LoggingSettings",
    "ExportSettings",
    "load_config",
    "map_dict_to_config",
    "load_field_specs",
]
