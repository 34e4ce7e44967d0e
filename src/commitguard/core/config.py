"""Settings loading and validation."""

import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(".commitguard.yaml")


class ReportSettings(BaseSettings):
    """Reporting and ignore-suggestion settings.

    Every field can be overridden from the environment, e.g.
    COMMITGUARD_SUGGEST_FOR_IGNORED_FILES=true.
    """
    model_config = SettingsConfigDict(env_prefix="COMMITGUARD_")

    rc_filename: Path = Field(default=Path(".talismanrc"))

    # Messages longer than max_message_length are cut to
    # truncate_head chars, a line break, truncate_tail chars and "..."
    max_message_length: int = 150
    truncate_head: int = 75
    truncate_tail: int = 72

    # False limits suggested entries to files with failures
    suggest_for_ignored_files: bool = True

    color: bool = True
    table_width: Optional[int] = None

    # None blocks until git exits
    git_timeout: Optional[int] = None

    @field_validator("max_message_length", "truncate_head", "truncate_tail")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"truncation lengths must be >= 1, got {v}")
        return v

    @model_validator(mode="after")
    def validate_truncation(self) -> "ReportSettings":
        if self.truncate_head + self.truncate_tail > self.max_message_length:
            raise ValueError(
                "truncate_head + truncate_tail must not exceed max_message_length "
                f"({self.truncate_head} + {self.truncate_tail} > {self.max_message_length})"
            )
        return self


def interactive_supported() -> bool:
    """Interactive confirmation is not offered on Windows."""
    return platform.system() != "Windows"


_settings_cache: Dict[str, tuple] = {}


def _get_cached_or_load(resolved_path: Path, loader):
    """Return cached settings if file mtime unchanged, else reload."""
    key = str(resolved_path)
    try:
        current_mtime = resolved_path.stat().st_mtime
    except FileNotFoundError:
        _settings_cache.pop(key, None)
        return None

    cached = _settings_cache.get(key)
    if cached is not None:
        cached_result, cached_mtime = cached
        if cached_mtime == current_mtime:
            return cached_result

    result = loader(resolved_path)
    _settings_cache[key] = (result, current_mtime)
    return result


def _load_settings_from_file(settings_path: Path) -> ReportSettings:
    """Internal loader for settings (no caching)."""
    with open(settings_path) as f:
        data = yaml.safe_load(f) or {}
    data = _expand_env_vars(data)
    return ReportSettings(**data.get("report", data))


def load_settings(settings_path: Path = DEFAULT_SETTINGS_PATH) -> ReportSettings:
    """Load settings from a YAML file.

    Values may sit at the top level or under a "report" key. A missing
    file yields defaults (plus any COMMITGUARD_* environment overrides).
    """
    if not settings_path.exists():
        logger.debug(f"Settings file not found: {settings_path}. Using defaults.")
        return ReportSettings()

    result = _get_cached_or_load(settings_path.resolve(), _load_settings_from_file)
    return result if result is not None else ReportSettings()


def clear_settings_cache() -> None:
    """Clear the module-level settings cache. Useful for tests."""
    _settings_cache.clear()


def _expand_env_vars(data: Any, _path: str = "") -> Any:
    """Recursively expand ${VAR} references in settings data."""
    if isinstance(data, dict):
        return {k: _expand_env_vars(v, f"{_path}.{k}" if _path else k) for k, v in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item, f"{_path}[{i}]") for i, item in enumerate(data)]
    elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
        env_var = data[2:-1]
        value = os.environ.get(env_var)
        if value is None:
            logger.warning(
                f"Environment variable '{env_var}' not set (referenced at settings path: {_path or 'root'}). "
                f"The literal string '{data}' will be used."
            )
            return data
        return value
    return data
