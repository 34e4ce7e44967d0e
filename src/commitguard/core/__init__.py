"""Settings."""

from .config import ReportSettings, clear_settings_cache, interactive_supported, load_settings

__all__ = [
    "ReportSettings",
    "clear_settings_cache",
    "interactive_supported",
    "load_settings",
]
