"""Persistent ignore rules and the workflow that suggests new ones."""

from .rc_file import IgnoreConfig, Mode, RCFile, TalismanRC, build_ignore_config
from .suggestion import IgnoreSuggester, SuggestionOutcome, SuggestionState

__all__ = [
    "IgnoreConfig",
    "Mode",
    "RCFile",
    "TalismanRC",
    "build_ignore_config",
    "IgnoreSuggester",
    "SuggestionOutcome",
    "SuggestionState",
]
