"""Shared utility functions."""

from .atomic_io import atomic_write_text
from .error_handling import log_and_ignore, safe_call
from .hashing import DefaultSHA256Hasher, Hasher
from .subprocess_utils import SubprocessError, run_command, run_git_command, stage_file

__all__ = [
    # Atomic I/O
    "atomic_write_text",
    # Error handling
    "log_and_ignore",
    "safe_call",
    # Checksums
    "DefaultSHA256Hasher",
    "Hasher",
    # Subprocess utilities
    "SubprocessError",
    "run_command",
    "run_git_command",
    "stage_file",
]
