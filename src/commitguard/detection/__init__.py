"""Detection results and reports."""

from .results import (
    FILE_CONTENT,
    FILE_NAME,
    FILE_SIZE,
    DetectionResults,
    FailureTypes,
    FileResults,
    Finding,
    ResultsSummary,
)
from .report import Reporter, truncate_message
from .severity import Severity

__all__ = [
    "FILE_CONTENT",
    "FILE_NAME",
    "FILE_SIZE",
    "DetectionResults",
    "FailureTypes",
    "FileResults",
    "Finding",
    "ResultsSummary",
    "Reporter",
    "truncate_message",
    "Severity",
]
