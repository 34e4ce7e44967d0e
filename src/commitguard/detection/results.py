"""Detection results collected during a single scan run.

DetectionResults is the collecting parameter handed to every detector in a
scan. Detectors report failures, warnings and ignored files through it; the
results are grouped by file path so that every problem with an individual
file can be reported together.

One DetectionResults is created per scan and discarded after reporting.
It does no locking: detectors running in parallel must serialize their
calls to fail()/warn()/ignore().
"""

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..ignores.rc_file import Mode
from .severity import Severity

logger = logging.getLogger(__name__)

# Categories that count towards a failed run
FILE_CONTENT = "filecontent"
FILE_SIZE = "filesize"
FILE_NAME = "filename"


@dataclass
class Finding:
    """A single detector observation for a file."""
    category: str
    message: str
    commits: List[str] = field(default_factory=list)
    severity: Severity = Severity.LOW

    @property
    def key(self) -> Tuple[str, str]:
        return (self.category, self.message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.category,
            "message": self.message,
            "commits": list(self.commits),
            "severity": str(self.severity),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        _require_mapping(data, "finding")
        severity = data.get("severity") or "low"
        return cls(
            category=data.get("type", ""),
            message=data.get("message", ""),
            commits=list(data.get("commits") or []),
            severity=Severity.from_string(severity),
        )


@dataclass
class FileResults:
    """Failures, warnings and ignores recorded against one file path."""
    filename: str
    failure_list: List[Finding] = field(default_factory=list)
    warning_list: List[Finding] = field(default_factory=list)
    ignore_list: List[Finding] = field(default_factory=list)

    # Lookup tables; the lists above keep insertion order for reporting
    _failures_by_key: Dict[Tuple[str, str], Finding] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _warnings_by_key: Dict[Tuple[str, str], Finding] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _ignores_by_category: Dict[str, Finding] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def add_failure(
        self,
        category: str,
        message: str,
        commits: Iterable[str],
        severity: Severity,
    ) -> Finding:
        return _merge_into(
            self.failure_list, self._failures_by_key, category, message, commits, severity
        )

    def add_warning(
        self,
        category: str,
        message: str,
        commits: Iterable[str],
        severity: Severity,
    ) -> Finding:
        return _merge_into(
            self.warning_list, self._warnings_by_key, category, message, commits, severity
        )

    def add_ignore(self, category: str) -> Finding:
        existing = self._ignores_by_category.get(category)
        if existing is not None:
            return existing
        detail = Finding(category, "", [], Severity.LOW)
        self._ignores_by_category[category] = detail
        self.ignore_list.append(detail)
        return detail

    @property
    def has_failures_or_ignores(self) -> bool:
        return bool(self.failure_list or self.ignore_list)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "failure_list": [f.to_dict() for f in self.failure_list],
            "warning_list": [f.to_dict() for f in self.warning_list],
            "ignore_list": [f.to_dict() for f in self.ignore_list],
        }


def _merge_into(
    details: List[Finding],
    index: Dict[Tuple[str, str], Finding],
    category: str,
    message: str,
    commits: Iterable[str],
    severity: Severity,
) -> Finding:
    """Append a finding, or merge commits into the one with the same category and message.

    The first-seen severity and message win; commit ids are concatenated
    without removing duplicates.
    """
    existing = index.get((category, message))
    if existing is not None:
        existing.commits.extend(commits)
        return existing
    detail = Finding(category, message, list(commits), severity)
    index[detail.key] = detail
    details.append(detail)
    return detail


@dataclass
class FailureTypes:
    """Run-wide counters, one per failure category plus warnings and ignores."""
    filecontent: int = 0
    filesize: int = 0
    filename: int = 0
    warnings: int = 0
    ignores: int = 0

    def to_dict(self) -> dict:
        return {
            "filecontent": self.filecontent,
            "filesize": self.filesize,
            "filename": self.filename,
            "warnings": self.warnings,
            "ignores": self.ignores,
        }


def _require_mapping(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Expected an object for {what}, got {type(value).__name__}")
    return value


def _failure_types_from_dict(data: Dict[str, Any]) -> FailureTypes:
    """Build counters from serialized data, rejecting unknown or non-integer values."""
    for name, value in data.items():
        if name not in {f.name for f in fields(FailureTypes)}:
            raise ValueError(f"Unknown counter: '{name}'")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"Counter '{name}' must be a non-negative integer, got {value!r}")
    return FailureTypes(**data)


@dataclass
class ResultsSummary:
    types: FailureTypes = field(default_factory=FailureTypes)

    def to_dict(self) -> dict:
        return {"types": self.types.to_dict()}


class DetectionResults:
    """All interesting information collected during one detection run."""

    def __init__(self, mode: Mode = Mode.PRE_COMMIT):
        self.mode = mode
        self.summary = ResultsSummary()
        self._results: Dict[str, FileResults] = {}

    # --- accumulation ---

    def fail(
        self,
        file_path: str,
        category: str,
        message: str,
        commits: Optional[Iterable[str]] = None,
        severity: Severity = Severity.LOW,
    ) -> None:
        """Mark file_path as failing a detection for the supplied reason.

        May be called many times for the same file; the reasons accumulate.
        Only the "filecontent", "filesize" and "filename" categories are
        counted as failures of the run, any other category is stored but
        does not change the run's outcome.
        """
        self._results_for(file_path).add_failure(category, message, commits or [], severity)
        self._count_failure(category)

    def warn(
        self,
        file_path: str,
        category: str,
        message: str,
        commits: Optional[Iterable[str]] = None,
        severity: Severity = Severity.LOW,
    ) -> None:
        """Record a warning for file_path. Every call is counted."""
        self._results_for(file_path).add_warning(category, message, commits or [], severity)
        self.summary.types.warnings += 1

    def ignore(self, file_path: str, category: str) -> None:
        """Mark file_path as ignored by the detector for category.

        The ignore counter counts calls, so ignoring the same file and
        category twice stores one entry but adds two to the counter.
        """
        self._results_for(file_path).add_ignore(category)
        self.summary.types.ignores += 1

    def _results_for(self, file_path: str) -> FileResults:
        results = self._results.get(file_path)
        if results is None:
            results = FileResults(filename=file_path)
            self._results[file_path] = results
        return results

    def _count_failure(self, category: str) -> None:
        types = self.summary.types
        if category == FILE_CONTENT:
            types.filecontent += 1
        elif category == FILE_SIZE:
            types.filesize += 1
        elif category == FILE_NAME:
            types.filename += 1
        else:
            logger.debug(f"Failure category '{category}' is not counted towards the run outcome")

    # --- queries ---

    def has_failures(self) -> bool:
        """True if any counted failure was recorded for any file in this run."""
        types = self.summary.types
        return types.filecontent > 0 or types.filesize > 0 or types.filename > 0

    def has_warnings(self) -> bool:
        return self.summary.types.warnings > 0

    def has_ignores(self) -> bool:
        return self.summary.types.ignores > 0

    def has_detection_messages(self) -> bool:
        return self.has_warnings() or self.has_failures() or self.has_ignores()

    def successful(self) -> bool:
        """True if no detector found a reason to fail the run."""
        return not self.has_failures()

    def get_failures(self, file_path: str) -> List[Finding]:
        """Failures recorded for file_path, empty for unknown paths."""
        results = self._results.get(file_path)
        return results.failure_list if results is not None else []

    def get_warnings(self, file_path: str) -> List[Finding]:
        results = self._results.get(file_path)
        return results.warning_list if results is not None else []

    def get_ignores(self, file_path: str) -> List[Finding]:
        results = self._results.get(file_path)
        return results.ignore_list if results is not None else []

    def file_results(self) -> List[FileResults]:
        """Per-file results in the order the files were first reported."""
        return list(self._results.values())

    def files_with_failures_or_ignores(self) -> List[str]:
        return [r.filename for r in self._results.values() if r.has_failures_or_ignores]

    # --- serialization ---

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self._results.values()],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], mode: Mode = Mode.PRE_COMMIT) -> "DetectionResults":
        """Rebuild a run from its serialized form.

        Counters are taken from the serialized summary when present, since
        they count calls rather than stored entries; otherwise they are
        derived by replaying every stored entry once.
        """
        _require_mapping(data, "results document")
        results = cls(mode=mode)
        summary = data.get("summary")

        for item in data.get("results") or []:
            path = _require_mapping(item, "file results")["filename"]
            for raw in item.get("failure_list") or []:
                detail = Finding.from_dict(raw)
                results.fail(path, detail.category, detail.message, detail.commits, detail.severity)
            for raw in item.get("warning_list") or []:
                detail = Finding.from_dict(raw)
                results.warn(path, detail.category, detail.message, detail.commits, detail.severity)
            for raw in item.get("ignore_list") or []:
                results.ignore(path, _require_mapping(raw, "ignore entry").get("type", ""))

        if summary is not None:
            _require_mapping(summary, "summary")
            results.summary = ResultsSummary(_failure_types_from_dict(summary.get("types") or {}))
        return results
