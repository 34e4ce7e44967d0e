"""Persistent ignore rules stored in the project's .talismanrc file."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.atomic_io import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_RC_FILENAME = ".talismanrc"


class Mode(str, Enum):
    """Hook or scan mode; selects the section of the rc file that holds ignores."""
    PRE_COMMIT = "pre-commit"
    PRE_PUSH = "pre-push"
    SCAN = "scan"


class IgnoreConfig(BaseModel):
    """A single file ignore entry, scoped to the file's current checksum."""
    filename: str
    checksum: str = ""
    allowed_patterns: List[str] = Field(default_factory=list)

    def get_file_name(self) -> str:
        return self.filename

    def to_yaml_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"filename": self.filename, "checksum": self.checksum}
        if self.allowed_patterns:
            data["allowed_patterns"] = list(self.allowed_patterns)
        return data


class ScanConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    fileignoreconfig: List[IgnoreConfig] = Field(default_factory=list)


class TalismanRC(BaseModel):
    """Contents of the rc file. Unknown top-level keys are preserved on save."""
    model_config = ConfigDict(extra="allow")

    fileignoreconfig: List[IgnoreConfig] = Field(default_factory=list)
    scanconfig: Optional[ScanConfig] = None
    version: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> Optional[str]:
        # version: 1.0 parses as a float
        return None if v is None else str(v)

    def ignores_for(self, mode: Mode) -> List[IgnoreConfig]:
        if mode == Mode.SCAN:
            if self.scanconfig is None:
                self.scanconfig = ScanConfig()
            return self.scanconfig.fileignoreconfig
        return self.fileignoreconfig

    def to_yaml_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.fileignoreconfig:
            data["fileignoreconfig"] = [e.to_yaml_dict() for e in self.fileignoreconfig]
        if self.scanconfig is not None and (
            self.scanconfig.fileignoreconfig or self.scanconfig.model_extra
        ):
            scan: Dict[str, Any] = {}
            if self.scanconfig.fileignoreconfig:
                scan["fileignoreconfig"] = [
                    e.to_yaml_dict() for e in self.scanconfig.fileignoreconfig
                ]
            scan.update(self.scanconfig.model_extra or {})
            data["scanconfig"] = scan
        data.update(self.model_extra or {})
        if self.version is not None:
            data["version"] = self.version
        return data


def build_ignore_config(
    mode: Mode,
    filename: str,
    checksum: str,
    allowed_patterns: Optional[Iterable[str]] = None,
) -> IgnoreConfig:
    """Build the ignore entry for filename at its current checksum.

    The entry shape is the same for every mode; mode only decides where
    RCFile.add_ignores() stores it.
    """
    logger.debug(f"Building {mode.value} ignore entry for {filename}")
    return IgnoreConfig(
        filename=filename,
        checksum=checksum,
        allowed_patterns=list(allowed_patterns or []),
    )


def dump_ignore_config(entry: IgnoreConfig) -> str:
    """YAML rendering of a single entry, as it would appear in the rc file."""
    return yaml.safe_dump(entry.to_yaml_dict(), sort_keys=False, default_flow_style=False)


def dump_ignore_list_item(entry: IgnoreConfig) -> str:
    """YAML rendering of a single entry as one item of a fileignoreconfig list."""
    return yaml.safe_dump([entry.to_yaml_dict()], sort_keys=False, default_flow_style=False)


def dump_ignore_configs(entries: Iterable[IgnoreConfig]) -> str:
    """YAML rendering of entries under a fileignoreconfig key, ready to paste."""
    rc = TalismanRC(fileignoreconfig=list(entries))
    return yaml.safe_dump(rc.to_yaml_dict(), sort_keys=False, default_flow_style=False)


class RCFile:
    """Reads and updates the ignore rules file."""

    def __init__(self, path: Path = Path(DEFAULT_RC_FILENAME)):
        self.path = Path(path)

    def load(self) -> TalismanRC:
        """Parse the rc file. A missing or empty file yields an empty config."""
        if not self.path.exists():
            return TalismanRC()
        with open(self.path) as f:
            data = yaml.safe_load(f) or {}
        # "fileignoreconfig:" with no items parses as None
        data = {k: v for k, v in data.items() if v is not None}
        return TalismanRC(**data)

    def save(self, rc: TalismanRC) -> None:
        content = yaml.safe_dump(rc.to_yaml_dict(), sort_keys=False, default_flow_style=False)
        atomic_write_text(self.path, content)

    def add_ignores(self, mode: Mode, entries: Iterable[IgnoreConfig]) -> int:
        """Merge entries into the rc file, keyed by filename.

        An existing entry for the same file takes the new checksum and gains
        any new allowed patterns. Returns the number of entries written.
        """
        entries = list(entries)
        if not entries:
            logger.debug("No ignore entries to add")
            return 0

        rc = self.load()
        ignores = rc.ignores_for(mode)
        by_name = {e.filename: e for e in ignores}

        for entry in entries:
            existing = by_name.get(entry.filename)
            if existing is None:
                added = entry.model_copy(deep=True)
                ignores.append(added)
                by_name[added.filename] = added
                continue
            existing.checksum = entry.checksum
            for pattern in entry.allowed_patterns:
                if pattern not in existing.allowed_patterns:
                    existing.allowed_patterns.append(pattern)

        self.save(rc)
        logger.info(f"Added {len(entries)} ignore entries to {self.path}")
        return len(entries)
