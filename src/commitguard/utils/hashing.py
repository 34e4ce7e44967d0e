"""Content checksums used to scope ignore entries to a file's current content."""

import hashlib
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Takes a list of paths, returns an opaque checksum string
Hasher = Callable[[List[str]], str]


class DefaultSHA256Hasher:
    """SHA-256 over the per-file SHA-256 of each path and its content."""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else Path(".")

    def file_sha256(self, path: str) -> str:
        digest = hashlib.sha256(path.encode("utf-8"))
        full_path = self.root / path
        try:
            with open(full_path, "rb") as f:
                for chunk in iter(lambda: f.read(65536), b""):
                    digest.update(chunk)
        except FileNotFoundError:
            # Deleted files hash by name only
            logger.debug(f"{full_path} not found, hashing path only")
        return digest.hexdigest()

    def collective_sha256_hash(self, paths: Iterable[str]) -> str:
        combined = "".join(self.file_sha256(p) for p in sorted(paths))
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()

    def __call__(self, paths: Iterable[str]) -> str:
        return self.collective_sha256_hash(paths)
