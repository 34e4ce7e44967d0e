"""Atomic file I/O operations."""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(file_path: Path, content: str, max_retries: int = 3) -> None:
    """
    Atomically write content to a file using temp file + rename.

    The file is either fully written or left untouched, so a crash while
    saving the rc file never leaves a truncated config behind.

    Args:
        file_path: Target file path
        content: Text content to write
        max_retries: Maximum number of retry attempts on failure

    Raises:
        OSError: If write fails after all retries
    """
    file_path = Path(file_path)
    tmp_file = file_path.with_name(f"{file_path.name}.tmp.{os.getpid()}")

    last_error = None
    for attempt in range(max_retries):
        try:
            tmp_file.write_text(content)
            tmp_file.replace(file_path)
            return
        except OSError as e:
            last_error = e
            if attempt < max_retries - 1:
                logger.warning(
                    f"Failed to write {file_path} (attempt {attempt + 1}/{max_retries}): {e}"
                )
            continue
        finally:
            if tmp_file.exists():
                try:
                    tmp_file.unlink()
                except OSError:
                    pass

    logger.error(f"Failed to write {file_path} after {max_retries} attempts: {last_error}")
    raise last_error
