"""Subprocess helpers for the git calls made while persisting ignore entries."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class SubprocessError(Exception):
    """Exception raised when a subprocess command fails."""

    def __init__(self, cmd: str, returncode: int, stderr: str, stdout: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(
            f"Command failed with exit code {returncode}: {cmd}\nstderr: {stderr}"
        )

    @property
    def output(self) -> str:
        """Combined stdout and stderr of the failed command."""
        return "".join(part for part in (self.stdout, self.stderr) if part)


def run_command(
    cmd: Union[str, List[str]],
    *,
    cwd: Optional[Path] = None,
    check: bool = True,
    timeout: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """
    Run a command with standardized error handling.

    Args:
        cmd: Command to run (string or list)
        cwd: Working directory
        check: Raise exception on non-zero exit
        timeout: Timeout in seconds, None blocks until the command exits

    Returns:
        CompletedProcess with stdout, stderr, returncode

    Raises:
        SubprocessError: If check=True and command fails
        subprocess.TimeoutExpired: If timeout exceeded
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,  # We handle check ourselves for better error messages
        )
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {cmd}")
        raise

    if check and result.returncode != 0:
        cmd_str = cmd if isinstance(cmd, str) else " ".join(cmd)
        raise SubprocessError(
            cmd=cmd_str,
            returncode=result.returncode,
            stderr=result.stderr,
            stdout=result.stdout,
        )

    return result


def run_git_command(
    args: List[str],
    *,
    cwd: Optional[Path] = None,
    check: bool = True,
    timeout: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """
    Run a git command with standardized error handling.

    Args:
        args: Git command arguments (without 'git' prefix)
        cwd: Working directory (git repo)
        check: Raise exception on non-zero exit
        timeout: Timeout in seconds

    Raises:
        SubprocessError: If check=True and command fails
    """
    cmd = ["git"] + args
    try:
        return run_command(cmd, cwd=cwd, check=check, timeout=timeout)
    except SubprocessError:
        logger.error(f"Git command failed in {cwd or '.'}: {' '.join(args)}")
        raise


def stage_file(path: Path, *, cwd: Optional[Path] = None, timeout: Optional[int] = None) -> None:
    """git add a single file."""
    run_git_command(["add", str(path)], cwd=cwd, timeout=timeout)
