"""Standardized error handling utilities."""

import logging
from typing import TypeVar, Callable, Optional

logger = logging.getLogger(__name__)

T = TypeVar('T')


def log_and_ignore(
    error: Exception,
    message: str,
    *,
    logger_instance: Optional[logging.Logger] = None,
    level: int = logging.WARNING,
) -> None:
    """
    Log an error and ignore it (don't re-raise).

    Use for non-critical errors that should not change the outcome of a run.

    Args:
        error: Exception to log
        message: Context message to log
        logger_instance: Logger to use (defaults to module logger)
        level: Log level (default: WARNING)
    """
    log = logger_instance or logger
    log.log(level, f"{message}: {error}")


def safe_call(
    func: Callable[..., T],
    *args,
    default: Optional[T] = None,
    error_message: str = "Error in function call",
    logger_instance: Optional[logging.Logger] = None,
    **kwargs,
) -> Optional[T]:
    """
    Call a function, logging and swallowing any exception.

    Returns:
        Function result on success, default value on error
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_and_ignore(e, error_message, logger_instance=logger_instance, level=logging.ERROR)
        return default
