"""Console logging with coloured level names."""

import logging
import sys
from datetime import datetime
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "commitguard"


class ScanLogFormatter(logging.Formatter):
    """Formatter that prefixes messages with time, level and originating module."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        if self.use_colors:
            level_colors = {
                "DEBUG": "\033[36m",      # Cyan
                "INFO": "\033[32m",       # Green
                "WARNING": "\033[33m",    # Yellow
                "ERROR": "\033[31m",      # Red
                "CRITICAL": "\033[35m",   # Magenta
            }
            reset = "\033[0m"
            level_color = level_colors.get(record.levelname, "")
        else:
            level_color = ""
            reset = ""

        # commitguard.ignores.suggestion -> ignores.suggestion
        source = record.name
        if source.startswith(ROOT_LOGGER_NAME + "."):
            source = source[len(ROOT_LOGGER_NAME) + 1:]

        message = (
            f"{timestamp} {level_color}{record.levelname:8s}{reset} "
            f"[{source}] {record.getMessage()}"
        )
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(
    log_level: str = "WARNING",
    use_colors: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Logs go to stderr by default so that reports printed on stdout stay
    clean when piped.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_colors: Force colours on/off; defaults to whether the stream is a TTY
        stream: Output stream (default: sys.stderr)

    Returns:
        The configured package logger
    """
    stream = stream or sys.stderr
    if use_colors is None:
        use_colors = hasattr(stream, "isatty") and stream.isatty()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Close existing handlers before clearing (repeated setup in one process)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ScanLogFormatter(use_colors=use_colors))
    logger.addHandler(handler)

    return logger
