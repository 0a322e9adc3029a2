"""Console logging setup for the CLI."""

import logging
import sys
from datetime import datetime


class ReadableFormatter(logging.Formatter):
    """Human-readable colored formatter."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color, reset = (self.COLORS.get(record.levelname, ""), self.RESET) if self.use_color else ("", "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        base = f"{color}{ts} {record.levelname:<8}{reset} {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Send ``testgrid`` logs to stderr at ``level``.

    Calling it again replaces the handler installed by the previous call.

    Raises:
        ValueError: If ``level`` is not a known logging level.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger("testgrid")
    for handler in list(logger.handlers):
        if getattr(handler, "_testgrid_console", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ReadableFormatter(use_color=sys.stderr.isatty()))
    handler._testgrid_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
