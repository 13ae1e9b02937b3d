"""Logging for Ganttline with gesture-oriented verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Committed proposals (reorder / date change)
CHECKS_LEVEL = 15  # Declined gestures and rejected resize frames

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class GanttLogger(logging.Logger):
    """Logger with semantic methods matching the CLI verbosity levels.

    - changes(): level 1, proposals that reach a caller callback
    - checks(): level 2, gestures the engine declined and why
    - debug(): level 3, geometry and per-frame details
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a committed change (verbosity level 1)."""
        kwargs.setdefault("stacklevel", 2)
        self.log(CHANGES_LEVEL, msg, *args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a declined gesture or rejected proposal (verbosity level 2)."""
        kwargs.setdefault("stacklevel", 2)
        self.log(CHECKS_LEVEL, msg, *args, **kwargs)


def get_logger() -> GanttLogger:
    """Return the shared ``ganttline`` logger.

    The logger class is installed on first use so that every call returns
    the same :class:`GanttLogger` instance.
    """
    logging.setLoggerClass(GanttLogger)
    logger = logging.getLogger("ganttline")
    assert isinstance(logger, GanttLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the logger for a verbosity level (0-3).

    Safe to call repeatedly; existing handlers are replaced.

    Args:
        verbosity: 0=errors only, 1=changes, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def debug_enabled() -> bool:
    return get_logger().isEnabledFor(logging.DEBUG)
