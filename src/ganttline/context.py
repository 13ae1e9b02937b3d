"""Process-wide CLI state: config location and the "today" override."""

from __future__ import annotations

from datetime import date
from pathlib import Path


class _CliState:
    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.today: date | None = None


_state = _CliState()


def get_config_path() -> Path | None:
    """Return the config file passed with --config, if any."""
    return _state.config_path


def set_config_path(path: Path | None) -> None:
    _state.config_path = path


def get_today() -> date:
    """Return the pinned "today" date, falling back to the system clock."""
    return _state.today or date.today()  # noqa: DTZ011


def set_today(value: date | None) -> None:
    _state.today = value


def reset() -> None:
    """Forget all CLI state (used between test invocations)."""
    _state.config_path = None
    _state.today = None
