"""Custom exceptions for Ganttline."""


class GanttlineError(Exception):
    """Base exception for all Ganttline errors."""

    pass


class ValidationError(GanttlineError):
    """Raised when task data fails validation."""

    pass


class ParseError(GanttlineError):
    """Raised when YAML parsing fails."""

    pass


class ConfigError(GanttlineError):
    """Raised when a configuration file is missing or invalid."""

    pass
