"""
Severities and threshold filtering.

Severities are totally ordered by a fixed priority (lower = more severe):

    error(0) < warn(1) < log(2) < debug(3) < verbose(4)

A record passes when its priority is <= the priority of the active threshold.
"""

import logging
from enum import Enum
from typing import Optional, Union


class Severity(str, Enum):
    """Application severities."""
    ERROR = "error"
    WARN = "warn"
    LOG = "log"
    DEBUG = "debug"
    VERBOSE = "verbose"

    @property
    def priority(self) -> int:
        return LEVEL_PRIORITIES[self]

    @property
    def stdlib_level(self) -> int:
        """Matching ``logging`` level number."""
        return STDLIB_LEVELS[self]


LEVEL_PRIORITIES = {
    Severity.ERROR: 0,
    Severity.WARN: 1,
    Severity.LOG: 2,
    Severity.DEBUG: 3,
    Severity.VERBOSE: 4,
}

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

STDLIB_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.LOG: logging.INFO,
    Severity.DEBUG: logging.DEBUG,
    Severity.VERBOSE: VERBOSE,
}

# Names accepted in addition to the enum values
_ALIASES = {
    "info": Severity.LOG,
    "warning": Severity.WARN,
}


def parse_severity(value: Union[str, Severity, None]) -> Optional[Severity]:
    """
    Resolve a severity name.

    Returns None for unknown or empty names instead of raising.

    Example:
        >>> parse_severity("WARN")
        <Severity.WARN: 'warn'>
        >>> parse_severity("info")
        <Severity.LOG: 'log'>
        >>> parse_severity("silly") is None
        True
    """
    if isinstance(value, Severity):
        return value
    if not isinstance(value, str) or not value:
        return None

    name = value.strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Severity(name)
    except ValueError:
        return None


def to_backend_level(severity: Union[str, Severity]) -> str:
    """Backend level name: ``log`` becomes ``info``, the rest pass through."""
    value = severity.value if isinstance(severity, Severity) else severity
    return "info" if value == Severity.LOG.value else value


def from_backend_level(level: str) -> Union[Severity, str]:
    """Reverse of :func:`to_backend_level`. Unknown names are returned as-is."""
    name = Severity.LOG.value if level == "info" else level
    try:
        return Severity(name)
    except ValueError:
        return level


class LevelFilter(logging.Filter):
    """
    Threshold gate.

    Usable directly (``permits``) and as a ``logging.Filter`` on handlers,
    where it reads the ``severity`` attribute stamped on records by the facade.

    Example:
        >>> level_filter = LevelFilter("warn")
        >>> level_filter.permits("error")
        True
        >>> level_filter.permits("debug")
        False
    """

    def __init__(self, threshold: Union[str, Severity, None] = None):
        super().__init__()
        self._threshold = Severity.VERBOSE
        self.set_threshold(threshold)

    @property
    def threshold(self) -> Severity:
        return self._threshold

    def set_threshold(self, level: Union[str, Severity, None]) -> None:
        """Update threshold. Unrecognized names are ignored."""
        severity = parse_severity(level)
        if severity is None:
            return
        self._threshold = severity

    def permits(self, severity: Union[str, Severity]) -> bool:
        resolved = parse_severity(severity)
        if resolved is None:
            return False
        return resolved.priority <= self._threshold.priority

    def filter(self, record: logging.LogRecord) -> bool:
        severity = getattr(record, "severity", None)
        if severity is None:
            return True
        return self.permits(severity)
