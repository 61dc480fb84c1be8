"""
Severity model for log events and classified failures.

Severities are totally ordered: DEBUG < INFO < WARN < ERROR < FATAL.
Each tier has a display icon/label used in formatted records and a
stdlib logging level used to pick the console channel.
"""

import logging
from enum import Enum


class ErrorSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank >= other.rank


SEVERITY_ORDER = [
    ErrorSeverity.DEBUG,
    ErrorSeverity.INFO,
    ErrorSeverity.WARN,
    ErrorSeverity.ERROR,
    ErrorSeverity.FATAL,
]

SEVERITY_CONFIG = {
    ErrorSeverity.FATAL: {"icon": "🚨", "label": "FATAL ALERT"},
    ErrorSeverity.ERROR: {"icon": "🚨", "label": "ERROR"},
    ErrorSeverity.WARN: {"icon": "⚠️", "label": "WARNING"},
    ErrorSeverity.INFO: {"icon": "ℹ️", "label": "INFO"},
    ErrorSeverity.DEBUG: {"icon": "🐞", "label": "DEBUG"},
}

# Console channel per severity. FATAL shares the error channel.
SEVERITY_CHANNELS = {
    ErrorSeverity.FATAL: logging.ERROR,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.WARN: logging.WARNING,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.DEBUG: logging.DEBUG,
}


def severity_display(severity: ErrorSeverity) -> tuple[str, str]:
    """Return the (icon, label) pair shown in the header of a formatted record."""
    config = SEVERITY_CONFIG[severity]
    return config["icon"], config["label"]


def severity_channel(severity: ErrorSeverity) -> int:
    """Return the stdlib logging level a record of this severity is written at."""
    return SEVERITY_CHANNELS[severity]
