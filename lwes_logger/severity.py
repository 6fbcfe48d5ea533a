"""
Severity Levels
===============

Bounded Context: Severity Mapping

Standard leveled-logger severity table and the label conventions used in
event records and channel names.

Table:
    DEBUG=0  INFO=1  WARN=2  ERROR=3  FATAL=4  UNKNOWN=5

UNKNOWN is labeled "ANY". An absent severity is treated as UNKNOWN, which
is why raw appends land on the "{Namespace}::Any" channel.
"""

from enum import IntEnum
from typing import Optional, Union


class Severity(IntEnum):
    """Numeric severity levels, lowest first."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    UNKNOWN = 5


SEVERITY_LABELS = ("DEBUG", "INFO", "WARN", "ERROR", "FATAL", "ANY")

SENTINEL_LABEL = SEVERITY_LABELS[Severity.UNKNOWN]

_ALIASES = {
    "WARNING": Severity.WARN,
    "CRITICAL": Severity.FATAL,
    "ANY": Severity.UNKNOWN,
}

SeverityLike = Union[Severity, int, str]


def to_severity(level: SeverityLike) -> Severity:
    """
    Coerce a level indicator to a Severity.

    Args:
        level: Severity, integer, or level name (case-insensitive)

    Returns:
        Matching Severity

    Raises:
        ValueError: If the name or number is not a known level
        TypeError: If the level is neither a name nor a number
    """
    if isinstance(level, Severity):
        return level

    if isinstance(level, str):
        name = level.strip().upper()
        if name in Severity.__members__:
            return Severity[name]
        if name in _ALIASES:
            return _ALIASES[name]
        raise ValueError(f"Unknown severity name: {level!r}")

    return Severity(int(level))


def canonicalize(level: Optional[SeverityLike]) -> str:
    """
    Return the canonical uppercase label for a level.

    None and numbers outside the table map to the sentinel "ANY".

    Example:
        >>> canonicalize(Severity.DEBUG)
        'DEBUG'
        >>> canonicalize(None)
        'ANY'
    """
    if level is None:
        return SENTINEL_LABEL

    try:
        severity = to_severity(level)
    except (TypeError, ValueError):
        return SENTINEL_LABEL

    return SEVERITY_LABELS[severity]


def capitalize(label: str) -> str:
    """Title-case a canonical label (e.g., "DEBUG" -> "Debug")."""
    return label.capitalize()
