"""
Exception Hierarchy
==================

Bounded Context: Error Reporting

All errors raised by lwes_logger itself derive from LwesLoggerError.
Exceptions raised inside caller-supplied suppliers (lazy messages, meta
field thunks, extra-data thunks) are never wrapped; they reach the caller
unchanged.
"""


class LwesLoggerError(Exception):
    """Base class for lwes_logger errors."""
    pass


class EmitError(LwesLoggerError):
    """Raised when a transport fails to send an event."""
    pass


class EncodeError(LwesLoggerError):
    """Raised when an event cannot be encoded to the wire format."""
    pass


class DecodeError(LwesLoggerError):
    """Raised when a datagram is not a valid wire event."""
    pass


class ConfigError(LwesLoggerError, ValueError):
    """Raised when logger configuration is invalid."""
    pass
