"""
Diagnostic Logging for lwes_logger
==================================

Bounded Context: Observability

JSON-structured diagnostics about the logger's own machinery (transport
lifecycle, heartbeats, listener decode failures). This is separate from the
events the logger emits on behalf of the application.

Public API
----------
    DiagnosticEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from lwes_logger.observability import create_logger, DiagnosticEvent
    >>> logger = create_logger("emitter")
    >>> logger.info(
    ...     event=DiagnosticEvent.EMITTER_OPENED,
    ...     message="Multicast emitter ready",
    ...     metadata={'address': '224.1.1.11:12345'}
    ... )

Output:
    {"timestamp": "2025-10-24T15:30:45.123456", "level": "INFO",
     "component": "emitter", "event": "emitter.opened",
     "message": "Multicast emitter ready",
     "metadata": {"address": "224.1.1.11:12345"}}
"""

from .events import DiagnosticEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'DiagnosticEvent',
    'StructuredLogger',
    'create_logger',
]
