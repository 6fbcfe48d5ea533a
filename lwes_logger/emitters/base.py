"""
Base Event Emitter
==================

Bounded Context: Event Transport

Abstract base class for the transports that carry emitted events.

Design:
- Fire-and-forget: no acknowledgement, no retry, no buffering
- Failures are logged as diagnostics and re-raised to the caller
- Per-emitter counters guarded by a stats lock

Architecture:
    BaseEmitter (abstract)
        ↓
    MulticastEmitter, MqttEmitter (concrete)

Responsibilities:
- Counting and diagnostics around each send
- NOT responsible for: Deciding channels (EventRouter) or building events
  (EventBuilder)

Example:
    >>> class PrintEmitter(BaseEmitter):
    ...     def _send(self, channel, fields):
    ...         print(channel, dict(fields))
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from ..observability import DiagnosticEvent, StructuredLogger, create_logger


class BaseEmitter(ABC):
    """
    Abstract base class for event transports.

    Subclasses implement _send(); emit() wraps it with counting and
    failure diagnostics. The fields mapping is treated as read-only: the
    same record may be sent to several channels.

    Attributes:
        logger: Structured logger for transport diagnostics

    Thread Safety:
        Counters are updated under a lock; _send() implementations must be
        safe to call from several threads.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        """
        Args:
            logger: Structured logger (default: "emitter" component)
        """
        self.logger = logger or create_logger("emitter")
        self._stats_lock = threading.Lock()
        self._event_count = 0
        self._closed = False

    @abstractmethod
    def _send(self, channel: str, fields: Mapping[str, str]) -> None:
        """Transport-specific send. Raise on failure."""
        raise NotImplementedError("Subclasses must implement _send()")

    def emit(self, channel: str, fields: Mapping[str, str]) -> None:
        """
        Send one event to a channel.

        Args:
            channel: Channel name (e.g., "LwesLogger::Debug")
            fields: Event fields (string keys and values)

        Raises:
            EmitError: Transport failure (subclass-specific errors may
                also propagate)
        """
        try:
            self._send(channel, fields)
        except Exception as e:
            self.logger.error(
                event=DiagnosticEvent.EMITTER_EMIT_FAILED,
                message="Failed to emit event",
                exc_info=e,
                metadata={'channel': channel, 'emitter': type(self).__name__}
            )
            raise

        with self._stats_lock:
            self._event_count += 1

        self._after_emit()

    def _after_emit(self) -> None:
        """Hook run after a counted send; implementations handle their own errors."""
        pass

    def close(self) -> None:
        """Release transport resources. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._close()
        self.logger.info(
            event=DiagnosticEvent.EMITTER_CLOSED,
            message="Emitter closed",
            metadata={'event_count': self._event_count, 'emitter': type(self).__name__}
        )

    def _close(self) -> None:
        """Transport-specific cleanup."""
        pass

    @property
    def closed(self) -> bool:
        return self._closed

    def get_stats(self) -> Dict[str, Any]:
        """
        Get emitter statistics.

        Returns:
            Dictionary with event count and closed flag
        """
        with self._stats_lock:
            return {
                'event_count': self._event_count,
                'closed': self._closed,
            }

    def __enter__(self) -> "BaseEmitter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
