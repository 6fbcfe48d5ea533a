"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

Architecture:
- Wraps Python's logging module
- Adds structured metadata
- Formats as JSON for stdout/file

Example:
    >>> logger = StructuredLogger(component="emitter")
    >>> logger.debug(
    ...     event=DiagnosticEvent.EMITTER_HEARTBEAT,
    ...     message="Heartbeat sent",
    ...     metadata={'seq': 3}
    ... )
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import DiagnosticEvent


class StructuredLogger:
    """
    JSON structured logger for lwes_logger diagnostics.

    Attributes:
        component: Component name (e.g., "emitter", "listener")
        logger: Underlying Python logger instance

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier (e.g., "emitter")
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: lwes_logger.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"lwes_logger.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: DiagnosticEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Internal log method with structured format.

        Args:
            level: Log level name (DEBUG, INFO, WARNING, ERROR)
            event: Typed diagnostic event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception for ERROR logs
        """
        log_level = getattr(logging, level)
        if not self.logger.isEnabledFor(log_level):
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(log_level, json.dumps(log_entry, default=str))

    def debug(
        self,
        event: DiagnosticEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message."""
        self._log('DEBUG', event, message, metadata)

    def info(
        self,
        event: DiagnosticEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Example:
            >>> logger.info(
            ...     event=DiagnosticEvent.MQTT_CONNECTED,
            ...     message="Connected to broker",
            ...     metadata={'broker': 'localhost:1883'}
            ... )
        """
        self._log('INFO', event, message, metadata)

    def warning(
        self,
        event: DiagnosticEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log WARNING level message."""
        self._log('WARNING', event, message, metadata)

    def error(
        self,
        event: DiagnosticEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log ERROR level message.

        Args:
            event: Typed diagnostic event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception instance, summarized in the JSON entry

        Example:
            >>> try:
            ...     sock.sendto(payload, target)
            ... except OSError as e:
            ...     logger.error(
            ...         event=DiagnosticEvent.EMITTER_EMIT_FAILED,
            ...         message="Failed to send event",
            ...         exc_info=e,
            ...     )
            ...     raise
        """
        self._log('ERROR', event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        """Change logging level dynamically."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """
    Pass-through formatter for pre-rendered JSON messages.

    StructuredLogger already renders the entry as JSON.
    """

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Args:
        component: Component identifier
        level: Logging level (default: INFO)

    Returns:
        Configured StructuredLogger instance
    """
    return StructuredLogger(component=component, level=level)
