"""
Event Routing
=============

Bounded Context: Dual-channel Event Dispatch

For every accepted log call the router builds exactly one LogEvent and
sends that same instance to:

    "{Namespace}::{full_logs_event}"   unless the full-logs channel is disabled
    "{Namespace}::{Severity}"          unless full_logs_only is set

and then writes a text line to the sink. Calls below the threshold return
immediately without invoking the lazy message supplier.

Message Flow:
    log call → threshold gate → EventBuilder → emitter(s) → TextSink
"""

from typing import Any, Mapping, Optional

from .emitters import BaseEmitter
from .channels import ChannelSettings
from .events import EventBuilder, LogEntry, LogEvent, MessageSupplier
from .severity import Severity, SeverityLike, to_severity
from .sinks import TextSink


class EventRouter:
    """
    Routes log calls to the event transport and the text sink.

    Attributes:
        builder: Event builder (also owns the channel settings)
        emitter: Event transport
        sink: Text sink
        level: Minimum severity accepted by route()

    Example:
        >>> router = EventRouter(builder, emitter, TextSink(), Severity.INFO)
        >>> router.route(Severity.DEBUG, supplier=expensive)  # filtered
        True
    """

    def __init__(
        self,
        builder: EventBuilder,
        emitter: BaseEmitter,
        sink: Optional[TextSink] = None,
        level: SeverityLike = Severity.DEBUG
    ):
        self.builder = builder
        self.emitter = emitter
        self.sink = sink or TextSink()
        self.level = level

    @property
    def level(self) -> Severity:
        return self._level

    @level.setter
    def level(self, value: SeverityLike) -> None:
        self._level = to_severity(value)

    def is_enabled_for(self, severity: Optional[SeverityLike]) -> bool:
        """
        True if a call at this severity passes the threshold gate.

        Absent or unrecognised severities always pass.
        """
        if severity is None:
            return True
        try:
            return to_severity(severity) >= self._level
        except (TypeError, ValueError):
            return not isinstance(severity, int) or severity >= self._level

    def route(
        self,
        severity: Optional[SeverityLike] = None,
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None
    ) -> bool:
        """
        Emit one event for a leveled log call and write the text line.

        Returns:
            True (also for calls filtered by the threshold)
        """
        if not self.is_enabled_for(severity):
            return True

        settings = self.builder.channels.snapshot()
        entry = self.builder.resolve(severity, message, progname, supplier)
        self.dispatch(self.builder.compose(entry, data, settings), entry, settings)

        self.sink.write_line(entry.label, entry.time, entry.progname, entry.message)
        return True

    def append(self, message: Any) -> LogEvent:
        """
        Emit an event with unset severity, then write message unformatted.

        Returns:
            The emitted event
        """
        settings = self.builder.channels.snapshot()
        entry = self.builder.resolve(None, message)
        event = self.builder.compose(entry, settings=settings)
        self.dispatch(event, entry, settings)

        self.sink.write_raw(message)
        return event

    def emit_event(
        self,
        severity: Optional[SeverityLike] = None,
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None
    ) -> LogEvent:
        """
        Build and emit an event, bypassing the threshold and the text sink.

        Returns:
            The emitted event
        """
        settings = self.builder.channels.snapshot()
        entry = self.builder.resolve(severity, message, progname, supplier)
        event = self.builder.compose(entry, data, settings)
        self.dispatch(event, entry, settings)
        return event

    def dispatch(self, event: LogEvent, entry: LogEntry, settings: ChannelSettings) -> None:
        """Send one event to the full-logs and/or severity channel."""
        full_channel = settings.full_channel
        if full_channel:
            self.emitter.emit(full_channel, event)

        if not settings.full_logs_only:
            self.emitter.emit(settings.severity_channel(entry.suffix), event)
