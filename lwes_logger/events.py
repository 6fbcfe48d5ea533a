"""
Event Building
==============

Bounded Context: Structured Event Composition

This module turns the arguments of one log call into a LogEvent: a flat,
read-only mapping of string field names to string values.

Resolution order:
    1. severity  <- canonical label ("ANY" when absent)
    2. progname  <- given value, else the logger default
    3. message   <- given value, else supplier(), else progname
    4. event_id  <- "{Namespace}::{Severity}-{token}"
    5. meta fields (suppliers invoked), overridden by the core fields
    6. per-call data (suppliers invoked), overriding everything
    7. every value stringified (None -> "")

Example:
    >>> builder = EventBuilder(NamespaceConfig(), MetaFieldRegistry())
    >>> event = builder.build(Severity.DEBUG, "hello", "worker")
    >>> event.severity, event.message
    ('DEBUG', 'hello')
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional

from .channels import ChannelSettings, NamespaceConfig
from .naming import strip_ansi
from .registry import MetaFieldRegistry, resolve_value
from .severity import SeverityLike, canonicalize, capitalize

DEFAULT_DATETIME_FORMAT = "%b %d %H:%M:%S"

MessageSupplier = Callable[[], Any]


def new_event_token() -> str:
    """Time-based unique token for event ids."""
    return str(uuid.uuid1())


def stringify(value: Any) -> str:
    """String form of a field value; None becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class LogEvent(Mapping):
    """
    Immutable structured event record.

    Behaves as a read-only Mapping[str, str] and compares equal to a plain
    dict with the same items. The same instance is handed to every channel
    an event is emitted to.

    Example:
        >>> event = LogEvent({'severity': 'INFO', 'message': 'hi'})
        >>> event == {'severity': 'INFO', 'message': 'hi'}
        True
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping):
        self._fields = {str(key): stringify(value) for key, value in fields.items()}

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"LogEvent({self._fields!r})"

    def to_dict(self) -> Dict[str, str]:
        """Plain dict copy of the fields."""
        return dict(self._fields)

    @property
    def severity(self) -> str:
        return self._fields.get("severity", "")

    @property
    def message(self) -> str:
        return self._fields.get("message", "")

    @property
    def progname(self) -> str:
        return self._fields.get("progname", "")

    @property
    def timestamp(self) -> str:
        return self._fields.get("timestamp", "")

    @property
    def event_id(self) -> str:
        return self._fields.get("event_id", "")


@dataclass(frozen=True)
class LogEntry:
    """
    Resolved arguments of one log call.

    Shared by the event path and the text sink so a lazy message supplier
    runs at most once per call.

    Attributes:
        severity: Original level indicator (None when unset)
        label: Canonical uppercase label ("ANY" when unset)
        progname: Resolved program name (may be None)
        message: Resolved message before escape stripping
        time: Capture time of the call
    """
    severity: Optional[SeverityLike]
    label: str
    progname: Optional[Any]
    message: Any
    time: datetime

    @property
    def suffix(self) -> str:
        """Capitalized label used in channel names and event ids."""
        return capitalize(self.label)


class EventBuilder:
    """
    Composes LogEvent records from log call arguments.

    Attributes:
        channels: Shared routing settings (namespace source)
        registry: Meta fields merged into every event
        clock: Zero-argument callable returning the current datetime
        token_provider: Zero-argument callable returning a unique token
        datetime_format: strftime pattern for the timestamp field
        default_progname: Progname used when a call gives none

    Thread Safety:
        build() reads one snapshot of the channels and registry per call.
    """

    def __init__(
        self,
        channels: NamespaceConfig,
        registry: MetaFieldRegistry,
        clock: Optional[Callable[[], datetime]] = None,
        token_provider: Optional[Callable[[], str]] = None,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
        default_progname: Optional[str] = None
    ):
        self.channels = channels
        self.registry = registry
        self.clock = clock or datetime.now
        self.token_provider = token_provider or new_event_token
        self.datetime_format = datetime_format
        self.default_progname = default_progname

    def resolve(
        self,
        severity: Optional[SeverityLike] = None,
        message: Any = None,
        progname: Any = None,
        supplier: Optional[MessageSupplier] = None
    ) -> LogEntry:
        """
        Apply the severity, progname and message defaulting chain.

        Args:
            severity: Level indicator, or None for the sentinel
            message: Message, or None to fall back to supplier/progname
            progname: Program name, or None for the logger default
            supplier: Zero-argument callable producing the message

        Returns:
            LogEntry with every value resolved
        """
        if progname is None:
            progname = self.default_progname

        if message is None and supplier is not None:
            message = supplier()
        if message is None:
            message = progname

        return LogEntry(
            severity=severity,
            label=canonicalize(severity),
            progname=progname,
            message=message,
            time=self.clock(),
        )

    def compose(
        self,
        entry: LogEntry,
        data: Optional[Mapping] = None,
        settings: Optional[ChannelSettings] = None
    ) -> LogEvent:
        """
        Build the event record for an already resolved entry.

        Args:
            entry: Output of resolve()
            data: Per-call fields; values may be suppliers and win on
                every key collision
            settings: Channel snapshot (taken now when omitted)

        Returns:
            LogEvent with string values only
        """
        settings = settings or self.channels.snapshot()

        event_id = f"{settings.namespace}::{entry.suffix}-{self.token_provider()}"

        fields = self.registry.evaluate()
        fields.update({
            'message': strip_ansi(stringify(entry.message)),
            'progname': stringify(entry.progname),
            'severity': entry.label,
            'timestamp': entry.time.strftime(self.datetime_format),
            'event_id': event_id,
        })

        if data:
            for key, value in data.items():
                fields[key] = resolve_value(value)

        return LogEvent(fields)

    def build(
        self,
        severity: Optional[SeverityLike] = None,
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None,
        settings: Optional[ChannelSettings] = None
    ) -> LogEvent:
        """
        Build one event record from log call arguments.

        Never fails because severity, message, progname or data are
        absent. Exceptions from suppliers propagate unchanged.

        Example:
            >>> event = builder.build(Severity.DEBUG, None, "prog",
            ...                       supplier=lambda: "lazy")
            >>> event.message
            'lazy'
        """
        entry = self.resolve(severity, message, progname, supplier)
        return self.compose(entry, data, settings)
