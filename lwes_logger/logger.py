"""
LwesLogger
==========

Bounded Context: Leveled Logging Facade

A leveled logger (debug/info/warn/error/fatal/unknown) whose every accepted
call is emitted as a structured, namespaced event before a text line is
written to the log device.

Architecture:
    LwesLogger
        ├── NamespaceConfig     (namespace, full-logs routing)
        ├── MetaFieldRegistry   (hostname, pid, custom meta fields)
        ├── EventBuilder        (LogEvent composition)
        ├── EventRouter         (threshold, channels, text sink)
        ├── BaseEmitter         (multicast or MQTT transport)
        └── TextSink            (human-readable lines)

Example:
    >>> logger = LwesLogger("224.1.1.11", namespace="billing_service",
    ...                     log_device=sys.stderr)
    >>> logger.info("invoice sent", data={'invoice_id': 42})
    # emits BillingService::Full and BillingService::Info

    >>> @logger.meta_event_attr("request_id")
    ... def current_request_id():
    ...     return context.request_id
"""

from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from .channels import DEFAULT_NAMESPACE, NamespaceConfig
from .config import LoggerConfig
from .emitters import BaseEmitter, create_emitter
from .emitters.multicast import DEFAULT_HEARTBEAT, DEFAULT_IFACE, DEFAULT_TTL
from .events import DEFAULT_DATETIME_FORMAT, EventBuilder, LogEvent, MessageSupplier
from .registry import MetaFieldRegistry, MetaValue
from .router import EventRouter
from .severity import Severity, SeverityLike
from .sinks import TextSink


class LwesLogger:
    """
    Leveled logger with structured event emission.

    Each accepted call builds one LogEvent and emits it to
    "{namespace}::{full_logs_event}" and/or "{namespace}::{Severity}",
    then writes a formatted line to the log device.

    Attributes:
        registry: Meta fields merged into every event
        channels: Namespace and full-logs routing settings
        builder: Event builder
        router: Event router
        sink: Text sink for the log device

    Thread Safety:
        Meta field registration and namespace changes are locked; each
        call works from one consistent snapshot of both.
    """

    def __init__(
        self,
        address: str,
        log_device: Any = None,
        namespace: str = DEFAULT_NAMESPACE,
        datetime_format: str = DEFAULT_DATETIME_FORMAT,
        iface: str = DEFAULT_IFACE,
        port: Optional[int] = None,
        heartbeat: float = DEFAULT_HEARTBEAT,
        ttl: int = DEFAULT_TTL,
        level: SeverityLike = Severity.DEBUG,
        progname: Optional[str] = None,
        transport: str = "multicast",
        emitter: Optional[BaseEmitter] = None,
        clock: Optional[Callable[[], datetime]] = None,
        token_provider: Optional[Callable[[], str]] = None
    ):
        """
        Create a logger.

        Args:
            address: Transport address (multicast group or MQTT broker host)
            log_device: Text log device (None, stream, path, or rotation tuple)
            namespace: Event namespace, normalized (default: "LwesLogger")
            datetime_format: strftime pattern for event and line timestamps
            iface: Multicast interface (default: "0.0.0.0")
            port: Transport port (default: 12345 multicast, 1883 MQTT)
            heartbeat: Multicast heartbeat interval in seconds (default: 1)
            ttl: Multicast TTL (default: 1)
            level: Minimum severity (default: DEBUG)
            progname: Default program name
            transport: "multicast" or "mqtt" (ignored when emitter is given)
            emitter: Pre-built transport
            clock: Current-time source (default: datetime.now)
            token_provider: Unique token source for event ids
        """
        self.address = address
        self.registry = MetaFieldRegistry()
        self.channels = NamespaceConfig(namespace)
        self.builder = EventBuilder(
            self.channels,
            self.registry,
            clock=clock,
            token_provider=token_provider,
            datetime_format=datetime_format,
            default_progname=progname,
        )
        self.sink = TextSink(
            log_device,
            datetime_format=datetime_format,
            hostname=self.registry.get('hostname'),
        )

        if emitter is None:
            emitter = create_emitter(
                transport,
                address,
                iface=iface,
                port=port,
                heartbeat=heartbeat,
                ttl=ttl,
            )

        self.router = EventRouter(self.builder, emitter, self.sink, level)

    @classmethod
    def from_config(cls, config: LoggerConfig, **kwargs) -> "LwesLogger":
        """
        Create a logger from a LoggerConfig.

        Keyword arguments (emitter, clock, token_provider) are passed to
        the constructor.
        """
        logger = cls(
            config.address,
            log_device=config.log_device,
            namespace=config.namespace,
            datetime_format=config.datetime_format,
            iface=config.iface,
            port=config.port,
            heartbeat=config.heartbeat,
            ttl=config.ttl,
            level=config.level,
            progname=config.progname,
            transport=config.transport,
            **kwargs
        )
        logger.full_logs_event = config.full_logs_event
        logger.full_logs_only = config.full_logs_only
        for key, value in config.meta.items():
            logger.meta_event_attr(key, value)
        return logger

    # ========== Settings ==========

    @property
    def emitter(self) -> BaseEmitter:
        return self.router.emitter

    @property
    def namespace(self) -> str:
        return self.channels.namespace

    @namespace.setter
    def namespace(self, value: str) -> None:
        self.channels.namespace = value

    @property
    def full_logs_event(self) -> Optional[str]:
        """Full-logs channel suffix; None or False disables it."""
        return self.channels.full_logs_event

    @full_logs_event.setter
    def full_logs_event(self, value) -> None:
        self.channels.full_logs_event = value

    @property
    def full_logs_only(self) -> bool:
        """Only emit to the full-logs channel."""
        return self.channels.full_logs_only

    @full_logs_only.setter
    def full_logs_only(self, value: bool) -> None:
        self.channels.full_logs_only = value

    @property
    def level(self) -> Severity:
        return self.router.level

    @level.setter
    def level(self, value: SeverityLike) -> None:
        self.router.level = value

    @property
    def progname(self) -> Optional[str]:
        return self.builder.default_progname

    @progname.setter
    def progname(self, value: Optional[str]) -> None:
        self.builder.default_progname = value

    @property
    def datetime_format(self) -> str:
        return self.builder.datetime_format

    @datetime_format.setter
    def datetime_format(self, value: str) -> None:
        self.builder.datetime_format = value
        self.sink.datetime_format = value

    @property
    def meta_event(self) -> Dict[str, MetaValue]:
        """Snapshot of the meta fields (suppliers uninvoked)."""
        return self.registry.snapshot()

    def meta_event_attr(self, key: str, value: MetaValue = None):
        """
        Set a meta field added to every event.

        A callable value is invoked on every event. Without a value, returns
        a decorator that registers the decorated function as the supplier.

        Example:
            >>> logger.meta_event_attr("region", "us-west-2")
            >>> logger.meta_event_attr("load", lambda: os.getloadavg()[0])
            >>> @logger.meta_event_attr("user")
            ... def current_user():
            ...     return session.user
        """
        if value is not None:
            self.registry.set(key, value)
            return value

        def register(supplier: Callable[[], Any]) -> Callable[[], Any]:
            self.registry.set(key, supplier)
            return supplier

        return register

    def is_enabled_for(self, severity: SeverityLike) -> bool:
        return self.router.is_enabled_for(severity)

    # ========== Logging ==========

    def add(
        self,
        severity: Optional[SeverityLike],
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None
    ) -> bool:
        """
        Log to the event transport and the log device.

        Args:
            severity: Level of the call
            message: Message; when None, supplier() then progname are used
            progname: Program name (default: logger progname)
            data: Extra event fields; values may be callables
            supplier: Lazy message, never invoked for filtered calls

        Returns:
            True
        """
        return self.router.route(severity, message, progname, data, supplier)

    log = add

    def debug(self, message: Any = None, progname: Any = None,
              data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.DEBUG, message, progname, data, supplier)

    def info(self, message: Any = None, progname: Any = None,
             data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.INFO, message, progname, data, supplier)

    def warn(self, message: Any = None, progname: Any = None,
             data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.WARN, message, progname, data, supplier)

    warning = warn

    def error(self, message: Any = None, progname: Any = None,
              data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.ERROR, message, progname, data, supplier)

    def fatal(self, message: Any = None, progname: Any = None,
              data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.FATAL, message, progname, data, supplier)

    def unknown(self, message: Any = None, progname: Any = None,
                data: Optional[Mapping] = None, supplier: Optional[MessageSupplier] = None) -> bool:
        return self.add(Severity.UNKNOWN, message, progname, data, supplier)

    def append(self, message: Any) -> LogEvent:
        """
        Emit a "{namespace}::Any" event and write message to the log
        device without formatting.
        """
        return self.router.append(message)

    def emit_log(
        self,
        severity: Optional[SeverityLike],
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None
    ) -> LogEvent:
        """Emit an event only: no threshold check, nothing written to the log device."""
        return self.router.emit_event(severity, message, progname, data, supplier)

    def build_log_event(
        self,
        severity: Optional[SeverityLike],
        message: Any = None,
        progname: Any = None,
        data: Optional[Mapping] = None,
        supplier: Optional[MessageSupplier] = None
    ) -> LogEvent:
        """Build an event record without emitting it."""
        return self.builder.build(severity, message, progname, data, supplier)

    # ========== Lifecycle ==========

    def close(self) -> None:
        """Close the transport and the log device."""
        try:
            self.router.emitter.close()
        finally:
            self.sink.close()

    def __enter__(self) -> "LwesLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
