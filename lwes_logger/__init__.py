"""
lwes_logger
===========

Bounded Context: Real-time Structured Logging

A leveled logger that emits every log call as a structured, namespaced
event on an event bus (LWES multicast or MQTT), in parallel with a
conventional text log.

Architecture:
- naming / severity: Channel naming and severity label conventions
- registry: Meta fields merged into every event (hostname, pid, ...)
- events: LogEvent record and EventBuilder
- router: Threshold gate and full-logs / per-severity dispatch
- emitters/: Event transports (MulticastEmitter, MqttEmitter)
- sinks: Text log device
- observability/: JSON diagnostics for the logger's own machinery

Public API
----------
Logger:
    LwesLogger, LoggerConfig

Events:
    LogEvent, EventBuilder, EventRouter, MetaFieldRegistry,
    NamespaceConfig, Severity

Transports:
    BaseEmitter, MulticastEmitter, MqttEmitter, create_emitter

Example:
    >>> from lwes_logger import LwesLogger
    >>>
    >>> logger = LwesLogger("224.1.1.11", namespace="billing_service")
    >>> logger.meta_event_attr("region", "us-west-2")
    >>> logger.info("invoice sent", data={'invoice_id': 42})
    >>> # BillingService::Full and BillingService::Info receive:
    >>> # {'hostname': ..., 'pid': ..., 'region': 'us-west-2',
    >>> #  'message': 'invoice sent', 'progname': '', 'severity': 'INFO',
    >>> #  'timestamp': 'Oct 24 15:30:45',
    >>> #  'event_id': 'BillingService::Info-<uuid>', 'invoice_id': '42'}
"""

__version__ = "1.0.4"

from .channels import ChannelSettings, NamespaceConfig
from .config import LoggerConfig
from .emitters import BaseEmitter, MqttEmitter, MulticastEmitter, create_emitter
from .events import EventBuilder, LogEntry, LogEvent
from .exceptions import (
    ConfigError,
    DecodeError,
    EmitError,
    EncodeError,
    LwesLoggerError,
)
from .logger import LwesLogger
from .naming import normalize, strip_ansi
from .registry import MetaFieldRegistry
from .router import EventRouter
from .severity import Severity
from .sinks import TextSink

__all__ = [
    '__version__',
    # Logger
    'LwesLogger',
    'LoggerConfig',
    # Events
    'LogEvent',
    'LogEntry',
    'EventBuilder',
    'EventRouter',
    'MetaFieldRegistry',
    'NamespaceConfig',
    'ChannelSettings',
    'Severity',
    'TextSink',
    'normalize',
    'strip_ansi',
    # Transports
    'BaseEmitter',
    'MulticastEmitter',
    'MqttEmitter',
    'create_emitter',
    # Errors
    'LwesLoggerError',
    'EmitError',
    'EncodeError',
    'DecodeError',
    'ConfigError',
]
