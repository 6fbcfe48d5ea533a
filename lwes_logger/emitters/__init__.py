"""
Event Emitters
==============

Bounded Context: Event Transport

Public API
----------
    BaseEmitter: Abstract transport (for custom transports)
    MulticastEmitter: LWES datagrams over UDP/multicast
    MqttEmitter: JSON messages over MQTT
    create_emitter: Factory keyed by transport name

Example:
    >>> from lwes_logger.emitters import create_emitter
    >>> emitter = create_emitter("multicast", "224.1.1.11", port=12345)
"""

from typing import Optional

from ..exceptions import ConfigError
from ..observability import StructuredLogger
from .base import BaseEmitter
from .multicast import (
    DEFAULT_HEARTBEAT,
    DEFAULT_IFACE,
    DEFAULT_PORT,
    DEFAULT_TTL,
    MulticastEmitter,
)
from .mqtt import DEFAULT_MQTT_PORT, MqttEmitter

TRANSPORTS = ("multicast", "mqtt")

DEFAULT_PORTS = {
    'multicast': DEFAULT_PORT,
    'mqtt': DEFAULT_MQTT_PORT,
}


def create_emitter(
    transport: str,
    address: str,
    iface: str = DEFAULT_IFACE,
    port: Optional[int] = None,
    heartbeat: float = DEFAULT_HEARTBEAT,
    ttl: int = DEFAULT_TTL,
    logger: Optional[StructuredLogger] = None
) -> BaseEmitter:
    """
    Create a transport from connection parameters.

    The multicast transport uses every parameter. The MQTT transport uses
    address and port, and connects before returning; if the broker is
    unreachable, later emits raise EmitError.

    Args:
        transport: "multicast" or "mqtt"
        address: Destination address / broker host
        iface: Multicast interface
        port: Port (default depends on transport)
        heartbeat: Multicast heartbeat interval in seconds
        ttl: Multicast TTL
        logger: Structured logger for diagnostics

    Raises:
        ConfigError: If transport is unknown
    """
    if transport not in TRANSPORTS:
        raise ConfigError(
            f"Invalid transport: {transport}. Must be one of {TRANSPORTS}"
        )

    if port is None:
        port = DEFAULT_PORTS[transport]

    if transport == "mqtt":
        emitter = MqttEmitter(broker_host=address, broker_port=port, logger=logger)
        emitter.connect()
        return emitter

    return MulticastEmitter(
        address,
        iface=iface,
        port=port,
        heartbeat=heartbeat,
        ttl=ttl,
        logger=logger,
    )


__all__ = [
    'BaseEmitter',
    'MulticastEmitter',
    'MqttEmitter',
    'TRANSPORTS',
    'DEFAULT_PORTS',
    'create_emitter',
]
