"""
Diagnostic Event Types
======================

Bounded Context: Observability Event Taxonomy

Event Naming Convention:
    <component>.<action>

    component: emitter, mqtt, listener, config
"""

from enum import Enum


class DiagnosticEvent(str, Enum):
    """
    Typed diagnostic event names.

    Categories:
    - emitter.*: Transport lifecycle (any transport)
    - mqtt.*: MQTT broker interactions
    - listener.*: Multicast listener
    - config.*: Configuration loading
    """

    # ========== Emitter Events ==========
    EMITTER_OPENED = "emitter.opened"
    """Transport ready to send events."""

    EMITTER_CLOSED = "emitter.closed"
    """Transport closed."""

    EMITTER_HEARTBEAT = "emitter.heartbeat"
    """Heartbeat event sent."""

    EMITTER_EMIT_FAILED = "emitter.emit_failed"
    """Event could not be sent (error is re-raised)."""

    EMITTER_HEARTBEAT_FAILED = "emitter.heartbeat_failed"
    """Heartbeat could not be sent (dropped)."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_CONNECTION_ERROR = "mqtt.connection_error"
    """Failed to connect to MQTT broker."""

    # ========== Listener Events ==========
    LISTENER_STARTED = "listener.started"
    """Listener bound and receiving."""

    LISTENER_STOPPED = "listener.stopped"
    """Listener stopped."""

    LISTENER_DECODE_ERROR = "listener.decode_error"
    """Received datagram was not a valid event."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Configuration file loaded."""

