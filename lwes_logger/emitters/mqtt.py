"""
MQTT Emitter
============

Bounded Context: MQTT Event Transport

Publishes events to an MQTT broker, one message per channel emission.

Design:
- Channel name used verbatim as the topic (e.g., "LwesLogger::Debug")
- JSON payload of the event fields
- QoS 0 (fire-and-forget) by default
- Connection managed by paho-mqtt's background loop

Example:
    >>> emitter = MqttEmitter("localhost")
    >>> emitter.connect()
    True
    >>> emitter.emit("LwesLogger::Info", {'message': 'hello'})
"""

import json
import threading
from typing import Any, Dict, Mapping, Optional

import paho.mqtt.client as mqtt

from ..exceptions import EmitError
from ..observability import DiagnosticEvent, StructuredLogger
from .base import BaseEmitter

DEFAULT_MQTT_PORT = 1883


class MqttEmitter(BaseEmitter):
    """
    MQTT transport for emitted events.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        client_id: MQTT client identifier
        qos: Quality of Service (default: 0)
        keepalive: Keepalive interval in seconds

    Thread Safety:
        Thread-safe via paho-mqtt's loop_start() and threading.Event
    """

    def __init__(
        self,
        broker_host: str,
        broker_port: int = DEFAULT_MQTT_PORT,
        client_id: str = "",
        logger: Optional[StructuredLogger] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 0,
        keepalive: int = 60
    ):
        """
        Initialize MQTT emitter (does not connect).

        Args:
            broker_host: MQTT broker hostname
            broker_port: MQTT broker port (default: 1883)
            client_id: Client identifier ("" lets the broker assign one)
            logger: Structured logger for diagnostics
            username: MQTT authentication username (optional)
            password: MQTT authentication password (optional)
            qos: Quality of Service (0=fire-and-forget)
            keepalive: Keepalive interval in seconds
        """
        super().__init__(logger)
        self.broker_host = broker_host
        self.broker_port = int(broker_port)
        self.client_id = client_id
        self.qos = qos
        self.keepalive = keepalive

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        self._connected = threading.Event()

    @property
    def broker(self) -> str:
        return f"{self.broker_host}:{self.broker_port}"

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        """Callback when CONNACK is received."""
        if reason_code.is_failure:
            self.logger.error(
                event=DiagnosticEvent.MQTT_CONNECTION_ERROR,
                message=f"Failed to connect to broker ({reason_code})",
                metadata={'broker': self.broker}
            )
            return

        self._connected.set()
        self.logger.info(
            event=DiagnosticEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker",
            metadata={'broker': self.broker, 'client_id': self.client_id}
        )

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        """Callback when disconnected from broker."""
        self._connected.clear()
        self.logger.warning(
            event=DiagnosticEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={'broker': self.broker, 'reason_code': str(reason_code)}
        )

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to the broker and start the network loop.

        Args:
            timeout: Seconds to wait for CONNACK

        Returns:
            True if connected, False otherwise
        """
        try:
            self.client.connect(self.broker_host, self.broker_port, keepalive=self.keepalive)
        except OSError as e:
            self.logger.error(
                event=DiagnosticEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': self.broker}
            )
            return False

        self.client.loop_start()

        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=DiagnosticEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout",
            metadata={'broker': self.broker, 'timeout': timeout}
        )
        return False

    def is_connected(self) -> bool:
        """Check if currently connected to broker."""
        return self._connected.is_set()

    def _send(self, channel: str, fields: Mapping[str, str]) -> None:
        if not self._connected.is_set():
            raise EmitError(f"Cannot emit to {channel}: not connected to {self.broker}")

        payload = json.dumps(dict(fields))
        result = self.client.publish(channel, payload=payload, qos=self.qos)

        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            raise EmitError(f"Publish to {channel} failed: {mqtt.error_string(result.rc)}")

    def _close(self) -> None:
        self.client.loop_stop()
        self.client.disconnect()
        self._connected.clear()

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({
            'connected': self._connected.is_set(),
            'broker': self.broker,
        })
        return stats
