"""Tests for the MQTT emitter with a mocked paho client."""

import json
from unittest.mock import MagicMock, patch

import paho.mqtt.client as mqtt
import pytest

from lwes_logger import EmitError, MqttEmitter


@pytest.fixture
def client():
    with patch("lwes_logger.emitters.mqtt.mqtt.Client") as client_class:
        instance = client_class.return_value
        instance.publish.return_value = MagicMock(rc=mqtt.MQTT_ERR_SUCCESS)
        yield instance


def _accept(emitter):
    emitter._on_connect(None, None, {}, MagicMock(is_failure=False), None)


class TestConnect:
    def test_connect_waits_for_connack(self, client):
        emitter = MqttEmitter("broker.local", broker_port=1884)
        client.connect.side_effect = lambda *args, **kwargs: _accept(emitter)

        assert emitter.connect(timeout=1.0) is True
        client.connect.assert_called_once_with("broker.local", 1884, keepalive=60)
        client.loop_start.assert_called_once()
        assert emitter.is_connected()

    def test_connect_refused(self, client):
        client.connect.side_effect = ConnectionRefusedError()
        emitter = MqttEmitter("broker.local")
        assert emitter.connect(timeout=0.1) is False

    def test_connack_failure(self, client):
        emitter = MqttEmitter("broker.local")
        emitter._on_connect(None, None, {}, MagicMock(is_failure=True), None)
        assert not emitter.is_connected()

    def test_disconnect_clears_state(self, client):
        emitter = MqttEmitter("broker.local")
        _accept(emitter)
        emitter._on_disconnect(None, None, {}, 0, None)
        assert not emitter.is_connected()


class TestEmit:
    def test_publishes_json_to_channel_topic(self, client):
        emitter = MqttEmitter("broker.local")
        _accept(emitter)

        emitter.emit("LwesLogger::Info", {'message': "hi"})

        topic = client.publish.call_args.args[0]
        payload = client.publish.call_args.kwargs['payload']
        assert topic == "LwesLogger::Info"
        assert json.loads(payload) == {'message': "hi"}
        assert client.publish.call_args.kwargs['qos'] == 0

    def test_not_connected_raises(self, client):
        emitter = MqttEmitter("broker.local")
        with pytest.raises(EmitError, match="not connected"):
            emitter.emit("LwesLogger::Info", {})
        client.publish.assert_not_called()

    def test_publish_failure_raises(self, client):
        client.publish.return_value = MagicMock(rc=mqtt.MQTT_ERR_NO_CONN)
        emitter = MqttEmitter("broker.local")
        _accept(emitter)

        with pytest.raises(EmitError):
            emitter.emit("LwesLogger::Info", {})
        assert emitter.get_stats()['event_count'] == 0

    def test_close_stops_loop(self, client):
        emitter = MqttEmitter("broker.local")
        emitter.close()
        client.loop_stop.assert_called_once()
        client.disconnect.assert_called_once()
        assert emitter.closed
