"""Tests for the LwesLogger facade: construction, settings, lifecycle."""

import io
from unittest.mock import patch

from lwes_logger import LoggerConfig, LwesLogger, MulticastEmitter, Severity

from .conftest import RecordingEmitter


class TestInit:
    def test_defaults(self, logger):
        assert logger.full_logs_event == "Full"
        assert logger.full_logs_only is False
        assert logger.namespace == "LwesLogger"
        assert logger.level is Severity.DEBUG
        assert not logger.sink.enabled

    def test_namespace_normalized(self, make_logger):
        assert make_logger(namespace="test_namespace").namespace == "TestNamespace"

    def test_emitter_options_forwarded(self):
        with patch("lwes_logger.logger.create_emitter") as create:
            LwesLogger("0.0.0.0", iface="244.0.0.1", port=54321, heartbeat=5, ttl=30)

        create.assert_called_once_with(
            "multicast",
            "0.0.0.0",
            iface="244.0.0.1",
            port=54321,
            heartbeat=5,
            ttl=30,
        )

    def test_default_emitter_is_multicast(self, receiver):
        _, port = receiver
        logger = LwesLogger("127.0.0.1", port=port, heartbeat=0)
        try:
            assert isinstance(logger.emitter, MulticastEmitter)
            assert logger.emitter.port == port
        finally:
            logger.close()


class TestMetaEventAttr:
    def test_static_value(self, logger):
        logger.meta_event_attr('test1', "value1")
        assert logger.meta_event['test1'] == "value1"

    def test_supplier_stored_uninvoked(self, logger):
        logger.meta_event_attr('test2', lambda: "value2")
        assert logger.meta_event['test2']() == "value2"

    def test_decorator(self, logger):
        @logger.meta_event_attr('test3')
        def supplier():
            return "value3"

        assert logger.meta_event['test3'] is supplier
        assert supplier() == "value3"

    def test_meta_event_is_snapshot(self, logger):
        logger.meta_event['sneaky'] = 1
        assert 'sneaky' not in logger.meta_event


class TestSettings:
    def test_datetime_format_applies_to_events_and_lines(self, make_logger):
        device = io.StringIO()
        logger = make_logger(log_device=device)
        logger.datetime_format = "%H:%M"

        event = logger.emit_log(Severity.INFO, "x")
        logger.info("x")

        assert event.timestamp == "15:30"
        assert "[15:30#" in device.getvalue()


class TestFromConfig:
    def test_applies_config(self):
        emitter = RecordingEmitter()
        config = LoggerConfig(
            address="224.1.1.11",
            namespace="billing_service",
            full_logs_event="Everything",
            full_logs_only=True,
            level="WARN",
            progname="billing",
            meta={'region': "us-west-2"},
        )

        logger = LwesLogger.from_config(config, emitter=emitter)
        logger.info("dropped")
        logger.error("kept")

        assert emitter.channels == ["BillingService::Everything"]
        fields = emitter.emitted[0][1]
        assert fields['region'] == "us-west-2"
        assert fields['progname'] == "billing"


class TestLifecycle:
    def test_context_manager_closes_emitter(self):
        emitter = RecordingEmitter()
        with LwesLogger("127.0.0.1", emitter=emitter) as logger:
            logger.info("x")
        assert emitter.closed
