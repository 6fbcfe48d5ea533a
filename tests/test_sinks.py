"""Tests for the text sink."""

import io
import logging.handlers
from datetime import datetime

import pytest

from lwes_logger import ConfigError
from lwes_logger.sinks import TextSink, create_handler

WHEN = datetime(2025, 1, 2, 3, 4, 5)


class BrokenStream:
    def write(self, text):
        raise OSError("disk full")

    def flush(self):
        pass


class TestFormatting:
    def test_format_line(self):
        sink = TextSink(io.StringIO(), hostname="web01", pid=42)
        line = sink.format_line("ERROR", WHEN, "prog", "message")
        assert line == "web01 [Jan 02 03:04:05#42] ERROR -- prog: message\n"

    def test_format_line_blank_progname(self):
        sink = TextSink(io.StringIO(), hostname="web01", pid=42)
        assert sink.format_line("WARN", WHEN, None, "m") == "web01 [Jan 02 03:04:05#42]  WARN -- : m\n"

    def test_write_raw_is_unformatted(self):
        device = io.StringIO()
        sink = TextSink(device)
        sink.write_raw("raw")
        sink.write_raw(" bytes")
        assert device.getvalue() == "raw bytes"


class TestDevices:
    def test_none_writes_nothing(self):
        sink = TextSink(None)
        assert not sink.enabled
        sink.write_line("INFO", WHEN, None, "dropped")

    def test_path(self, tmp_path):
        path = tmp_path / "test.log"
        sink = TextSink(str(path), hostname="h", pid=1)
        sink.write_line("INFO", WHEN, "p", "to file")
        sink.close()
        assert path.read_text() == "h [Jan 02 03:04:05#1]  INFO -- p: to file\n"

    def test_rotation_by_size(self, tmp_path):
        handler = create_handler([str(tmp_path / "test.log"), 10, 10241024])
        try:
            assert isinstance(handler, logging.handlers.RotatingFileHandler)
            assert handler.backupCount == 10
            assert handler.maxBytes == 10241024
        finally:
            handler.close()

    def test_rotation_by_age(self, tmp_path):
        handler = create_handler((str(tmp_path / "test.log"), "daily"))
        try:
            assert isinstance(handler, logging.handlers.TimedRotatingFileHandler)
        finally:
            handler.close()

    def test_unknown_rotation(self, tmp_path):
        with pytest.raises(ConfigError):
            create_handler((str(tmp_path / "test.log"), "monthly"))

    def test_unsupported_device(self):
        with pytest.raises(ConfigError):
            create_handler(3.5)

    def test_stream_left_open_on_close(self):
        device = io.StringIO()
        sink = TextSink(device)
        sink.close()
        assert not device.closed


class TestErrors:
    def test_write_failure_propagates(self):
        sink = TextSink(BrokenStream())
        with pytest.raises(OSError, match="disk full"):
            sink.write_line("INFO", WHEN, None, "m")
