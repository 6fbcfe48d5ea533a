"""Shared fixtures: a recording transport and a deterministic logger."""

import os
import socket
from datetime import datetime

import pytest

from lwes_logger import LwesLogger
from lwes_logger.emitters import BaseEmitter

FIXED_TIME = datetime(2025, 10, 24, 15, 30, 45)
TIMESTAMP = "Oct 24 15:30:45"
TOKEN = "uuid_timestamp"
HOSTNAME = socket.gethostname()
PID = str(os.getpid())


class RecordingEmitter(BaseEmitter):
    """Emitter that keeps every (channel, fields) pair it is given."""

    def __init__(self):
        super().__init__()
        self.emitted = []

    def _send(self, channel, fields):
        self.emitted.append((channel, fields))

    @property
    def channels(self):
        return [channel for channel, _ in self.emitted]


class FailingEmitter(BaseEmitter):
    """Emitter whose sends always fail."""

    def __init__(self, error):
        super().__init__()
        self.error = error

    def _send(self, channel, fields):
        raise self.error


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def make_logger(emitter):
    def factory(**kwargs):
        kwargs.setdefault("emitter", emitter)
        kwargs.setdefault("clock", lambda: FIXED_TIME)
        kwargs.setdefault("token_provider", lambda: TOKEN)
        return LwesLogger("127.0.0.1", **kwargs)
    return factory


@pytest.fixture
def logger(make_logger):
    return make_logger()


@pytest.fixture
def receiver():
    """Loopback UDP socket; yields (sock, port)."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5.0)
    try:
        yield sock, sock.getsockname()[1]
    finally:
        sock.close()
