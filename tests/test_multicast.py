"""Tests for the UDP/multicast emitter, against a loopback receiver."""

import socket

import pytest

from lwes_logger import EmitError, MulticastEmitter
from lwes_logger.codec import decode_event
from lwes_logger.emitters import multicast
from lwes_logger.emitters.multicast import is_multicast


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _receive(sock):
    data, _ = sock.recvfrom(65536)
    return decode_event(data)


class TestEmit:
    def test_sends_encoded_event(self, receiver):
        sock, port = receiver
        emitter = MulticastEmitter("127.0.0.1", port=port, heartbeat=0)
        try:
            emitter.emit("LwesLogger::Info", {'message': "hello", 'severity': "INFO"})
            assert _receive(sock) == ("LwesLogger::Info", {'message': "hello", 'severity': "INFO"})
            assert emitter.get_stats()['event_count'] == 1
        finally:
            emitter.close()

    def test_one_datagram_per_emit(self, receiver):
        sock, port = receiver
        emitter = MulticastEmitter("127.0.0.1", port=port, heartbeat=0)
        try:
            for i in range(3):
                emitter.emit("Ns::Debug", {'i': str(i)})
            received = [_receive(sock)[1]['i'] for _ in range(3)]
            assert received == ["0", "1", "2"]
        finally:
            emitter.close()

    def test_send_after_close_raises(self, receiver):
        _, port = receiver
        emitter = MulticastEmitter("127.0.0.1", port=port, heartbeat=0)
        emitter.close()
        with pytest.raises(EmitError):
            emitter.emit("Ns::Debug", {})


class TestHeartbeat:
    def test_startup_heartbeat_shutdown(self, receiver):
        sock, port = receiver
        clock = FakeClock()
        emitter = MulticastEmitter("127.0.0.1", port=port, heartbeat=5, clock=clock)

        assert _receive(sock) == ("System::Startup", {'freq': 5, 'count': 0, 'total': 0, 'seq': 1})

        clock.now += 2
        emitter.emit("Ns::Info", {'message': "a"})
        assert _receive(sock)[0] == "Ns::Info"

        clock.now += 4
        emitter.emit("Ns::Info", {'message': "b"})
        assert _receive(sock)[0] == "Ns::Info"
        assert _receive(sock) == ("System::Heartbeat", {'freq': 5, 'count': 2, 'total': 2, 'seq': 2})

        emitter.close()
        assert _receive(sock) == ("System::Shutdown", {'freq': 5, 'count': 0, 'total': 2, 'seq': 3})

    def test_failed_startup_closes_socket(self, receiver, monkeypatch):
        _, port = receiver
        opened = []
        real_socket = socket.socket

        def tracking_socket(*args, **kwargs):
            sock = real_socket(*args, **kwargs)
            opened.append(sock)
            return sock

        def failing_system(self, name):
            raise EmitError("startup failed")

        monkeypatch.setattr(multicast.socket, "socket", tracking_socket)
        monkeypatch.setattr(MulticastEmitter, "_send_system", failing_system)

        with pytest.raises(EmitError, match="startup failed"):
            MulticastEmitter("127.0.0.1", port=port, heartbeat=1)

        assert len(opened) == 1
        assert opened[0].fileno() == -1

    def test_failed_heartbeat_does_not_fail_event(self, receiver, make_logger):
        sock, port = receiver
        clock = FakeClock()
        emitter = MulticastEmitter("127.0.0.1", port=port, heartbeat=5, clock=clock)
        assert _receive(sock)[0] == "System::Startup"

        def failing_system(name):
            raise EmitError("heartbeat failed")

        emitter._send_system = failing_system
        logger = make_logger(emitter=emitter)
        clock.now += 10

        try:
            assert logger.info("x") is True
            assert _receive(sock)[0] == "LwesLogger::Full"
            assert _receive(sock)[0] == "LwesLogger::Info"
            assert emitter.get_stats()['event_count'] == 2
        finally:
            del emitter._send_system
            emitter.close()


class TestMulticastSocket:
    def test_ttl_applied_for_multicast_group(self):
        emitter = MulticastEmitter("224.1.1.11", port=12345, heartbeat=0, ttl=7)
        try:
            ttl = emitter._sock.getsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL)
            assert ttl == 7
        finally:
            emitter.close()

    @pytest.mark.parametrize("address, expected", [
        ("224.1.1.11", True),
        ("239.255.0.1", True),
        ("127.0.0.1", False),
        ("localhost", False),
    ])
    def test_is_multicast(self, address, expected):
        assert is_multicast(address) is expected
