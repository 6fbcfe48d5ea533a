"""
Multicast Emitter
=================

Bounded Context: LWES Event Transport

Sends LWES-encoded events as UDP datagrams, normally to a multicast group.

Design:
- One datagram per emitted event, no acknowledgement
- Multicast TTL and outgoing interface applied for multicast addresses
- Optional heartbeat: System::Startup on open, System::Heartbeat from
  emit() once `heartbeat` seconds have passed, System::Shutdown on close

Example:
    >>> emitter = MulticastEmitter("224.1.1.11", port=12345, heartbeat=0)
    >>> emitter.emit("LwesLogger::Info", {'message': 'hello'})
    >>> emitter.close()
"""

import ipaddress
import socket
import time
from typing import Any, Callable, Dict, Mapping, Optional

from ..codec import encode_event
from ..exceptions import EmitError
from ..observability import DiagnosticEvent, StructuredLogger
from .base import BaseEmitter

DEFAULT_IFACE = "0.0.0.0"
DEFAULT_PORT = 12345
DEFAULT_HEARTBEAT = 1
DEFAULT_TTL = 1

STARTUP_EVENT = "System::Startup"
HEARTBEAT_EVENT = "System::Heartbeat"
SHUTDOWN_EVENT = "System::Shutdown"


def is_multicast(address: str) -> bool:
    """True if address is a literal IPv4/IPv6 multicast address."""
    try:
        return ipaddress.ip_address(address).is_multicast
    except ValueError:
        return False


class MulticastEmitter(BaseEmitter):
    """
    UDP/multicast transport using the LWES wire encoding.

    Attributes:
        address: Destination host or multicast group
        iface: Outgoing interface address for multicast ("0.0.0.0" = default)
        port: Destination UDP port
        heartbeat: Seconds between heartbeat events (0 disables)
        ttl: Multicast time-to-live

    Thread Safety:
        sendto() on a UDP socket is atomic per datagram; heartbeat
        bookkeeping is done under the stats lock.
    """

    def __init__(
        self,
        address: str,
        iface: str = DEFAULT_IFACE,
        port: int = DEFAULT_PORT,
        heartbeat: float = DEFAULT_HEARTBEAT,
        ttl: int = DEFAULT_TTL,
        logger: Optional[StructuredLogger] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Open the UDP socket.

        Args:
            address: Destination host or multicast group
            iface: Outgoing interface for multicast (default: 0.0.0.0)
            port: Destination port (default: 12345)
            heartbeat: Heartbeat interval in seconds, 0 disables (default: 1)
            ttl: Multicast TTL (default: 1)
            logger: Structured logger instance
            clock: Monotonic time source for heartbeat scheduling

        Raises:
            EmitError: If the socket cannot be created or configured
        """
        super().__init__(logger)
        self.address = address
        self.iface = iface
        self.port = int(port)
        self.heartbeat = heartbeat
        self.ttl = int(ttl)
        self._clock = clock

        self._target = (address, self.port)
        self._sock = self._open_socket()

        self._total = 0
        self._since_heartbeat = 0
        self._sequence = 0
        self._last_heartbeat = clock()

        self.logger.info(
            event=DiagnosticEvent.EMITTER_OPENED,
            message="Multicast emitter ready",
            metadata={
                'address': f"{address}:{self.port}",
                'iface': iface,
                'ttl': self.ttl,
                'heartbeat': heartbeat
            }
        )

        if self.heartbeat:
            try:
                self._send_system(STARTUP_EVENT)
            except EmitError:
                self._sock.close()
                raise

    def _open_socket(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.address else socket.AF_INET
        try:
            sock = socket.socket(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        except OSError as e:
            raise EmitError(f"Unable to create UDP socket: {e}") from e

        if is_multicast(self.address):
            try:
                if family == socket.AF_INET6:
                    sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_HOPS, self.ttl)
                else:
                    sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self.ttl)
                    if self.iface and self.iface != DEFAULT_IFACE:
                        sock.setsockopt(
                            socket.IPPROTO_IP,
                            socket.IP_MULTICAST_IF,
                            socket.inet_aton(self.iface)
                        )
            except OSError as e:
                sock.close()
                raise EmitError(f"Unable to configure multicast on {self.iface}: {e}") from e

        return sock

    def _send_datagram(self, payload: bytes) -> None:
        try:
            self._sock.sendto(payload, self._target)
        except OSError as e:
            raise EmitError(f"Failed to send to {self.address}:{self.port}: {e}") from e

    def _send(self, channel: str, fields: Mapping[str, str]) -> None:
        self._send_datagram(encode_event(channel, fields))

        with self._stats_lock:
            self._total += 1
            self._since_heartbeat += 1

    def _after_emit(self) -> None:
        with self._stats_lock:
            due = bool(self.heartbeat) and self._clock() - self._last_heartbeat >= self.heartbeat

        if not due:
            return
        try:
            self._send_system(HEARTBEAT_EVENT)
        except EmitError as e:
            self.logger.warning(
                event=DiagnosticEvent.EMITTER_HEARTBEAT_FAILED,
                message="Heartbeat dropped",
                metadata={'address': f"{self.address}:{self.port}", 'error': str(e)}
            )

    def _system_fields(self) -> Dict[str, Any]:
        with self._stats_lock:
            self._sequence += 1
            fields = {
                'freq': int(self.heartbeat),
                'count': self._since_heartbeat,
                'total': self._total,
                'seq': self._sequence,
            }
            self._since_heartbeat = 0
            self._last_heartbeat = self._clock()
        return fields

    def _send_system(self, name: str) -> None:
        fields = self._system_fields()
        self._send_datagram(encode_event(name, fields))
        self.logger.debug(
            event=DiagnosticEvent.EMITTER_HEARTBEAT,
            message=f"Sent {name}",
            metadata=fields
        )

    def _close(self) -> None:
        try:
            if self.heartbeat:
                self._send_system(SHUTDOWN_EVENT)
        finally:
            self._sock.close()

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats.update({
            'address': f"{self.address}:{self.port}",
            'heartbeat_seq': self._sequence,
        })
        return stats
