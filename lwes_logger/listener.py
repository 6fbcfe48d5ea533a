"""
Multicast Listener
==================

Bounded Context: Event Consumption

Receives LWES datagrams (for example, those sent by MulticastEmitter),
decodes them and hands each event to a callback.

Design:
- Background receive thread with a short socket timeout so stop() is prompt
- Undecodable datagrams are logged and skipped
- Callbacks run in the receive thread; keep them fast

Example:
    >>> def on_event(channel, fields):
    ...     print(channel, fields.get('message'))
    >>>
    >>> listener = MulticastListener("224.1.1.11", 12345, on_event)
    >>> listener.start()
    >>> # ...
    >>> listener.stop()
"""

import socket
import struct
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from .codec import decode_event
from .emitters.multicast import DEFAULT_IFACE, DEFAULT_PORT, is_multicast
from .exceptions import DecodeError
from .observability import DiagnosticEvent, StructuredLogger, create_logger

EventCallback = Callable[[str, Dict[str, Any]], None]

MAX_DATAGRAM = 65536


class MulticastListener:
    """
    Receiver for LWES events.

    Attributes:
        address: Multicast group to join, or local address to bind
        port: UDP port
        iface: Interface used to join the group
        on_event: Callback invoked with (channel, fields)

    Thread Safety:
        Counters are guarded by a lock; start()/stop() are not reentrant.
    """

    def __init__(
        self,
        address: str,
        port: int = DEFAULT_PORT,
        on_event: Optional[EventCallback] = None,
        iface: str = DEFAULT_IFACE,
        logger: Optional[StructuredLogger] = None
    ):
        self.address = address
        self.port = int(port)
        self.iface = iface
        self.on_event = on_event
        self.logger = logger or create_logger("listener")

        self._sock: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._stats_lock = threading.Lock()
        self._received = 0
        self._rejected = 0

    def bind(self) -> Tuple[str, int]:
        """
        Open the socket (joining the group for multicast addresses).

        Returns:
            Bound (host, port); port is the real port when 0 was requested
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        if is_multicast(self.address):
            sock.bind(("", self.port))
            membership = struct.pack(
                "4s4s",
                socket.inet_aton(self.address),
                socket.inet_aton(self.iface)
            )
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        else:
            sock.bind((self.address, self.port))

        sock.settimeout(0.5)
        self._sock = sock
        return sock.getsockname()

    def handle_datagram(self, data: bytes) -> bool:
        """
        Decode one datagram and invoke the callback.

        Returns:
            True if the datagram was a valid event
        """
        try:
            channel, fields = decode_event(data)
        except DecodeError as e:
            with self._stats_lock:
                self._rejected += 1
            self.logger.warning(
                event=DiagnosticEvent.LISTENER_DECODE_ERROR,
                message="Discarded invalid datagram",
                metadata={'error': str(e), 'size': len(data)}
            )
            return False

        with self._stats_lock:
            self._received += 1

        if self.on_event is not None:
            self.on_event(channel, fields)
        return True

    def start(self) -> None:
        """Start receiving in a background thread."""
        if self._sock is None:
            self.bind()

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._receive_loop, daemon=True)
        self._thread.start()

        self.logger.info(
            event=DiagnosticEvent.LISTENER_STARTED,
            message="Listening for events",
            metadata={'address': f"{self.address}:{self.port}"}
        )

    def _receive_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                data, _ = self._sock.recvfrom(MAX_DATAGRAM)
            except socket.timeout:
                continue
            except OSError:
                if self._stop_event.is_set():
                    break
                raise
            self.handle_datagram(data)

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the receive thread and close the socket."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

        self.logger.info(
            event=DiagnosticEvent.LISTENER_STOPPED,
            message="Listener stopped",
            metadata=self.get_stats()
        )

    def get_stats(self) -> Dict[str, int]:
        with self._stats_lock:
            return {'received': self._received, 'rejected': self._rejected}
