"""
MetaFieldRegistry - Fields merged into every emitted event

Bounded Context: Per-logger event metadata
Responsibilities:
  - Hold static meta field values (hostname, pid, ...)
  - Hold zero-argument suppliers evaluated on every event build
  - Provide consistent snapshots to the event builder

Threading: Thread-safe (uses lock for writes and snapshots)
Pattern: Registry with explicit registration
"""

import os
import socket
import threading
from typing import Any, Callable, Dict, List, Union

MetaValue = Union[Any, Callable[[], Any]]


def is_supplier(value: Any) -> bool:
    """True if value should be invoked to produce a field value."""
    return callable(value)


def resolve_value(value: MetaValue) -> Any:
    """Invoke a supplier, or return a static value unchanged."""
    if is_supplier(value):
        return value()
    return value


class MetaFieldRegistry:
    """
    Registry of meta fields applied to every built event.

    Key Features:
      - Static values and suppliers share one keyspace
      - Suppliers are invoked on every evaluate(), never cached
      - hostname and pid captured once at construction

    Thread Safety:
      - Writes and snapshots take the lock, so a build never sees a
        half-applied update

    Example:
        registry = MetaFieldRegistry()
        registry.set('region', 'us-west-2')
        registry.set('request_id', lambda: current_request_id())

        registry.evaluate()
        # {'hostname': 'web01', 'pid': '4242', 'region': 'us-west-2',
        #  'request_id': 'f3a9...'}
    """

    def __init__(self, hostname: str = None, pid: str = None):
        self._fields: Dict[str, MetaValue] = {
            'hostname': hostname if hostname is not None else socket.gethostname(),
            'pid': pid if pid is not None else str(os.getpid()),
        }
        self._lock = threading.Lock()

    def set(self, key: str, value: MetaValue) -> None:
        """
        Store a meta field, replacing any prior entry for key.

        Args:
            key: Field name in the emitted event
            value: Static value, or zero-argument callable invoked per event
        """
        with self._lock:
            self._fields[key] = value

    def remove(self, key: str) -> None:
        """
        Remove a meta field.

        Raises:
            KeyError: If key is not registered
        """
        with self._lock:
            del self._fields[key]

    def get(self, key: str, default: Any = None) -> MetaValue:
        """Raw entry for key (a supplier is returned uninvoked)."""
        with self._lock:
            return self._fields.get(key, default)

    def snapshot(self) -> Dict[str, MetaValue]:
        """
        Copy of the raw entries.

        Returns: Dict copy (suppliers not invoked)
        """
        with self._lock:
            return dict(self._fields)

    def evaluate(self) -> Dict[str, Any]:
        """
        Snapshot with every supplier invoked.

        Suppliers run outside the lock; their exceptions propagate.
        """
        return {key: resolve_value(value) for key, value in self.snapshot().items()}

    @property
    def keys(self) -> List[str]:
        """Registered field names, in registration order."""
        with self._lock:
            return list(self._fields)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._fields

    def __len__(self) -> int:
        with self._lock:
            return len(self._fields)
