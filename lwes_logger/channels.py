"""
Channel Settings
================

Bounded Context: Event Routing Configuration

NamespaceConfig holds the mutable routing settings of one logger: the
normalized namespace, the full-logs channel name and the full-logs-only
switch. Every route/build call works from one frozen ChannelSettings
snapshot so a concurrent namespace change never splits a call across two
namespaces.
"""

import threading
from dataclasses import dataclass
from typing import Optional, Union

from .naming import channel_name, normalize

DEFAULT_NAMESPACE = "LwesLogger"
DEFAULT_FULL_LOGS_EVENT = "Full"


@dataclass(frozen=True)
class ChannelSettings:
    """
    Immutable view of the routing settings for one call.

    Attributes:
        namespace: Normalized namespace
        full_logs_event: Full-logs channel suffix, or None when disabled
        full_logs_only: Skip the per-severity channel
    """
    namespace: str
    full_logs_event: Optional[str]
    full_logs_only: bool

    @property
    def full_channel(self) -> Optional[str]:
        """Full-logs channel name, or None when disabled."""
        if not self.full_logs_event:
            return None
        return channel_name(self.namespace, self.full_logs_event)

    def severity_channel(self, suffix: str) -> str:
        """Channel name for a capitalized severity suffix."""
        return channel_name(self.namespace, suffix)


class NamespaceConfig:
    """
    Mutable routing settings shared by the builder and the router.

    The namespace is re-normalized on every assignment. Setting
    full_logs_event to None or False disables the full-logs channel.

    Example:
        >>> config = NamespaceConfig("my_app")
        >>> config.namespace
        'MyApp'
        >>> config.snapshot().full_channel
        'MyApp::Full'
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        full_logs_event: Union[str, None, bool] = DEFAULT_FULL_LOGS_EVENT,
        full_logs_only: bool = False
    ):
        self._lock = threading.Lock()
        self._namespace = normalize(namespace)
        self._full_logs_event = full_logs_event or None
        self._full_logs_only = bool(full_logs_only)

    @property
    def namespace(self) -> str:
        return self._namespace

    @namespace.setter
    def namespace(self, value: str) -> None:
        normalized = normalize(value)
        with self._lock:
            self._namespace = normalized

    @property
    def full_logs_event(self) -> Optional[str]:
        return self._full_logs_event

    @full_logs_event.setter
    def full_logs_event(self, value: Union[str, None, bool]) -> None:
        with self._lock:
            self._full_logs_event = value or None

    @property
    def full_logs_only(self) -> bool:
        return self._full_logs_only

    @full_logs_only.setter
    def full_logs_only(self, value: bool) -> None:
        with self._lock:
            self._full_logs_only = bool(value)

    def snapshot(self) -> ChannelSettings:
        """Consistent copy of all settings."""
        with self._lock:
            return ChannelSettings(
                namespace=self._namespace,
                full_logs_event=self._full_logs_event,
                full_logs_only=self._full_logs_only,
            )
