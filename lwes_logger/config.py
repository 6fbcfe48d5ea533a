"""
Configuration schema for LwesLogger.

Defines the construction-time options of a logger: event transport
connection parameters, namespace and channel routing, timestamp format,
severity threshold and the text log device.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .channels import DEFAULT_FULL_LOGS_EVENT, DEFAULT_NAMESPACE
from .emitters import DEFAULT_PORTS, TRANSPORTS
from .emitters.multicast import DEFAULT_HEARTBEAT, DEFAULT_IFACE, DEFAULT_TTL
from .events import DEFAULT_DATETIME_FORMAT
from .exceptions import ConfigError
from .severity import to_severity


@dataclass(frozen=True)
class LoggerConfig:
    """
    Construction options for LwesLogger.

    Loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    # Transport
    address: str
    transport: str = "multicast"
    iface: str = DEFAULT_IFACE
    port: Optional[int] = None  # transport default when unset
    heartbeat: float = DEFAULT_HEARTBEAT
    ttl: int = DEFAULT_TTL

    # Event naming
    namespace: str = DEFAULT_NAMESPACE
    full_logs_event: Optional[str] = DEFAULT_FULL_LOGS_EVENT
    full_logs_only: bool = False
    datetime_format: str = DEFAULT_DATETIME_FORMAT

    # Leveled logging
    level: Union[str, int] = "DEBUG"
    progname: Optional[str] = None
    log_device: Any = None

    # Static meta fields added to every event
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate logger configuration."""
        if not self.address:
            raise ConfigError("address cannot be empty")

        if self.transport not in TRANSPORTS:
            raise ConfigError(
                f"Invalid transport: {self.transport}. Must be one of {TRANSPORTS}"
            )

        if self.port is not None and not 1 <= self.port <= 65535:
            raise ConfigError(
                f"port must be in [1, 65535], got {self.port}"
            )

        if not 0 <= self.ttl <= 255:
            raise ConfigError(
                f"ttl must be in [0, 255], got {self.ttl}"
            )

        if self.heartbeat < 0:
            raise ConfigError(
                f"heartbeat must be >= 0, got {self.heartbeat}"
            )

        if not self.namespace:
            raise ConfigError("namespace cannot be empty")

        try:
            to_severity(self.level)
        except ValueError as e:
            raise ConfigError(f"Invalid level: {self.level!r}") from e

    @property
    def resolved_port(self) -> int:
        """Configured port, or the transport's default."""
        if self.port is None:
            return DEFAULT_PORTS[self.transport]
        return self.port

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggerConfig":
        """
        Build configuration from a plain dict.

        Raises:
            ConfigError: On unknown keys or a missing address
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        if "address" not in data:
            raise ConfigError("address is required")

        values = dict(data)
        if isinstance(values.get("log_device"), list):
            values["log_device"] = tuple(values["log_device"])
        if values.get("meta") is None:
            values["meta"] = {}

        return cls(**values)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "LoggerConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            address: "224.1.1.11"
            port: 12345
            iface: "0.0.0.0"
            heartbeat: 1
            ttl: 1

            namespace: "billing_service"
            full_logs_event: "Full"
            full_logs_only: false
            datetime_format: "%b %d %H:%M:%S"

            level: "INFO"
            progname: "billing"
            log_device: ["./logs/billing.log", 10, 10485760]

            meta:
              region: "us-west-2"
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {yaml_path}, got {type(data).__name__}")

        return cls.from_dict(data)
