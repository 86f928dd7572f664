from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .properties import GuacamoleProperties, PropertySource

# Property names as they appear in guacamole.properties
CONSUL_IO_HOSTNAME = "consul-io-hostname"
CONSUL_IO_PORT = "consul-io-port"
CONSUL_IO_TOKEN = "consul-io-token"

DEFAULT_HOSTNAME = "localhost"
DEFAULT_PORT = 8500

# Only services carrying this tag become connections. Not configurable.
SERVICE_TAG = "guacamole"


def _string_property(source: PropertySource, name: str) -> Optional[str]:
    value = source.get_property(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _integer_property(source: PropertySource, name: str) -> Optional[int]:
    value = _string_property(source, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Property {name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class RegistrySettings:
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    token: Optional[str] = None     # absent = unauthenticated registry access
    timeout_s: float = 30.0

    @staticmethod
    def from_properties(source: PropertySource) -> "RegistrySettings":
        hostname = _string_property(source, CONSUL_IO_HOSTNAME)
        port = _integer_property(source, CONSUL_IO_PORT)
        return RegistrySettings(
            hostname=hostname if hostname is not None else DEFAULT_HOSTNAME,
            port=port if port is not None else DEFAULT_PORT,
            token=_string_property(source, CONSUL_IO_TOKEN),
        )

    @staticmethod
    def load(source: Optional[PropertySource] = None) -> "RegistrySettings":
        """Resolve settings from guacamole.properties (plus env overrides)."""
        return RegistrySettings.from_properties(source or GuacamoleProperties())
