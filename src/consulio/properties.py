"""Property sources for the registry settings.

The host framework reads its settings from a ``guacamole.properties`` file.
Lookup order (highest to lowest):
1. Environment variables (``consul-io-hostname`` -> ``CONSUL_IO_HOSTNAME``)
2. guacamole.properties in GUACAMOLE_HOME
3. Nothing (callers apply their own defaults)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, runtime_checkable

from .errors import ConfigurationError

PROPERTIES_FILE = "guacamole.properties"


@runtime_checkable
class PropertySource(Protocol):
    """Anything able to resolve a named property to its raw string value."""

    def get_property(self, name: str) -> Optional[str]:
        """Return the raw value of ``name``, or None if it is not set."""


def guacamole_home() -> Path:
    """
    Directory holding guacamole.properties:
      - $GUACAMOLE_HOME if set
      - ~/.guacamole if it exists
      - /etc/guacamole otherwise
    """
    env_home = os.environ.get("GUACAMOLE_HOME")
    if env_home:
        return Path(env_home)
    user_home = Path.home() / ".guacamole"
    if user_home.is_dir():
        return user_home
    return Path("/etc/guacamole")


def properties_path() -> Path:
    return guacamole_home() / PROPERTIES_FILE


def env_var_name(name: str) -> str:
    """Environment variable equivalent of a property name."""
    return name.upper().replace("-", "_")


def parse_properties_file(path: Path) -> Dict[str, str]:
    """Parse a properties file and return key-value pairs.

    Handles:
    - Comments (lines starting with # or !)
    - Empty lines
    - key=value and key: value formats (first separator wins)
    """
    result: Dict[str, str] = {}

    if not path.exists():
        return result

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    for line in content.splitlines():
        line = line.strip()

        if not line or line[0] in "#!":
            continue

        positions = [p for p in (line.find("="), line.find(":")) if p >= 0]
        if not positions:
            continue

        split_at = min(positions)
        key = line[:split_at].strip()
        value = line[split_at + 1:].strip()

        if key:
            result[key] = value

    return result


class MappingProperties:
    """Property source backed by an in-memory mapping."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get_property(self, name: str) -> Optional[str]:
        return self._values.get(name)


class GuacamoleProperties:
    """guacamole.properties with environment variable overrides."""

    def __init__(self, path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self.path = path or properties_path()
        self._environ = os.environ if environ is None else environ
        self._file_values = parse_properties_file(self.path)

    def get_property(self, name: str) -> Optional[str]:
        # Environment overrides (highest priority)
        value = self._environ.get(env_var_name(name))
        if value is not None:
            return value
        return self._file_values.get(name)


class LayeredProperties:
    """Consults several sources in order; the first one that has a value wins."""

    def __init__(self, *sources: PropertySource):
        self._sources = sources

    def get_property(self, name: str) -> Optional[str]:
        for source in self._sources:
            value = source.get_property(name)
            if value is not None:
                return value
        return None
