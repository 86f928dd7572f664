"""Connection directory built from the service catalog.

Walks the catalog once per session, maps every tagged instance, and keeps the
accepted connections keyed by identifier. Catalog failures are all-or-nothing;
per-instance validation failures are logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from ..catalog.client import CatalogClient, RegistryError
from ..config import SERVICE_TAG
from ..errors import ConsulIOError, ServerError
from ..models import Connection
from .mapper import Rejected, map_instance

LOG = logging.getLogger(__name__)


class DirectoryState(str, Enum):
    """Lifecycle of a connection directory."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class DirectoryStateError(ConsulIOError):
    """Operation not allowed in the directory's current state."""
    pass


class ConnectionInitError(ServerError):
    """The catalog could not be read, so the session has no connections."""
    pass


@dataclass
class InitializationReport:
    """What a single initialize() pass saw and kept."""
    services_scanned: int = 0
    instances_seen: int = 0
    accepted: List[str] = field(default_factory=list)
    rejected: List[Rejected] = field(default_factory=list)


class ConnectionDirectory:
    """Session-scoped, read-only directory of catalog connections."""

    def __init__(self, client: CatalogClient, tag: str = SERVICE_TAG):
        self._client = client
        self._tag = tag
        self._connections: Dict[str, Connection] = {}
        self._state = DirectoryState.UNINITIALIZED

    @property
    def state(self) -> DirectoryState:
        return self._state

    @property
    def tag(self) -> str:
        return self._tag

    def initialize(self) -> InitializationReport:
        """Populate the directory from the catalog.

        Raises:
            DirectoryStateError: if the directory was already initialized
            ConnectionInitError: if the catalog could not be read; the
                directory is then FAILED and holds no connections
        """
        if self._state is not DirectoryState.UNINITIALIZED:
            raise DirectoryStateError(f"Cannot initialize a directory in state {self._state.value}")

        self._state = DirectoryState.INITIALIZING
        try:
            connections, report = self._load()
        except RegistryError as e:
            self._state = DirectoryState.FAILED
            LOG.error("Unable to connect to Consul.IO service: %s", e)
            LOG.debug("Exception while connecting to Consul.IO.", exc_info=True)
            raise ConnectionInitError("Unable to connect to Consul.IO service.") from e
        except Exception:
            self._state = DirectoryState.FAILED
            raise

        self._connections = connections
        self._state = DirectoryState.READY
        LOG.info(
            "Loaded %d connection(s) from %d service(s); %d instance(s) rejected",
            len(connections), report.services_scanned, len(report.rejected),
        )
        return report

    def _load(self) -> Tuple[Dict[str, Connection], InitializationReport]:
        # Built locally so a catalog failure leaves nothing behind
        connections: Dict[str, Connection] = {}
        report = InitializationReport()

        for name in sorted(self._client.list_service_names()):
            report.services_scanned += 1
            for instance in self._client.list_instances(name, self._tag):
                report.instances_seen += 1
                result = map_instance(instance)

                if isinstance(result, Rejected):
                    LOG.warning("Skipping service %s: %s", result.service_name, result.reason.description)
                    report.rejected.append(result)
                    continue

                if result.identifier in connections:
                    LOG.debug("Duplicate connection %s, keeping the latest instance", result.identifier)
                connections[result.identifier] = result
                report.accepted.append(result.identifier)

        return connections, report

    def _require_ready(self) -> None:
        if self._state is not DirectoryState.READY:
            raise DirectoryStateError(f"Directory is {self._state.value}, not ready")

    # --- Lookup ---

    def get(self, identifier: str) -> Optional[Connection]:
        """Get a connection by identifier, or None if there is none."""
        self._require_ready()
        return self._connections.get(identifier)

    def get_all(self, identifiers: Iterable[str]) -> List[Connection]:
        """Get the connections for ``identifiers``, silently skipping unknown ones."""
        self._require_ready()
        found = []
        for identifier in identifiers:
            connection = self._connections.get(identifier)
            if connection is not None:
                found.append(connection)
        return found

    def get_identifiers(self) -> FrozenSet[str]:
        """Snapshot of the identifiers currently in the directory."""
        return frozenset(self._connections)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))
