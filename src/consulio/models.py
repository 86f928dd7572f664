"""Connection, group and permission models.

Defines the objects handed to the host framework: connections with their
protocol configuration, the root connection group, and the read-only
permission sets describing what a session's user may access.
"""

from __future__ import annotations

from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

# Identifier (and name) of the single group holding every connection
ROOT_CONNECTION_GROUP = "ROOT"


@dataclass(frozen=True)
class ConnectionConfiguration:
    """Protocol plus the parameters the remote desktop gateway needs."""
    protocol: str
    parameters: Dict[str, str] = field(default_factory=dict)

    def get_parameter(self, name: str) -> Optional[str]:
        return self.parameters.get(name)


@dataclass(frozen=True)
class Connection:
    """A remote-access target discovered in the catalog."""
    identifier: str
    name: str
    configuration: ConnectionConfiguration
    parent_identifier: str = ROOT_CONNECTION_GROUP

    @property
    def protocol(self) -> str:
        return self.configuration.protocol


@dataclass(frozen=True)
class ConnectionGroup:
    """A group of connections. Sessions only ever have the root group."""
    identifier: str
    name: str
    connection_identifiers: FrozenSet[str] = frozenset()
    connection_group_identifiers: FrozenSet[str] = frozenset()

    @classmethod
    def root(cls, connection_identifiers: Iterable[str]) -> "ConnectionGroup":
        return cls(
            identifier=ROOT_CONNECTION_GROUP,
            name=ROOT_CONNECTION_GROUP,
            connection_identifiers=frozenset(connection_identifiers),
        )


class ObjectPermission(str, Enum):
    """Permission types on a single object."""
    READ = "read"


class ObjectPermissionSet:
    """Read-only set of objects on which READ is granted."""

    def __init__(self, identifiers: Iterable[str] = ()):
        self._identifiers: FrozenSet[str] = frozenset(identifiers)

    def has_permission(self, permission: ObjectPermission, identifier: str) -> bool:
        return permission is ObjectPermission.READ and identifier in self._identifiers

    def get_accessible_objects(
        self,
        permissions: Iterable[ObjectPermission] = (ObjectPermission.READ,),
        identifiers: Optional[Iterable[str]] = None,
    ) -> FrozenSet[str]:
        """Subset of ``identifiers`` (default: all) reachable with any of ``permissions``."""
        if ObjectPermission.READ not in set(permissions):
            return frozenset()
        if identifiers is None:
            return self._identifiers
        return self._identifiers & frozenset(identifiers)

    @property
    def identifiers(self) -> FrozenSet[str]:
        return self._identifiers

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObjectPermissionSet):
            return self._identifiers == other._identifiers
        if isinstance(other, AbstractSet):
            return self._identifiers == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._identifiers)

    def __repr__(self) -> str:
        return f"ObjectPermissionSet({sorted(self._identifiers)!r})"
