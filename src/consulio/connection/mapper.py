"""Service instance -> connection translation.

Validates a catalog entry and converts its metadata into a connection
configuration. Rejections are values, not exceptions: one bad service must
never stop the rest of the catalog from being mapped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..catalog.client import ServiceInstance
from ..models import ROOT_CONNECTION_GROUP, Connection, ConnectionConfiguration

PROTOCOL_KEY = "protocol"
HOSTNAME_PARAMETER = "hostname"
PORT_PARAMETER = "port"

MIN_PORT = 1
MAX_PORT = 65535


class RejectionReason(str, Enum):
    """Why a service instance could not become a connection."""
    MISSING_ADDRESS = "missing-address"
    INVALID_PORT = "invalid-port"
    MISSING_PROTOCOL = "missing-protocol"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    RejectionReason.MISSING_ADDRESS: "Hostname or address not specified.",
    RejectionReason.INVALID_PORT: "Port number not specified or invalid.",
    RejectionReason.MISSING_PROTOCOL: "Protocol not specified.",
}


@dataclass(frozen=True)
class Rejected:
    """A service instance that failed validation."""
    service_name: str
    reason: RejectionReason

    def __str__(self) -> str:
        return f"{self.service_name}: {self.reason.description}"


MapResult = Union[Connection, Rejected]


def validate_instance(instance: ServiceInstance) -> Optional[RejectionReason]:
    """Return the first failing rule for ``instance``, or None if it is usable."""
    if not instance.address:
        return RejectionReason.MISSING_ADDRESS
    if not MIN_PORT <= instance.port <= MAX_PORT:
        return RejectionReason.INVALID_PORT
    if not instance.metadata.get(PROTOCOL_KEY):
        return RejectionReason.MISSING_PROTOCOL
    return None


def map_instance(instance: ServiceInstance) -> MapResult:
    """Convert a tagged service instance into a connection.

    The "protocol" metadata entry selects the protocol and is consumed; every
    other entry is forwarded as a connection parameter, with "hostname" and
    "port" taken from the instance itself.
    """
    reason = validate_instance(instance)
    if reason is not None:
        return Rejected(service_name=instance.name, reason=reason)

    # Copy: the instance's metadata belongs to the catalog response
    parameters = dict(instance.metadata)
    protocol = parameters.pop(PROTOCOL_KEY)
    parameters[HOSTNAME_PARAMETER] = instance.address
    parameters[PORT_PARAMETER] = str(instance.port)

    return Connection(
        identifier=instance.name,
        name=instance.name,
        configuration=ConnectionConfiguration(protocol=protocol, parameters=parameters),
        parent_identifier=ROOT_CONNECTION_GROUP,
    )
