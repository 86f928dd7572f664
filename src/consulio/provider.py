"""Authentication provider exposing Consul services as connections.

The host framework authenticates the user; this provider only turns the
catalog into that user's connections. Every session gets its own catalog
client and its own directory, so sessions share no mutable state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .catalog.client import CatalogClient
from .config import RegistrySettings
from .connection.directory import ConnectionDirectory
from .properties import PropertySource
from .user.context import UserContext

LOG = logging.getLogger(__name__)

PROVIDER_IDENTIFIER = "consulio"

ClientFactory = Callable[[RegistrySettings], CatalogClient]


@dataclass(frozen=True)
class AuthenticatedUser:
    """A principal already authenticated by the host framework."""
    identifier: str
    provider_identifier: str = ""


class ConsulIOAuthenticationProvider:
    """Builds per-session user contexts from the Consul catalog."""

    def __init__(
        self,
        properties: Optional[PropertySource] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        # Resolved once; a bad property fails here rather than per session
        self.settings = RegistrySettings.load(properties)
        self._client_factory: ClientFactory = client_factory or CatalogClient

    @property
    def identifier(self) -> str:
        return PROVIDER_IDENTIFIER

    def create_directory(self) -> ConnectionDirectory:
        """Initialize a fresh connection directory from the catalog.

        Raises ConnectionInitError if the catalog cannot be read.
        """
        client = self._client_factory(self.settings)
        try:
            connections = ConnectionDirectory(client)
            connections.initialize()
        finally:
            client.close()
        return connections

    def get_user_context(self, authenticated_user: AuthenticatedUser) -> UserContext:
        """Build the user context for a newly authenticated session."""
        LOG.debug("Building connections for user %s", authenticated_user.identifier)

        connections = self.create_directory()

        context = UserContext(self)
        context.init(authenticated_user.identifier, connections)
        return context
