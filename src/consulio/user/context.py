"""Per-session user context.

Binds an authenticated username to the session's connection directory: one
root group holding every discovered connection, and a user whose permissions
cover exactly those connections and that group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..connection.directory import ConnectionDirectory, DirectoryState, DirectoryStateError
from ..errors import ConsulIOError
from ..models import ROOT_CONNECTION_GROUP, ConnectionGroup, ObjectPermissionSet

if TYPE_CHECKING:
    from ..provider import ConsulIOAuthenticationProvider


class ContextNotInitialized(ConsulIOError):
    """The user context was used before init()."""
    pass


class ContextAlreadyInitialized(ConsulIOError):
    """init() was called on a context that is already bound."""
    pass


class SessionUser:
    """The user a context belongs to.

    Permissions are computed on each call from the session's directory and
    root group rather than stored on the user.
    """

    def __init__(self, identifier: str, connections: ConnectionDirectory, root_group: ConnectionGroup):
        self.identifier = identifier
        self._connections = connections
        self._root_group = root_group

    def get_connection_permissions(self) -> ObjectPermissionSet:
        return ObjectPermissionSet(self._connections.get_identifiers())

    def get_connection_group_permissions(self) -> ObjectPermissionSet:
        return ObjectPermissionSet({self._root_group.identifier})

    def __repr__(self) -> str:
        return f"SessionUser({self.identifier!r})"


class UserContext:
    """What one authenticated user sees for the lifetime of a session."""

    def __init__(self, auth_provider: "ConsulIOAuthenticationProvider"):
        self._auth_provider = auth_provider
        self._self: Optional[SessionUser] = None
        self._connections: Optional[ConnectionDirectory] = None
        self._root_group: Optional[ConnectionGroup] = None

    def init(self, username: str, connections: ConnectionDirectory) -> None:
        """Bind ``username`` to an initialized connection directory."""
        if self._self is not None:
            raise ContextAlreadyInitialized(f"User context for {self._self.identifier} is already initialized")
        if connections.state is not DirectoryState.READY:
            raise DirectoryStateError(
                f"Cannot bind a user context to a directory in state {connections.state.value}"
            )

        root_group = ConnectionGroup.root(connections.get_identifiers())

        self._connections = connections
        self._root_group = root_group
        self._self = SessionUser(username, connections, root_group)

    def _require_init(self) -> None:
        if self._self is None:
            raise ContextNotInitialized("User context has not been initialized")

    @property
    def authentication_provider(self) -> "ConsulIOAuthenticationProvider":
        return self._auth_provider

    def self(self) -> SessionUser:
        self._require_init()
        return self._self

    @property
    def connection_directory(self) -> ConnectionDirectory:
        self._require_init()
        return self._connections

    @property
    def root_connection_group(self) -> ConnectionGroup:
        self._require_init()
        return self._root_group


__all__ = [
    "ROOT_CONNECTION_GROUP",
    "ContextAlreadyInitialized",
    "ContextNotInitialized",
    "SessionUser",
    "UserContext",
]
