"""Exception hierarchy shared across the consulio package."""

from __future__ import annotations


class ConsulIOError(Exception):
    """Base class for every error raised by consulio."""
    pass


class ServerError(ConsulIOError):
    """A server-side failure that prevents a user session from starting."""
    pass


class ConfigurationError(ConsulIOError):
    """A configured property has a value that cannot be used."""
    pass
