"""Catalog Module for consulio.

Provides the call surface over the Consul HTTP catalog API:
- Listing every registered service name
- Listing the instances of a service carrying a tag
"""

from .client import (
    CatalogClient,
    RegistryError,
    RegistryProtocolError,
    RegistryUnreachable,
    ServiceInstance,
)

__all__ = [
    "CatalogClient",
    "RegistryError",
    "RegistryProtocolError",
    "RegistryUnreachable",
    "ServiceInstance",
]
