"""Catalog Client for consulio.

Thin connector for the Consul HTTP catalog API. Provides normalized
interfaces for service name listing and tagged instance lookup. No retries
happen here; every failure propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set
from urllib.parse import quote

import requests

from ..config import RegistrySettings
from ..errors import ConsulIOError
from ..urls import registry_base_url

LOG = logging.getLogger(__name__)


class RegistryError(ConsulIOError):
    """Error from catalog operations."""
    pass


class RegistryUnreachable(RegistryError):
    """The registry could not be contacted (transport failure)."""
    pass


class RegistryProtocolError(RegistryError):
    """The registry answered, but not with what the catalog API promises."""
    pass


@dataclass(frozen=True)
class ServiceInstance:
    """Normalized service instance representation."""
    name: str
    address: str
    port: int
    metadata: Dict[str, str] = field(default_factory=dict)
    service_id: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Any) -> "ServiceInstance":
        if not isinstance(data, dict):
            raise RegistryProtocolError(f"Expected a service object, got {type(data).__name__}")

        name = data.get("ServiceName")
        if not isinstance(name, str) or not name:
            raise RegistryProtocolError("Service entry without ServiceName")

        # Missing address/port are validation concerns, not protocol errors
        raw_port = data.get("ServicePort")
        if raw_port is None:
            port = 0
        elif isinstance(raw_port, bool) or not isinstance(raw_port, int):
            raise RegistryProtocolError(f"Service {name}: ServicePort is not an integer: {raw_port!r}")
        else:
            port = raw_port

        meta = data.get("ServiceMeta")
        if meta is None:
            meta = {}
        if not isinstance(meta, dict):
            raise RegistryProtocolError(f"Service {name}: ServiceMeta is not an object")

        tags = data.get("ServiceTags") or []
        if not isinstance(tags, list):
            raise RegistryProtocolError(f"Service {name}: ServiceTags is not a list")

        address = data.get("ServiceAddress")
        if address is None:
            address = ""
        if not isinstance(address, str):
            raise RegistryProtocolError(f"Service {name}: ServiceAddress is not a string: {address!r}")

        return cls(
            name=name,
            address=address,
            port=port,
            metadata={str(k): "" if v is None else str(v) for k, v in meta.items()},
            service_id=data.get("ServiceID") or "",
            tags=[str(t) for t in tags],
        )


class CatalogClient:
    """Client for the Consul service catalog.

    One client per session; it owns a requests.Session and should be
    closed (or used as a context manager) once the session is built.
    """

    def __init__(self, settings: Optional[RegistrySettings] = None):
        self.settings = settings or RegistrySettings.load()
        self.base_url = registry_base_url(self.settings.hostname, self.settings.port)
        self._session = requests.Session()
        self._update_auth_headers()

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def _update_auth_headers(self) -> None:
        """Update session headers with authentication."""
        self._session.headers.clear()
        self._session.headers["Accept"] = "application/json"

        if self.settings.token:
            self._session.headers["X-Consul-Token"] = self.settings.token

    def _url(self, path: str) -> str:
        """Build full URL for API endpoint."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make an API request and return the decoded JSON body."""
        url = self._url(path)
        try:
            response = self._session.request(method, url, timeout=self.settings.timeout_s, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            detail = (e.response.text or "").strip() if e.response is not None else str(e)
            raise RegistryProtocolError(f"Registry returned HTTP {status} for {path}: {detail}") from e
        except requests.exceptions.RequestException as e:
            raise RegistryUnreachable(f"Cannot connect to registry at {self.base_url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RegistryProtocolError(f"Invalid JSON from registry for {path}: {e}") from e

    # --- Catalog ---

    def list_service_names(self) -> Set[str]:
        """List every service name in the catalog, regardless of tag."""
        data = self._request("GET", "/catalog/services")
        if not isinstance(data, dict):
            raise RegistryProtocolError("Expected an object mapping service names to tags")
        return set(data)

    def list_instances(self, name: str, tag: str) -> List[ServiceInstance]:
        """List all instances of ``name`` carrying ``tag``."""
        data = self._request("GET", f"/catalog/service/{quote(name, safe='')}", params={"tag": tag})
        if data is None:
            return []
        if not isinstance(data, list):
            raise RegistryProtocolError(f"Expected a list of instances for service {name}")
        instances = [ServiceInstance.from_api(item) for item in data]
        LOG.debug("Service %s: %d instance(s) tagged %r", name, len(instances), tag)
        return instances
