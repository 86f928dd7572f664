"""URL helpers.

The Consul HTTP API lives under /v1 on the agent's HTTP port. Operators
usually configure a bare hostname (``consul.internal``) but occasionally paste
a full URL (``https://consul.internal``); both must produce the same base.
"""

from __future__ import annotations

from urllib.parse import urlparse


def _ensure_scheme(host: str) -> str:
    host = (host or "").strip()
    if not host:
        return host
    if "://" not in host:
        # bare IPv6 literal
        if host.count(":") > 1 and "[" not in host:
            host = f"[{host}]"
        return "http://" + host
    return host


def registry_base_url(hostname: str, port: int) -> str:
    """Return the Consul API base URL: scheme://host:port/v1

    Any port or path already present in ``hostname`` is replaced by ``port``.
    """
    u = urlparse(_ensure_scheme(hostname or "localhost"))
    scheme = u.scheme or "http"
    host = u.hostname or "localhost"
    if ":" in host:
        host = f"[{host}]"
    return f"{scheme}://{host}:{port}/v1"
