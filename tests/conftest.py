"""Shared fixtures: an in-memory stand-in for the Consul catalog."""

from typing import Callable, Dict, List, Optional

import pytest

from consulio.catalog.client import ServiceInstance


def make_instance(
    name: str = "rdp1",
    address: str = "10.0.0.5",
    port: int = 3389,
    metadata: Optional[Dict[str, str]] = None,
) -> ServiceInstance:
    return ServiceInstance(
        name=name,
        address=address,
        port=port,
        metadata={"protocol": "rdp"} if metadata is None else metadata,
    )


class FakeCatalogClient:
    """Serves a fixed catalog snapshot and records how it was queried."""

    def __init__(
        self,
        services: Dict[str, List[ServiceInstance]],
        fail_names: Optional[Exception] = None,
        fail_on: Optional[Dict[str, Exception]] = None,
    ):
        self.services = services
        self.fail_names = fail_names
        self.fail_on = fail_on or {}
        self.instance_calls: List[tuple] = []
        self.closed = False

    def list_service_names(self):
        if self.fail_names is not None:
            raise self.fail_names
        return set(self.services)

    def list_instances(self, name, tag):
        self.instance_calls.append((name, tag))
        if name in self.fail_on:
            raise self.fail_on[name]
        return list(self.services.get(name, []))

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


@pytest.fixture
def instance() -> Callable[..., ServiceInstance]:
    return make_instance


@pytest.fixture
def fake_catalog() -> Callable[..., FakeCatalogClient]:
    return FakeCatalogClient
