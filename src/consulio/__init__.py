"""consulio: Consul catalog services as remote-access connections."""

__version__ = "0.1.0"
