"""Catalog CLI Commands for consulio.

Operator commands to inspect what a user session would receive:
- connections: the connections a session would be given
- show: one connection's configuration
- services: raw service names in the catalog
"""

from __future__ import annotations

import argparse
from typing import Dict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import CONSUL_IO_HOSTNAME, CONSUL_IO_PORT, CONSUL_IO_TOKEN, RegistrySettings, SERVICE_TAG
from ..connection.directory import ConnectionInitError
from ..connection.mapper import HOSTNAME_PARAMETER, PORT_PARAMETER
from ..errors import ConfigurationError
from ..properties import GuacamoleProperties, LayeredProperties, MappingProperties, PropertySource
from ..provider import AuthenticatedUser, ConsulIOAuthenticationProvider
from .client import CatalogClient, RegistryError

console = Console()


def _properties(args: argparse.Namespace) -> PropertySource:
    """Command-line overrides on top of guacamole.properties."""
    overrides: Dict[str, str] = {}
    if args.hostname:
        overrides[CONSUL_IO_HOSTNAME] = args.hostname
    if args.port is not None:
        overrides[CONSUL_IO_PORT] = str(args.port)
    if args.token:
        overrides[CONSUL_IO_TOKEN] = args.token
    return LayeredProperties(MappingProperties(overrides), GuacamoleProperties(args.properties))


# --- Session Commands ---

def cmd_connections(args: argparse.Namespace) -> int:
    """List the connections a user session would receive."""
    try:
        provider = ConsulIOAuthenticationProvider(_properties(args))
        context = provider.get_user_context(AuthenticatedUser(args.user, provider.identifier))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1
    except ConnectionInitError as e:
        console.print(f"[red]Error:[/red] {e} ({e.__cause__})")
        return 2

    connections = sorted(context.connection_directory, key=lambda c: c.identifier)
    if not connections:
        console.print(f"[yellow]No services tagged '{SERVICE_TAG}' found.[/yellow]")
        return 0

    table = Table(title=f"Connections for {args.user}")
    table.add_column("Identifier", style="cyan")
    table.add_column("Protocol", style="bold")
    table.add_column("Hostname")
    table.add_column("Port", justify="right")
    table.add_column("Parameters", style="dim")

    for connection in connections:
        params = dict(connection.configuration.parameters)
        hostname = params.pop(HOSTNAME_PARAMETER, "")
        port = params.pop(PORT_PARAMETER, "")
        extra = ", ".join(f"{k}={v}" for k, v in sorted(params.items()))
        table.add_row(connection.identifier, connection.protocol, hostname, port, extra)

    console.print(table)
    console.print(f"\nTotal: {len(connections)} connection(s) in group {context.root_connection_group.name}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show one connection's configuration."""
    try:
        provider = ConsulIOAuthenticationProvider(_properties(args))
        connections = provider.create_directory()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1
    except ConnectionInitError as e:
        console.print(f"[red]Error:[/red] {e} ({e.__cause__})")
        return 2

    connection = connections.get(args.identifier)
    if connection is None:
        console.print(f"[yellow]No connection named '{args.identifier}'.[/yellow]")
        return 1

    lines = [f"[bold]Protocol:[/bold] {connection.protocol}"]
    for name, value in sorted(connection.configuration.parameters.items()):
        lines.append(f"  {name}: {value}")

    console.print(Panel("\n".join(lines), title=connection.identifier, border_style="cyan"))
    return 0


# --- Catalog Commands ---

def cmd_services(args: argparse.Namespace) -> int:
    """List every service name in the catalog."""
    try:
        settings = RegistrySettings.load(_properties(args))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    try:
        with CatalogClient(settings) as client:
            names = sorted(client.list_service_names())
    except RegistryError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 2

    if not names:
        console.print("[yellow]No services registered.[/yellow]")
        return 0

    for name in names:
        console.print(f"  {name}")

    console.print(f"\nTotal: {len(names)} service(s)")
    return 0


# --- Parser Setup ---

def add_catalog_commands(subparsers: argparse._SubParsersAction) -> None:
    """Add catalog-related commands to the main parser."""

    # connections
    p_connections = subparsers.add_parser("connections", help="List connections a session would receive")
    p_connections.add_argument("--user", "-u", default="guacadmin", help="Username to build the session for")
    p_connections.set_defaults(func=cmd_connections)

    # show
    p_show = subparsers.add_parser("show", help="Show one connection's configuration")
    p_show.add_argument("identifier", help="Connection identifier (service name)")
    p_show.set_defaults(func=cmd_show)

    # services
    p_services = subparsers.add_parser("services", help="List every service name in the catalog")
    p_services.set_defaults(func=cmd_services)


def run_catalog_command(args: argparse.Namespace) -> int:
    """Run a catalog command if func is set."""
    if hasattr(args, "func") and args.func:
        return args.func(args)
    return -1  # Not a catalog command
