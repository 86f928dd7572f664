"""consulio CLI - inspect Consul services exposed as connections.

Usage:
    consulio connections [--user NAME]   # Connections a session would receive
    consulio show <identifier>           # One connection's configuration
    consulio services                    # Every service name in the catalog

Registry settings come from guacamole.properties (GUACAMOLE_HOME), environment
variables (CONSUL_IO_HOSTNAME, CONSUL_IO_PORT, CONSUL_IO_TOKEN), or the
--hostname/--port/--token flags, in increasing order of priority.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .catalog.commands import add_catalog_commands, run_catalog_command

console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="consulio",
        description="consulio: Consul catalog services as remote-access connections",
    )

    parser.add_argument("--hostname", help="Consul hostname override (consul-io-hostname)")
    parser.add_argument("--port", type=int, help="Consul HTTP API port override (consul-io-port)")
    parser.add_argument("--token", help="Consul ACL token override (consul-io-token)")
    parser.add_argument("--properties", type=Path, help="Path to guacamole.properties")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="subcmd")
    add_catalog_commands(sub)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    result = run_catalog_command(args)
    if result == -1:
        parser.print_help()
        raise SystemExit(2)
    raise SystemExit(result)
