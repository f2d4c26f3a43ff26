"""
chainprobe CLI

Post-deployment inspection of (possibly proxied) contracts.

Commands:
  resolve      - Resolve a contract name / proxy to its implementation
  initialized  - Read the _initialized counter of upgradeable contracts
  slot         - Look up a variable in a storage layout
  call         - Execute a read-only contract call
  bytecode     - Compare deployed runtime code with compiled bytecode
"""

from __future__ import annotations

import logging

import click

from . import __version__


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=__version__, prog_name="chainprobe")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC traffic and resolution steps")
def cli(verbose: bool) -> None:
    """chainprobe - contract call and on-chain state inspection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============ Commands ============

from .commands.bytecode import bytecode
from .commands.call import call
from .commands.initialized import initialized
from .commands.resolve import resolve
from .commands.slot import slot

cli.add_command(resolve)
cli.add_command(initialized)
cli.add_command(slot)
cli.add_command(call)
cli.add_command(bytecode)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
