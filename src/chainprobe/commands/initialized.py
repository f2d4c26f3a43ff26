"""
Initialized - read the _initialized counter of upgradeable contracts.

0 means the contract was never initialized, 255 means initializers were
permanently disabled. ``--expect`` turns the read into a check.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..errors import ProbeError
from ..session import Session
from .common import build_settings, chain_options, fail


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--expect", type=click.IntRange(0, 255), default=None, help="Required counter value")
@chain_options
def initialized(names: tuple[str, ...], expect: Optional[int], rpc_url, addresses_path, artifacts_dir) -> None:
    """Read the initialization counter of each NAME."""
    settings = build_settings(rpc_url, addresses_path, artifacts_dir)
    mismatched = []

    with Session(settings) as session:
        for name in names:
            try:
                state = session.initialization.inspect(name)
            except ProbeError as exc:
                fail(exc)

            note = ""
            if state.disabled:
                note = " (disabled)"
            elif not state.initialized:
                note = " (not initialized)"
            click.echo(f"  {name} @ {state.address}: {state.counter}{note}")

            if expect is not None and state.counter != expect:
                mismatched.append(name)

    if mismatched:
        click.secho(f"FAILED: expected {expect} for {', '.join(mismatched)}", fg="red")
        sys.exit(1)
