"""Bytecode - compare deployed runtime code with the compiled artifact."""

from __future__ import annotations

import sys

import click

from ..errors import ProbeError
from ..session import Session
from ..verify.bytecode import check_deployed_bytecode
from .common import build_settings, chain_options, fail


@click.command()
@click.argument("names", nargs=-1, required=True)
@chain_options
def bytecode(names: tuple[str, ...], rpc_url, addresses_path, artifacts_dir) -> None:
    """Check that the code behind each NAME matches its compiled bytecode."""
    settings = build_settings(rpc_url, addresses_path, artifacts_dir)
    failed = False

    with Session(settings) as session:
        for name in names:
            try:
                check = check_deployed_bytecode(name, session.artifacts, session.resolver, session.rpc)
            except ProbeError as exc:
                fail(exc)

            if check.matches:
                click.secho(f"  OK    {name} @ {check.address}", fg="green")
            else:
                failed = True
                click.secho(
                    f"  DIFF  {name} @ {check.address} "
                    f"({check.actual_size} bytes on chain, {check.expected_size} compiled)",
                    fg="red",
                )

    if failed:
        sys.exit(1)
