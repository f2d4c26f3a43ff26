"""Slot - look up where a variable lives in a contract's storage layout."""

from __future__ import annotations

import sys

import click

from ..errors import ProbeError
from ..session import Session
from .common import artifacts_option, build_settings, fail


@click.command()
@click.argument("contract")
@click.argument("label")
@click.option("--type", "type_tag", default="t_uint8", show_default=True, help="Storage type tag")
@artifacts_option
def slot(contract: str, label: str, type_tag: str, artifacts_dir) -> None:
    """Show slot, offset and width of LABEL in CONTRACT's layout."""
    settings = build_settings(artifacts_dir=artifacts_dir)

    with Session(settings) as session:
        try:
            layout = session.artifacts.layout(contract)
        except ProbeError as exc:
            fail(exc)

    entry = layout.find_slot(label, type_tag)
    if entry is None:
        click.secho(f"{label} ({type_tag}) not found in {contract}", fg="yellow")
        sys.exit(1)

    click.echo(f"  Slot:    {entry.slot}")
    click.echo(f"  Offset:  {entry.offset}")
    click.echo(f"  Width:   {layout.width_of(entry.type)}")
    click.echo(f"  Declared in {entry.contract}")
