"""
Resolve - show the address behind a logical contract name.

For proxied names also shows the proxy admin and which strategy found the
implementation (EIP-1967 slot or the legacy AddressManager).
"""

from __future__ import annotations

import click

from ..errors import ProbeError
from ..session import Session
from ..utils import is_zero_address
from ..verify.proxy import ContractRef
from .common import build_settings, chain_options, fail


@click.command()
@click.argument("name")
@chain_options
def resolve(name: str, rpc_url, addresses_path, artifacts_dir) -> None:
    """Resolve NAME to its deployed (or implementation) address."""
    settings = build_settings(rpc_url, addresses_path, artifacts_dir)
    ref = ContractRef.classify(name)

    with Session(settings) as session:
        try:
            if not ref.is_proxied:
                click.echo(f"  {name}: {session.resolver.resolve(ref)}")
                return

            binding = session.resolver.resolve_proxy(ref)
            admin = session.resolver.read_admin_slot(binding.proxy)
        except ProbeError as exc:
            fail(exc)

    click.echo(f"  Proxy:           {binding.proxy}")
    click.echo(f"  Implementation:  {binding.implementation}")
    click.echo(f"  Resolved via:    {binding.strategy.value}")
    if not is_zero_address(admin):
        click.echo(f"  Admin:           {admin}")
