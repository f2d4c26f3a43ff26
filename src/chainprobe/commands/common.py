from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, NoReturn, Optional

import click

from ..config import Settings, load_settings
from ..errors import ProbeError

rpc_url_option = click.option(
    "--rpc-url",
    envvar="CHAINPROBE_RPC_URL",
    default=None,
    help="JSON-RPC endpoint",
)
addresses_option = click.option(
    "--addresses",
    "addresses_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file mapping contract names to deployed addresses",
)
artifacts_option = click.option(
    "--artifacts",
    "artifacts_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Foundry out/ directory",
)


def chain_options(func: Callable[..., Any]) -> Callable[..., Any]:
    return rpc_url_option(addresses_option(artifacts_option(func)))


def build_settings(
    rpc_url: Optional[str] = None,
    addresses_path: Optional[Path] = None,
    artifacts_dir: Optional[Path] = None,
) -> Settings:
    """Environment settings with command-line overrides applied."""
    try:
        settings = load_settings()
    except ProbeError as exc:
        fail(exc)
    overrides: dict[str, Any] = {}
    if rpc_url:
        overrides["rpc_url"] = rpc_url
    if addresses_path:
        overrides["addresses_path"] = addresses_path
    if artifacts_dir:
        overrides["artifacts_dir"] = artifacts_dir
    return replace(settings, **overrides)


def fail(exc: Exception) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    for detail in getattr(exc, "errors", []):
        click.secho(f"  - {detail}", fg="red", err=True)
    sys.exit(exc.exit_code if isinstance(exc, ProbeError) else 1)
