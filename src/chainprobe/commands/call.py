"""
Call - execute a read-only contract call.

Arguments are given as a JSON array; integers, booleans, strings and
addresses map directly, and ``0x``-prefixed strings for bytes parameters are
converted to bytes.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Optional

import click

from ..calls.call import ContractCall
from ..calls.codec import AbiKind, abi_kind, canonical_type, find_function
from ..errors import EncodingError, ProbeError
from ..session import Session
from ..utils import hex_to_bytes
from .common import build_settings, chain_options, fail


def _coerce(param: dict, value: Any) -> Any:
    try:
        kind = abi_kind(canonical_type(param))
    except ValueError:
        return value
    if kind in (AbiKind.BYTES, AbiKind.FIXED_BYTES) and isinstance(value, str):
        try:
            return hex_to_bytes(value)
        except ValueError as exc:
            raise EncodingError(f"{param.get('name') or param['type']}: {exc}") from None
    return value


def _show(value: Any) -> str:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_show(v) for v in value) + "]"
    return str(value)


@click.command()
@click.argument("address")
@click.argument("method")
@click.option("--abi-name", required=True, help="Contract name for ABI loading")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--sender", default=None, help="Call sender (default: zero address)")
@chain_options
def call(
    address: str,
    method: str,
    abi_name: str,
    args_json: str,
    sender: Optional[str],
    rpc_url,
    addresses_path,
    artifacts_dir,
) -> None:
    """Call METHOD on ADDRESS without sending a transaction."""
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid args: {exc}", fg="red")
        sys.exit(1)

    settings = build_settings(rpc_url, addresses_path, artifacts_dir)
    with Session(settings) as session:
        try:
            abi = session.artifacts.abi(abi_name)
            try:
                entry = find_function(abi, method, arity=len(args))
            except LookupError:
                entry = None
            if entry is not None:
                args = [_coerce(p, v) for p, v in zip(entry.get("inputs", []), args)]

            contract_call = ContractCall.new(abi, address, method, *args)
            if sender:
                contract_call = contract_call.with_sender(sender)
            result = contract_call.unpack(session.rpc.call(contract_call.to_read_request()))
        except ProbeError as exc:
            fail(exc)

    for i, (type_str, value) in enumerate(zip(result.types, result.outputs)):
        click.echo(f"  [{i}] {type_str}: {_show(value)}")
