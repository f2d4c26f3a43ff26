"""
Deployed bytecode check.

Compares the runtime code at a contract's implementation address with the
compiled ``deployedBytecode``. Immutable values are written into the code at
construction time, so every immutable-reference range is zeroed on both
sides before comparing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..chain.artifacts import ArtifactRegistry
from ..chain.protocols import CodeReader
from ..errors import BytecodeMismatchError, ConfigError
from ..utils import hex_to_bytes
from .proxy import ContractRef, ProxyResolver

logger = logging.getLogger(__name__)


def mask_immutables(code: bytes, references: Mapping[str, Sequence[Mapping[str, int]]]) -> bytes:
    masked = bytearray(code)
    for ranges in references.values():
        for ref in ranges:
            start, length = ref["start"], ref["length"]
            end = min(start + length, len(masked))
            masked[start:end] = b"\x00" * max(end - start, 0)
    return bytes(masked)


@dataclass(frozen=True)
class BytecodeCheck:
    name: str
    address: str
    matches: bool
    expected_size: int
    actual_size: int

    def raise_for_mismatch(self) -> None:
        if not self.matches:
            raise BytecodeMismatchError(
                f"Code at {self.address} does not match {self.name} "
                f"({self.actual_size} bytes on chain, {self.expected_size} compiled)"
            )


def check_deployed_bytecode(
    name: str,
    artifacts: ArtifactRegistry,
    resolver: ProxyResolver,
    reader: CodeReader,
) -> BytecodeCheck:
    """Check the code behind ``name`` (its implementation, for proxied names)."""
    ref = ContractRef.classify(name)
    contract = ref.implementation_name
    address = resolver.resolve(ref)

    references = artifacts.immutable_references(contract)
    try:
        compiled = hex_to_bytes(artifacts.deployed_bytecode(contract))
    except ValueError as exc:
        raise ConfigError(f"Deployed bytecode of {contract} is not plain hex: {exc}") from None
    expected = mask_immutables(compiled, references)
    actual = mask_immutables(reader.get_code(address), references)

    matches = bool(expected) and expected == actual
    logger.debug("%s at %s: bytecode %s", contract, address, "matches" if matches else "differs")
    return BytecodeCheck(name, address, matches, len(expected), len(actual))
