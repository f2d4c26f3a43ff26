from __future__ import annotations

import re
from typing import Union

from eth_hash.auto import keccak

ZERO_ADDRESS = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"[0-9a-fA-F]*")

HexLike = Union[str, bytes, bytearray]


def keccak256(data: bytes) -> bytes:
    # Keccak-256 is not NIST SHA3-256; never use hashlib.sha3_256 here.
    return keccak(data)


def is_hex_address(value: str) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def to_checksum_address(address: HexLike) -> str:
    """Convert an address to EIP-55 checksummed format."""
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(address)}")
        addr = bytes(address).hex()
    else:
        if not is_hex_address(address):
            raise ValueError(f"Invalid address: {address!r}")
        addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


def hex_to_bytes(value: HexLike) -> bytes:
    """
    Decode a hex string (``0x`` prefix optional) to bytes.

    Raises:
        ValueError: If the string has an odd number of digits or non-hex characters
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    if len(raw) % 2 or not _HEX_RE.fullmatch(raw):
        raise ValueError(f"Invalid hex data: {value[:80]!r}")
    return bytes.fromhex(raw)


def bytes_to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def word_to_address(word: bytes) -> str:
    """Take the low-order 20 bytes of a 32-byte storage word as an address."""
    if len(word) != 32:
        raise ValueError(f"Storage word must be 32 bytes, got {len(word)}")
    return to_checksum_address(word[12:])
