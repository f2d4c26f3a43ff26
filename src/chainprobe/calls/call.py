"""
Call Builder - reusable contract call descriptors.

A ``ContractCall`` captures address, method and positional arguments once and
projects itself into either a read-only ``eth_call`` request or a transaction
candidate for whatever subsystem signs and broadcasts.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from ..errors import DecodingError, EncodingError
from ..utils import ZERO_ADDRESS, HexLike, bytes_to_hex, to_checksum_address
from .codec import CallResult, decode_outputs, encode_arguments, find_function, method_selector


def _checksum(address: str, role: str) -> str:
    try:
        return to_checksum_address(address)
    except ValueError:
        raise EncodingError(f"Invalid call {role}: {address!r}") from None


@dataclass(frozen=True)
class ReadRequest:
    """Request for a read-only call (no state change)."""

    sender: str
    to: str
    data: bytes

    def to_rpc_params(self) -> dict[str, str]:
        return {
            "from": self.sender,
            "to": self.to,
            "data": bytes_to_hex(self.data),
        }


@dataclass(frozen=True)
class TxCandidate:
    """
    Recipient and calldata for a state-changing call.

    Gas, nonce, value and signing belong to the submitting subsystem.
    """

    to: str
    data: bytes

    def to_dict(self) -> dict[str, str]:
        return {"to": self.to, "data": bytes_to_hex(self.data)}


@dataclass(frozen=True)
class ContractCall:
    abi: Sequence[Mapping[str, Any]] = field(repr=False)
    address: str
    method: str
    args: tuple = ()
    sender: Optional[str] = None

    @classmethod
    def new(
        cls,
        abi: Optional[Sequence[Mapping[str, Any]]],
        address: str,
        method: str,
        *args: Any,
    ) -> "ContractCall":
        """
        Build a call descriptor.

        Nothing is validated here except the ABI itself; argument problems
        surface from ``pack``.

        Raises:
            ValueError: If abi is None
        """
        if abi is None:
            raise ValueError("abi is required to build a contract call")
        return cls(abi=abi, address=address, method=method, args=tuple(args))

    def with_sender(self, sender: str) -> "ContractCall":
        return replace(self, sender=sender)

    def _entry(self) -> Mapping[str, Any]:
        return find_function(self.abi, self.method, arity=len(self.args))

    def pack(self) -> bytes:
        """Encode selector and arguments. Raises ``EncodingError``."""
        try:
            entry = self._entry()
        except LookupError as exc:
            raise EncodingError(str(exc)) from None
        return method_selector(entry) + encode_arguments(entry, self.args)

    def to_read_request(self) -> ReadRequest:
        return ReadRequest(
            sender=_checksum(self.sender or ZERO_ADDRESS, "sender"),
            to=_checksum(self.address, "address"),
            data=self.pack(),
        )

    def to_tx_candidate(self) -> TxCandidate:
        return TxCandidate(to=_checksum(self.address, "address"), data=self.pack())

    def unpack(self, data: HexLike) -> CallResult:
        """Decode return data with this call's method outputs. Raises ``DecodingError``."""
        try:
            entry = self._entry()
        except LookupError as exc:
            raise DecodingError(str(exc)) from None
        return decode_outputs(entry, data)
