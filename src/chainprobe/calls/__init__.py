"""
Calls - ABI encoding/decoding and contract call descriptors.

Built on eth-abi for the wire format and eth-hash for selectors.
"""

from .call import ContractCall, ReadRequest, TxCandidate
from .codec import AbiKind, CallResult, abi_kind, decode_result, encode_call

__all__ = [
    "AbiKind",
    "CallResult",
    "ContractCall",
    "ReadRequest",
    "TxCandidate",
    "abi_kind",
    "decode_result",
    "encode_call",
]
