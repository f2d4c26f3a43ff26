__version__ = "0.3.0"

__all__ = [
    # Calls
    "AbiKind",
    "CallResult",
    "ContractCall",
    "ReadRequest",
    "TxCandidate",
    "abi_kind",
    "decode_result",
    "encode_call",
    # Storage layout
    "StorageLayout",
    "StorageSlot",
    "StorageType",
    "extract_packed",
    "find_slot",
    "parse_layout",
    # Chain collaborators
    "AddressBook",
    "ArtifactRegistry",
    "ContractArtifact",
    "RpcClient",
    # Verification
    "ContractKind",
    "ContractRef",
    "InitializationReader",
    "InitializationState",
    "ProxyBinding",
    "ProxyResolver",
    "check_deployed_bytecode",
    # Errors
    "ProbeError",
    "EncodingError",
    "DecodingError",
    "MalformedLayoutError",
    "SlotNotFoundError",
    "UnresolvedProxyError",
    "RpcError",
    "ArtifactNotFoundError",
    "UnknownContractError",
    "BytecodeMismatchError",
    "ConfigError",
    "ResultTypeError",
]

from .calls.call import ContractCall, ReadRequest, TxCandidate
from .calls.codec import AbiKind, CallResult, abi_kind, decode_result, encode_call
from .layout.models import (
    StorageLayout,
    StorageSlot,
    StorageType,
    extract_packed,
    find_slot,
    parse_layout,
)
from .chain.addresses import AddressBook
from .chain.artifacts import ArtifactRegistry, ContractArtifact
from .chain.rpc import RpcClient
from .verify.bytecode import check_deployed_bytecode
from .verify.initialized import InitializationReader, InitializationState
from .verify.proxy import ContractKind, ContractRef, ProxyBinding, ProxyResolver
from .errors import (
    ArtifactNotFoundError,
    BytecodeMismatchError,
    ConfigError,
    DecodingError,
    EncodingError,
    MalformedLayoutError,
    ProbeError,
    ResultTypeError,
    RpcError,
    SlotNotFoundError,
    UnknownContractError,
    UnresolvedProxyError,
)
