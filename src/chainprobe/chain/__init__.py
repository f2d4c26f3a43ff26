"""
Chain - collaborators that talk to a node or read build output.

Uses httpx for JSON-RPC instead of the heavyweight web3.py.
"""

from .addresses import AddressBook
from .artifacts import ArtifactRegistry, ContractArtifact, find_contracts_out
from .protocols import CallExecutor, CodeReader, StorageReader
from .rpc import RpcClient

__all__ = [
    "AddressBook",
    "ArtifactRegistry",
    "CallExecutor",
    "CodeReader",
    "ContractArtifact",
    "RpcClient",
    "StorageReader",
    "find_contracts_out",
]
