"""Shared fixtures: an in-memory chain and a solc storage layout."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from chainprobe.calls.call import ReadRequest
from chainprobe.chain.addresses import AddressBook
from chainprobe.chain.artifacts import ArtifactRegistry, ContractArtifact

PROXY_ADDRESS = "0x" + "11" * 20
IMPL_ADDRESS = "0x" + "22" * 20
LEGACY_IMPL_ADDRESS = "0x" + "33" * 20
MANAGER_ADDRESS = "0x" + "44" * 20
DIRECT_ADDRESS = "0x" + "55" * 20

MESSENGER = "src/L1/L1CrossDomainMessenger.sol:L1CrossDomainMessenger"

LAYOUT_DOCUMENT: dict[str, Any] = {
    "storage": [
        {"astId": 1000, "contract": MESSENGER, "label": "spacer_0_0_20", "offset": 0, "slot": "0", "type": "t_address"},
        {"astId": 1001, "contract": MESSENGER, "label": "_initialized", "offset": 20, "slot": "0", "type": "t_uint8"},
        {"astId": 1002, "contract": MESSENGER, "label": "_initializing", "offset": 21, "slot": "0", "type": "t_bool"},
        {"astId": 1003, "contract": MESSENGER, "label": "spacer_1_0_1600", "offset": 0, "slot": "1", "type": "t_array(t_uint256)50_storage"},
        {"astId": 1012, "contract": MESSENGER, "label": "successfulMessages", "offset": 0, "slot": "203", "type": "t_mapping(t_bytes32,t_bool)"},
        {"astId": 1014, "contract": MESSENGER, "label": "msgNonce", "offset": 0, "slot": "205", "type": "t_uint240"},
    ],
    "types": {
        "t_address": {"encoding": "inplace", "label": "address", "numberOfBytes": "20"},
        "t_array(t_uint256)50_storage": {"encoding": "inplace", "label": "uint256[50]", "numberOfBytes": "1600", "base": "t_uint256"},
        "t_bool": {"encoding": "inplace", "label": "bool", "numberOfBytes": "1"},
        "t_bytes32": {"encoding": "inplace", "label": "bytes32", "numberOfBytes": "32"},
        "t_mapping(t_bytes32,t_bool)": {"encoding": "mapping", "label": "mapping(bytes32 => bool)", "numberOfBytes": "32", "key": "t_bytes32", "value": "t_bool"},
        "t_uint240": {"encoding": "inplace", "label": "uint240", "numberOfBytes": "30"},
        "t_uint256": {"encoding": "inplace", "label": "uint256", "numberOfBytes": "32"},
        "t_uint8": {"encoding": "inplace", "label": "uint8", "numberOfBytes": "1"},
    },
}

# Runtime code with one 32-byte immutable at offset 5
DEPLOYED_BYTECODE = "0x6080604052" + "00" * 32 + "5b00"
IMMUTABLE_REFERENCES = {"73451": [{"start": 5, "length": 32}]}


def packed_word(value: int, offset: int, low_bytes: bytes = b"") -> bytes:
    """32-byte word with ``value`` at byte ``offset`` above ``low_bytes``."""
    word = (value << (offset * 8)) | int.from_bytes(low_bytes or b"\x00", "big")
    return word.to_bytes(32, "big")


def address_word(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


class FakeChain:
    """In-memory stand-in for the RPC client."""

    def __init__(self) -> None:
        self.storage: dict[tuple[str, int], bytes] = {}
        self.code: dict[str, bytes] = {}
        self.call_results: dict[str, bytes] = {}
        self.calls: list[ReadRequest] = []
        self.storage_reads: list[tuple[str, int]] = []
        self.closed = False

    def set_storage(self, address: str, slot: int, word: bytes) -> None:
        self.storage[(address.lower(), slot)] = word.rjust(32, b"\x00")

    def get_storage_at(self, address: str, slot: int, block: Any = "latest") -> bytes:
        self.storage_reads.append((address.lower(), slot))
        return self.storage.get((address.lower(), slot), bytes(32))

    def get_code(self, address: str, block: Any = "latest") -> bytes:
        return self.code.get(address.lower(), b"")

    def call(self, request: ReadRequest, block: Any = "latest") -> bytes:
        self.calls.append(request)
        return self.call_results.get(request.to.lower(), b"")

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture()
def layout_document() -> dict[str, Any]:
    return copy.deepcopy(LAYOUT_DOCUMENT)


@pytest.fixture()
def artifacts() -> ArtifactRegistry:
    return ArtifactRegistry(
        [
            ContractArtifact.from_dict(
                "L1CrossDomainMessenger",
                {
                    "abi": [],
                    "storageLayout": copy.deepcopy(LAYOUT_DOCUMENT),
                    "deployedBytecode": {
                        "object": DEPLOYED_BYTECODE,
                        "immutableReferences": IMMUTABLE_REFERENCES,
                    },
                },
            ),
            ContractArtifact.from_dict(
                "SystemConfig",
                {"abi": [], "storageLayout": {"storage": [], "types": None}},
            ),
            ContractArtifact.from_dict("Plain", {"abi": []}),
        ]
    )


@pytest.fixture()
def addresses() -> AddressBook:
    return AddressBook(
        {
            "L1CrossDomainMessengerProxy": PROXY_ADDRESS,
            "L1CrossDomainMessenger": DIRECT_ADDRESS,
            "AddressManager": MANAGER_ADDRESS,
            "SystemConfigProxy": "0x" + "66" * 20,
        }
    )


@pytest.fixture()
def foundry_out(tmp_path: Path) -> Path:
    """A Foundry out/ tree holding the messenger artifact."""
    out = tmp_path / "out"
    contract_dir = out / "L1CrossDomainMessenger.sol"
    contract_dir.mkdir(parents=True)
    artifact = {
        "abi": [
            {
                "type": "function",
                "name": "successfulMessages",
                "inputs": [{"name": "", "type": "bytes32"}],
                "outputs": [{"name": "", "type": "bool"}],
                "stateMutability": "view",
            },
        ],
        "bytecode": {"object": "0x6080"},
        "deployedBytecode": {
            "object": DEPLOYED_BYTECODE,
            "immutableReferences": IMMUTABLE_REFERENCES,
        },
        "storageLayout": LAYOUT_DOCUMENT,
    }
    (contract_dir / "L1CrossDomainMessenger.json").write_text(json.dumps(artifact), encoding="utf-8")
    (out / "build-info").mkdir()
    (out / "build-info" / "abc123.json").write_text("{}", encoding="utf-8")
    return out
