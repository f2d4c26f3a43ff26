"""
Proxy Resolver - find the implementation behind a proxied contract name.

Names ending in ``Proxy`` are proxied. Their implementation is read from the
EIP-1967 implementation slot; if that slot is empty, the legacy
``AddressManager`` registry is asked for ``OVM_<Name>`` (the name-indirection
scheme used by the pre-EIP-1967 proxies). Any other name is direct and
resolves to its own deployed address.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..calls.call import ContractCall
from ..chain.addresses import AddressBook
from ..chain.protocols import CallExecutor, StorageReader
from ..config import DEFAULT_ADDRESS_MANAGER
from ..errors import DecodingError, UnknownContractError, UnresolvedProxyError
from ..utils import is_zero_address, word_to_address

logger = logging.getLogger(__name__)

# keccak256("eip1967.proxy.implementation") - 1
EIP1967_IMPLEMENTATION_SLOT = 0x360894A13BA1A3210667C828492DB98DCA3E2076CC3735A920A3CA505D382BBC
# keccak256("eip1967.proxy.admin") - 1
EIP1967_ADMIN_SLOT = 0xB53127684A568B3173AE13B9F8A6016E243E63B6E8EE1178D6A717850B5D6103

PROXY_SUFFIX = "Proxy"
LEGACY_NAME_PREFIX = "OVM_"

ADDRESS_MANAGER_ABI = [
    {
        "type": "function",
        "name": "getAddress",
        "inputs": [{"name": "_name", "type": "string"}],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
]


class ContractKind(Enum):
    DIRECT = "direct"
    PROXIED = "proxied"


class ResolutionStrategy(Enum):
    EIP1967 = "eip1967"
    LEGACY = "legacy"


@dataclass(frozen=True)
class ContractRef:
    """A logical contract name, classified once."""

    name: str
    kind: ContractKind

    @classmethod
    def classify(cls, name: str) -> "ContractRef":
        if name.endswith(PROXY_SUFFIX) and name != PROXY_SUFFIX:
            return cls(name, ContractKind.PROXIED)
        return cls(name, ContractKind.DIRECT)

    @property
    def is_proxied(self) -> bool:
        return self.kind is ContractKind.PROXIED

    @property
    def implementation_name(self) -> str:
        """Name of the contract whose code and storage layout apply."""
        if self.is_proxied:
            return self.name[: -len(PROXY_SUFFIX)]
        return self.name

    @property
    def legacy_name(self) -> str:
        return LEGACY_NAME_PREFIX + self.implementation_name


@dataclass(frozen=True)
class ProxyBinding:
    proxy: str
    implementation: str
    strategy: ResolutionStrategy


def _as_ref(name: Union[str, ContractRef]) -> ContractRef:
    return name if isinstance(name, ContractRef) else ContractRef.classify(name)


class ProxyResolver:
    """
    Resolves logical names to on-chain addresses.

    Args:
        addresses: Deployed addresses by logical name
        storage: Raw storage reads
        executor: Read-only call execution (for the legacy registry)
        address_manager: Logical name of the legacy registry in ``addresses``
    """

    def __init__(
        self,
        addresses: AddressBook,
        storage: StorageReader,
        executor: CallExecutor,
        address_manager: str = DEFAULT_ADDRESS_MANAGER,
    ) -> None:
        self.addresses = addresses
        self.storage = storage
        self.executor = executor
        self.address_manager = address_manager

    def resolve(self, name: Union[str, ContractRef]) -> str:
        """Implementation address for proxied names, the deployed address otherwise."""
        ref = _as_ref(name)
        if not ref.is_proxied:
            return self.addresses.address_of(ref.name)
        return self.resolve_proxy(ref).implementation

    def resolve_proxy(self, name: Union[str, ContractRef]) -> ProxyBinding:
        """
        Resolve a proxied name to its implementation.

        Raises:
            ValueError: If the name is not a proxy name
            UnknownContractError: If the proxy itself has no deployed address
            UnresolvedProxyError: If neither strategy yields an implementation
        """
        ref = _as_ref(name)
        if not ref.is_proxied:
            raise ValueError(f"{ref.name} is not a proxy name")

        proxy = self.addresses.address_of(ref.name)
        implementation = self.read_implementation_slot(proxy)
        if not is_zero_address(implementation):
            logger.debug("%s -> %s via EIP-1967 slot", ref.name, implementation)
            return ProxyBinding(proxy, implementation, ResolutionStrategy.EIP1967)

        logger.debug("%s has an empty EIP-1967 slot, trying %s", ref.name, ref.legacy_name)
        implementation = self.lookup_legacy(ref)
        return ProxyBinding(proxy, implementation, ResolutionStrategy.LEGACY)

    def read_implementation_slot(self, proxy: str) -> str:
        return word_to_address(self.storage.get_storage_at(proxy, EIP1967_IMPLEMENTATION_SLOT))

    def read_admin_slot(self, proxy: str) -> str:
        return word_to_address(self.storage.get_storage_at(proxy, EIP1967_ADMIN_SLOT))

    def lookup_legacy(self, ref: ContractRef) -> str:
        try:
            manager = self.addresses.address_of(self.address_manager)
        except UnknownContractError:
            raise UnresolvedProxyError(
                f"Cannot resolve {ref.name}: EIP-1967 slot is empty and no "
                f"{self.address_manager} address is known"
            ) from None

        call = ContractCall.new(ADDRESS_MANAGER_ABI, manager, "getAddress", ref.legacy_name)
        try:
            result = call.unpack(self.executor.call(call.to_read_request()))
        except DecodingError as exc:
            raise UnresolvedProxyError(
                f"Cannot resolve {ref.name}: {self.address_manager} at {manager} "
                f"returned no usable address for {ref.legacy_name} ({exc})"
            ) from exc
        implementation = result.get_address(0)
        if is_zero_address(implementation):
            raise UnresolvedProxyError(
                f"Cannot resolve {ref.name}: EIP-1967 slot is empty and "
                f"{self.address_manager} has no entry for {ref.legacy_name}"
            )
        logger.debug("%s -> %s via %s", ref.name, implementation, self.address_manager)
        return implementation
