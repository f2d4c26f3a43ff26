"""
Initialization State Reader - read the ``_initialized`` counter.

For a proxied name the implementation's storage layout is used, but the word
is read at the proxy's address: the proxy delegates execution, so the state
lives in its own storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..chain.artifacts import ArtifactRegistry
from ..chain.protocols import StorageReader
from ..errors import SlotNotFoundError
from ..layout.models import StorageSlot, extract_packed
from .proxy import ContractRef, ProxyBinding, ProxyResolver

logger = logging.getLogger(__name__)

INITIALIZED_LABEL = "_initialized"
INITIALIZED_TYPE = "t_uint8"
# Value written by _disableInitializers()
DISABLED_COUNTER = 0xFF


@dataclass(frozen=True)
class InitializationState:
    name: str
    address: str
    slot: StorageSlot
    counter: int
    binding: Optional[ProxyBinding] = None

    @property
    def implementation(self) -> str:
        return self.binding.implementation if self.binding else self.address

    @property
    def initialized(self) -> bool:
        return self.counter != 0

    @property
    def disabled(self) -> bool:
        return self.counter == DISABLED_COUNTER


class InitializationReader:
    def __init__(
        self,
        artifacts: ArtifactRegistry,
        resolver: ProxyResolver,
        storage: StorageReader,
    ) -> None:
        self.artifacts = artifacts
        self.resolver = resolver
        self.storage = storage

    def initialized_slot(self, name: Union[str, ContractRef]) -> StorageSlot:
        ref = name if isinstance(name, ContractRef) else ContractRef.classify(name)
        layout = self.artifacts.layout(ref.implementation_name)
        entry = layout.find_slot(INITIALIZED_LABEL, INITIALIZED_TYPE)
        if entry is None:
            raise SlotNotFoundError(
                f"{ref.implementation_name} declares no {INITIALIZED_LABEL} ({INITIALIZED_TYPE})"
            )
        return entry

    def inspect(self, name: str) -> InitializationState:
        """
        Read the initialization counter of ``name``.

        Raises:
            ArtifactNotFoundError: If the implementation has no storage layout
            SlotNotFoundError: If the layout declares no ``_initialized``
            UnresolvedProxyError: If a proxied name has no implementation
            UnknownContractError: If ``name`` has no deployed address
        """
        ref = ContractRef.classify(name)
        entry = self.initialized_slot(ref)

        binding = self.resolver.resolve_proxy(ref) if ref.is_proxied else None
        address = binding.proxy if binding else self.resolver.resolve(ref)

        word = self.storage.get_storage_at(address, entry.slot)
        counter = extract_packed(word, entry.offset, 1)
        logger.debug(
            "%s at %s: slot %d offset %d -> %d", name, address, entry.slot, entry.offset, counter
        )
        return InitializationState(name, address, entry, counter, binding)

    def read_initialized_counter(self, name: str) -> int:
        return self.inspect(name).counter
