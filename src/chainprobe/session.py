"""
Session - the collaborators for one verification run.

Artifacts and addresses are loaded once, on first use, and shared by every
check in the run. The RPC client is closed when the session exits.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

from .chain.addresses import AddressBook
from .chain.artifacts import ArtifactRegistry
from .chain.rpc import RpcClient
from .config import Settings
from .verify.initialized import InitializationReader
from .verify.proxy import ProxyResolver


class Session:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if "rpc" in self.__dict__:
            self.rpc.close()

    @cached_property
    def rpc(self) -> RpcClient:
        return RpcClient(self.settings.rpc_url, timeout=self.settings.rpc_timeout)

    @cached_property
    def artifacts(self) -> ArtifactRegistry:
        return ArtifactRegistry.from_foundry_out(self.settings.artifacts_dir)

    @cached_property
    def addresses(self) -> AddressBook:
        if self.settings.addresses_path is None:
            return AddressBook()
        return AddressBook.from_path(self.settings.addresses_path)

    @cached_property
    def resolver(self) -> ProxyResolver:
        return ProxyResolver(
            self.addresses,
            storage=self.rpc,
            executor=self.rpc,
            address_manager=self.settings.address_manager,
        )

    @cached_property
    def initialization(self) -> InitializationReader:
        return InitializationReader(self.artifacts, self.resolver, self.rpc)
