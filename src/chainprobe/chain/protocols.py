"""Collaborator interfaces the verification code depends on."""

from __future__ import annotations

from typing import Protocol, Union

from ..calls.call import ReadRequest


class StorageReader(Protocol):
    def get_storage_at(self, address: str, slot: int, block: Union[str, int] = "latest") -> bytes:
        """Return the 32-byte word stored at ``slot`` of ``address``."""
        ...


class CallExecutor(Protocol):
    def call(self, request: ReadRequest, block: Union[str, int] = "latest") -> bytes:
        """Execute a read-only call and return the raw result bytes."""
        ...


class CodeReader(Protocol):
    def get_code(self, address: str, block: Union[str, int] = "latest") -> bytes:
        ...
