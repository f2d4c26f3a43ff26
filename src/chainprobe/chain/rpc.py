"""
JSON-RPC Client for EVM nodes.

Lightweight alternative to web3.py: httpx for HTTP, hex handling by hand.
Supports read-only calls, raw storage reads and code lookups, which is all
the verification layer needs.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Union

import httpx

from ..calls.call import ReadRequest
from ..config import DEFAULT_RPC_TIMEOUT, get_rpc_url
from ..errors import RpcError
from ..utils import hex_to_bytes

logger = logging.getLogger(__name__)

Block = Union[str, int]


def _block_param(block: Block) -> str:
    return hex(block) if isinstance(block, int) else block


def _data(method: str, result: Any) -> bytes:
    try:
        return hex_to_bytes(result or "0x")
    except (AttributeError, ValueError):
        raise RpcError(f"{method} returned invalid data: {result!r}") from None


class RpcClient:
    """
    Synchronous JSON-RPC client.

    Holds one ``httpx.Client`` for its lifetime; use it as a context manager
    or call ``close()``.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url or get_rpc_url()
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: On transport failure, HTTP error status or a JSON-RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc %s %s", method, params)

        try:
            response = self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"{method} returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a non-object response")
        if data.get("error"):
            raise RpcError(f"RPC error: {data['error']}")
        return data.get("result")

    def call(self, request: ReadRequest, block: Block = "latest") -> bytes:
        result = self.request("eth_call", [request.to_rpc_params(), _block_param(block)])
        return _data("eth_call", result)

    def get_storage_at(self, address: str, slot: int, block: Block = "latest") -> bytes:
        result = self.request("eth_getStorageAt", [address, hex(slot), _block_param(block)])
        # Some nodes return the word as an unpadded quantity (e.g. "0x1")
        try:
            value = int(result, 16) if result and result != "0x" else 0
        except (TypeError, ValueError):
            raise RpcError(f"eth_getStorageAt returned invalid data: {result!r}") from None
        if value.bit_length() > 256:
            raise RpcError(f"eth_getStorageAt returned more than 32 bytes: {result!r}")
        return value.to_bytes(32, "big")

    def get_code(self, address: str, block: Block = "latest") -> bytes:
        result = self.request("eth_getCode", [address, _block_param(block)])
        return _data("eth_getCode", result)

    def chain_id(self) -> int:
        return int(self.request("eth_chainId", []), 16)
