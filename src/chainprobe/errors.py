"""
Error taxonomy for chainprobe.

Every data-dependent failure is a ``ProbeError`` carrying a CLI exit code.
``ResultTypeError`` is different: it signals that the caller asked a
``CallResult`` for a type the ABI never declared, which is a bug at the call
site rather than bad chain data.
"""

from __future__ import annotations


class ProbeError(RuntimeError):
    exit_code: int = 1


class EncodingError(ProbeError):
    exit_code = 2


class DecodingError(ProbeError):
    exit_code = 3


class MalformedLayoutError(ProbeError):
    exit_code = 4

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class SlotNotFoundError(ProbeError):
    exit_code = 5


class UnresolvedProxyError(ProbeError):
    exit_code = 6


class RpcError(ProbeError):
    exit_code = 7


class ArtifactNotFoundError(ProbeError):
    exit_code = 8


class UnknownContractError(ProbeError):
    exit_code = 9


class BytecodeMismatchError(ProbeError):
    exit_code = 10


class ConfigError(ProbeError):
    """Unusable settings or input files (address book, artifacts)."""

    exit_code = 11


class ResultTypeError(TypeError):
    pass


__all__ = [
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
