"""
ABI Codec - encode contract calls and decode their return data.

Encoding goes through eth-abi after every argument has been checked against
the ABI category of its declared type, so shape mistakes surface as
``EncodingError`` with the offending argument path instead of an opaque
eth-abi message.

Decoding yields a ``CallResult``: the raw decoded values plus their canonical
ABI types. Its typed getters are checked projections; asking for a type the
ABI did not declare raises ``ResultTypeError``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from eth_abi import decode, encode
from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError

from ..errors import DecodingError, EncodingError, ResultTypeError
from ..utils import HexLike, hex_to_bytes, is_hex_address, keccak256, to_checksum_address

T = TypeVar("T")

_INT_RE = re.compile(r"^(u?)int(\d*)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(\d+)$")
_ARRAY_RE = re.compile(r"^(.*)\[(\d*)\]$")


class AbiKind(Enum):
    UINT = "uint"
    INT = "int"
    BOOL = "bool"
    ADDRESS = "address"
    FIXED_BYTES = "fixed_bytes"
    BYTES = "bytes"
    STRING = "string"
    ARRAY = "array"
    TUPLE = "tuple"


def abi_kind(type_str: str) -> AbiKind:
    """
    Map an ABI type string to its category.

    Accepts canonical tuple notation such as ``(uint256,address)[]`` as well
    as the JSON ABI's bare ``tuple``.

    Raises:
        ValueError: If the type is not a supported ABI type
    """
    if type_str.endswith("]"):
        return AbiKind.ARRAY
    if type_str.startswith("(") or type_str == "tuple":
        return AbiKind.TUPLE
    if type_str == "bool":
        return AbiKind.BOOL
    if type_str == "address":
        return AbiKind.ADDRESS
    if type_str == "bytes":
        return AbiKind.BYTES
    if type_str == "string":
        return AbiKind.STRING

    m = _INT_RE.match(type_str)
    if m:
        bits = int(m.group(2) or 256)
        if 8 <= bits <= 256 and bits % 8 == 0:
            return AbiKind.UINT if m.group(1) else AbiKind.INT

    m = _FIXED_BYTES_RE.match(type_str)
    if m and 1 <= int(m.group(1)) <= 32:
        return AbiKind.FIXED_BYTES

    raise ValueError(f"Unsupported ABI type: {type_str}")


def int_bits(type_str: str) -> int:
    m = _INT_RE.match(type_str)
    if not m:
        raise ValueError(f"Not an integer type: {type_str}")
    return int(m.group(2) or 256)


def fixed_bytes_size(type_str: str) -> int:
    m = _FIXED_BYTES_RE.match(type_str)
    if not m:
        raise ValueError(f"Not a fixed bytes type: {type_str}")
    return int(m.group(1))


def array_element(type_str: str) -> tuple[str, Optional[int]]:
    """Split ``T[n]`` / ``T[]`` into the element type and optional length."""
    m = _ARRAY_RE.match(type_str)
    if not m:
        raise ValueError(f"Not an array type: {type_str}")
    length = m.group(2)
    return m.group(1), int(length) if length else None


def canonical_type(param: Mapping[str, Any]) -> str:
    """Render a JSON ABI parameter as its canonical type string."""
    type_str = param["type"]
    if type_str.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){type_str[len('tuple'):]}"
    return type_str


def method_signature(entry: Mapping[str, Any]) -> str:
    types = [canonical_type(p) for p in entry.get("inputs", [])]
    return f"{entry['name']}({','.join(types)})"


def method_selector(entry: Mapping[str, Any]) -> bytes:
    return keccak256(method_signature(entry).encode("utf-8"))[:4]


def find_function(
    abi: Sequence[Mapping[str, Any]],
    method: str,
    arity: Optional[int] = None,
) -> Mapping[str, Any]:
    """
    Find a function entry by name or full signature.

    Overloads sharing a name are narrowed by ``arity`` when given.

    Raises:
        LookupError: If no entry, or more than one, matches
    """
    functions = [e for e in abi if e.get("type", "function") == "function"]
    if "(" in method:
        candidates = [e for e in functions if method_signature(e) == method]
    else:
        candidates = [e for e in functions if e.get("name") == method]
        if len(candidates) > 1 and arity is not None:
            candidates = [e for e in candidates if len(e.get("inputs", [])) == arity]

    if not candidates:
        raise LookupError(f"Function {method} not found in ABI")
    if len(candidates) > 1:
        sigs = ", ".join(method_signature(e) for e in candidates)
        raise LookupError(f"Function {method} is ambiguous: {sigs}")
    return candidates[0]


def _normalize(param: Mapping[str, Any], value: Any, path: str) -> Any:
    """Check ``value`` against the declared parameter and return what eth-abi expects."""
    type_str = param["type"]
    try:
        kind = abi_kind(canonical_type(param))
    except ValueError as exc:
        raise EncodingError(f"{path}: {exc}") from None

    if kind is AbiKind.ARRAY:
        element_type, length = array_element(type_str)
        if not isinstance(value, (list, tuple)):
            raise EncodingError(f"{path}: expected a sequence for {type_str}, got {type(value).__name__}")
        if length is not None and len(value) != length:
            raise EncodingError(f"{path}: expected {length} items for {type_str}, got {len(value)}")
        element = dict(param, type=element_type)
        return [_normalize(element, v, f"{path}[{i}]") for i, v in enumerate(value)]

    if kind is AbiKind.TUPLE:
        components = param.get("components", [])
        if isinstance(value, Mapping):
            names = [c.get("name") for c in components]
            missing = [n for n in names if n not in value]
            if missing:
                raise EncodingError(f"{path}: missing struct fields {missing}")
            value = [value[n] for n in names]
        if not isinstance(value, (list, tuple)) or len(value) != len(components):
            raise EncodingError(f"{path}: expected {len(components)} struct fields")
        return tuple(
            _normalize(c, v, f"{path}.{c.get('name') or i}")
            for i, (c, v) in enumerate(zip(components, value))
        )

    if kind in (AbiKind.UINT, AbiKind.INT):
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodingError(f"{path}: expected int for {type_str}, got {type(value).__name__}")
        bits = int_bits(type_str)
        if kind is AbiKind.UINT:
            lo, hi = 0, (1 << bits) - 1
        else:
            lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        if not lo <= value <= hi:
            raise EncodingError(f"{path}: {value} out of range for {type_str}")
        return value

    if kind is AbiKind.BOOL:
        if not isinstance(value, bool):
            raise EncodingError(f"{path}: expected bool, got {type(value).__name__}")
        return value

    if kind is AbiKind.ADDRESS:
        if isinstance(value, (bytes, bytearray)) and len(value) == 20:
            return bytes(value)
        if not is_hex_address(value):
            raise EncodingError(f"{path}: invalid address {value!r}")
        body = value[2:] if value.startswith("0x") else value
        # Mixed case must be a valid EIP-55 checksum
        if body != body.lower() and body != body.upper() and to_checksum_address(value)[2:] != body:
            raise EncodingError(f"{path}: bad EIP-55 checksum in {value!r}")
        return value

    if kind is AbiKind.FIXED_BYTES:
        size = fixed_bytes_size(type_str)
        if not isinstance(value, (bytes, bytearray)) or len(value) > size:
            raise EncodingError(f"{path}: expected at most {size} bytes for {type_str}")
        return bytes(value)

    if kind is AbiKind.BYTES:
        if not isinstance(value, (bytes, bytearray)):
            raise EncodingError(f"{path}: expected bytes, got {type(value).__name__}")
        return bytes(value)

    if not isinstance(value, str):
        raise EncodingError(f"{path}: expected str, got {type(value).__name__}")
    return value


def encode_arguments(entry: Mapping[str, Any], args: Sequence[Any]) -> bytes:
    """ABI-encode ``args`` for the inputs of a function entry (no selector)."""
    inputs = entry.get("inputs", [])
    if len(args) != len(inputs):
        raise EncodingError(
            f"{method_signature(entry)} takes {len(inputs)} arguments, got {len(args)}"
        )
    values = [
        _normalize(param, value, param.get("name") or f"arg{i}")
        for i, (param, value) in enumerate(zip(inputs, args))
    ]
    if not inputs:
        return b""
    types = [canonical_type(p) for p in inputs]
    try:
        return encode(types, values)
    except (AbiEncodingError, ABITypeError, ParseError) as exc:
        raise EncodingError(f"Failed to encode {method_signature(entry)}: {exc}") from exc


def encode_call(abi: Sequence[Mapping[str, Any]], method: str, args: Sequence[Any]) -> bytes:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        method: Function name or full signature
        args: Positional arguments matching the signature

    Returns:
        4-byte selector followed by the encoded arguments

    Raises:
        EncodingError: If the function is unknown or the arguments do not fit
    """
    try:
        entry = find_function(abi, method, arity=len(args))
    except LookupError as exc:
        raise EncodingError(str(exc)) from None
    return method_selector(entry) + encode_arguments(entry, args)


def _checksum_leaves(param: Mapping[str, Any], value: Any) -> Any:
    """Checksum every address in a decoded value, descending into arrays and tuples."""
    kind = abi_kind(canonical_type(param))
    if kind is AbiKind.ADDRESS:
        return to_checksum_address(value)
    if kind is AbiKind.ARRAY:
        element = dict(param, type=array_element(param["type"])[0])
        return tuple(_checksum_leaves(element, v) for v in value)
    if kind is AbiKind.TUPLE:
        return tuple(_checksum_leaves(c, v) for c, v in zip(param.get("components", []), value))
    return value


def decode_outputs(entry: Mapping[str, Any], data: HexLike) -> "CallResult":
    outputs = entry.get("outputs", [])
    types = tuple(canonical_type(p) for p in outputs)
    if not types:
        return CallResult((), ())

    try:
        raw = hex_to_bytes(data)
    except ValueError as exc:
        raise DecodingError(f"Return data for {method_signature(entry)} is not hex: {exc}") from None
    if not raw:
        raise DecodingError(f"Empty return data for {method_signature(entry)}")
    if len(raw) % 32:
        raise DecodingError(
            f"Return data for {method_signature(entry)} is {len(raw)} bytes, "
            f"not a multiple of 32"
        )
    try:
        values = decode(list(types), raw)
    except (AbiDecodingError, ABITypeError, ParseError) as exc:
        raise DecodingError(f"Failed to decode {method_signature(entry)}: {exc}") from exc
    values = tuple(_checksum_leaves(p, v) for p, v in zip(outputs, values))
    return CallResult(values, types)


def decode_result(
    abi: Sequence[Mapping[str, Any]],
    method: str,
    data: HexLike,
    arity: Optional[int] = None,
) -> "CallResult":
    """
    ABI-decode a function's return data.

    Raises:
        DecodingError: If the function is unknown or the data does not match
                       the declared output tuple
    """
    try:
        entry = find_function(abi, method, arity=arity)
    except LookupError as exc:
        raise DecodingError(str(exc)) from None
    return decode_outputs(entry, data)


@dataclass(frozen=True)
class CallResult:
    """Decoded outputs of one call, addressed by position."""

    outputs: tuple
    types: tuple

    def __len__(self) -> int:
        return len(self.outputs)

    def __getitem__(self, i: int) -> Any:
        return self.outputs[i]

    def _project(self, i: int, kinds: tuple[AbiKind, ...], requested: str) -> Any:
        if not 0 <= i < len(self.outputs):
            raise IndexError(f"Output index {i} out of range ({len(self.outputs)} outputs)")
        declared = self.types[i]
        if abi_kind(declared) not in kinds:
            raise ResultTypeError(f"Output {i} is {declared}, not {requested}")
        return self.outputs[i]

    def _uint(self, i: int, bits: int) -> int:
        value = self._project(i, (AbiKind.UINT,), f"uint{bits}")
        if int_bits(self.types[i]) > bits:
            raise ResultTypeError(f"Output {i} is {self.types[i]}, wider than uint{bits}")
        return value

    def get_uint8(self, i: int) -> int:
        return self._uint(i, 8)

    def get_uint16(self, i: int) -> int:
        return self._uint(i, 16)

    def get_uint32(self, i: int) -> int:
        return self._uint(i, 32)

    def get_uint64(self, i: int) -> int:
        return self._uint(i, 64)

    def get_big_int(self, i: int) -> int:
        return self._project(i, (AbiKind.UINT, AbiKind.INT), "integer")

    def get_bool(self, i: int) -> bool:
        return self._project(i, (AbiKind.BOOL,), "bool")

    def get_address(self, i: int) -> str:
        return to_checksum_address(self._project(i, (AbiKind.ADDRESS,), "address"))

    def get_bytes32(self, i: int) -> bytes:
        value = self._project(i, (AbiKind.FIXED_BYTES,), "bytes32")
        if fixed_bytes_size(self.types[i]) != 32:
            raise ResultTypeError(f"Output {i} is {self.types[i]}, not bytes32")
        return value

    def get_hash(self, i: int) -> bytes:
        return self.get_bytes32(i)

    def get_bytes(self, i: int) -> bytes:
        return self._project(i, (AbiKind.BYTES,), "bytes")

    def get_string(self, i: int) -> str:
        return self._project(i, (AbiKind.STRING,), "string")

    def _list_of(self, i: int, element: str) -> list:
        value = self._project(i, (AbiKind.ARRAY,), f"{element}[]")
        element_type, _ = array_element(self.types[i])
        if element_type != element:
            raise ResultTypeError(f"Output {i} is {self.types[i]}, not {element}[]")
        return list(value)

    def get_bytes32_list(self, i: int) -> list[bytes]:
        return self._list_of(i, "bytes32")

    def get_address_list(self, i: int) -> list[str]:
        return [to_checksum_address(a) for a in self._list_of(i, "address")]

    def get_struct(self, i: int, factory: Callable[..., T]) -> T:
        """Build ``factory(*fields)`` from a tuple-typed output."""
        value = self._project(i, (AbiKind.TUPLE,), "struct")
        return factory(*value)


__all__ = [
    "AbiKind",
    "CallResult",
    "abi_kind",
    "canonical_type",
    "decode_outputs",
    "decode_result",
    "encode_arguments",
    "encode_call",
    "find_function",
    "method_selector",
    "method_signature",
]
