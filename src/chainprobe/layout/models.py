"""
Storage Layout Model - typed view of solc's ``storageLayout`` output.

A layout is reference data: parsed once per contract version, never mutated.
Slot coordinates are used as-is to read a raw 32-byte word and pick the
packed value out of it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from ..errors import MalformedLayoutError
from .schemas import validate_layout_document

WORD_SIZE = 32


@dataclass(frozen=True)
class StorageSlot:
    ast_id: int
    contract: str
    label: str
    offset: int
    slot: int
    type: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StorageSlot":
        return cls(
            ast_id=payload["astId"],
            contract=payload["contract"],
            label=payload["label"],
            offset=payload["offset"],
            slot=int(payload["slot"]),
            type=payload["type"],
        )


@dataclass(frozen=True)
class StorageType:
    label: str
    encoding: str
    number_of_bytes: int
    key: Optional[str] = None
    value: Optional[str] = None
    base: Optional[str] = None
    members: tuple[StorageSlot, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StorageType":
        return cls(
            label=payload["label"],
            encoding=payload["encoding"],
            number_of_bytes=int(payload["numberOfBytes"]),
            key=payload.get("key"),
            value=payload.get("value"),
            base=payload.get("base"),
            members=tuple(StorageSlot.from_dict(m) for m in payload.get("members", [])),
        )


@dataclass(frozen=True)
class StorageLayout:
    storage: tuple[StorageSlot, ...] = ()
    types: Mapping[str, StorageType] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, payload: Any) -> "StorageLayout":
        validate_layout_document(payload)
        types = {tag: StorageType.from_dict(info) for tag, info in (payload["types"] or {}).items()}
        return cls(
            storage=tuple(StorageSlot.from_dict(entry) for entry in payload["storage"]),
            types=MappingProxyType(types),
        )

    @classmethod
    def from_path(cls, path: Path) -> "StorageLayout":
        with path.open("r", encoding="utf-8") as f:
            return parse_layout(f.read())

    def find_slot(self, label: str, type_tag: str) -> Optional[StorageSlot]:
        """
        Find a variable by label and type tag.

        Both must match: the type tag tells apart a variable that was
        renamed or re-typed between contract versions. A miss returns None.
        """
        for entry in self.storage:
            if entry.label == label and entry.type == type_tag:
                return entry
        return None

    def slots_at(self, index: int) -> list[StorageSlot]:
        """All variables packed into slot ``index``, in offset order."""
        return sorted((e for e in self.storage if e.slot == index), key=lambda e: e.offset)

    def type_of(self, entry: StorageSlot) -> StorageType:
        return self.types[entry.type]

    def width_of(self, type_tag: str) -> int:
        """Byte width a type occupies in its slot (32 for mappings and dynamic arrays)."""
        return self.types[type_tag].number_of_bytes


def parse_layout(document: Union[str, bytes, Mapping[str, Any]]) -> StorageLayout:
    """
    Parse a storage-layout document.

    Args:
        document: JSON text/bytes or an already decoded dict

    Raises:
        MalformedLayoutError: If the document is not valid JSON or is
                              missing required structure
    """
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as exc:
            raise MalformedLayoutError(f"Storage layout is not valid JSON: {exc}") from exc
    return StorageLayout.from_dict(document)


def find_slot(layout: StorageLayout, label: str, type_tag: str) -> Optional[StorageSlot]:
    return layout.find_slot(label, type_tag)


def extract_packed(word: bytes, offset: int, width: int) -> int:
    """
    Extract a packed value from a 32-byte storage word.

    The value occupies bytes ``[offset, offset + width)`` counted from the
    low-order end of the word.
    """
    if len(word) != WORD_SIZE:
        raise ValueError(f"Storage word must be {WORD_SIZE} bytes, got {len(word)}")
    if offset < 0 or width <= 0 or offset + width > WORD_SIZE:
        raise ValueError(f"Range offset={offset} width={width} does not fit in a slot")
    return (int.from_bytes(word, "big") >> (offset * 8)) & ((1 << (width * 8)) - 1)
