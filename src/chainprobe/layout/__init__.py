from .models import (
    StorageLayout,
    StorageSlot,
    StorageType,
    extract_packed,
    find_slot,
    parse_layout,
)
from .schemas import STORAGE_LAYOUT_SCHEMA, validate_layout_document

__all__ = [
    "STORAGE_LAYOUT_SCHEMA",
    "StorageLayout",
    "StorageSlot",
    "StorageType",
    "extract_packed",
    "find_slot",
    "parse_layout",
    "validate_layout_document",
]
