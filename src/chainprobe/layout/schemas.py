from __future__ import annotations

from functools import lru_cache
from typing import Any

import jsonschema

from ..errors import MalformedLayoutError

_DECIMAL = {"type": "string", "pattern": "^[0-9]+$"}

_STORAGE_ENTRY = {
    "type": "object",
    "required": ["astId", "contract", "label", "offset", "slot", "type"],
    "properties": {
        "astId": {"type": "integer"},
        "contract": {"type": "string"},
        "label": {"type": "string"},
        "offset": {"type": "integer", "minimum": 0, "maximum": 31},
        "slot": _DECIMAL,
        "type": {"type": "string"},
    },
}

STORAGE_LAYOUT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "solc storage layout",
    "type": "object",
    "required": ["storage", "types"],
    "properties": {
        "storage": {"type": "array", "items": _STORAGE_ENTRY},
        "types": {
            "type": ["object", "null"],
            "additionalProperties": {
                "type": "object",
                "required": ["encoding", "label", "numberOfBytes"],
                "properties": {
                    "encoding": {
                        "enum": ["inplace", "mapping", "dynamic_array", "bytes"],
                    },
                    "label": {"type": "string"},
                    "numberOfBytes": _DECIMAL,
                    "key": {"type": "string"},
                    "value": {"type": "string"},
                    "base": {"type": "string"},
                    "members": {"type": "array", "items": _STORAGE_ENTRY},
                },
            },
        },
    },
}


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


@lru_cache(maxsize=None)
def layout_validator() -> jsonschema.Validator:
    validator_cls = jsonschema.validators.validator_for(STORAGE_LAYOUT_SCHEMA)
    validator_cls.check_schema(STORAGE_LAYOUT_SCHEMA)
    return validator_cls(STORAGE_LAYOUT_SCHEMA)


def validate_layout_document(document: Any) -> None:
    """
    Check a decoded storage-layout document against the solc schema.

    Also checks that every referenced type tag is defined in ``types``.

    Raises:
        MalformedLayoutError: With one formatted message per problem
    """
    errors = sorted(layout_validator().iter_errors(document), key=lambda e: [str(p) for p in e.path])
    formatted = [_format_error(err) for err in errors]

    if not formatted:
        types = document.get("types") or {}
        refs = [(f"storage/{i}", e["type"]) for i, e in enumerate(document["storage"])]
        for tag, info in types.items():
            refs.extend((f"types/{tag}", info[k]) for k in ("key", "value", "base") if k in info)
            refs.extend(
                (f"types/{tag}/members/{i}", m["type"])
                for i, m in enumerate(info.get("members", []))
            )
        formatted = [f"{where}: unknown type {tag!r}" for where, tag in refs if tag not in types]

    if formatted:
        raise MalformedLayoutError("Malformed storage layout.", errors=formatted)
