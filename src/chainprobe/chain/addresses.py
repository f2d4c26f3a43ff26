"""
Address Book - deployed address for each logical contract name.

Loaded from a flat JSON object such as a deployment's ``.deploy`` file:
``{"L1CrossDomainMessengerProxy": "0x...", "AddressManager": "0x..."}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from ..errors import ConfigError, UnknownContractError
from ..utils import to_checksum_address


class AddressBook:
    """Checksummed address by logical name. Invalid entries raise ``ConfigError``."""

    def __init__(self, addresses: Optional[Mapping[str, str]] = None) -> None:
        self._addresses: dict[str, str] = {}
        for name, address in (addresses or {}).items():
            try:
                self._addresses[name] = to_checksum_address(address)
            except ValueError:
                raise ConfigError(f"Address book entry {name} is not an address: {address!r}") from None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AddressBook":
        bad = [k for k, v in payload.items() if not isinstance(v, str)]
        if bad:
            raise ConfigError(f"Address book entries must be hex strings: {bad}")
        return cls(payload)

    @classmethod
    def from_path(cls, path: Path) -> "AddressBook":
        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read address book {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigError(f"{path} must contain a JSON object of name -> address")
        return cls.from_dict(payload)

    def __contains__(self, name: str) -> bool:
        return name in self._addresses

    def names(self) -> list[str]:
        return sorted(self._addresses)

    def get(self, name: str) -> Optional[str]:
        return self._addresses.get(name)

    def address_of(self, name: str) -> str:
        try:
            return self._addresses[name]
        except KeyError:
            raise UnknownContractError(f"No deployed address for {name}") from None
