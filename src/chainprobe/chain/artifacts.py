"""
Artifact Registry - per-contract compiler output for one verification run.

Holds ABI, storage layout, deployed bytecode and immutable references keyed
by contract name. A registry is built once (usually from a Foundry ``out/``
tree) and passed explicitly to whatever needs it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..errors import ArtifactNotFoundError, ConfigError
from ..layout.models import StorageLayout

logger = logging.getLogger(__name__)


def find_contracts_out(start: Optional[Path] = None) -> Path:
    """
    Locate a Foundry ``out/`` directory.

    Searches from ``start`` (default: the current directory) upward.
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        for candidate in (parent / "out", parent / "contracts" / "out"):
            if candidate.is_dir():
                return candidate
    raise ArtifactNotFoundError(
        "Cannot find a Foundry out/ directory. Run 'forge build' or set CHAINPROBE_ARTIFACTS."
    )


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    abi: list[dict[str, Any]] = field(default_factory=list, repr=False)
    storage_layout: Optional[StorageLayout] = field(default=None, repr=False)
    deployed_bytecode: str = "0x"
    immutable_references: Mapping[str, list[dict[str, int]]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, payload: Mapping[str, Any]) -> "ContractArtifact":
        """
        Build from a Foundry (or Hardhat) artifact.

        Foundry nests bytecode as ``{"object": ..., "immutableReferences": ...}``,
        Hardhat stores a plain hex string.
        """
        deployed = payload.get("deployedBytecode", "0x")
        if isinstance(deployed, Mapping):
            bytecode = deployed.get("object", "0x")
            immutables = deployed.get("immutableReferences", {})
        else:
            bytecode = deployed
            immutables = payload.get("immutableReferences", {})
        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        layout_doc = payload.get("storageLayout")
        return cls(
            name=name,
            abi=list(payload.get("abi", [])),
            storage_layout=StorageLayout.from_dict(layout_doc) if layout_doc else None,
            deployed_bytecode=bytecode,
            immutable_references=dict(immutables or {}),
        )


class ArtifactRegistry:
    """Contract artifacts by name, scoped to one verification run."""

    def __init__(self, artifacts: Iterable[ContractArtifact] = ()) -> None:
        self._artifacts: dict[str, ContractArtifact] = {}
        for artifact in artifacts:
            self.register(artifact)

    @classmethod
    def from_foundry_out(cls, out_dir: Optional[Path] = None) -> "ArtifactRegistry":
        """
        Load every ``<Name>.sol/<Name>.json`` artifact under ``out_dir``.

        Files whose stem differs from their directory (e.g. build-info or
        versioned duplicates like ``Foo.0.8.15.json``) are skipped.
        """
        out_dir = out_dir or find_contracts_out()
        registry = cls()
        for path in sorted(out_dir.glob("*.sol/*.json")):
            name = path.stem
            if path.parent.name != f"{name}.sol":
                continue
            try:
                with path.open("r", encoding="utf-8") as f:
                    payload = json.load(f)
            except (OSError, ValueError) as exc:
                raise ConfigError(f"Cannot read artifact {path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise ConfigError(f"Artifact {path} is not a JSON object")
            registry.register(ContractArtifact.from_dict(name, payload))
        logger.debug("loaded %d artifacts from %s", len(registry), out_dir)
        return registry

    def __len__(self) -> int:
        return len(self._artifacts)

    def __contains__(self, name: str) -> bool:
        return name in self._artifacts

    def register(self, artifact: ContractArtifact) -> None:
        self._artifacts[artifact.name] = artifact

    def names(self) -> list[str]:
        return sorted(self._artifacts)

    def artifact(self, name: str) -> ContractArtifact:
        try:
            return self._artifacts[name]
        except KeyError:
            raise ArtifactNotFoundError(f"No artifact for contract {name}") from None

    def abi(self, name: str) -> list[dict[str, Any]]:
        return self.artifact(name).abi

    def layout(self, name: str) -> StorageLayout:
        layout = self.artifact(name).storage_layout
        if layout is None:
            raise ArtifactNotFoundError(
                f"Artifact for {name} has no storage layout. "
                f"Add extra_output = [\"storageLayout\"] to foundry.toml."
            )
        return layout

    def deployed_bytecode(self, name: str) -> str:
        return self.artifact(name).deployed_bytecode

    def immutable_references(self, name: str) -> Mapping[str, list[dict[str, int]]]:
        return self.artifact(name).immutable_references
