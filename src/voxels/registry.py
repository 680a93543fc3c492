# src/voxels/registry.py
"""
Block registry loader.

Responsibility:
  - Load config/voxels.yaml from CONFIG_DIR
  - Map block names to numeric type ids and back
  - Resolve named block sets (plain lists or include/exclude/invert specs)
    into BlockSet instances, caching each resolved set

Set specs may reference block names and other set names. Cycles are a
config error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from .block_set import MAX_BLOCK_IDS, BlockSet


# Default config directory; tests monkeypatch this to point at a temp dir.
CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

DEFAULT_REGISTRY_FILE = "voxels.yaml"


def _load_yaml(name: str) -> Dict[str, Any]:
    """
    Load a YAML config file from CONFIG_DIR and return it as a dict.

    Raises FileNotFoundError if the file does not exist.
    """
    path = CONFIG_DIR / name
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config {path} must be a mapping at top level.")
    return data


@dataclass
class BlockRegistry:
    """
    Name <-> id table plus named block set definitions.

    Config expectations:

      max_block_ids: 4096          # optional
      blocks:
        "log": 17
      sets:
        "logs": ["log", "log2"]
        "safe_ground":
          include: ["solid"]
          exclude: ["falling"]
          invert: false            # optional
    """

    ids: Dict[str, int]
    set_specs: Dict[str, Any] = field(default_factory=dict)
    max_block_ids: int = MAX_BLOCK_IDS
    _resolved: Dict[str, BlockSet] = field(default_factory=dict, repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BlockRegistry":
        blocks = data.get("blocks") or {}
        sets = data.get("sets") or {}
        if not isinstance(blocks, Mapping) or not isinstance(sets, Mapping):
            raise ValueError("'blocks' and 'sets' must be mappings.")

        max_block_ids = int(data.get("max_block_ids", MAX_BLOCK_IDS))
        ids: Dict[str, int] = {}
        for name, type_id in blocks.items():
            type_id = int(type_id)
            if not 0 <= type_id < max_block_ids:
                raise ValueError(f"Block {name!r} has out-of-range id {type_id}.")
            ids[str(name)] = type_id

        return cls(ids=ids, set_specs=dict(sets), max_block_ids=max_block_ids)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    @property
    def names(self) -> Dict[int, str]:
        """Reverse table, type id -> block name."""
        return {type_id: name for name, type_id in self.ids.items()}

    def id_of(self, name: str) -> int:
        try:
            return self.ids[name]
        except KeyError:
            raise KeyError(f"Unknown block name {name!r}") from None

    def name_of(self, type_id: int) -> Optional[str]:
        return self.names.get(type_id)

    def set_names(self) -> List[str]:
        return sorted(self.set_specs)

    def describe(self, block_set: BlockSet) -> str:
        return block_set.describe(self.names)

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def block_set(self, name: str) -> BlockSet:
        """Resolve a named set, e.g. registry.block_set("logs")."""
        return self._resolve(name, ())

    def _resolve(self, name: str, stack: tuple) -> BlockSet:
        cached = self._resolved.get(name)
        if cached is not None:
            return cached

        if name in stack:
            chain = " -> ".join(stack + (name,))
            raise ValueError(f"Cyclic block set definition: {chain}")
        if name not in self.set_specs:
            raise KeyError(f"Unknown block set {name!r}")

        spec = self.set_specs[name]
        stack = stack + (name,)

        if isinstance(spec, Mapping):
            result = self._union_of(spec.get("include") or [], stack)
            exclude = spec.get("exclude") or []
            if exclude:
                result = result.intersect(self._union_of(exclude, stack).invert())
            if spec.get("invert"):
                result = result.invert()
        elif isinstance(spec, list):
            result = self._union_of(spec, stack)
        else:
            raise ValueError(f"Block set {name!r} must be a list or a mapping.")

        self._resolved[name] = result
        return result

    def _union_of(self, refs: Iterable[str], stack: tuple) -> BlockSet:
        result = BlockSet.empty(self.max_block_ids)
        for ref in refs:
            # A set may share its name with a block ("air"); inside its own
            # definition the name means the block.
            if ref in self.set_specs and not (ref in stack and ref in self.ids):
                result = result.union(self._resolve(ref, stack))
            elif ref in self.ids:
                result = result.union(
                    BlockSet.of(self.ids[ref], max_block_ids=self.max_block_ids)
                )
            else:
                raise KeyError(f"Unknown block or set {ref!r} in set {stack[-1]!r}")
        return result


def load_block_registry(name: str = DEFAULT_REGISTRY_FILE) -> BlockRegistry:
    """Load the block registry from CONFIG_DIR/<name>."""
    return BlockRegistry.from_mapping(_load_yaml(name))


__all__ = ["CONFIG_DIR", "BlockRegistry", "load_block_registry"]
