# src/voxels/block_sets.py
"""
Standard block sets and the safety predicates built on them.

Provides:
- StandardBlockSets: the named sets the planners need (air, logs, leaves,
  safe ground/side/ceiling), resolved from a BlockRegistry
- WoodType: tree species and their log/sapling variants
- default_block_sets(): process-local singleton built from config/voxels.yaml

The safety predicates answer "can the agent stand here / next to this"
questions. They only read the world.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .block_set import BlockSet
from .registry import BlockRegistry, load_block_registry
from .world import BlockPos, WorldAccessor

# Horizontal neighbors of a column.
SIDE_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class WoodType(Enum):
    """
    Tree species.

    Values are (log block name, species meta, sapling meta). Log metas use
    the low two bits for the species and the high two bits for the axis.
    """

    OAK = ("log", 0, 0)
    SPRUCE = ("log", 1, 1)
    BIRCH = ("log", 2, 2)
    JUNGLE = ("log", 3, 3)
    ACACIA = ("log2", 0, 4)
    DARK_OAK = ("log2", 1, 5)

    @property
    def log_block(self) -> str:
        return self.value[0]

    @property
    def species_meta(self) -> int:
        return self.value[1]

    @property
    def sapling_meta(self) -> int:
        return self.value[2]

    def log_blocks(self, registry: BlockRegistry) -> BlockSet:
        """Type+meta set of this species' logs in every orientation."""
        type_id = registry.id_of(self.log_block)
        return BlockSet.of_variants(
            ((type_id, (axis << 2) | self.species_meta) for axis in range(4)),
            max_block_ids=registry.max_block_ids,
        )

    @classmethod
    def parse(cls, name: str) -> "WoodType":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown wood type {name!r}") from None


@dataclass(frozen=True)
class StandardBlockSets:
    """Block sets used for tree detection and agent safety checks."""

    air: BlockSet
    logs: BlockSet
    leaves: BlockSet
    tree_stuff: BlockSet
    safe_ground: BlockSet
    safe_side: BlockSet
    safe_ceiling: BlockSet
    registry: Optional[BlockRegistry] = None

    @classmethod
    def from_registry(cls, registry: BlockRegistry) -> "StandardBlockSets":
        return cls(
            air=registry.block_set("air"),
            logs=registry.block_set("logs"),
            leaves=registry.block_set("leaves"),
            tree_stuff=registry.block_set("tree_stuff"),
            safe_ground=registry.block_set("safe_ground"),
            safe_side=registry.block_set("safe_side"),
            safe_ceiling=registry.block_set("safe_ceiling"),
            registry=registry,
        )

    def logs_of(self, wood_type: Optional[WoodType]) -> BlockSet:
        """Trunk set for one species, or every log when wood_type is None."""
        if wood_type is None:
            return self.logs
        if self.registry is None:
            raise ValueError("wood_type requires a registry")
        return wood_type.log_blocks(self.registry)

    # ------------------------------------------------------------------
    # Safety predicates
    # ------------------------------------------------------------------

    def is_safe_ground(self, world: WorldAccessor, pos: BlockPos) -> bool:
        return self.safe_ground.is_at(world, pos)

    def safe_side_around(self, world: WorldAccessor, pos: BlockPos) -> bool:
        """All four horizontal neighbors of pos are safe to stand next to."""
        return all(
            self.safe_side.is_at(world, pos.add(dx, 0, dz)) for dx, dz in SIDE_OFFSETS
        )

    def safe_side_and_ceiling_around(self, world: WorldAccessor, pos: BlockPos) -> bool:
        """safe_side_around(pos) and a safe ceiling block directly above pos."""
        return self.safe_side_around(world, pos) and self.safe_ceiling.is_at(
            world, pos.above()
        )


_default_block_sets: Optional[StandardBlockSets] = None


def default_block_sets() -> StandardBlockSets:
    """
    Return a process-local StandardBlockSets singleton.

    First call reads config/voxels.yaml; later calls reuse the result.
    """
    global _default_block_sets
    if _default_block_sets is None:
        _default_block_sets = StandardBlockSets.from_registry(load_block_registry())
    return _default_block_sets


def _reset_caches_for_tests() -> None:
    """Drop the singleton so the next call reloads the config."""
    global _default_block_sets
    _default_block_sets = None


__all__ = [
    "WoodType",
    "StandardBlockSets",
    "default_block_sets",
]
