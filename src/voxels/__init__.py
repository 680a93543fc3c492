# src/voxels/__init__.py
"""
Voxel classification layer.

Exports:
    - BlockSet / Resolution: immutable voxel-type bitsets
    - BlockRegistry: block names, ids and named sets from config/voxels.yaml
    - StandardBlockSets / WoodType: the sets and safety predicates planners use
    - BlockPos / WorldAccessor / WorldSnapshot: world reads
"""

from __future__ import annotations

from .block_set import BlockSet, Resolution, encode_voxel, decode_voxel
from .registry import BlockRegistry, load_block_registry
from .block_sets import StandardBlockSets, WoodType, default_block_sets
from .world import BlockPos, WorldAccessor, WorldSnapshot, RawChunk

__all__ = [
    "BlockSet",
    "Resolution",
    "encode_voxel",
    "decode_voxel",
    "BlockRegistry",
    "load_block_registry",
    "StandardBlockSets",
    "WoodType",
    "default_block_sets",
    "BlockPos",
    "WorldAccessor",
    "WorldSnapshot",
    "RawChunk",
]
