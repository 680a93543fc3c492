# world access: positions, accessor protocol, chunk-backed snapshot
# src/voxels/world.py
"""
World access for the voxel layer.

Provides:
- BlockPos: integer (x, y, z) world coordinate
- WorldAccessor: read-only query surface returning encoded voxels
- RawChunk / WorldSnapshot: a chunk-keyed snapshot implementing WorldAccessor

Rules:
- Reads never fail. Unknown chunks and coordinates outside the world
  height read as air (encoded 0).
- Snapshots are plain data; nothing here mutates world state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, NamedTuple, Protocol, Tuple, runtime_checkable

AIR_ENCODED = 0

CHUNK_SIZE = 16
WORLD_HEIGHT = 256


class BlockPos(NamedTuple):
    """Integer world coordinate."""

    x: int
    y: int
    z: int

    def add(self, dx: int = 0, dy: int = 0, dz: int = 0) -> "BlockPos":
        return BlockPos(self.x + dx, self.y + dy, self.z + dz)

    def above(self, n: int = 1) -> "BlockPos":
        return BlockPos(self.x, self.y + n, self.z)

    def below(self, n: int = 1) -> "BlockPos":
        return BlockPos(self.x, self.y - n, self.z)


@runtime_checkable
class WorldAccessor(Protocol):
    """
    Read-only voxel lookup.

    Implementations must be pure snapshot reads and must return the air
    encoding for anything they do not know about.
    """

    def get_encoded_voxel(self, x: int, y: int, z: int) -> int:
        ...


@dataclass
class RawChunk:
    """
    One 16-wide column of the world.

    blocks maps chunk-local (x, y, z) to an encoded voxel. Absent entries
    are air.
    """

    x: int
    z: int
    blocks: Dict[Tuple[int, int, int], int] = field(default_factory=dict)


@dataclass
class WorldSnapshot:
    """
    Chunk-keyed world snapshot.

    Chunks are keyed by (chunk_x, chunk_z). Block coordinates are split into
    chunk and local parts with floor division so negative coordinates land
    in the right chunk.
    """

    chunks: Dict[Tuple[int, int], RawChunk] = field(default_factory=dict)
    height: int = WORLD_HEIGHT

    def get_encoded_voxel(self, x: int, y: int, z: int) -> int:
        if not 0 <= y < self.height:
            return AIR_ENCODED

        cx, lx = divmod(x, CHUNK_SIZE)
        cz, lz = divmod(z, CHUNK_SIZE)

        chunk = self.chunks.get((cx, cz))
        if chunk is None:
            return AIR_ENCODED
        return int(chunk.blocks.get((lx, y, lz), AIR_ENCODED))

    def set_encoded_voxel(self, x: int, y: int, z: int, encoded: int) -> None:
        """Store a voxel, creating the chunk on demand. Used when assembling snapshots."""
        cx, lx = divmod(x, CHUNK_SIZE)
        cz, lz = divmod(z, CHUNK_SIZE)

        chunk = self.chunks.get((cx, cz))
        if chunk is None:
            chunk = RawChunk(x=cx, z=cz)
            self.chunks[(cx, cz)] = chunk

        if encoded == AIR_ENCODED:
            chunk.blocks.pop((lx, y, lz), None)
        else:
            chunk.blocks[(lx, y, lz)] = encoded

    @classmethod
    def from_blocks(cls, blocks: Mapping[Tuple[int, int, int], int]) -> "WorldSnapshot":
        """Build a snapshot from a world-coordinate -> encoded voxel mapping."""
        snapshot = cls()
        for (x, y, z), encoded in blocks.items():
            snapshot.set_encoded_voxel(x, y, z, encoded)
        return snapshot


__all__ = [
    "AIR_ENCODED",
    "BlockPos",
    "WorldAccessor",
    "RawChunk",
    "WorldSnapshot",
]
