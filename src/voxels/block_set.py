# immutable voxel-type bitsets with type and type+meta resolution
# src/voxels/block_set.py
"""
BlockSet: set of voxel types, identified by numeric type id.

A BlockSet is an immutable bit vector. It comes in two resolutions:

- Resolution.TYPE:       one bit per type id.
- Resolution.TYPE_META:  one bit per (type id, meta) pair, META_SLOTS bits
                         per type. Used when a variant (e.g. wood species)
                         matters.

Combining a TYPE set with a TYPE_META set first promotes the TYPE set by
copying each set bit into every meta slot of that type. Sets of different
resolution are never compared bit-for-bit.

This module does not know block names. Name lookup lives in
voxels.registry; describe() takes an optional name mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .world import BlockPos, WorldAccessor

# Type ids are 0..MAX_BLOCK_IDS-1.
MAX_BLOCK_IDS = 4096

META_BITS = 4
META_SLOTS = 1 << META_BITS
META_MASK = META_SLOTS - 1

_FULL_META_MASK = (1 << META_SLOTS) - 1


class Resolution(Enum):
    """Granularity of a BlockSet."""

    TYPE = "type"
    TYPE_META = "type_meta"


def encode_voxel(type_id: int, meta: int = 0) -> int:
    """Pack (type id, meta) into the encoded voxel integer."""
    return (type_id << META_BITS) | (meta & META_MASK)


def decode_voxel(encoded: int) -> Tuple[int, int]:
    """Split an encoded voxel into (type id, meta)."""
    return encoded >> META_BITS, encoded & META_MASK


def _iter_bits(bits: int) -> Iterator[int]:
    """Yield the index of every set bit, lowest first."""
    while bits:
        low = bits & -bits
        yield low.bit_length() - 1
        bits ^= low


def _check_type_id(type_id: int, max_block_ids: int) -> None:
    if not 0 <= type_id < max_block_ids:
        raise ValueError(
            f"Block id {type_id} outside of configured range 0..{max_block_ids - 1}"
        )


@dataclass(frozen=True)
class BlockSet:
    """
    Immutable set of voxel types.

    Equality and hashing are over (resolution, max_block_ids, bits).
    """

    bits: int = 0
    resolution: Resolution = Resolution.TYPE
    max_block_ids: int = MAX_BLOCK_IDS

    def __post_init__(self) -> None:
        if not 0 <= self.bits <= self._capacity_mask():
            raise ValueError(
                f"Bits outside of the {self.resolution.value} range for "
                f"{self.max_block_ids} block ids"
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, *type_ids: int, max_block_ids: int = MAX_BLOCK_IDS) -> "BlockSet":
        """Build a type-only set containing the given type ids."""
        bits = 0
        for type_id in type_ids:
            _check_type_id(type_id, max_block_ids)
            bits |= 1 << type_id
        return cls(bits=bits, resolution=Resolution.TYPE, max_block_ids=max_block_ids)

    @classmethod
    def of_variants(
        cls,
        variants: Iterable[Tuple[int, int]],
        max_block_ids: int = MAX_BLOCK_IDS,
    ) -> "BlockSet":
        """Build a type+meta set from (type id, meta) pairs."""
        bits = 0
        for type_id, meta in variants:
            _check_type_id(type_id, max_block_ids)
            if not 0 <= meta < META_SLOTS:
                raise ValueError(f"Meta value {meta} outside of range 0..{META_MASK}")
            bits |= 1 << encode_voxel(type_id, meta)
        return cls(
            bits=bits, resolution=Resolution.TYPE_META, max_block_ids=max_block_ids
        )

    @classmethod
    def empty(cls, max_block_ids: int = MAX_BLOCK_IDS) -> "BlockSet":
        return cls(bits=0, max_block_ids=max_block_ids)

    @classmethod
    def all(cls, max_block_ids: int = MAX_BLOCK_IDS) -> "BlockSet":
        return cls.empty(max_block_ids).invert()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_meta_aware(self) -> bool:
        return self.resolution is Resolution.TYPE_META

    def contains(self, type_id: int) -> bool:
        """
        True if the type is in this set.

        For type+meta sets this is true when any meta slot of the type is set.
        """
        if not 0 <= type_id < self.max_block_ids:
            return False
        if self.is_meta_aware:
            return bool((self.bits >> (type_id << META_BITS)) & _FULL_META_MASK)
        return bool((self.bits >> type_id) & 1)

    def contains_encoded(self, encoded: int) -> bool:
        """
        Membership test for an encoded (type, meta) value.

        Type-only sets discard the meta part.
        """
        if encoded < 0:
            return False
        if self.is_meta_aware:
            if encoded >= self.max_block_ids << META_BITS:
                return False
            return bool((self.bits >> encoded) & 1)
        return self.contains(encoded >> META_BITS)

    def is_at(self, world: "WorldAccessor", pos: "BlockPos") -> bool:
        """Check whether one of these types is at the given world position."""
        x, y, z = pos
        return self.contains_encoded(world.get_encoded_voxel(x, y, z))

    def block_ids(self) -> Iterator[int]:
        """Yield every type id that has at least one bit set."""
        if not self.is_meta_aware:
            yield from _iter_bits(self.bits)
            return
        last = -1
        for index in _iter_bits(self.bits):
            type_id = index >> META_BITS
            if type_id != last:
                last = type_id
                yield type_id

    def variants(self) -> Iterator[Tuple[int, int]]:
        """Yield (type id, meta) pairs, promoting type-only sets on the fly."""
        for index in _iter_bits(self.to_meta_set().bits):
            yield decode_voxel(index)

    # ------------------------------------------------------------------
    # Set algebra
    # ------------------------------------------------------------------

    def to_meta_set(self) -> "BlockSet":
        """Return the type+meta equivalent of this set."""
        if self.is_meta_aware:
            return self
        bits = 0
        for type_id in _iter_bits(self.bits):
            bits |= _FULL_META_MASK << (type_id << META_BITS)
        return BlockSet(
            bits=bits,
            resolution=Resolution.TYPE_META,
            max_block_ids=self.max_block_ids,
        )

    def _reconciled(self, other: "BlockSet") -> Tuple["BlockSet", "BlockSet"]:
        if self.max_block_ids != other.max_block_ids:
            raise ValueError(
                "Cannot combine block sets with capacities "
                f"{self.max_block_ids} and {other.max_block_ids}"
            )
        if self.resolution is other.resolution:
            return self, other
        return self.to_meta_set(), other.to_meta_set()

    def union(self, other: "BlockSet") -> "BlockSet":
        a, b = self._reconciled(other)
        return BlockSet(a.bits | b.bits, a.resolution, a.max_block_ids)

    def intersect(self, other: "BlockSet") -> "BlockSet":
        a, b = self._reconciled(other)
        return BlockSet(a.bits & b.bits, a.resolution, a.max_block_ids)

    def invert(self) -> "BlockSet":
        return BlockSet(
            self._capacity_mask() & ~self.bits, self.resolution, self.max_block_ids
        )

    def _capacity_mask(self) -> int:
        width = self.max_block_ids
        if self.is_meta_aware:
            width <<= META_BITS
        return (1 << width) - 1

    __or__ = union
    __and__ = intersect
    __invert__ = invert

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def describe(self, names: Optional[Mapping[int, str]] = None) -> str:
        """
        Human-readable enumeration, e.g. "BlockSet [log (17), log2 (162)]".

        Type+meta sets list each variant as "name:meta (id:meta)".
        """
        names = names or {}
        entries = []
        if self.is_meta_aware:
            for type_id, meta in self.variants():
                label = names.get(type_id, "block")
                entries.append(f"{label}:{meta} ({type_id}:{meta})")
        else:
            for type_id in self.block_ids():
                entries.append(f"{names.get(type_id, 'block')} ({type_id})")
        return f"BlockSet [{', '.join(entries)}]"

    def __str__(self) -> str:
        return self.describe()


__all__ = [
    "MAX_BLOCK_IDS",
    "META_BITS",
    "META_SLOTS",
    "Resolution",
    "BlockSet",
    "encode_voxel",
    "decode_voxel",
]
