# src/harvest/scoring.py
"""
Destination scoring for tree harvesting.

rate(distance, pos) returns a score where lower is better and REJECT (-1)
means "do not walk here". Closer trees with more exposed trunk win, but
trunk blocks next to unsafe surroundings are never counted: the vertical
scan stops at the first level the agent could not safely work next to.
"""

from __future__ import annotations

from dataclasses import dataclass

from voxels.block_set import BlockSet
from voxels.block_sets import StandardBlockSets
from voxels.world import BlockPos, WorldAccessor

REJECT = -1.0

BASE_SCORE = 20
POINTS_PER_LOG = 2


@dataclass
class DestinationScorer:
    """Scores candidate destinations by the trunk exposed above them."""

    world: WorldAccessor
    logs: BlockSet
    block_sets: StandardBlockSets
    tree_height: int = 7

    def is_log(self, pos: BlockPos) -> bool:
        return self.logs.is_at(self.world, pos)

    def count_logs(self, pos: BlockPos) -> int:
        """
        Trunk blocks at pos and pos+1, plus those at levels 2..tree_height-1
        up to the first level without safe sides and ceiling.
        """
        points = int(self.is_log(pos)) + int(self.is_log(pos.above()))
        for i in range(2, self.tree_height):
            level = pos.above(i)
            if not self.block_sets.safe_side_and_ceiling_around(self.world, level):
                break
            if self.is_log(level):
                points += 1
        return points

    def rate(self, distance: float, pos: BlockPos) -> float:
        if not (self.is_log(pos) or self.is_log(pos.above())):
            return REJECT
        return distance + BASE_SCORE - POINTS_PER_LOG * self.count_logs(pos)


__all__ = ["REJECT", "DestinationScorer"]
