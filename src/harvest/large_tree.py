# 2x2 trunk detection, spiral staircase geometry and plan emission
# src/harvest/large_tree.py
"""
Large (2x2) tree handling.

A large trunk cannot be cut from the ground. Instead the agent digs a
spiral staircase into the trunk itself, climbs it to the top, then walks
back down, clearing the whole 2x2 footprint above each stair as it goes.

Staircase:
    position(y) = (min_x + ((y + off) >> 1 & 1), y,
                   min_z + ((y + off + 1) >> 1 & 1))

    Over any 4 consecutive levels this visits each footprint column exactly
    once, and consecutive stairs are horizontally adjacent, so every step is
    a plain jump-move. `off` (stair_offset) is chosen so the agent's current
    cell is a stair.

Detection:
    The agent arrives at a destination that may be one corner of a 2x2
    trunk. The four footprints having that position as a corner are
    scanned upward; each level needs 3 trunk blocks while at or below the
    agent's level + 1 (the agent already broke its own column there) and 4
    above that. The first footprint taller than the minimum height wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from voxels.block_set import BlockSet
from voxels.block_sets import StandardBlockSets
from voxels.world import BlockPos, WorldAccessor

from .errors import NotOnTrunkError
from .tasks import DestroyRangeTask, MoveTask, TaskQueue

log = logging.getLogger(__name__)

# Footprint origins relative to the arrival position, in the order tried.
CANDIDATE_ORIGINS = ((0, 0), (0, -1), (-1, 0), (-1, -1))

STAIR_PERIOD = 4

# How far above a stair the descend pass clears.
CLEAR_ABOVE = 4


@dataclass(eq=False)
class LargeTreeState:
    """
    Planning record for one large-tree harvest.

    Mutable and compared by identity: detection fills in top_y and
    stair_offset after construction.

    min_y is the level harvesting started at (where the descent ends).
    top_y is the first level that is no longer trunk.
    """

    min_x: int
    min_y: int
    min_z: int
    top_y: int = 0
    stair_offset: int = 0

    @classmethod
    def at(cls, pos: BlockPos) -> "LargeTreeState":
        return cls(min_x=pos.x, min_y=pos.y, min_z=pos.z, top_y=pos.y)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def relative_x(self, y: int) -> int:
        return ((y + self.stair_offset) >> 1) & 1

    def relative_z(self, y: int) -> int:
        return ((y + self.stair_offset + 1) >> 1) & 1

    def position(self, y: int) -> BlockPos:
        """The stair the agent stands on at level y."""
        return BlockPos(
            self.min_x + self.relative_x(y), y, self.min_z + self.relative_z(y)
        )

    def footprint(self, y: int) -> List[BlockPos]:
        return [
            BlockPos(self.min_x + dx, y, self.min_z + dz)
            for dx in (0, 1)
            for dz in (0, 1)
        ]

    @property
    def tree_height(self) -> int:
        return self.top_y - self.min_y

    def scan_tree_height(
        self,
        world: WorldAccessor,
        logs: BlockSet,
        agent_pos: BlockPos,
        world_height: int = 255,
    ) -> int:
        """Set top_y to the first level the trunk no longer fills."""
        self.top_y = self.min_y
        while self.top_y < world_height:
            trunk_blocks = sum(
                1 for pos in self.footprint(self.top_y) if logs.is_at(world, pos)
            )
            required = 3 if self.top_y <= agent_pos.y + 1 else 4
            log.debug("Trunk at y=%d: %d/%d", self.top_y, trunk_blocks, required)
            if trunk_blocks < required:
                break
            self.top_y += 1
        return self.top_y

    def set_stair_offset_by_position(self, pos: BlockPos) -> None:
        """Pick the stair offset that makes pos a stair."""
        for offset in range(STAIR_PERIOD):
            self.stair_offset = offset
            if self.position(pos.y) == pos:
                return
        raise NotOnTrunkError(f"Not on the trunk of {self!r}", pos)

    def is_valid_agent_position(self, pos: BlockPos) -> bool:
        return self.min_y <= pos.y < self.top_y and self.position(pos.y) == pos

    # ------------------------------------------------------------------
    # Plan emission
    # ------------------------------------------------------------------

    def add_tasks(
        self,
        world: WorldAccessor,
        block_sets: StandardBlockSets,
        agent_pos: BlockPos,
        queue: TaskQueue,
    ) -> int:
        """
        Queue the climb and the clearing descent. Returns the top level reached.

        Raises NotOnTrunkError if the agent is not on its stair.
        """
        if not self.is_valid_agent_position(agent_pos):
            raise NotOnTrunkError(f"Illegal start position for {self!r}", agent_pos)

        # Climb until the top or until the next stair is unsafe.
        last = agent_pos
        for y in range(agent_pos.y + 1, self.top_y):
            target = self.position(y)
            if not (
                block_sets.safe_side_and_ceiling_around(world, target.above())
                and block_sets.safe_side_around(world, target)
                and block_sets.is_safe_ground(world, target.below())
            ):
                log.debug("Stopping climb below unsafe stair %s", target)
                break
            queue.add_task(MoveTask(target, jump=True, from_xz=(last.x, last.z)))
            last = target

        # Walk down, clearing everything above each stair.
        for y in range(last.y, agent_pos.y - 1, -1):
            queue.add_task(MoveTask(self.position(y)))
            queue.add_task(
                DestroyRangeTask(
                    BlockPos(self.min_x, y, self.min_z),
                    BlockPos(self.min_x + 1, y + CLEAR_ABOVE, self.min_z + 1),
                )
            )
        return last.y

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "min_z": self.min_z,
            "top_y": self.top_y,
            "stair_offset": self.stair_offset,
        }


def detect_large_tree(
    world: WorldAccessor,
    logs: BlockSet,
    agent_pos: BlockPos,
    *,
    min_height: int = 3,
    world_height: int = 255,
) -> Optional[LargeTreeState]:
    """
    Return the state for the first 2x2 footprint around agent_pos that is a
    large tree, or None.
    """
    for dx, dz in CANDIDATE_ORIGINS:
        state = LargeTreeState.at(agent_pos.add(dx, 0, dz))
        state.scan_tree_height(world, logs, agent_pos, world_height)
        if state.tree_height > min_height:
            state.set_stair_offset_by_position(agent_pos)
            log.info("Found large tree %r", state)
            return state
    return None


__all__ = ["LargeTreeState", "detect_large_tree", "CANDIDATE_ORIGINS"]
