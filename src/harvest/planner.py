# tree harvest planner: destination rating + per-target task emission
# src/harvest/planner.py
"""
TreeHarvestPlanner: plugs into a destination-search engine.

The engine polls the planner once per decision cycle:

    if not planner.add_tasks_for_large_tree(agent_pos):
        # normal search, using planner.rate_destination(distance, pos)
        ...
        # on arrival:
        planner.add_tasks_for_target(destination)

States:
    Searching        large_tree is None; destinations are scored normally.
    LargeTreeActive  large_tree is set; search is bypassed and the
                     staircase plan is emitted instead.

The only ways in and out of LargeTreeActive are switch_large_tree() (run
by a queued SwitchLargeTreeTask) and a failed validity check in
add_tasks_for_large_tree().
"""

from __future__ import annotations

import logging
from typing import Optional

from monitoring.bus import EventBus, default_bus
from monitoring.events import EventType
from monitoring.logger import log_event
from voxels.block_set import BlockSet
from voxels.block_sets import StandardBlockSets, default_block_sets
from voxels.world import BlockPos, WorldAccessor

from .config import HarvestConfig, load_harvest_config
from .errors import HarvestTaskError, NotOnTrunkError
from .large_tree import LargeTreeState, detect_large_tree
from .scoring import DestinationScorer
from .tasks import (
    DestroyRangeTask,
    MonitoringTaskOperations,
    PlantSaplingTask,
    SwitchLargeTreeTask,
    TaskOperations,
    TaskQueue,
    WaitTask,
)

log = logging.getLogger(__name__)

# Wait ticks per level of trunk above the destination.
WAIT_TICKS_PER_LEVEL = 2


def harvest_id(kind: str, pos: BlockPos) -> str:
    """Correlation id shared by the events of one harvest, e.g. "large_tree@0,10,0"."""
    return f"{kind}@{pos.x},{pos.y},{pos.z}"


def _large_tree_id(state: LargeTreeState) -> str:
    return harvest_id("large_tree", BlockPos(state.min_x, state.min_y, state.min_z))


class TreeHarvestPlanner:
    """
    Finds trees, walks to their base and fells them.

    Public contract:
      rate_destination(distance, pos) -> float   (-1 rejects)
      add_tasks_for_target(pos)                   (on arrival)
      add_tasks_for_large_tree(agent_pos) -> bool (bypass search)
      switch_large_tree(state, agent_pos, ops)    (run by queued task)
    """

    def __init__(
        self,
        world: WorldAccessor,
        queue: TaskQueue,
        *,
        config: HarvestConfig | None = None,
        block_sets: StandardBlockSets | None = None,
        ops: TaskOperations | None = None,
        bus: EventBus | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._queue = queue
        self._cfg = config if config is not None else load_harvest_config()
        self._sets = block_sets if block_sets is not None else default_block_sets()
        self._bus = bus if bus is not None else default_bus
        self._ops = ops if ops is not None else MonitoringTaskOperations(self._bus)
        self._log = logger or log

        self.logs: BlockSet = self._sets.logs_of(self._cfg.wood_type)
        self._scorer = DestinationScorer(
            world=world,
            logs=self.logs,
            block_sets=self._sets,
            tree_height=self._cfg.tree_height,
        )

        # Set while cutting a large tree; the search engine is bypassed then.
        self.large_tree: Optional[LargeTreeState] = None

    # ------------------------------------------------------------------
    # Search engine hooks
    # ------------------------------------------------------------------

    @property
    def passable_blocks(self) -> BlockSet:
        """Extra blocks the search may treat as foot/head space (leaves)."""
        return self._sets.leaves

    def rate_destination(self, distance: float, pos: BlockPos) -> float:
        return self._scorer.rate(distance, BlockPos(*pos))

    def add_tasks_for_large_tree(self, agent_pos: BlockPos) -> bool:
        """
        Emit the large-tree plan if large-tree mode is active.

        Returns True when tasks were queued and the search must be skipped.
        On a validity failure the failure is reported, large-tree mode is
        left and False is returned so the engine searches normally.
        """
        if self.large_tree is None:
            return False

        agent_pos = BlockPos(*agent_pos)
        try:
            top = self.large_tree.add_tasks(
                self._world, self._sets, agent_pos, self._queue
            )
        except NotOnTrunkError as exc:
            self._log.warning("Large tree plan aborted: %s", exc)
            self._ops.desync(exc)
            self.large_tree = None
            return False

        self._queue.add_task(SwitchLargeTreeTask(self, None))
        log_event(
            bus=self._bus,
            module="harvest.planner",
            event_type=EventType.PLAN_CREATED,
            message="Queued large tree staircase",
            payload={
                "kind": "large_tree",
                "start": list(agent_pos),
                "top_reached": top,
                "state": self.large_tree.to_dict(),
            },
            correlation_id=_large_tree_id(self.large_tree),
        )
        return True

    def add_tasks_for_target(self, current_pos: BlockPos) -> None:
        """Queue the tasks for a destination the agent just reached."""
        current_pos = BlockPos(*current_pos)
        if self._handle_large_tree(current_pos):
            return

        mine_above = 0
        for i in range(2, self._cfg.tree_height):
            if self._scorer.is_log(current_pos.above(i)):
                mine_above = i

        top = 0
        for i in range(2, mine_above + 1):
            pos = current_pos.above(i)
            if not self._sets.safe_side_and_ceiling_around(self._world, pos):
                break
            if not self._sets.air.is_at(self._world, pos):
                top = i

        if top > 0:
            self._queue.add_task(
                DestroyRangeTask(current_pos.above(2), current_pos.above(top))
            )
        if self._cfg.replant:
            self._queue.add_task(PlantSaplingTask(current_pos, self._cfg.wood_type))
        self._queue.add_task(WaitTask(mine_above * WAIT_TICKS_PER_LEVEL))

        log_event(
            bus=self._bus,
            module="harvest.planner",
            event_type=EventType.PLAN_CREATED,
            message="Queued single trunk harvest",
            payload={
                "kind": "single_trunk",
                "pos": list(current_pos),
                "trunk_top": mine_above,
                "cleared_to": top,
            },
            correlation_id=harvest_id("single_trunk", current_pos),
        )

    def _handle_large_tree(self, current_pos: BlockPos) -> bool:
        state = detect_large_tree(
            self._world,
            self.logs,
            current_pos,
            min_height=self._cfg.large_tree_min_height,
            world_height=self._cfg.world_height,
        )
        if state is None:
            return False
        self._queue.add_task(SwitchLargeTreeTask(self, state))
        return True

    # ------------------------------------------------------------------
    # Mode switch (runs at execution time)
    # ------------------------------------------------------------------

    def switch_large_tree(
        self,
        state: Optional[LargeTreeState],
        agent_pos: BlockPos,
        ops: TaskOperations | None = None,
    ) -> None:
        ops = ops if ops is not None else self._ops
        agent_pos = BlockPos(*agent_pos)

        if state is not None and not state.is_valid_agent_position(agent_pos):
            ops.desync(HarvestTaskError("Not in a tree.", agent_pos))
            self.large_tree = None
            return

        previous = self.large_tree
        self.large_tree = state
        tracked = state if state is not None else previous
        log_event(
            bus=self._bus,
            module="harvest.planner",
            event_type=EventType.MODE_SWITCH,
            message=(
                "Entering large tree mode"
                if state is not None
                else "Leaving large tree mode"
            ),
            payload={"state": None if state is None else state.to_dict()},
            correlation_id=None if tracked is None else _large_tree_id(tracked),
        )


__all__ = ["TreeHarvestPlanner", "WAIT_TICKS_PER_LEVEL", "harvest_id"]
