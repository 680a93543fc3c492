# tests/test_planner.py
"""
Tests for harvest.planner.TreeHarvestPlanner.

Covers:
- single trunk plans (partial clearing, replant, wait ticks)
- species restriction
- the large-tree mode cycle driven through queued switch tasks
- desync reporting on the monitoring bus
"""

from __future__ import annotations

from typing import List, Tuple

import pytest

from harvest import config as config_module
from harvest.config import HarvestConfig
from harvest.planner import TreeHarvestPlanner
from harvest.scoring import REJECT
from harvest.tasks import (
    DestroyRangeTask,
    MonitoringTaskOperations,
    MoveTask,
    PlantSaplingTask,
    SwitchLargeTreeTask,
    TaskQueue,
    WaitTask,
)
from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from voxels.block_sets import WoodType
from voxels.world import BlockPos


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus: EventBus) -> List[MonitoringEvent]:
    received: List[MonitoringEvent] = []
    bus.subscribe(received.append)
    return received


@pytest.fixture
def ops(bus: EventBus) -> MonitoringTaskOperations:
    return MonitoringTaskOperations(bus)


def make_planner(
    world, block_sets, bus, ops, **config
) -> Tuple[TreeHarvestPlanner, TaskQueue]:
    queue = TaskQueue()
    planner = TreeHarvestPlanner(
        world,
        queue,
        config=HarvestConfig(**config),
        block_sets=block_sets,
        ops=ops,
        bus=bus,
    )
    return planner, queue


# ---------------------------------------------------------------------------
# Single trunk
# ---------------------------------------------------------------------------


@pytest.fixture
def lava_topped_trunk(world):
    """Oak trunk at (0, 10..14, 0) with lava beside its top log."""
    world.fill((0, 10, 0), (0, 14, 0), "log")
    world.set_block((1, 14, 0), "lava")
    return BlockPos(0, 10, 0)


def test_single_trunk_clears_only_safe_levels(
    world, block_sets, bus, ops, events, lava_topped_trunk
) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)

    planner.add_tasks_for_target(lava_topped_trunk)

    assert list(queue) == [
        DestroyRangeTask(BlockPos(0, 12, 0), BlockPos(0, 13, 0)),
        WaitTask(8),
    ]
    assert [e.event_type for e in events] == [EventType.PLAN_CREATED]
    assert events[0].payload["kind"] == "single_trunk"
    assert events[0].payload["cleared_to"] == 3
    assert events[0].correlation_id == "single_trunk@0,10,0"


def test_single_trunk_replants(world, block_sets, bus, ops, lava_topped_trunk) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops, replant=True)

    planner.add_tasks_for_target(lava_topped_trunk)

    tasks = list(queue)
    assert tasks[1] == PlantSaplingTask(lava_topped_trunk, None)
    assert tasks[-1] == WaitTask(8)


def test_no_trunk_above_only_waits(world, block_sets, bus, ops) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)

    planner.add_tasks_for_target(BlockPos(3, 10, 3))

    assert list(queue) == [WaitTask(0)]


def test_wood_type_restriction(world, block_sets, bus, ops) -> None:
    world.fill((0, 10, 0), (0, 14, 0), "log", 0)  # oak
    planner, queue = make_planner(
        world, block_sets, bus, ops, wood_type=WoodType.SPRUCE, replant=True
    )

    assert planner.rate_destination(2, BlockPos(0, 10, 0)) == REJECT

    planner.add_tasks_for_target(BlockPos(0, 10, 0))
    assert list(queue) == [
        PlantSaplingTask(BlockPos(0, 10, 0), WoodType.SPRUCE),
        WaitTask(0),
    ]


def test_rate_destination_delegates_to_scorer(world, block_sets, bus, ops) -> None:
    world.fill((0, 10, 0), (0, 14, 0), "log")
    planner, _ = make_planner(world, block_sets, bus, ops)

    assert planner.rate_destination(5, (0, 10, 0)) == 15


def test_passable_blocks_are_leaves(world, block_sets, bus, ops) -> None:
    planner, _ = make_planner(world, block_sets, bus, ops)
    assert planner.passable_blocks == block_sets.leaves


# ---------------------------------------------------------------------------
# Large tree mode
# ---------------------------------------------------------------------------


@pytest.fixture
def large_trunk(world):
    """2x2 trunk through level 14; the agent cut into (0, 11, 0)."""
    world.fill((0, 10, 0), (1, 14, 1), "log")
    world.clear((0, 11, 0))
    world.clear((0, 12, 0))
    return BlockPos(0, 11, 0)


def test_large_tree_mode_cycle(
    world, block_sets, bus, ops, events, large_trunk
) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)
    agent = large_trunk

    assert planner.add_tasks_for_large_tree(agent) is False

    planner.add_tasks_for_target(agent)
    (enter,) = queue.drain()
    assert isinstance(enter, SwitchLargeTreeTask)
    assert enter.state is not None
    assert planner.large_tree is None  # nothing changes until the task runs

    enter.run(agent, ops)
    assert planner.large_tree is enter.state

    assert planner.add_tasks_for_large_tree(agent) is True
    tasks = queue.drain()

    assert len(tasks) == 12
    assert tasks[0] == MoveTask(BlockPos(0, 12, 1), jump=True, from_xz=(0, 0))
    assert tasks[-2] == DestroyRangeTask(BlockPos(0, 11, 0), BlockPos(1, 15, 1))
    leave = tasks[-1]
    assert isinstance(leave, SwitchLargeTreeTask)
    assert leave.state is None

    leave.run(agent, ops)
    assert planner.large_tree is None
    assert ops.errors == []

    assert [e.event_type for e in events] == [
        EventType.MODE_SWITCH,
        EventType.PLAN_CREATED,
        EventType.MODE_SWITCH,
    ]
    assert events[0].message == "Entering large tree mode"
    assert events[1].payload["top_reached"] == 14
    assert events[2].message == "Leaving large tree mode"
    # Every event of this harvest names the footprint origin.
    assert {e.correlation_id for e in events} == {"large_tree@0,11,0"}


def test_switch_desyncs_when_agent_left_the_trunk(
    world, block_sets, bus, ops, events, large_trunk
) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)
    planner.add_tasks_for_target(large_trunk)
    (enter,) = queue.drain()

    enter.run(BlockPos(5, 10, 5), ops)

    assert planner.large_tree is None
    assert len(ops.errors) == 1
    assert ops.errors[0].message == "Not in a tree."
    assert ops.errors[0].pos == BlockPos(5, 10, 5)
    assert [e.event_type for e in events] == [EventType.PLAN_FAILED]
    assert events[0].payload["reason"] == "desync"


def test_invalid_start_leaves_large_tree_mode(
    world, block_sets, bus, ops, events, large_trunk, caplog
) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)
    planner.add_tasks_for_target(large_trunk)
    queue.drain()[0].run(large_trunk, ops)
    assert planner.large_tree is not None

    with caplog.at_level("WARNING", logger="harvest.planner"):
        handled = planner.add_tasks_for_large_tree(BlockPos(5, 11, 5))

    assert handled is False
    assert planner.large_tree is None
    assert len(queue) == 0
    assert len(ops.errors) == 1
    assert "Large tree plan aborted" in caplog.text
    assert events[-1].event_type is EventType.PLAN_FAILED


def test_switch_task_uses_planner_ops_by_default(
    world, block_sets, bus, ops, large_trunk
) -> None:
    planner, queue = make_planner(world, block_sets, bus, ops)
    planner.add_tasks_for_target(large_trunk)
    (enter,) = queue.drain()

    planner.switch_large_tree(enter.state, BlockPos(9, 9, 9))

    assert len(ops.errors) == 1


def test_default_config_comes_from_harvest_yaml(
    world, block_sets, bus, ops, lava_topped_trunk, tmp_path, monkeypatch
) -> None:
    (tmp_path / "harvest.yaml").write_text(
        "harvest:\n  replant: true\n  tree_height: 4\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    queue = TaskQueue()

    planner = TreeHarvestPlanner(world, queue, block_sets=block_sets, ops=ops, bus=bus)
    planner.add_tasks_for_target(lava_topped_trunk)

    # tree_height 4 limits the trunk scan to offsets 2 and 3.
    assert list(queue) == [
        DestroyRangeTask(BlockPos(0, 12, 0), BlockPos(0, 13, 0)),
        PlantSaplingTask(lava_topped_trunk, None),
        WaitTask(6),
    ]
