#!/usr/bin/env python3
"""
tools/harvest_demo.py

Offline walk-through of the tree harvest planner.

Builds a small synthetic WorldSnapshot with:
    - a flat dirt floor at y=9
    - a single oak trunk at (6, 10..14, 0)
    - a 2x2 spruce trunk at (0..1, 10..17, 0..1)

Then:
    - rates a few destinations
    - plans the single trunk
    - plans the large tree (detection, mode switch, staircase)
    - prints every task table with rich

Usage:
    python tools/harvest_demo.py [--no-replant] [--debug]

Planner settings come from config/harvest.yaml.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path when running as a script
# ---------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# ---------------------------------------------------------------------------
# Imports from the project
# ---------------------------------------------------------------------------

from rich.console import Console  # noqa: E402

from harvest import TaskQueue, TreeHarvestPlanner, load_harvest_config  # noqa: E402
from harvest.plan_view import print_task_table  # noqa: E402
from harvest.tasks import MonitoringTaskOperations, SwitchLargeTreeTask  # noqa: E402
from monitoring import EventBus, configure_logging  # noqa: E402
from voxels import BlockPos, WorldSnapshot, default_block_sets, encode_voxel  # noqa: E402


def build_world() -> WorldSnapshot:
    registry = default_block_sets().registry
    assert registry is not None
    snapshot = WorldSnapshot()

    def put(x: int, y: int, z: int, name: str, meta: int = 0) -> None:
        snapshot.set_encoded_voxel(x, y, z, encode_voxel(registry.id_of(name), meta))

    for x in range(-4, 10):
        for z in range(-4, 6):
            put(x, 9, z, "dirt")

    for y in range(10, 15):
        put(6, y, 0, "log")

    for y in range(10, 18):
        for x in (0, 1):
            for z in (0, 1):
                put(x, y, z, "log", 1)

    # The agent has already cut its way into the big trunk at (0, 10..11, 0).
    snapshot.set_encoded_voxel(0, 10, 0, 0)
    snapshot.set_encoded_voxel(0, 11, 0, 0)
    return snapshot


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--no-replant", action="store_true", help="override replant from config")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.debug else logging.INFO)
    console = Console()

    world = build_world()
    bus = EventBus()
    bus.subscribe(lambda event: console.log(f"[event] {event.event_type.name}: {event.message}"))
    ops = MonitoringTaskOperations(bus)

    config = load_harvest_config()
    if args.no_replant:
        config = dataclasses.replace(config, replant=False)

    queue = TaskQueue()
    planner = TreeHarvestPlanner(
        world,
        queue,
        config=config,
        ops=ops,
        bus=bus,
    )

    console.rule("Destination ratings")
    for pos in (BlockPos(6, 10, 0), BlockPos(6, 12, 0), BlockPos(3, 10, 3)):
        console.print(f"{tuple(pos)} -> {planner.rate_destination(5, pos)}")

    console.rule("Single trunk")
    planner.add_tasks_for_target(BlockPos(6, 10, 0))
    print_task_table(queue.drain(), "Single trunk at (6, 10, 0)", console)

    console.rule("Large tree")
    agent = BlockPos(0, 10, 0)
    planner.add_tasks_for_target(agent)
    for task in queue.drain():
        if isinstance(task, SwitchLargeTreeTask):
            task.run(agent, ops)

    if planner.add_tasks_for_large_tree(agent):
        print_task_table(queue.drain(), "Large tree staircase", console)
    else:
        console.print("No large tree plan was produced.")

    return 0 if not ops.errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
