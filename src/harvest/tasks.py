# queued task variants and the queue the planner appends to
# src/harvest/tasks.py
"""
Tasks emitted by the harvest planner.

The planner never executes anything. It appends tasks to a TaskQueue that
an external runtime drains. Variants:

    MoveTask             walk (or jump-move) to a position
    DestroyRangeTask     break every block in an inclusive cuboid
    PlantSaplingTask     plant a sapling of a species
    WaitTask             idle for a number of ticks
    SwitchLargeTreeTask  enter/leave large-tree mode at execution time

Every task can be flattened into a generic Action(type, params) record for
executors that speak the flat action vocabulary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    Union,
)

from monitoring.bus import EventBus, default_bus
from monitoring.events import EventType
from monitoring.logger import log_event
from voxels.block_sets import WoodType
from voxels.world import BlockPos

from .errors import HarvestTaskError

if TYPE_CHECKING:
    from .large_tree import LargeTreeState
    from .planner import TreeHarvestPlanner


log = logging.getLogger(__name__)


@dataclass
class Action:
    """Flat action record: a type string plus JSON-safe params."""

    type: str
    params: Dict[str, Any]


def _xyz(pos: BlockPos) -> Dict[str, int]:
    return {"x": int(pos.x), "y": int(pos.y), "z": int(pos.z)}


# ---------------------------------------------------------------------------
# Task variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveTask:
    """
    Move to pos.

    jump=True is a jump-move onto the next stair: the runtime digs the
    target and the space above it, then jumps over from the column from_xz.
    """

    pos: BlockPos
    jump: bool = False
    from_xz: Optional[Tuple[int, int]] = None

    def to_action(self) -> Action:
        params: Dict[str, Any] = _xyz(self.pos)
        if self.jump:
            params["jump"] = True
        if self.from_xz is not None:
            params["from_x"], params["from_z"] = self.from_xz
        return Action(type="move_to", params=params)


@dataclass(frozen=True)
class DestroyRangeTask:
    """Destroy every block in the inclusive cuboid low..high."""

    low: BlockPos
    high: BlockPos

    def contains(self, pos: BlockPos) -> bool:
        return all(lo <= p <= hi for lo, p, hi in zip(self.low, pos, self.high))

    def to_action(self) -> Action:
        return Action(
            type="destroy_range",
            params={"low": _xyz(self.low), "high": _xyz(self.high)},
        )


@dataclass(frozen=True)
class PlantSaplingTask:
    pos: BlockPos
    wood_type: Optional[WoodType] = None

    def to_action(self) -> Action:
        params: Dict[str, Any] = _xyz(self.pos)
        if self.wood_type is not None:
            params["wood_type"] = self.wood_type.name.lower()
        return Action(type="plant_sapling", params=params)


@dataclass(frozen=True)
class WaitTask:
    """Idle so falling leaves and dropped items can settle."""

    ticks: int

    def to_action(self) -> Action:
        return Action(type="wait", params={"ticks": int(self.ticks)})


@dataclass(frozen=True)
class SwitchLargeTreeTask:
    """
    Switch the planner into (state given) or out of (state None) large-tree
    mode when the runtime reaches this task.

    The switch re-checks the agent position at that moment, since the world
    may have changed since the task was queued.
    """

    planner: "TreeHarvestPlanner" = field(compare=False, repr=False)
    state: Optional["LargeTreeState"] = None

    def run(self, agent_pos: BlockPos, ops: "TaskOperations") -> None:
        self.planner.switch_large_tree(self.state, agent_pos, ops)

    def to_action(self) -> Action:
        return Action(
            type="switch_large_tree",
            params={"state": None if self.state is None else self.state.to_dict()},
        )


Task = Union[
    MoveTask,
    DestroyRangeTask,
    PlantSaplingTask,
    WaitTask,
    SwitchLargeTreeTask,
]


# ---------------------------------------------------------------------------
# Queue + runtime hooks
# ---------------------------------------------------------------------------


class TaskQueue:
    """Ordered, append-only task sequence. The runtime owns and drains it."""

    def __init__(self) -> None:
        self._tasks: List[Task] = []

    def add_task(self, task: Task) -> None:
        log.debug("Queued %r", task)
        self._tasks.append(task)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __getitem__(self, index: int) -> Task:
        return self._tasks[index]

    def drain(self) -> List[Task]:
        """Hand every queued task to the caller and empty the queue."""
        tasks, self._tasks = self._tasks, []
        return tasks

    def to_actions(self) -> List[Action]:
        return [task.to_action() for task in self._tasks]


class TaskOperations(Protocol):
    """What a running task may report back to the runtime."""

    def desync(self, error: HarvestTaskError) -> None:
        ...


class MonitoringTaskOperations:
    """
    TaskOperations that logs each desync and publishes a PLAN_FAILED event.

    Errors are also kept in `errors` for the runtime to inspect.
    """

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._bus = bus if bus is not None else default_bus
        self._log = logger or log
        self.errors: List[HarvestTaskError] = []

    def desync(self, error: HarvestTaskError) -> None:
        self._log.warning("Task desync: %s", error)
        self.errors.append(error)
        log_event(
            bus=self._bus,
            module="harvest.tasks",
            event_type=EventType.PLAN_FAILED,
            message=error.message,
            payload={"reason": "desync", **error.to_dict()},
        )


__all__ = [
    "Action",
    "MoveTask",
    "DestroyRangeTask",
    "PlantSaplingTask",
    "WaitTask",
    "SwitchLargeTreeTask",
    "Task",
    "TaskQueue",
    "TaskOperations",
    "MonitoringTaskOperations",
]
