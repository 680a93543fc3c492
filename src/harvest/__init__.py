# src/harvest/__init__.py
"""
Tree harvest planning.

Exports:
    - TreeHarvestPlanner: destination rating + task emission, large-tree mode
    - DestinationScorer: rate(distance, pos)
    - LargeTreeState / detect_large_tree: 2x2 trunk staircase geometry
    - HarvestConfig / load_harvest_config: planner settings
    - Task variants and TaskQueue
"""

from __future__ import annotations

from .config import HarvestConfig, load_harvest_config
from .errors import HarvestError, HarvestTaskError, NotOnTrunkError
from .large_tree import LargeTreeState, detect_large_tree
from .planner import TreeHarvestPlanner
from .scoring import REJECT, DestinationScorer
from .tasks import (
    Action,
    DestroyRangeTask,
    MonitoringTaskOperations,
    MoveTask,
    PlantSaplingTask,
    SwitchLargeTreeTask,
    Task,
    TaskOperations,
    TaskQueue,
    WaitTask,
)

__all__ = [
    "HarvestConfig",
    "load_harvest_config",
    "HarvestError",
    "HarvestTaskError",
    "NotOnTrunkError",
    "LargeTreeState",
    "detect_large_tree",
    "TreeHarvestPlanner",
    "REJECT",
    "DestinationScorer",
    "Action",
    "DestroyRangeTask",
    "MonitoringTaskOperations",
    "MoveTask",
    "PlantSaplingTask",
    "SwitchLargeTreeTask",
    "Task",
    "TaskOperations",
    "TaskQueue",
    "WaitTask",
]
