# src/harvest/errors.py
"""
Error types for the harvest planner.

- HarvestError: base class for planner errors.
- HarvestTaskError: a queued task found its precondition violated when it
  ran (the agent is not where the plan expected). Carries a short message
  and the offending position; this is what gets reported as a desync.
- NotOnTrunkError: the agent is not on the staircase cell of a large tree.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from voxels.world import BlockPos


class HarvestError(Exception):
    """Base class for harvest planner errors."""


class HarvestTaskError(HarvestError):
    def __init__(self, message: str, pos: Optional[BlockPos] = None) -> None:
        self.message = message
        self.pos = pos
        super().__init__(message if pos is None else f"{message} at {tuple(pos)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "pos": None if self.pos is None else list(self.pos),
        }


class NotOnTrunkError(HarvestTaskError, ValueError):
    """Raised when a position is not a stair of the large tree being cut."""


__all__ = ["HarvestError", "HarvestTaskError", "NotOnTrunkError"]
