# path: src/monitoring/events.py
"""
Event schemas for harvest monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured planner/runtime events)

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the harvest planner."""

    # A batch of tasks was queued for a destination or a large tree
    PLAN_CREATED = auto()

    # Planner entered or left large-tree mode
    MODE_SWITCH = auto()

    # A queued task found its precondition violated (desync)
    PLAN_FAILED = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the planner or by queued tasks.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("harvest.planner", ...)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (positions, task counts, state)
    correlation_id: Optional[str] = None  # Groups events of one harvest

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data
