# structured event helper
"""
Convenience publisher for harvest monitoring events.

Usage:

    from monitoring.bus import EventBus
    from monitoring.logger import log_event
    from monitoring.events import EventType

    bus = EventBus()
    log_event(
        bus=bus,
        module="harvest.planner",
        event_type=EventType.MODE_SWITCH,
        message="Entering large-tree mode",
        payload={"min_x": 0, "min_z": 0},
    )
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent


def log_event(
    bus: EventBus,
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> MonitoringEvent:
    """
    Create a MonitoringEvent, publish it on `bus` and return it.

    Parameters
    ----------
    bus:
        EventBus instance to publish the event to.
    module:
        String identifying the source module ("harvest.planner", ...).
    event_type:
        EventType enum member describing what kind of event this is.
    message:
        Short human-readable description.
    payload:
        Structured JSON-safe data attached to this event.
    correlation_id:
        Optional ID linking related events.
    """
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=payload or {},
        correlation_id=correlation_id,
    )
    bus.publish(event)
    return event
