# src/monitoring/__init__.py
"""
Monitoring for the harvest planner: event bus, event schema, logging setup.
"""

from __future__ import annotations

from .bus import EventBus, default_bus
from .events import EventType, MonitoringEvent
from .logger import log_event
from .logging_config import configure_logging

__all__ = [
    "EventBus",
    "default_bus",
    "EventType",
    "MonitoringEvent",
    "log_event",
    "configure_logging",
]
