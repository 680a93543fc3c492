#tests/test_monitoring_event_bus.py
"""
Tests for monitoring.bus.EventBus and monitoring.logger.log_event

Covers:
- Delivery order across harvest event types
- Unsubscribe and clear
- A failing subscriber does not block the others
- Concurrent publishers from several threads
- log_event builds, publishes and returns JSON-safe events
"""

from __future__ import annotations

import json
import threading
from typing import List

from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from monitoring.logger import log_event


def make_event(event_type: EventType, step: int) -> MonitoringEvent:
    return MonitoringEvent(
        ts=float(step),
        module="harvest.planner",
        event_type=event_type,
        message=f"step {step}",
        payload={"step": step},
    )


def test_event_bus_delivers_planner_events_in_order():
    bus = EventBus()
    received: List[MonitoringEvent] = []
    bus.subscribe(received.append)

    sequence = [
        EventType.MODE_SWITCH,
        EventType.PLAN_CREATED,
        EventType.PLAN_FAILED,
        EventType.MODE_SWITCH,
    ]
    for step, event_type in enumerate(sequence):
        bus.publish(make_event(event_type, step))

    assert [e.event_type for e in received] == sequence
    assert [e.payload["step"] for e in received] == [0, 1, 2, 3]


def test_event_bus_unsubscribe_and_clear():
    bus = EventBus()
    first: List[MonitoringEvent] = []
    second: List[MonitoringEvent] = []

    bus.subscribe(first.append)
    bus.subscribe(second.append)
    bus.unsubscribe(first.append)
    # Unknown subscribers are ignored.
    bus.unsubscribe(lambda evt: None)

    bus.publish(make_event(EventType.MODE_SWITCH, 1))
    bus.clear()
    bus.publish(make_event(EventType.MODE_SWITCH, 2))

    assert first == []
    assert [e.payload["step"] for e in second] == [1]


def test_failing_subscriber_does_not_block_delivery(caplog):
    bus = EventBus()
    received: List[MonitoringEvent] = []

    def broken(evt: MonitoringEvent) -> None:
        raise RuntimeError("dashboard went away")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    with caplog.at_level("ERROR", logger="monitoring.bus"):
        bus.publish(make_event(EventType.PLAN_CREATED, 1))

    assert len(received) == 1
    assert "dashboard went away" in caplog.text


def test_event_bus_concurrent_publishers():
    bus = EventBus()
    per_thread = 50

    received: List[MonitoringEvent] = []
    lock = threading.Lock()

    def subscriber(evt: MonitoringEvent) -> None:
        with lock:
            received.append(evt)

    bus.subscribe(subscriber)

    def publisher(event_type: EventType) -> None:
        for i in range(per_thread):
            bus.publish(make_event(event_type, i))

    threads = [
        threading.Thread(target=publisher, args=(event_type,))
        for event_type in (
            EventType.PLAN_CREATED,
            EventType.MODE_SWITCH,
            EventType.PLAN_FAILED,
        )
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(received) == 3 * per_thread


def test_log_event_publishes_json_safe_event():
    bus = EventBus()
    received: List[MonitoringEvent] = []
    bus.subscribe(received.append)

    event = log_event(
        bus=bus,
        module="harvest.tasks",
        event_type=EventType.PLAN_FAILED,
        message="Not in a tree.",
        payload={"reason": "desync", "pos": [1, 2, 3]},
        correlation_id="tree-7",
    )

    assert received == [event]

    data = json.loads(json.dumps(event.to_dict()))
    assert data["event_type"] == "PLAN_FAILED"
    assert data["module"] == "harvest.tasks"
    assert data["payload"] == {"reason": "desync", "pos": [1, 2, 3]}
    assert data["correlation_id"] == "tree-7"
    assert isinstance(data["ts"], float)


def test_log_event_defaults_to_empty_payload():
    event = log_event(
        bus=EventBus(),
        module="harvest.planner",
        event_type=EventType.MODE_SWITCH,
        message="idle",
    )

    assert event.payload == {}
    assert event.correlation_id is None
