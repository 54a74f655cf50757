"""
Timeline - Construction of audit events.

Events are only ever appended, and only to a state a resolver has
already cloned. Event IDs derive from the timeline position so replaying
the same inputs yields the same IDs.
"""

from __future__ import annotations
from datetime import datetime, timezone

from .state import RunState, TimelineEvent, TimelineEventType, EventDetails


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def next_event_id(state: RunState) -> str:
    return f"evt-{len(state.timeline):04d}"


def append_event(
    state: RunState,
    event_type: TimelineEventType,
    description: str,
    *,
    circuit_id: str | None = None,
    node_id: str | None = None,
    details: EventDetails | None = None,
    timestamp: str | None = None,
) -> TimelineEvent:
    """
    Append an event to `state.timeline` and return it.

    The snapshot is taken from `state` as it is at call time, so append
    after the edits the event describes.
    """
    event = TimelineEvent(
        id=next_event_id(state),
        event_type=event_type,
        timestamp=timestamp or utc_now(),
        circuit_id=circuit_id or state.position.circuit_id,
        description=description,
        snapshot=state.snapshot(),
        node_id=node_id,
        details=details,
    )
    state.timeline.append(event)
    return event
