"""
Audit Summary - Read-only aggregation over a run.

Nothing here changes a RunState. Summaries feed operator views and exports;
state_at() rebuilds a point-in-time view from a stored event snapshot for
replay.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from copy import deepcopy
from enum import Enum
from typing import Any

from ..engine_core.state import RunState, TimelineEvent, TimelineEventType, RunWarning
from ..world_schema.world import WorldDefinition, CircuitDefinition


class CircuitStatus(Enum):
    """Progress label derived from a circuit's node counts."""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    ADVANCED = "ADVANCED"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


@dataclass
class CircuitAudit:
    """Per-circuit counts and status."""
    id: str
    name: str
    description: str | None
    is_current_circuit: bool
    total_nodes: int
    hacked_nodes: int
    blocked_nodes: int
    discovered_nodes: int
    status: CircuitStatus
    events: list[TimelineEvent] = field(default_factory=list)

    @property
    def progress(self) -> int:
        """Hacked share of the circuit, as a rounded percentage."""
        if self.total_nodes == 0:
            return 0
        return round(self.hacked_nodes * 100 / self.total_nodes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "isCurrentCircuit": self.is_current_circuit,
            "totalNodes": self.total_nodes,
            "hackedNodes": self.hacked_nodes,
            "blockedNodes": self.blocked_nodes,
            "discoveredNodes": self.discovered_nodes,
            "progress": self.progress,
            "status": self.status.value,
            "eventCount": len(self.events),
        }


@dataclass
class RunAuditData:
    """Whole-run audit: totals, circuits, timeline and warnings."""
    run_id: str
    run_name: str | None
    project_name: str
    created_at: str | None
    total_circuits: int
    completed_circuits: int
    blocked_circuits: int
    total_nodes: int
    hacked_nodes: int
    blocked_nodes: int
    discovered_nodes: int
    total_attempts: int
    circuits: list[CircuitAudit]
    timeline: list[TimelineEvent]
    warnings: list[RunWarning]

    @property
    def progress(self) -> int:
        if self.total_nodes == 0:
            return 0
        return round(self.hacked_nodes * 100 / self.total_nodes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "runId": self.run_id,
            "runName": self.run_name,
            "projectName": self.project_name,
            "createdAt": self.created_at,
            "totalCircuits": self.total_circuits,
            "completedCircuits": self.completed_circuits,
            "blockedCircuits": self.blocked_circuits,
            "totalNodes": self.total_nodes,
            "hackedNodes": self.hacked_nodes,
            "blockedNodes": self.blocked_nodes,
            "discoveredNodes": self.discovered_nodes,
            "totalAttempts": self.total_attempts,
            "progress": self.progress,
            "circuits": [circuit.to_dict() for circuit in self.circuits],
            "warnings": [warning.to_dict() for warning in self.warnings],
            "timelineEvents": len(self.timeline),
        }


def derive_status(
    total: int,
    hacked: int,
    blocked: int,
    *,
    completed: bool = False,
    locked: bool = False,
) -> CircuitStatus:
    """
    Status from counts.

    `completed` is the memoized completion flag (final node hacked);
    `locked` is the circuit-wide lockout flag.
    """
    if completed or (total > 0 and hacked == total):
        return CircuitStatus.COMPLETED
    if locked or (blocked > 0 and hacked == 0):
        return CircuitStatus.BLOCKED
    if hacked > total * 0.5:
        return CircuitStatus.ADVANCED
    if hacked > 0 or blocked > 0:
        return CircuitStatus.IN_PROGRESS
    return CircuitStatus.NOT_STARTED


def summarize_circuit(state: RunState, circuit: CircuitDefinition) -> CircuitAudit:
    hacked = blocked = discovered = 0
    for node in circuit.nodes:
        node_state = state.nodes.get(node.id)
        if not node_state:
            continue
        hacked += node_state.hacked
        blocked += node_state.blocked
        discovered += node_state.discovered

    total = len(circuit.nodes)
    return CircuitAudit(
        id=circuit.id,
        name=circuit.name,
        description=circuit.description,
        is_current_circuit=circuit.id == state.position.circuit_id,
        total_nodes=total,
        hacked_nodes=hacked,
        blocked_nodes=blocked,
        discovered_nodes=discovered,
        status=derive_status(
            total,
            hacked,
            blocked,
            completed=state.is_circuit_completed(circuit.id),
            locked=state.is_circuit_blocked(circuit.id),
        ),
        events=[event for event in state.timeline if event.circuit_id == circuit.id],
    )


def circuit_summary(state: RunState, world: WorldDefinition) -> list[CircuitAudit]:
    """One CircuitAudit per circuit, in world order."""
    return [summarize_circuit(state, circuit) for circuit in world.circuits]


def generate_audit_data(
    state: RunState,
    world: WorldDefinition,
    *,
    run_id: str = "",
    run_name: str | None = None,
    project_name: str = "",
    created_at: str | None = None,
) -> RunAuditData:
    """Aggregate a full audit of the run. Never mutates `state`."""
    circuits = circuit_summary(state, world)

    return RunAuditData(
        run_id=run_id,
        run_name=run_name,
        project_name=project_name,
        created_at=created_at,
        total_circuits=len(circuits),
        completed_circuits=sum(1 for c in circuits if c.status == CircuitStatus.COMPLETED),
        blocked_circuits=sum(1 for c in world.circuits if state.is_circuit_blocked(c.id)),
        total_nodes=sum(c.total_nodes for c in circuits),
        hacked_nodes=sum(c.hacked_nodes for c in circuits),
        blocked_nodes=sum(c.blocked_nodes for c in circuits),
        discovered_nodes=sum(c.discovered_nodes for c in circuits),
        total_attempts=sum(ns.attempts for ns in state.nodes.values()),
        circuits=circuits,
        timeline=list(state.timeline),
        warnings=list(state.warnings),
    )


def state_at(state: RunState, event_index: int) -> RunState:
    """
    Rebuild the run as it was right after timeline event `event_index`.

    Position and node/link maps come from the event snapshot. Circuit
    flags and last-hacked positions are derived from the events up to and
    including that one. Warnings are cut at the count the snapshot recorded;
    snapshots stored without a count fall back to the event timestamp.

    Raises IndexError when the timeline has no such event.
    """
    if not -len(state.timeline) <= event_index < len(state.timeline):
        raise IndexError(f"No timeline event at index {event_index}")
    if event_index < 0:
        event_index += len(state.timeline)

    events = deepcopy(state.timeline[: event_index + 1])
    snapshot = events[-1].snapshot

    last_hacked: dict[str, str] = {}
    blocked_circuits: dict[str, bool] = {}
    completed_circuits: dict[str, bool] = {}
    for event in events:
        if event.event_type == TimelineEventType.NODE_HACKED and event.node_id:
            last_hacked[event.circuit_id] = event.node_id
        elif event.event_type == TimelineEventType.CIRCUIT_BLOCKED:
            blocked_circuits[event.circuit_id] = True
        elif event.event_type == TimelineEventType.CIRCUIT_COMPLETED:
            completed_circuits[event.circuit_id] = True

    if snapshot.warning_count is not None:
        warnings = state.warnings[: snapshot.warning_count]
    else:
        cutoff = events[-1].timestamp
        warnings = [w for w in state.warnings if w.timestamp is None or w.timestamp <= cutoff]

    return RunState(
        position=snapshot.position,
        nodes={node_id: replace(ns) for node_id, ns in snapshot.nodes.items()},
        links={link_id: replace(ls) for link_id, ls in snapshot.links.items()},
        last_hacked_node_by_circuit=last_hacked,
        warnings=warnings,
        blocked_circuits=blocked_circuits,
        completed_circuits=completed_circuits,
        timeline=events,
    )
