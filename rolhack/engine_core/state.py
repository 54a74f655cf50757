"""
Run State - Per-run execution state for a world.

Design principles:
- Value-like: resolvers clone before editing and return the clone
- Serializable: every piece has a to_dict() in the stored document format
- Auditable: the timeline carries a lightweight snapshot per event
- Self-contained: circuit lockout/completion flags live on the state,
  never in module globals, so concurrent runs share nothing
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
from copy import deepcopy
from enum import Enum


class HackResult(Enum):
    """Result of the last hack attempt on a node."""
    NONE = "none"
    SUCCESS = "success"
    FAIL = "fail"


class WarningSeverity(Enum):
    """Severity of a security warning raised during play."""
    INFO = "INFO"
    TRACE = "TRACE"
    ALERT = "ALERT"
    LOCKDOWN = "LOCKDOWN"
    BLACK_ICE = "BLACK_ICE"


class TimelineEventType(Enum):
    """Kinds of audit events. Plain moves are not recorded."""
    RUN_START = "RUN_START"
    NODE_HACKED = "NODE_HACKED"
    NODE_BLOCKED = "NODE_BLOCKED"
    CIRCUIT_BLOCKED = "CIRCUIT_BLOCKED"
    LINKS_DISCOVERED = "LINKS_DISCOVERED"
    CIRCUIT_CHANGED = "CIRCUIT_CHANGED"
    CIRCUIT_COMPLETED = "CIRCUIT_COMPLETED"
    RUN_COMPLETED = "RUN_COMPLETED"


@dataclass(frozen=True)
class Position:
    """Where the player currently is."""
    circuit_id: str
    node_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"circuitId": self.circuit_id, "nodeId": self.node_id}


@dataclass
class NodeState:
    """Progress on a single node."""
    hacked: bool = False
    blocked: bool = False
    inaccessible: bool = False
    discovered: bool = False
    attempts: int = 0
    last_result: HackResult = HackResult.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "hacked": self.hacked,
            "blocked": self.blocked,
            "inaccessible": self.inaccessible,
            "discovered": self.discovered,
            "attempts": self.attempts,
            "lastResult": None if self.last_result == HackResult.NONE else self.last_result.value,
        }


@dataclass
class LinkState:
    """Progress on a single link."""
    discovered: bool = False
    inaccessible: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"discovered": self.discovered, "inaccessible": self.inaccessible}


@dataclass(frozen=True)
class RunWarning:
    """A security event shown to the player."""
    severity: WarningSeverity
    node_id: str
    message: str
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "severity": self.severity.value,
            "nodeId": self.node_id,
            "message": self.message,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data


@dataclass
class StateSnapshot:
    """
    Point-in-time view stored on each timeline event.

    Only position, node/link maps and how many warnings existed: never a
    timeline inside a timeline. `warning_count` is None on snapshots stored
    before it was recorded.
    """
    position: Position
    nodes: dict[str, NodeState]
    links: dict[str, LinkState]
    warning_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "position": self.position.to_dict(),
            "nodes": {node_id: ns.to_dict() for node_id, ns in self.nodes.items()},
            "links": {link_id: ls.to_dict() for link_id, ls in self.links.items()},
        }
        if self.warning_count is not None:
            data["warningCount"] = self.warning_count
        return data


@dataclass
class EventDetails:
    """Optional extra data attached to a timeline event."""
    discovered_links: list[str] | None = None
    discovered_nodes: list[str] | None = None
    warning_generated: bool | None = None
    previous_circuit_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.discovered_links is not None:
            data["discoveredLinks"] = list(self.discovered_links)
        if self.discovered_nodes is not None:
            data["discoveredNodes"] = list(self.discovered_nodes)
        if self.warning_generated is not None:
            data["warningGenerated"] = self.warning_generated
        if self.previous_circuit_id is not None:
            data["previousCircuitId"] = self.previous_circuit_id
        return data


@dataclass
class TimelineEvent:
    """An entry in the append-only audit log."""
    id: str
    event_type: TimelineEventType
    timestamp: str
    circuit_id: str
    description: str
    snapshot: StateSnapshot
    node_id: str | None = None
    details: EventDetails | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.event_type.value,
            "timestamp": self.timestamp,
            "circuitId": self.circuit_id,
        }
        if self.node_id is not None:
            data["nodeId"] = self.node_id
        data["description"] = self.description
        if self.details is not None:
            data["details"] = self.details.to_dict()
        data["snapshot"] = self.snapshot.to_dict()
        return data


@dataclass
class RunState:
    """
    Complete execution state of a run.

    Created once by initialize(), then only replaced by resolvers.
    """
    position: Position
    nodes: dict[str, NodeState] = field(default_factory=dict)
    links: dict[str, LinkState] = field(default_factory=dict)

    # Circuit id -> node id, used when re-entering a circuit
    last_hacked_node_by_circuit: dict[str, str] = field(default_factory=dict)

    warnings: list[RunWarning] = field(default_factory=list)

    # Circuit-wide flags
    blocked_circuits: dict[str, bool] = field(default_factory=dict)
    completed_circuits: dict[str, bool] = field(default_factory=dict)

    timeline: list[TimelineEvent] = field(default_factory=list)

    @property
    def current_node_state(self) -> NodeState | None:
        return self.nodes.get(self.position.node_id)

    def is_circuit_blocked(self, circuit_id: str) -> bool:
        return self.blocked_circuits.get(circuit_id, False)

    def is_circuit_completed(self, circuit_id: str) -> bool:
        return self.completed_circuits.get(circuit_id, False)

    def snapshot(self) -> StateSnapshot:
        """Copy of position and node/link maps, detached from this state."""
        return StateSnapshot(
            position=self.position,
            nodes={node_id: replace(ns) for node_id, ns in self.nodes.items()},
            links={link_id: replace(ls) for link_id, ls in self.links.items()},
            warning_count=len(self.warnings),
        )

    def clone(self) -> RunState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored run-state document format."""
        return {
            "position": self.position.to_dict(),
            "lastHackedNodeByCircuit": dict(self.last_hacked_node_by_circuit),
            "nodes": {node_id: ns.to_dict() for node_id, ns in self.nodes.items()},
            "links": {link_id: ls.to_dict() for link_id, ls in self.links.items()},
            "warnings": [w.to_dict() for w in self.warnings],
            "timeline": [event.to_dict() for event in self.timeline],
            "blockedCircuits": dict(self.blocked_circuits),
            "completedCircuits": dict(self.completed_circuits),
        }
