"""
Run-state documents - Validation and conversion of stored run state.

Stored runs are camelCase JSON documents. They are validated with pydantic
before being turned into RunState values, so a resolver never sees a
malformed state. `timeline`, `blockedCircuits` and `completedCircuits`
are optional so runs stored before those existed still load.
"""

from __future__ import annotations
from typing import Any, Literal, Optional
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import RunStateValidationError
from .state import (
    RunState,
    NodeState,
    LinkState,
    Position,
    RunWarning,
    StateSnapshot,
    TimelineEvent,
    EventDetails,
    HackResult,
    WarningSeverity,
    TimelineEventType,
)


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PositionDocument(DocumentModel):
    circuit_id: str
    node_id: str


class NodeStateDocument(DocumentModel):
    hacked: bool
    blocked: bool
    inaccessible: bool
    discovered: bool
    attempts: int = Field(ge=0)
    last_result: Optional[Literal["none", "success", "fail"]] = None


class LinkStateDocument(DocumentModel):
    discovered: bool
    inaccessible: bool


class WarningDocument(DocumentModel):
    severity: WarningSeverity
    node_id: str
    message: str
    timestamp: Optional[str] = None


class SnapshotDocument(DocumentModel):
    position: PositionDocument
    nodes: dict[str, NodeStateDocument]
    links: dict[str, LinkStateDocument]
    warning_count: Optional[int] = Field(default=None, ge=0)


class EventDetailsDocument(DocumentModel):
    discovered_links: Optional[list[str]] = None
    discovered_nodes: Optional[list[str]] = None
    warning_generated: Optional[bool] = None
    previous_circuit_id: Optional[str] = None


class TimelineEventDocument(DocumentModel):
    id: str
    type: TimelineEventType
    timestamp: str
    circuit_id: str
    node_id: Optional[str] = None
    description: str
    details: Optional[EventDetailsDocument] = None
    snapshot: SnapshotDocument


class RunStateDocument(DocumentModel):
    position: PositionDocument
    last_hacked_node_by_circuit: dict[str, str] = Field(default_factory=dict)
    nodes: dict[str, NodeStateDocument]
    links: dict[str, LinkStateDocument]
    warnings: list[WarningDocument] = Field(default_factory=list)
    timeline: list[TimelineEventDocument] = Field(default_factory=list)
    blocked_circuits: dict[str, bool] = Field(default_factory=dict)
    completed_circuits: dict[str, bool] = Field(default_factory=dict)


def parse_run_state(document: Any) -> RunState:
    """
    Validate a stored run-state document and build the RunState.

    Raises RunStateValidationError listing every problem found.
    """
    try:
        doc = RunStateDocument.model_validate(document)
    except ValidationError as e:
        raise RunStateValidationError([
            {"path": list(err["loc"]), "code": err["type"], "message": err["msg"]}
            for err in e.errors()
        ]) from e
    return _to_run_state(doc)


def parse_run_state_json(json_text: str) -> RunState:
    try:
        document = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise RunStateValidationError([
            {"path": [], "code": "INVALID_JSON", "message": f"Invalid JSON: {e.msg}"}
        ]) from e
    return parse_run_state(document)


def dump_run_state(state: RunState) -> dict[str, Any]:
    return state.to_dict()


def dump_run_state_json(state: RunState, indent: int | None = None) -> str:
    return json.dumps(state.to_dict(), indent=indent, ensure_ascii=False)


def _to_position(doc: PositionDocument) -> Position:
    return Position(circuit_id=doc.circuit_id, node_id=doc.node_id)


def _to_node_state(doc: NodeStateDocument) -> NodeState:
    return NodeState(
        hacked=doc.hacked,
        blocked=doc.blocked,
        inaccessible=doc.inaccessible,
        discovered=doc.discovered,
        attempts=doc.attempts,
        last_result=HackResult(doc.last_result or "none"),
    )


def _to_link_state(doc: LinkStateDocument) -> LinkState:
    return LinkState(discovered=doc.discovered, inaccessible=doc.inaccessible)


def _to_snapshot(doc: SnapshotDocument) -> StateSnapshot:
    return StateSnapshot(
        position=_to_position(doc.position),
        nodes={node_id: _to_node_state(ns) for node_id, ns in doc.nodes.items()},
        links={link_id: _to_link_state(ls) for link_id, ls in doc.links.items()},
        warning_count=doc.warning_count,
    )


def _to_event(doc: TimelineEventDocument) -> TimelineEvent:
    details = None
    if doc.details is not None:
        details = EventDetails(
            discovered_links=doc.details.discovered_links,
            discovered_nodes=doc.details.discovered_nodes,
            warning_generated=doc.details.warning_generated,
            previous_circuit_id=doc.details.previous_circuit_id,
        )
    return TimelineEvent(
        id=doc.id,
        event_type=doc.type,
        timestamp=doc.timestamp,
        circuit_id=doc.circuit_id,
        description=doc.description,
        snapshot=_to_snapshot(doc.snapshot),
        node_id=doc.node_id,
        details=details,
    )


def _to_run_state(doc: RunStateDocument) -> RunState:
    return RunState(
        position=_to_position(doc.position),
        nodes={node_id: _to_node_state(ns) for node_id, ns in doc.nodes.items()},
        links={link_id: _to_link_state(ls) for link_id, ls in doc.links.items()},
        last_hacked_node_by_circuit=dict(doc.last_hacked_node_by_circuit),
        warnings=[
            RunWarning(
                severity=w.severity,
                node_id=w.node_id,
                message=w.message,
                timestamp=w.timestamp,
            )
            for w in doc.warnings
        ],
        blocked_circuits=dict(doc.blocked_circuits),
        completed_circuits=dict(doc.completed_circuits),
        timeline=[_to_event(event) for event in doc.timeline],
    )
