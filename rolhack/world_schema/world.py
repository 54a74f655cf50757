"""
World Definition - Static, authored description of a hacking network.

A world is an ordered list of circuits. Each circuit is a self-contained
sub-graph of nodes (hackable systems) and links (connections between them).
The world never changes during a run; all progress lives in RunState.

Documents use camelCase keys (the editor/storage format). Python code uses
snake_case attribute names. Legacy documents are migrated while parsing:
- `cd` is accepted for `challengeDifficulty`
- nodes without a `failDie` key get a D4
- a single legacy `failMode` fills both failure policies
- legacy mode names WARNING/BLOQUEO map to WARN/BLOCK
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_FAIL_DIE = 4
MIN_FAIL_DIE = 3
MAX_FAIL_DIE = 20

# Fail die results at or below this are critical failures
CRITICAL_FAIL_THRESHOLD = 2


class FailMode(str, Enum):
    """What happens to a node when a breach fails."""
    WARN = "WARN"  # Trace recorded, node stays open for retry
    BLOCK = "BLOCK"  # Node and its whole circuit are locked permanently


LEGACY_FAIL_MODES = {
    "WARNING": FailMode.WARN.value,
    "BLOQUEO": FailMode.BLOCK.value,
}


class LinkStyle(str, Enum):
    """Visual style of a link (presentation only)."""
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class WorldModel(BaseModel):
    """Base for world models: immutable, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _has_key(data: dict[str, Any], camel: str, snake: str) -> bool:
    return camel in data or snake in data


class NodeDefinition(WorldModel):
    """
    A hackable system inside a circuit.

    `level` is informational; the only rule that reads it is entry
    detection (level 0). Access control never depends on it.
    """
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    level: int = Field(ge=0)
    challenge_difficulty: int  # 0 = always-open entry; range checked by business rules
    fail_die: Optional[int] = None  # Range checked by business rules
    critical_fail_mode: FailMode = FailMode.BLOCK
    range_fail_mode: FailMode = FailMode.WARN
    range_error_message: Optional[str] = None
    visible_by_default: bool
    is_final: bool = False

    # Map positioning, percent of the map canvas
    map_x: Optional[float] = Field(default=None, ge=0, le=100)
    map_y: Optional[float] = Field(default=None, ge=0, le=100)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if "cd" in data and not _has_key(data, "challengeDifficulty", "challenge_difficulty"):
            data["challengeDifficulty"] = data.pop("cd")

        # An explicit null is kept so validation can report it
        if not _has_key(data, "failDie", "fail_die"):
            data["failDie"] = DEFAULT_FAIL_DIE

        legacy_mode = data.pop("failMode", None)
        for camel, snake in (
            ("criticalFailMode", "critical_fail_mode"),
            ("rangeFailMode", "range_fail_mode"),
        ):
            key = snake if snake in data and camel not in data else camel
            value = data.get(key, legacy_mode)
            if value is None:
                continue
            data[key] = LEGACY_FAIL_MODES.get(value, value) if isinstance(value, str) else value

        return data

    @property
    def is_entry(self) -> bool:
        return self.level == 0


class LinkDefinition(WorldModel):
    """A connection between two nodes of the same circuit."""
    id: str = Field(min_length=1)
    from_node: str = Field(alias="from", min_length=1)
    to_node: str = Field(alias="to", min_length=1)
    style: LinkStyle = LinkStyle.SOLID
    hidden: bool
    bidirectional: bool = True

    def touches(self, node_id: str) -> bool:
        return node_id in (self.from_node, self.to_node)


class CircuitDefinition(WorldModel):
    """A sub-network: the unit of lockout and completion."""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    nodes: tuple[NodeDefinition, ...] = Field(min_length=1)
    links: tuple[LinkDefinition, ...]

    def get_node(self, node_id: str) -> NodeDefinition | None:
        """Get a node definition by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_link(self, link_id: str) -> LinkDefinition | None:
        """Get a link definition by ID."""
        for link in self.links:
            if link.id == link_id:
                return link
        return None

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    @property
    def entry_nodes(self) -> list[NodeDefinition]:
        return [node for node in self.nodes if node.is_entry]

    @property
    def final_node(self) -> NodeDefinition | None:
        for node in self.nodes:
            if node.is_final:
                return node
        return None


class WorldMeta(WorldModel):
    """Authoring metadata."""
    version: str = Field(min_length=1)
    author: Optional[str] = None
    created_at: Optional[str] = None
    description: Optional[str] = None


class WorldDefinition(WorldModel):
    """
    Complete world definition.

    This is the static input every resolver reads. It is only ever
    constructed from a document that went through the validator.
    """
    meta: WorldMeta
    circuits: tuple[CircuitDefinition, ...] = Field(min_length=1)

    def get_circuit(self, circuit_id: str) -> CircuitDefinition | None:
        """Get a circuit by ID."""
        for circuit in self.circuits:
            if circuit.id == circuit_id:
                return circuit
        return None

    @property
    def circuit_ids(self) -> list[str]:
        return [circuit.id for circuit in self.circuits]

    @property
    def total_nodes(self) -> int:
        return sum(len(circuit.nodes) for circuit in self.circuits)

    def to_document(self) -> dict[str, Any]:
        """Serialize back to a camelCase JSON-compatible document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
