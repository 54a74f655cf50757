"""
Run initialization - builds the starting RunState for a world.
"""

from __future__ import annotations
import logging

from ..world_schema.world import WorldDefinition
from .errors import NoEntryNodeError
from .state import RunState, NodeState, LinkState, Position, TimelineEventType
from .timeline import append_event

log = logging.getLogger(__name__)


def initialize(world: WorldDefinition, *, timestamp: str | None = None) -> RunState:
    """
    Create the initial state of a run.

    - nodes start discovered if visible by default
    - links start discovered unless hidden
    - the player starts on the first entry node of the first circuit,
      which is always discovered

    Raises NoEntryNodeError if the first circuit has no entry node.
    """
    nodes: dict[str, NodeState] = {}
    links: dict[str, LinkState] = {}

    for circuit in world.circuits:
        for node in circuit.nodes:
            nodes[node.id] = NodeState(discovered=node.visible_by_default)
        for link in circuit.links:
            links[link.id] = LinkState(discovered=not link.hidden)

    first_circuit = world.circuits[0]
    entry_nodes = first_circuit.entry_nodes
    if not entry_nodes:
        raise NoEntryNodeError(first_circuit.id)

    start_node = entry_nodes[0]
    nodes[start_node.id].discovered = True

    state = RunState(
        position=Position(circuit_id=first_circuit.id, node_id=start_node.id),
        nodes=nodes,
        links=links,
    )
    append_event(
        state,
        TimelineEventType.RUN_START,
        f"Run started at {start_node.name} in {first_circuit.name}",
        node_id=start_node.id,
        timestamp=timestamp,
    )

    log.debug("Initialized run at %s/%s", first_circuit.id, start_node.id)
    return state
