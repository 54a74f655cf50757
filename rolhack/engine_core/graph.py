"""
Graph queries over a world definition.

All lookups are read-only. Direction rules: a link can always be walked
from its `from` end; it can be walked from its `to` end only when it is
bidirectional.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..world_schema.world import (
    WorldDefinition,
    CircuitDefinition,
    NodeDefinition,
    LinkDefinition,
)
from .state import RunState, NodeState


@dataclass(frozen=True)
class NodeLocation:
    """A node together with the circuit that owns it."""
    circuit: CircuitDefinition
    node: NodeDefinition


@dataclass(frozen=True)
class LinkLocation:
    circuit: CircuitDefinition
    link: LinkDefinition


@dataclass(frozen=True)
class CurrentNodeInfo:
    circuit: CircuitDefinition
    node: NodeDefinition
    node_state: NodeState


def find_circuit(world: WorldDefinition, circuit_id: str) -> CircuitDefinition | None:
    return world.get_circuit(circuit_id)


def find_node(world: WorldDefinition, node_id: str) -> NodeLocation | None:
    """Find a node by ID across all circuits."""
    for circuit in world.circuits:
        node = circuit.get_node(node_id)
        if node:
            return NodeLocation(circuit=circuit, node=node)
    return None


def find_link(world: WorldDefinition, link_id: str) -> LinkLocation | None:
    """Find a link by ID across all circuits."""
    for circuit in world.circuits:
        link = circuit.get_link(link_id)
        if link:
            return LinkLocation(circuit=circuit, link=link)
    return None


def find_entry_nodes(circuit: CircuitDefinition) -> list[NodeDefinition]:
    """Entry points (level 0) in authoring order."""
    return circuit.entry_nodes


def links_from_node(circuit: CircuitDefinition, node_id: str) -> list[LinkDefinition]:
    """Links that can be walked starting at `node_id`."""
    return [
        link for link in circuit.links
        if link.from_node == node_id or (link.bidirectional and link.to_node == node_id)
    ]


def link_target(link: LinkDefinition, from_node_id: str) -> str:
    """The far end of `link` as seen from `from_node_id`."""
    if link.from_node == from_node_id:
        return link.to_node
    return link.from_node


def link_connects(link: LinkDefinition, node_a: str, node_b: str) -> bool:
    """True if `link` can be walked from `node_a` to `node_b`."""
    if link.from_node == node_a and link.to_node == node_b:
        return True
    return link.bidirectional and link.from_node == node_b and link.to_node == node_a


def connecting_links(
    circuit: CircuitDefinition, from_node_id: str, to_node_id: str
) -> list[LinkDefinition]:
    """Every link that can be walked from one node to the other."""
    return [link for link in circuit.links if link_connects(link, from_node_id, to_node_id)]


def has_hidden_links_available(state: RunState, world: WorldDefinition) -> bool:
    """Whether a discovery action from the current node would find anything."""
    circuit = world.get_circuit(state.position.circuit_id)
    if not circuit or state.is_circuit_blocked(circuit.id):
        return False

    for link in links_from_node(circuit, state.position.node_id):
        link_state = state.links.get(link.id)
        if link.hidden and link_state and not link_state.discovered:
            return True
    return False


def current_node_info(state: RunState, world: WorldDefinition) -> CurrentNodeInfo | None:
    circuit = world.get_circuit(state.position.circuit_id)
    if not circuit:
        return None
    node = circuit.get_node(state.position.node_id)
    if not node:
        return None
    node_state = state.nodes.get(node.id)
    if not node_state:
        return None
    return CurrentNodeInfo(circuit=circuit, node=node, node_state=node_state)
