"""
Movement Resolver - Walking links inside the current circuit.

Movement only follows a direct link; there is no graph-wide fast travel.
The link must be discovered and accessible, then:
- retreat: the target is already hacked, always allowed
- advance: the target is not hacked, needs the current node hacked and
  the target discovered

Moves change nothing but the position and leave no timeline event.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import logging

from ..world_schema.world import WorldDefinition, CircuitDefinition
from .graph import connecting_links, links_from_node, link_target
from .outcome import MoveOutcome, MoveKind
from .state import RunState, Position

log = logging.getLogger(__name__)


@dataclass
class AvailableMoves:
    """Node IDs the player could move to right now."""
    retreat: list[str] = field(default_factory=list)
    advance: list[str] = field(default_factory=list)

    @property
    def all(self) -> list[str]:
        return self.retreat + self.advance


def move(
    state: RunState, world: WorldDefinition, target_node_id: str
) -> tuple[RunState, MoveOutcome]:
    """Move to a node linked to the current one."""
    position = state.position
    circuit = world.get_circuit(position.circuit_id)

    if not circuit:
        return _reject(state, "NO SIGNAL. This network does not exist.", "CIRCUIT_NOT_FOUND")

    if state.is_circuit_blocked(circuit.id):
        return _reject(state, f"{circuit.name} is in lockdown. No routes respond.", "CIRCUIT_BLOCKED")

    if target_node_id == position.node_id:
        return _reject(state, "You are already connected there.", "ALREADY_AT_TARGET")

    target = circuit.get_node(target_node_id)
    target_state = state.nodes.get(target_node_id)
    if not target or not target_state:
        return _reject(state, "NO SIGNAL. That system is not on this network.", "TARGET_NOT_FOUND")

    if target_state.inaccessible:
        return _reject(state, f"{target.name} is out of reach.", "TARGET_INACCESSIBLE")

    if target_state.blocked:
        return _reject(state, f"{target.name} is sealed. Access permanently denied.", "TARGET_BLOCKED")

    known_links = [
        state.links[link.id]
        for link in connecting_links(circuit, position.node_id, target_node_id)
        if link.id in state.links and state.links[link.id].discovered
    ]
    if not known_links:
        return _reject(state, f"NO ROUTE. No known access leads to {target.name}.", "NO_ROUTE")

    if all(link_state.inaccessible for link_state in known_links):
        return _reject(state, f"ROUTE SEVERED. The access to {target.name} is down.", "LINK_INACCESSIBLE")

    if target_state.hacked:
        kind = MoveKind.RETREAT
        message = f"RECONNECTING to {target.name}."
    else:
        current_state = state.nodes.get(position.node_id)
        if not current_state or not current_state.hacked:
            return _reject(
                state,
                "ACCESS DENIED. Current node NOT COMPROMISED: breach it before advancing.",
                "CURRENT_NOT_HACKED",
            )
        if not target_state.discovered:
            return _reject(state, "NO ROUTE. That system has not been located yet.", "TARGET_NOT_DISCOVERED")
        kind = MoveKind.ADVANCE
        message = f"ROUTING to {target.name}."

    new_state = state.clone()
    new_state.position = replace(position, node_id=target_node_id)

    return new_state, MoveOutcome(
        success=True,
        new_position=new_state.position,
        message=message,
        kind=kind,
    )


def available_moves(state: RunState, world: WorldDefinition) -> AvailableMoves:
    """Every target `move` would accept from the current position."""
    moves = AvailableMoves()
    circuit = world.get_circuit(state.position.circuit_id)
    if not circuit or state.is_circuit_blocked(circuit.id):
        return moves

    current_id = state.position.node_id
    current_state = state.nodes.get(current_id)
    current_hacked = bool(current_state and current_state.hacked)

    for target_id in _linked_targets(state, circuit, current_id):
        target_state = state.nodes.get(target_id)
        if not target_state or target_state.inaccessible or target_state.blocked:
            continue
        if target_state.hacked:
            moves.retreat.append(target_id)
        elif current_hacked and target_state.discovered:
            moves.advance.append(target_id)

    return moves


def _linked_targets(state: RunState, circuit: CircuitDefinition, node_id: str) -> list[str]:
    targets: list[str] = []
    for link in links_from_node(circuit, node_id):
        link_state = state.links.get(link.id)
        if not link_state or not link_state.discovered or link_state.inaccessible:
            continue
        target_id = link_target(link, node_id)
        if target_id != node_id and target_id not in targets and circuit.get_node(target_id):
            targets.append(target_id)
    return targets


def _reject(state: RunState, message: str, error_code: str) -> tuple[RunState, MoveOutcome]:
    log.debug("Move rejected from %s: %s", state.position.node_id, error_code)
    return state, MoveOutcome.rejected(state.position, message, error_code)
