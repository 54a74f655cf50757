"""
Circuit Switch Resolver - Jumping to another circuit of the world.

On arrival the player lands on the last node they hacked there, if it is
still usable, otherwise on the circuit's first entry node.
"""

from __future__ import annotations
import logging

from ..world_schema.world import CircuitDefinition, NodeDefinition, WorldDefinition
from .outcome import SwitchOutcome
from .state import RunState, Position, TimelineEventType, EventDetails
from .timeline import append_event

log = logging.getLogger(__name__)


def switch_circuit(
    state: RunState,
    world: WorldDefinition,
    target_circuit_id: str,
    *,
    timestamp: str | None = None,
) -> tuple[RunState, SwitchOutcome]:
    """Reposition the player in another circuit."""
    target = world.get_circuit(target_circuit_id)
    if not target:
        return _reject(state, "NO SIGNAL. That network does not exist.", "CIRCUIT_NOT_FOUND")

    previous_circuit_id = state.position.circuit_id
    if target.id == previous_circuit_id:
        return _reject(state, f"You are already inside {target.name}.", "ALREADY_IN_CIRCUIT")

    if state.is_circuit_blocked(target.id):
        return _reject(state, f"{target.name} is in lockdown. All access revoked.", "CIRCUIT_BLOCKED")

    arrival = resolve_arrival_node(state, target)
    if not arrival:
        return _reject(state, f"{target.name} exposes no entry point.", "NO_ENTRY_NODE")

    new_state = state.clone()
    new_state.position = Position(circuit_id=target.id, node_id=arrival.id)
    arrival_state = new_state.nodes.get(arrival.id)
    if arrival_state:
        arrival_state.discovered = True

    previous = world.get_circuit(previous_circuit_id)
    previous_name = previous.name if previous else previous_circuit_id
    append_event(
        new_state,
        TimelineEventType.CIRCUIT_CHANGED,
        f"Switched from {previous_name} to {target.name}",
        circuit_id=target.id,
        node_id=arrival.id,
        details=EventDetails(previous_circuit_id=previous_circuit_id),
        timestamp=timestamp,
    )
    log.debug("Switched circuit %s -> %s at %s", previous_circuit_id, target.id, arrival.id)

    return new_state, SwitchOutcome(
        success=True,
        new_position=new_state.position,
        message=f"CONNECTED to {target.name}. Landing at {arrival.name}.",
        previous_circuit_id=previous_circuit_id,
    )


def resolve_arrival_node(state: RunState, circuit: CircuitDefinition) -> NodeDefinition | None:
    """Last hacked node if still valid, else the first entry node."""
    last_hacked_id = state.last_hacked_node_by_circuit.get(circuit.id)
    if last_hacked_id:
        node = circuit.get_node(last_hacked_id)
        node_state = state.nodes.get(last_hacked_id)
        if (
            node
            and node_state
            and node_state.hacked
            and not node_state.blocked
            and not node_state.inaccessible
        ):
            return node

    entry_nodes = circuit.entry_nodes
    return entry_nodes[0] if entry_nodes else None


def _reject(state: RunState, message: str, error_code: str) -> tuple[RunState, SwitchOutcome]:
    log.debug("Circuit switch rejected: %s", error_code)
    return state, SwitchOutcome.rejected(state.position, message, error_code)
