"""
Discovery Resolver - Scans the current node for hidden accesses.

Scanning does not need the current node to be hacked; it is only refused
when the circuit is in lockdown.
"""

from __future__ import annotations
import logging

from ..world_schema.world import WorldDefinition
from .graph import links_from_node, link_target
from .outcome import DiscoverOutcome
from .state import RunState, TimelineEventType, EventDetails
from .timeline import append_event

log = logging.getLogger(__name__)


def discover(
    state: RunState,
    world: WorldDefinition,
    *,
    timestamp: str | None = None,
) -> tuple[RunState, DiscoverOutcome]:
    """
    Reveal hidden links leaving the current node, and the nodes behind them.

    Returns the input state unchanged when the scan is refused or finds
    nothing new.
    """
    circuit_id = state.position.circuit_id
    node_id = state.position.node_id
    circuit = world.get_circuit(circuit_id)

    if not circuit:
        log.debug("Discover rejected: unknown circuit %s", circuit_id)
        return state, DiscoverOutcome(
            message="NO SIGNAL. This network does not exist.",
            error_code="CIRCUIT_NOT_FOUND",
        )

    if state.is_circuit_blocked(circuit_id):
        log.debug("Discover rejected: circuit %s blocked", circuit_id)
        return state, DiscoverOutcome(
            message=f"{circuit.name} is in lockdown. Scanners are jammed.",
            error_code="CIRCUIT_BLOCKED",
        )

    new_state = state.clone()
    discovered_links: list[str] = []
    discovered_nodes: list[str] = []

    for link in links_from_node(circuit, node_id):
        link_state = new_state.links.get(link.id)
        if not link.hidden or not link_state or link_state.discovered:
            continue

        link_state.discovered = True
        discovered_links.append(link.id)

        target_id = link_target(link, node_id)
        target_state = new_state.nodes.get(target_id)
        if target_state and not target_state.discovered:
            target_state.discovered = True
            discovered_nodes.append(target_id)

    if not discovered_links:
        return state, DiscoverOutcome(message="SCAN COMPLETE. No hidden accesses from this position.")

    count = len(discovered_links)
    append_event(
        new_state,
        TimelineEventType.LINKS_DISCOVERED,
        f"Discovered {count} hidden access{'es' if count > 1 else ''}",
        circuit_id=circuit_id,
        node_id=node_id,
        details=EventDetails(
            discovered_links=list(discovered_links),
            discovered_nodes=list(discovered_nodes),
        ),
        timestamp=timestamp,
    )

    if count == 1:
        message = "SCAN COMPLETE. A hidden access has been revealed."
    else:
        message = "SCAN COMPLETE. Several hidden accesses have been revealed."

    return new_state, DiscoverOutcome(
        message=message,
        discovered_links=discovered_links,
        discovered_nodes=discovered_nodes,
    )
