"""
Hack Resolver - Two-phase dice resolution of a breach attempt.

Phase 1: the player rolls against the node's challenge difficulty.
    roll >= CD  -> node hacked
    roll <  CD  -> a second roll on the node's fail die is required

Phase 2: the fail die decides how bad the failure is.
    1-2         -> critical failure, policy = criticalFailMode
    3-failDie   -> range failure, policy = rangeFailMode

    WARN  -> a warning is recorded, the node stays open for retry
    BLOCK -> the node and its whole circuit are locked permanently;
             on a node with CD <= 2 this is a catastrophic breach (game over)

The resolver keeps no session between the two phases: the caller repeats
the same roll value together with the fail die result.
"""

from __future__ import annotations
import logging

from ..world_schema.world import (
    WorldDefinition,
    CircuitDefinition,
    NodeDefinition,
    FailMode,
    DEFAULT_FAIL_DIE,
    CRITICAL_FAIL_THRESHOLD,
)
from .outcome import HackOutcome
from .state import (
    RunState,
    RunWarning,
    HackResult,
    WarningSeverity,
    TimelineEventType,
    EventDetails,
)
from .timeline import append_event, utc_now

log = logging.getLogger(__name__)


def attempt_hack(
    state: RunState,
    world: WorldDefinition,
    roll_value: int,
    fail_die_roll: int | None = None,
    *,
    timestamp: str | None = None,
) -> tuple[RunState, HackOutcome]:
    """
    Attempt to hack the node at the current position.

    Returns (new_state, outcome). When nothing changes (precondition
    failure, pending second roll, invalid input) the input state object
    itself is returned.
    """
    circuit = world.get_circuit(state.position.circuit_id)
    node = circuit.get_node(state.position.node_id) if circuit else None
    if not circuit or not node:
        return _reject(state, "NO SIGNAL. Nothing answers at this address.", "NODE_NOT_FOUND")

    node_state = state.nodes.get(node.id)
    if not node_state:
        return _reject(state, f"{node.name} does not respond to intrusion attempts.", "NODE_STATE_MISSING")

    if node_state.hacked:
        return _reject(state, f"{node.name} is already under your control.", "NODE_ALREADY_HACKED")

    if node_state.blocked:
        return _reject(
            state,
            f"{node.name} is sealed. Access permanently denied.",
            "NODE_BLOCKED",
            blocked=True,
        )

    if state.is_circuit_blocked(circuit.id):
        return _reject(
            state,
            f"{circuit.name} is in lockdown. All access revoked.",
            "CIRCUIT_BLOCKED",
            blocked=True,
        )

    if node_state.inaccessible:
        return _reject(state, f"{node.name} is out of reach.", "NODE_INACCESSIBLE")

    if roll_value < 0:
        return _reject(state, "Breach signal malformed.", "INVALID_ROLL")

    if roll_value >= node.challenge_difficulty:
        return _resolve_success(state, world, circuit, node, timestamp)

    fail_die = node.fail_die or DEFAULT_FAIL_DIE

    if fail_die_roll is None:
        return state, HackOutcome(
            success=False,
            message="BREACH FAILED. The system is counterattacking: roll the fail die.",
            needs_second_roll=True,
            fail_die=fail_die,
        )

    if not 1 <= fail_die_roll <= fail_die:
        return _reject(state, "Countermeasure reading is out of range.", "INVALID_FAIL_DIE_ROLL")

    return _resolve_failure(state, circuit, node, fail_die_roll, timestamp)


def circuit_is_complete(state: RunState, circuit: CircuitDefinition) -> bool:
    """
    A circuit is complete when its final node is hacked, or, when it has
    no final node, when every node in it is hacked.
    """
    final_node = circuit.final_node
    if final_node:
        final_state = state.nodes.get(final_node.id)
        return bool(final_state and final_state.hacked)

    return all(
        state.nodes.get(node.id) is not None and state.nodes[node.id].hacked
        for node in circuit.nodes
    )


def _reject(
    state: RunState, message: str, error_code: str, blocked: bool = False
) -> tuple[RunState, HackOutcome]:
    log.debug("Hack rejected at %s: %s", state.position.node_id, error_code)
    return state, HackOutcome.rejected(message, error_code, blocked=blocked)


def _resolve_success(
    state: RunState,
    world: WorldDefinition,
    circuit: CircuitDefinition,
    node: NodeDefinition,
    timestamp: str | None,
) -> tuple[RunState, HackOutcome]:
    new_state = state.clone()
    node_state = new_state.nodes[node.id]
    node_state.attempts += 1
    node_state.hacked = True
    node_state.last_result = HackResult.SUCCESS
    new_state.last_hacked_node_by_circuit[circuit.id] = node.id

    ts = timestamp or utc_now()
    append_event(
        new_state,
        TimelineEventType.NODE_HACKED,
        f"{node.name} hacked",
        circuit_id=circuit.id,
        node_id=node.id,
        timestamp=ts,
    )

    circuit_completed, run_completed = _check_completion(new_state, world, circuit, ts)

    message = f"ACCESS GRANTED. {node.name} compromised."
    if run_completed:
        message += " Every network has fallen."
    elif circuit_completed:
        message += f" {circuit.name} is yours."

    return new_state, HackOutcome(
        success=True,
        message=message,
        hacked=True,
        circuit_completed=circuit_completed,
        run_completed=run_completed,
    )


def _check_completion(
    state: RunState,
    world: WorldDefinition,
    circuit: CircuitDefinition,
    timestamp: str,
) -> tuple[bool, bool]:
    """Record circuit and run completion the first time they happen."""
    if state.is_circuit_completed(circuit.id) or not circuit_is_complete(state, circuit):
        return False, False

    state.completed_circuits[circuit.id] = True
    append_event(
        state,
        TimelineEventType.CIRCUIT_COMPLETED,
        f"Circuit {circuit.name} completed",
        circuit_id=circuit.id,
        timestamp=timestamp,
    )
    log.info("Circuit %s completed", circuit.id)

    run_completed = all(state.is_circuit_completed(c.id) for c in world.circuits)
    if run_completed:
        append_event(
            state,
            TimelineEventType.RUN_COMPLETED,
            "All circuits completed",
            circuit_id=circuit.id,
            timestamp=timestamp,
        )
        log.info("Run completed")

    return True, run_completed


def _resolve_failure(
    state: RunState,
    circuit: CircuitDefinition,
    node: NodeDefinition,
    fail_die_roll: int,
    timestamp: str | None,
) -> tuple[RunState, HackOutcome]:
    critical = fail_die_roll <= CRITICAL_FAIL_THRESHOLD
    mode = node.critical_fail_mode if critical else node.range_fail_mode

    new_state = state.clone()
    node_state = new_state.nodes[node.id]
    node_state.attempts += 1
    node_state.last_result = HackResult.FAIL
    ts = timestamp or utc_now()

    if mode == FailMode.WARN:
        if critical:
            severity = WarningSeverity.TRACE
            message = f"TRACE DETECTED. Intrusion flagged on {node.name}. System still accessible."
        else:
            severity = WarningSeverity.ALERT
            message = node.range_error_message or (
                f"TRACE DETECTED. {node.name} rejected the connection. System on alert."
            )
        warning = RunWarning(severity=severity, node_id=node.id, message=message, timestamp=ts)
        new_state.warnings.append(warning)
        return new_state, HackOutcome(success=False, message=message, warning=warning)

    # BLOCK: the node and every other node of its circuit become unreachable
    game_over = node.challenge_difficulty <= CRITICAL_FAIL_THRESHOLD
    node_state.blocked = True
    new_state.blocked_circuits[circuit.id] = True

    if game_over:
        severity = WarningSeverity.BLACK_ICE
        message = f"BLACK ICE. Catastrophic breach at {node.name}. Connection terminated."
    elif critical:
        severity = WarningSeverity.BLACK_ICE
        message = f"BLACK ICE. {node.name} fought back. Access permanently denied."
    else:
        severity = WarningSeverity.LOCKDOWN
        message = node.range_error_message or f"LOCKDOWN. {node.name} has sealed itself."

    warning = RunWarning(severity=severity, node_id=node.id, message=message, timestamp=ts)
    new_state.warnings.append(warning)

    append_event(
        new_state,
        TimelineEventType.NODE_BLOCKED,
        f"{node.name} blocked",
        circuit_id=circuit.id,
        node_id=node.id,
        details=EventDetails(warning_generated=True),
        timestamp=ts,
    )
    append_event(
        new_state,
        TimelineEventType.CIRCUIT_BLOCKED,
        f"Circuit {circuit.name} locked down",
        circuit_id=circuit.id,
        node_id=node.id,
        timestamp=ts,
    )
    log.info(
        "Node %s blocked, circuit %s locked (critical=%s, game_over=%s)",
        node.id, circuit.id, critical, game_over,
    )

    return new_state, HackOutcome(
        success=False,
        message=f"{message} {circuit.name} is in lockdown.",
        blocked=True,
        circuit_blocked=True,
        game_over=game_over,
        warning=warning,
    )
