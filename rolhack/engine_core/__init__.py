"""
Engine Core - Deterministic run state and rule resolution.

The engine is the runtime that:
1. Initializes a RunState from a validated WorldDefinition
2. Resolves hack, discover, move and circuit-switch inputs
3. Returns a brand-new state plus an outcome, never mutating its input
4. Keeps an append-only timeline for audit and replay
"""

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
from .errors import EngineError, NoEntryNodeError, RunStateValidationError
from .outcome import HackOutcome, DiscoverOutcome, MoveOutcome, SwitchOutcome, MoveKind
from .initializer import initialize
from .hack import attempt_hack, circuit_is_complete
from .discovery import discover
from .movement import move, available_moves, AvailableMoves
from .circuit_switch import switch_circuit, resolve_arrival_node
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action, replay
from .serialization import (
    parse_run_state,
    parse_run_state_json,
    dump_run_state,
    dump_run_state_json,
)

__all__ = [
    "RunState",
    "NodeState",
    "LinkState",
    "Position",
    "RunWarning",
    "StateSnapshot",
    "TimelineEvent",
    "EventDetails",
    "HackResult",
    "WarningSeverity",
    "TimelineEventType",
    "EngineError",
    "NoEntryNodeError",
    "RunStateValidationError",
    "HackOutcome",
    "DiscoverOutcome",
    "MoveOutcome",
    "SwitchOutcome",
    "MoveKind",
    "initialize",
    "attempt_hack",
    "circuit_is_complete",
    "discover",
    "move",
    "available_moves",
    "AvailableMoves",
    "switch_circuit",
    "resolve_arrival_node",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "replay",
    "parse_run_state",
    "parse_run_state_json",
    "dump_run_state",
    "dump_run_state_json",
]
