"""
Reducer - Applies actions to run state.

The reducer is the single dispatch point from actions to resolvers.

Design principles:
- Pure function: (state, action) -> new_state
- Validates payload shape before dispatching
- Returns ActionResult with success/failure
- Rejections are results, never exceptions
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
import logging

from ..world_schema.world import WorldDefinition
from .action import Action, ActionType, ActionResult
from .circuit_switch import switch_circuit
from .discovery import discover
from .hack import attempt_hack
from .initializer import initialize
from .movement import move
from .state import RunState

log = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to run state.

    Stateless - all state is in RunState.
    The world provides the rules.
    """
    world: WorldDefinition

    def apply(self, state: RunState, action: Action) -> ActionResult:
        """
        Apply an action to the run state.

        Returns ActionResult with the resulting state and the resolver outcome.
        """
        validation_error = self._validate_action(action)
        if validation_error:
            log.debug("Invalid %s action: %s", action.action_type.value, validation_error)
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION", state=state)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
                state=state,
            )

        new_state, outcome = handler(state, action)
        return ActionResult(
            success=outcome.error_code is None,
            new_state=new_state,
            outcome=outcome,
            changed=new_state is not state,
            error=outcome.message if outcome.error_code else None,
            error_code=outcome.error_code,
        )

    def _validate_action(self, action: Action) -> str | None:
        """
        Check the payload carries what the action type needs.

        Returns error message if invalid, None if valid.
        """
        payload = action.payload
        if action.action_type == ActionType.HACK and payload.roll_value is None:
            return "Hack requires a roll value"
        if action.action_type == ActionType.MOVE and not payload.target_node_id:
            return "Move requires a target node"
        if action.action_type == ActionType.SWITCH_CIRCUIT and not payload.target_circuit_id:
            return "Circuit switch requires a target circuit"
        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.HACK: self._handle_hack,
            ActionType.DISCOVER: self._handle_discover,
            ActionType.MOVE: self._handle_move,
            ActionType.SWITCH_CIRCUIT: self._handle_switch_circuit,
        }
        return handlers.get(action_type)

    def _handle_hack(self, state: RunState, action: Action):
        return attempt_hack(
            state,
            self.world,
            action.payload.roll_value,
            action.payload.fail_die_roll,
            timestamp=action.timestamp,
        )

    def _handle_discover(self, state: RunState, action: Action):
        return discover(state, self.world, timestamp=action.timestamp)

    def _handle_move(self, state: RunState, action: Action):
        return move(state, self.world, action.payload.target_node_id)

    def _handle_switch_circuit(self, state: RunState, action: Action):
        return switch_circuit(
            state,
            self.world,
            action.payload.target_circuit_id,
            timestamp=action.timestamp,
        )


def apply_action(world: WorldDefinition, state: RunState, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return Reducer(world).apply(state, action)


def replay(
    world: WorldDefinition,
    actions: Iterable[Action],
    *,
    start_timestamp: str | None = None,
) -> tuple[RunState, list[ActionResult]]:
    """
    Rebuild a run from its action log.

    Starts from initialize(world) and applies every action in order.
    With pinned timestamps the resulting state equals the live run.
    """
    reducer = Reducer(world)
    state = initialize(world, timestamp=start_timestamp)
    results = []
    for action in actions:
        result = reducer.apply(state, action)
        results.append(result)
        state = result.new_state
    return state, results
