"""
Action System - Player inputs, payloads, and results.

Actions represent the four things a player can do during a run:
1. Hack the current node (with an optional fail die roll)
2. Scan for hidden accesses
3. Move to a linked node
4. Switch circuit

A list of actions is a complete, replayable log of a run.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of player actions."""
    HACK = "hack"
    DISCOVER = "discover"
    MOVE = "move"
    SWITCH_CIRCUIT = "switch_circuit"


@dataclass
class ActionPayload:
    """
    Parameters of an action.

    Different action types use different fields; the reducer reads
    only the ones its handler needs.
    """
    roll_value: int | None = None
    fail_die_roll: int | None = None
    target_node_id: str | None = None
    target_circuit_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "rollValue": self.roll_value,
            "failDieRoll": self.fail_die_roll,
            "targetNodeId": self.target_node_id,
            "targetCircuitId": self.target_circuit_id,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class Action:
    """
    A complete action to be applied to a run state.

    `timestamp` pins the time written into timeline events, which makes
    replays reproduce the recorded log exactly.
    """
    action_type: ActionType
    payload: ActionPayload
    timestamp: str | None = None

    @classmethod
    def hack(cls, roll_value: int, fail_die_roll: int | None = None) -> Action:
        """Factory for hack action."""
        return cls(
            action_type=ActionType.HACK,
            payload=ActionPayload(roll_value=roll_value, fail_die_roll=fail_die_roll),
        )

    @classmethod
    def discover(cls) -> Action:
        """Factory for discover action."""
        return cls(action_type=ActionType.DISCOVER, payload=ActionPayload())

    @classmethod
    def move(cls, target_node_id: str) -> Action:
        """Factory for move action."""
        return cls(
            action_type=ActionType.MOVE,
            payload=ActionPayload(target_node_id=target_node_id),
        )

    @classmethod
    def switch_circuit(cls, target_circuit_id: str) -> Action:
        """Factory for circuit switch action."""
        return cls(
            action_type=ActionType.SWITCH_CIRCUIT,
            payload=ActionPayload(target_circuit_id=target_circuit_id),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.action_type.value, **self.payload.to_dict()}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        return cls(
            action_type=ActionType(data["type"]),
            payload=ActionPayload(
                roll_value=data.get("rollValue"),
                fail_die_roll=data.get("failDieRoll"),
                target_node_id=data.get("targetNodeId"),
                target_circuit_id=data.get("targetCircuitId"),
            ),
            timestamp=data.get("timestamp"),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action did what was asked
    - The resulting state (the input object itself when `changed` is False)
    - The resolver's outcome record, for presentation
    """
    success: bool
    new_state: Any | None = None  # RunState
    outcome: Any | None = None  # HackOutcome, DiscoverOutcome, MoveOutcome or SwitchOutcome
    changed: bool = False
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def failure(cls, error: str, error_code: str | None = None, state: Any | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)
