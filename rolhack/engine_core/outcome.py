"""
Outcomes - What each resolver reports back to the caller.

Outcomes are presentation-facing: messages are written in the voice of the
hacked system and never expose rolls, difficulties or failure policies.
A rejected call carries an `error_code` and comes with the input state
returned untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Position, RunWarning


class MoveKind(Enum):
    """How a successful move was authorized."""
    RETREAT = "retreat"  # Back to an already hacked node
    ADVANCE = "advance"  # Forward from a hacked node to a fresh one


@dataclass
class HackOutcome:
    """
    Result of a hack attempt.

    `needs_second_roll` means the breach failed and the caller must roll
    the node's fail die (`fail_die` sides) and call again with the same
    roll value.
    """
    success: bool
    message: str
    hacked: bool = False
    blocked: bool = False
    needs_second_roll: bool = False
    fail_die: int | None = None
    circuit_blocked: bool = False
    game_over: bool = False
    circuit_completed: bool = False
    run_completed: bool = False
    warning: RunWarning | None = None
    error_code: str | None = None

    @classmethod
    def rejected(cls, message: str, error_code: str, blocked: bool = False) -> HackOutcome:
        """Create an outcome for a call that changed nothing."""
        return cls(success=False, message=message, blocked=blocked, error_code=error_code)

    @property
    def rejected_call(self) -> bool:
        return self.error_code is not None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "success": self.success,
            "hacked": self.hacked,
            "blocked": self.blocked,
            "needsSecondRoll": self.needs_second_roll,
            "circuitBlocked": self.circuit_blocked,
            "gameOver": self.game_over,
            "circuitCompleted": self.circuit_completed,
            "runCompleted": self.run_completed,
            "message": self.message,
        }
        if self.fail_die is not None:
            data["failDie"] = self.fail_die
        if self.warning is not None:
            data["warning"] = self.warning.to_dict()
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        return data


@dataclass
class DiscoverOutcome:
    """Result of scanning for hidden accesses."""
    message: str
    discovered_links: list[str] = field(default_factory=list)
    discovered_nodes: list[str] = field(default_factory=list)
    error_code: str | None = None

    @property
    def found_anything(self) -> bool:
        return bool(self.discovered_links)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "discoveredLinks": list(self.discovered_links),
            "discoveredNodes": list(self.discovered_nodes),
            "message": self.message,
        }
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        return data


@dataclass
class MoveOutcome:
    """Result of moving inside the current circuit."""
    success: bool
    new_position: Position
    message: str
    kind: MoveKind | None = None
    error_code: str | None = None

    @classmethod
    def rejected(cls, position: Position, message: str, error_code: str) -> MoveOutcome:
        return cls(success=False, new_position=position, message=message, error_code=error_code)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "success": self.success,
            "newPosition": self.new_position.to_dict(),
            "message": self.message,
        }
        if self.kind is not None:
            data["kind"] = self.kind.value
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        return data


@dataclass
class SwitchOutcome:
    """Result of switching to another circuit."""
    success: bool
    new_position: Position
    message: str
    previous_circuit_id: str | None = None
    error_code: str | None = None

    @classmethod
    def rejected(cls, position: Position, message: str, error_code: str) -> SwitchOutcome:
        return cls(success=False, new_position=position, message=message, error_code=error_code)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "success": self.success,
            "newPosition": self.new_position.to_dict(),
            "message": self.message,
        }
        if self.previous_circuit_id is not None:
            data["previousCircuitId"] = self.previous_circuit_id
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        return data
