"""
Tests for switching between circuits.
"""

from ..engine_core import TimelineEventType, attempt_hack, move, switch_circuit
from ..engine_core.circuit_switch import resolve_arrival_node
from .conftest import TS


class TestSwitchCircuit:
    """Tests for arrival and rejections when changing circuit."""

    def test_first_visit_lands_on_entry(self, state, world):
        """A circuit never hacked is entered at its first entry node."""
        new_state, outcome = switch_circuit(state, world, "beta", timestamp=TS)

        assert outcome.success
        assert outcome.previous_circuit_id == "alpha"
        assert new_state.position.circuit_id == "beta"
        assert new_state.position.node_id == "E"
        assert new_state.nodes["E"].discovered
        assert "CONNECTED" in outcome.message

    def test_records_event(self, state, world):
        new_state, _ = switch_circuit(state, world, "beta", timestamp=TS)

        event = new_state.timeline[-1]
        assert event.event_type == TimelineEventType.CIRCUIT_CHANGED
        assert event.circuit_id == "beta"
        assert event.node_id == "E"
        assert event.details.previous_circuit_id == "alpha"

    def test_returns_to_last_hacked(self, state, world):
        """Coming back lands on the last node hacked in that circuit."""
        state, _ = attempt_hack(state, world, 5)
        state, _ = move(state, world, "B")
        state, _ = attempt_hack(state, world, 7)
        state, _ = move(state, world, "A")
        state, _ = switch_circuit(state, world, "beta")

        new_state, _ = switch_circuit(state, world, "alpha")

        assert new_state.position.node_id == "B"

    def test_invalid_last_hacked_falls_back(self, state, world):
        """A last hacked node that became unusable is skipped."""
        state, _ = attempt_hack(state, world, 5)
        state, _ = move(state, world, "B")
        state, _ = attempt_hack(state, world, 7)
        state, _ = switch_circuit(state, world, "beta")
        alpha = world.get_circuit("alpha")
        assert resolve_arrival_node(state, alpha).id == "B"

        state.nodes["B"].inaccessible = True
        assert resolve_arrival_node(state, alpha).id == "A"

        state.last_hacked_node_by_circuit["alpha"] = "C"
        assert resolve_arrival_node(state, alpha).id == "A"

    def test_blocked_circuit_rejected(self, state, world):
        """Re-entering a locked circuit is refused."""
        state.blocked_circuits["beta"] = True

        new_state, outcome = switch_circuit(state, world, "beta")

        assert new_state is state
        assert outcome.error_code == "CIRCUIT_BLOCKED"

    def test_same_circuit_rejected(self, state, world):
        new_state, outcome = switch_circuit(state, world, "alpha")
        assert new_state is state
        assert outcome.error_code == "ALREADY_IN_CIRCUIT"

    def test_unknown_circuit_rejected(self, state, world):
        new_state, outcome = switch_circuit(state, world, "gamma")
        assert new_state is state
        assert outcome.error_code == "CIRCUIT_NOT_FOUND"

    def test_input_untouched(self, state, world):
        before = state.to_dict()
        switch_circuit(state, world, "beta")
        assert state.to_dict() == before
