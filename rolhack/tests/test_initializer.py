"""
Tests for run initialization.
"""

import pytest

from ..engine_core import (
    HackResult,
    NoEntryNodeError,
    TimelineEventType,
    initialize,
)
from ..world_schema import WorldDefinition
from .conftest import TS


class TestInitialize:
    """Tests for the starting state of a run."""

    def test_starts_at_first_entry(self, state):
        """The player starts on the first entry node of the first circuit."""
        assert state.position.circuit_id == "alpha"
        assert state.position.node_id == "A"

    def test_node_visibility(self, state):
        """Nodes start discovered only when visible by default."""
        assert state.nodes["B"].discovered
        assert not state.nodes["D"].discovered

    def test_link_visibility(self, state):
        """Hidden links start undiscovered."""
        assert state.links["A-B"].discovered
        assert not state.links["A-D"].discovered

    def test_every_node_fresh(self, state):
        """No node starts hacked, blocked or attempted."""
        for node_state in state.nodes.values():
            assert not node_state.hacked
            assert not node_state.blocked
            assert node_state.attempts == 0
            assert node_state.last_result == HackResult.NONE

    def test_covers_all_circuits(self, state):
        """State is created for nodes and links of every circuit."""
        assert set(state.nodes) == {"A", "B", "C", "D", "E", "F"}
        assert set(state.links) == {"A-B", "B-C", "A-D", "E-F"}

    def test_run_start_event(self, state):
        """A RUN_START event with a snapshot opens the timeline."""
        assert len(state.timeline) == 1
        event = state.timeline[0]
        assert event.event_type == TimelineEventType.RUN_START
        assert event.id == "evt-0000"
        assert event.timestamp == TS
        assert event.node_id == "A"
        assert event.snapshot.position == state.position

    def test_hidden_entry_forced_discovered(self, world_document):
        """The start node is discovered even if hidden by default."""
        world_document["circuits"][0]["nodes"][0]["visibleByDefault"] = False
        world = WorldDefinition.model_validate(world_document)

        state = initialize(world, timestamp=TS)

        assert state.nodes["A"].discovered

    def test_no_entry_node_raises(self, world_document):
        """A first circuit without entry nodes cannot start a run."""
        world_document["circuits"][0]["nodes"][0]["level"] = 1
        world = WorldDefinition.model_validate(world_document)

        with pytest.raises(NoEntryNodeError) as exc_info:
            initialize(world)

        assert exc_info.value.code == "NO_ENTRY_NODE"
        assert exc_info.value.circuit_id == "alpha"

    def test_default_timestamp(self, world):
        """Without a pinned time, events carry the current UTC time."""
        state = initialize(world)
        assert state.timeline[0].timestamp.endswith("Z")
