"""
Tests for discovery (scanning for hidden accesses).
"""

from ..engine_core import TimelineEventType, attempt_hack, discover, initialize, move
from ..engine_core.graph import has_hidden_links_available
from ..world_schema import parse_world
from .conftest import TS, make_link, make_node, make_world_document


class TestDiscover:
    """Tests for revealing hidden links and nodes."""

    def test_reveals_hidden_link_and_node(self, state, world):
        """Scanning at A reveals the hidden link to D and D itself."""
        new_state, outcome = discover(state, world, timestamp=TS)

        assert outcome.error_code is None
        assert outcome.found_anything
        assert outcome.discovered_links == ["A-D"]
        assert outcome.discovered_nodes == ["D"]
        assert new_state.links["A-D"].discovered
        assert new_state.nodes["D"].discovered
        assert not state.links["A-D"].discovered

    def test_records_event(self, state, world):
        """A successful scan appends LINKS_DISCOVERED with the IDs."""
        new_state, _ = discover(state, world, timestamp=TS)

        event = new_state.timeline[-1]
        assert event.event_type == TimelineEventType.LINKS_DISCOVERED
        assert event.description == "Discovered 1 hidden access"
        assert event.details.discovered_links == ["A-D"]
        assert event.details.discovered_nodes == ["D"]
        assert event.snapshot.links["A-D"].discovered

    def test_does_not_need_hacked_node(self, state, world):
        """Scanning works from an unhacked node."""
        assert not state.nodes["A"].hacked
        new_state, outcome = discover(state, world)
        assert new_state is not state

    def test_nothing_left(self, state, world):
        """A second scan finds nothing and returns the same state."""
        scanned, _ = discover(state, world)

        again, outcome = discover(scanned, world)

        assert again is scanned
        assert not outcome.found_anything
        assert outcome.error_code is None
        assert "No hidden accesses" in outcome.message

    def test_scan_from_other_node(self, state, world):
        """Hidden links not touching the current node stay hidden."""
        state, _ = attempt_hack(state, world, 5)
        state, _ = move(state, world, "B")

        new_state, _ = discover(state, world)

        assert new_state is state
        assert not new_state.links["A-D"].discovered

    def test_rejected_when_circuit_blocked(self, state, world):
        """A locked circuit refuses scans."""
        state.blocked_circuits["alpha"] = True

        new_state, outcome = discover(state, world)

        assert new_state is state
        assert outcome.error_code == "CIRCUIT_BLOCKED"

    def test_hidden_links_available(self, state, world):
        """The scanner hint matches what a scan would find."""
        assert has_hidden_links_available(state, world)
        scanned, _ = discover(state, world)
        assert not has_hidden_links_available(scanned, world)

    def test_no_hint_in_locked_circuit(self, state, world):
        state.blocked_circuits["alpha"] = True
        assert not has_hidden_links_available(state, world)


class TestLinkDirection:
    """Tests for one-way and two-way hidden links."""

    def make_world(self, bidirectional):
        return parse_world(make_world_document([{
            "id": "c1",
            "name": "Directional",
            "nodes": [make_node("P", 0, 0), make_node("Q", 1, 3, visible=False)],
            "links": [make_link("Q-P", "Q", "P", hidden=True, bidirectional=bidirectional)],
        }]))

    def test_bidirectional_found_from_far_end(self):
        """A two-way hidden link is found from either end."""
        world = self.make_world(True)
        state = initialize(world, timestamp=TS)

        new_state, outcome = discover(state, world)

        assert outcome.discovered_links == ["Q-P"]
        assert outcome.discovered_nodes == ["Q"]

    def test_one_way_not_found_from_far_end(self):
        """A one-way hidden link is only found from its source."""
        world = self.make_world(False)
        state = initialize(world, timestamp=TS)

        new_state, outcome = discover(state, world)

        assert new_state is state
        assert outcome.discovered_links == []
