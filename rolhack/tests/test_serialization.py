"""
Tests for run-state documents.
"""

import json

import pytest

from ..engine_core import (
    RunStateValidationError,
    attempt_hack,
    discover,
    dump_run_state,
    dump_run_state_json,
    parse_run_state,
    parse_run_state_json,
)


class TestRunStateDocument:
    """Tests for loading and storing run state."""

    def test_round_trip(self, state, world):
        """A dumped state loads back to an equal state."""
        state, _ = attempt_hack(state, world, 1, 1)
        state, _ = discover(state, world)
        state, _ = attempt_hack(state, world, 5)

        loaded = parse_run_state_json(dump_run_state_json(state))

        assert loaded == state

    def test_camel_case_keys(self, state):
        document = dump_run_state(state)

        assert set(document) == {
            "position",
            "lastHackedNodeByCircuit",
            "nodes",
            "links",
            "warnings",
            "timeline",
            "blockedCircuits",
            "completedCircuits",
        }
        assert document["position"] == {"circuitId": "alpha", "nodeId": "A"}
        assert document["nodes"]["A"]["lastResult"] is None
        assert document["timeline"][0]["type"] == "RUN_START"
        assert document["timeline"][0]["snapshot"]["warningCount"] == 0

    def test_optional_fields_default(self, state):
        """Documents stored without timeline or circuit flags still load."""
        document = dump_run_state(state)
        for key in ("timeline", "blockedCircuits", "completedCircuits", "warnings"):
            del document[key]

        loaded = parse_run_state(document)

        assert loaded.timeline == []
        assert loaded.blocked_circuits == {}
        assert loaded.completed_circuits == {}

    def test_snapshot_without_warning_count(self, state):
        document = dump_run_state(state)
        del document["timeline"][0]["snapshot"]["warningCount"]

        loaded = parse_run_state(document)

        assert loaded.timeline[0].snapshot.warning_count is None

    def test_malformed_document(self, state):
        """Missing or mistyped fields raise with every problem listed."""
        document = dump_run_state(state)
        del document["position"]
        document["nodes"]["A"]["attempts"] = -1

        with pytest.raises(RunStateValidationError) as exc_info:
            parse_run_state(document)

        assert exc_info.value.code == "INVALID_RUN_STATE"
        assert len(exc_info.value.errors) == 2

    def test_invalid_json(self):
        with pytest.raises(RunStateValidationError) as exc_info:
            parse_run_state_json("[")
        assert exc_info.value.errors[0]["code"] == "INVALID_JSON"

    def test_json_is_plain(self, state):
        """The JSON output is standard JSON."""
        assert json.loads(dump_run_state_json(state, indent=2)) == dump_run_state(state)
