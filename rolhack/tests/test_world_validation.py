"""
Tests for world definition validation.

Tests:
- Structural validation (pydantic layer)
- Business rules and their error codes
- Advisory warnings
- Legacy document migration
"""

import json

import pytest

from ..world_schema import (
    FailMode,
    WorldValidationError,
    format_error_path,
    parse_world,
    validate_world,
    validate_world_json,
)
from .conftest import make_link, make_node, make_world_document


def single_circuit(nodes, links=()):
    return make_world_document([
        {"id": "c1", "name": "Circuit One", "nodes": list(nodes), "links": list(links)}
    ])


class TestStructuralLayer:
    """Tests for shape and type checking."""

    def test_valid_world(self, world_document):
        """A well-formed world validates and returns the typed definition."""
        result = validate_world(world_document)

        assert result.valid
        assert result.errors == []
        assert result.world is not None
        assert result.world.circuit_ids == ["alpha", "beta"]

    def test_missing_required_field(self, world_document):
        """A missing node field is reported with its path."""
        del world_document["circuits"][0]["nodes"][0]["visibleByDefault"]

        result = validate_world(world_document)

        assert not result.valid
        assert result.world is None
        assert result.errors[0].code == "missing"
        assert format_error_path(result.errors[0].path) == "circuits[0].nodes[0].visibleByDefault"

    def test_unknown_fail_mode(self, world_document):
        """Fail modes outside WARN/BLOCK are rejected structurally."""
        world_document["circuits"][0]["nodes"][1]["rangeFailMode"] = "MAYBE"

        result = validate_world(world_document)

        assert not result.valid
        assert "rangeFailMode" in result.errors[0].path

    def test_empty_circuit_list(self):
        """A world needs at least one circuit."""
        result = validate_world(make_world_document([]))
        assert not result.valid

    def test_map_coordinates_bounded(self, world_document):
        """Map positions must stay within 0-100."""
        world_document["circuits"][0]["nodes"][0]["mapX"] = 150
        result = validate_world(world_document)
        assert not result.valid

    def test_structural_errors_skip_business_rules(self):
        """Business rules are not run on a structurally broken document."""
        doc = single_circuit([make_node("A", 1, 3), {"id": "B"}])

        result = validate_world(doc)

        assert "NO_ENTRY_NODE" not in result.error_codes()

    def test_invalid_json(self):
        """Unparseable text produces INVALID_JSON."""
        result = validate_world_json("{not json")
        assert result.error_codes() == ["INVALID_JSON"]

    def test_json_text(self, world_document):
        """validate_world_json accepts a serialized document."""
        assert validate_world_json(json.dumps(world_document)).valid


class TestBusinessRules:
    """Tests for semantic rules, all collected in one pass."""

    def test_no_entry_node(self):
        """A circuit without a level 0 node is invalid."""
        result = validate_world(single_circuit([make_node("A", 1, 3)]))
        assert "NO_ENTRY_NODE" in result.error_codes()

    def test_duplicate_ids(self, world_document):
        """Duplicate circuit, node and link IDs are each reported."""
        alpha = world_document["circuits"][0]
        alpha["nodes"].append(make_node("A", 3, 1))
        alpha["links"].append(make_link("A-B", "B", "A"))
        world_document["circuits"][1]["id"] = "alpha"

        codes = validate_world(world_document).error_codes()

        assert "DUPLICATE_NODE_ID" in codes
        assert "DUPLICATE_LINK_ID" in codes
        assert "DUPLICATE_CIRCUIT_ID" in codes

    def test_negative_difficulty(self):
        """Challenge difficulty below zero is INVALID_CD."""
        result = validate_world(single_circuit([make_node("A", 0, -1)]))
        assert result.error_codes() == ["INVALID_CD"]

    def test_fail_die_out_of_range(self):
        """Fail dice outside D3-D20 are rejected."""
        doc = single_circuit(
            [make_node("A", 0, 0, fail_die=2), make_node("B", 1, 5, fail_die=21)],
            [make_link("l1", "A", "B")],
        )
        result = validate_world(doc)
        assert result.error_codes() == ["INVALID_FAIL_DIE", "INVALID_FAIL_DIE"]

    def test_explicit_null_fail_die(self):
        """An explicit null fail die is reported as missing."""
        result = validate_world(single_circuit([make_node("A", 0, 0, fail_die=None)]))
        assert result.error_codes() == ["MISSING_FAIL_DIE"]

    def test_orphan_and_self_links(self):
        """Links must join two distinct known nodes."""
        doc = single_circuit(
            [make_node("A", 0, 0), make_node("B", 1, 5)],
            [
                make_link("l1", "A", "B"),
                make_link("l2", "X", "B"),
                make_link("l3", "A", "Y"),
                make_link("l4", "B", "B"),
            ],
        )
        codes = validate_world(doc).error_codes()
        assert codes == ["ORPHAN_LINK_FROM", "ORPHAN_LINK_TO", "SELF_LINK"]

    def test_multiple_final_nodes(self):
        """Only one node per circuit may be final."""
        doc = single_circuit(
            [make_node("A", 0, 0, isFinal=True), make_node("B", 1, 5, isFinal=True)],
            [make_link("l1", "A", "B")],
        )
        assert validate_world(doc).error_codes() == ["MULTIPLE_FINAL_NODES"]

    def test_errors_collected(self):
        """Every failing rule shows up, not just the first."""
        doc = single_circuit(
            [make_node("A", 1, -2, fail_die=50)],
            [make_link("l1", "A", "Z")],
        )
        codes = validate_world(doc).error_codes()
        assert {"NO_ENTRY_NODE", "INVALID_CD", "INVALID_FAIL_DIE", "ORPHAN_LINK_TO"} <= set(codes)

    def test_parse_world_raises(self):
        """parse_world raises with the full error list."""
        with pytest.raises(WorldValidationError) as exc_info:
            parse_world(single_circuit([make_node("A", 1, 3)]))
        assert [e.code for e in exc_info.value.errors] == ["NO_ENTRY_NODE"]


class TestAdvisoryWarnings:
    """Tests for warnings that never block."""

    def test_reused_ids_across_circuits(self, world_document):
        """Reusing node or link IDs across circuits only warns."""
        beta = world_document["circuits"][1]
        beta["nodes"][1]["id"] = "B"
        beta["links"] = [make_link("A-B", "E", "B")]

        result = validate_world(world_document)

        assert result.valid
        codes = [w.code for w in result.warnings]
        assert "NODE_ID_REUSED" in codes
        assert "LINK_ID_REUSED" in codes

    def test_isolated_node(self):
        """A non-entry node with no links is flagged."""
        doc = single_circuit([make_node("A", 0, 0), make_node("B", 1, 5)])

        result = validate_world(doc)

        assert result.valid
        assert [w.code for w in result.warnings] == ["ISOLATED_NODE"]
        assert result.warnings[0].path == ("circuits", 0, "nodes", 1)


class TestLegacyMigration:
    """Tests for documents written in the older authoring format."""

    def test_cd_alias(self):
        """`cd` fills challengeDifficulty."""
        node = make_node("A", 0, 0)
        del node["challengeDifficulty"]
        node["cd"] = 9

        world = parse_world(single_circuit([node]))

        assert world.circuits[0].nodes[0].challenge_difficulty == 9

    def test_missing_fail_die_defaults(self):
        """Nodes without a failDie key get a D4."""
        node = make_node("A", 0, 0)
        del node["failDie"]

        world = parse_world(single_circuit([node]))

        assert world.circuits[0].nodes[0].fail_die == 4

    def test_single_fail_mode(self):
        """A legacy failMode fills both policies."""
        node = make_node("A", 0, 0)
        del node["criticalFailMode"]
        del node["rangeFailMode"]
        node["failMode"] = "BLOQUEO"

        parsed = parse_world(single_circuit([node])).circuits[0].nodes[0]

        assert parsed.critical_fail_mode == FailMode.BLOCK
        assert parsed.range_fail_mode == FailMode.BLOCK

    def test_legacy_mode_names(self):
        """WARNING and BLOQUEO map onto WARN and BLOCK."""
        node = make_node("A", 0, 0, critical="BLOQUEO", range_mode="WARNING")

        parsed = parse_world(single_circuit([node])).circuits[0].nodes[0]

        assert parsed.critical_fail_mode == FailMode.BLOCK
        assert parsed.range_fail_mode == FailMode.WARN

    def test_default_policies(self):
        """Without any mode, critical blocks and range warns."""
        node = make_node("A", 0, 0)
        del node["criticalFailMode"]
        del node["rangeFailMode"]

        parsed = parse_world(single_circuit([node])).circuits[0].nodes[0]

        assert parsed.critical_fail_mode == FailMode.BLOCK
        assert parsed.range_fail_mode == FailMode.WARN

    def test_document_round_trip(self, world):
        """to_document produces a document that validates to the same world."""
        assert parse_world(world.to_document()) == world


class TestErrorPaths:
    """Tests for error path formatting."""

    def test_root(self):
        assert format_error_path(()) == "root"

    def test_nested(self):
        assert format_error_path(["circuits", 0, "links", 3, "from"]) == "circuits[0].links[3].from"
