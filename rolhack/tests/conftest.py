"""
Pytest fixtures for RolHack tests.

The main test world has two circuits:

    alpha:  A(cd 5, WARN) -- B(cd 7, BLOCK) -- C(cd 10, final)
            A ~~ D (hidden link, D hidden)
    beta:   E(cd 2, BLOCK) -- F(cd 4)
"""

import pytest

from ..world_schema import WorldDefinition, parse_world
from ..engine_core import RunState, initialize

TS = "2025-01-01T00:00:00.000Z"


def make_node(node_id, level, cd, fail_die=6, critical="WARN", range_mode="WARN", visible=True, **extra):
    """Node document in the camelCase authoring format."""
    node = {
        "id": node_id,
        "name": f"Node {node_id}",
        "level": level,
        "challengeDifficulty": cd,
        "failDie": fail_die,
        "criticalFailMode": critical,
        "rangeFailMode": range_mode,
        "visibleByDefault": visible,
    }
    node.update(extra)
    return node


def make_link(link_id, from_node, to_node, hidden=False, **extra):
    link = {"id": link_id, "from": from_node, "to": to_node, "style": "solid", "hidden": hidden}
    link.update(extra)
    return link


def make_world_document(circuits):
    return {"meta": {"version": "1.0.0", "author": "tests"}, "circuits": circuits}


@pytest.fixture
def world_document() -> dict:
    """A fresh, valid two-circuit world document."""
    return make_world_document([
        {
            "id": "alpha",
            "name": "Alpha Grid",
            "nodes": [
                make_node("A", 0, 5),
                make_node("B", 1, 7, critical="BLOCK", range_mode="BLOCK"),
                make_node(
                    "C", 2, 10, fail_die=8, critical="BLOCK",
                    rangeErrorMessage="ICE WALL. Connection refused.", isFinal=True,
                ),
                make_node("D", 1, 3, fail_die=4, visible=False),
            ],
            "links": [
                make_link("A-B", "A", "B"),
                make_link("B-C", "B", "C"),
                make_link("A-D", "A", "D", hidden=True, style="dashed"),
            ],
        },
        {
            "id": "beta",
            "name": "Beta Relay",
            "nodes": [
                make_node("E", 0, 2, fail_die=4, critical="BLOCK", range_mode="BLOCK"),
                make_node("F", 1, 4, fail_die=4),
            ],
            "links": [make_link("E-F", "E", "F")],
        },
    ])


@pytest.fixture
def world(world_document) -> WorldDefinition:
    return parse_world(world_document)


@pytest.fixture
def state(world) -> RunState:
    """Fresh run at A with a pinned start time."""
    return initialize(world, timestamp=TS)


@pytest.fixture
def ts() -> str:
    return TS
