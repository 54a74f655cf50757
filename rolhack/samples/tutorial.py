"""
Tutorial World

A small training network that teaches every mechanic in order:
- An entry terminal that always opens
- A firewall that warns on a bad roll
- A hidden port that only a scan reveals
- A database with a bigger fail die
- A core that locks the circuit on any failure

The document is written in the legacy authoring format (`cd`, `WARNING`,
`BLOQUEO`) so loading it also exercises migration.
"""

from typing import Any

from ..world_schema.world import WorldDefinition
from ..world_schema.validation import parse_world

TUTORIAL_PROJECT_NAME = "RolHack Tutorial"


def create_tutorial_world() -> WorldDefinition:
    """Parse and validate the tutorial world."""
    return parse_world(tutorial_document())


def tutorial_document() -> dict[str, Any]:
    """The raw tutorial document, as an author would store it."""
    return {
        "meta": {
            "version": "1.0.0",
            "author": "RolHack",
            "description": "Interactive tutorial covering the RolHack mechanics",
        },
        "circuits": [
            {
                "id": "tutorial-circuit",
                "name": "Training Network",
                "description": "Your first incursion into the system",
                "nodes": _define_nodes(),
                "links": _define_links(),
            }
        ],
    }


def _define_nodes() -> list[dict[str, Any]]:
    return [
        {
            "id": "node-start",
            "name": "Access Terminal",
            "description": "Entry point to the system. Access guaranteed.",
            "level": 0,
            "cd": 0,
            "failDie": 6,
            "criticalFailMode": "WARNING",
            "rangeFailMode": "WARNING",
            "visibleByDefault": True,
            "mapX": 10,
            "mapY": 50,
        },
        {
            "id": "node-firewall",
            "name": "Basic Firewall",
            "description": "A firewall running a stock configuration.",
            "level": 1,
            "cd": 11,
            "failDie": 6,
            "criticalFailMode": "BLOQUEO",
            "rangeFailMode": "WARNING",
            "rangeErrorMessage": "FIREWALL TRACE. Connection refused.",
            "visibleByDefault": True,
            "mapX": 35,
            "mapY": 30,
        },
        {
            "id": "node-hidden",
            "name": "Hidden Port",
            "description": "An alternate access found by scanning.",
            "level": 1,
            "cd": 12,
            "failDie": 6,
            "criticalFailMode": "BLOQUEO",
            "rangeFailMode": "WARNING",
            "rangeErrorMessage": "PORT DETECTED. Access denied.",
            "visibleByDefault": False,
            "mapX": 35,
            "mapY": 70,
        },
        {
            "id": "node-database",
            "name": "Database",
            "description": "Corporate data server.",
            "level": 2,
            "cd": 15,
            "failDie": 8,
            "criticalFailMode": "BLOQUEO",
            "rangeFailMode": "WARNING",
            "rangeErrorMessage": "DATABASE ALERT. Query blocked.",
            "visibleByDefault": True,
            "mapX": 65,
            "mapY": 50,
        },
        {
            "id": "node-core",
            "name": "System Core",
            "description": "Final objective. Maximum security.",
            "level": 3,
            "cd": 20,
            "failDie": 10,
            "criticalFailMode": "BLOQUEO",
            "rangeFailMode": "BLOQUEO",
            "visibleByDefault": True,
            "isFinal": True,
            "mapX": 90,
            "mapY": 50,
        },
    ]


def _define_links() -> list[dict[str, Any]]:
    return [
        # Main visible path
        {"id": "link-start-firewall", "from": "node-start", "to": "node-firewall", "style": "solid", "hidden": False},
        {"id": "link-firewall-database", "from": "node-firewall", "to": "node-database", "style": "solid", "hidden": False},
        {"id": "link-database-core", "from": "node-database", "to": "node-core", "style": "solid", "hidden": False},
        # Scan-only path
        {"id": "link-start-hidden", "from": "node-start", "to": "node-hidden", "style": "dashed", "hidden": True},
        {"id": "link-hidden-database", "from": "node-hidden", "to": "node-database", "style": "dashed", "hidden": False},
    ]
