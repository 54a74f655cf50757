"""
RolHack - Network Intrusion Rules Engine

A deterministic, rules-driven engine for a graph-based hacking minigame.
The engine loads world definitions (authored networks of circuits, nodes
and links) and provides:
- World validation and legacy migration
- Run state initialization
- Two-phase hack resolution, discovery, movement and circuit switching
- An append-only timeline with audit summaries and exports
"""

__version__ = "0.1.0"
