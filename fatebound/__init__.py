"""
Fatebound - Card Battle Engine

A deterministic, turn-based engine for one-on-one champion card battles.
The engine provides:
- A fixed catalog of champions and cards
- State management and a pure reducer for player intents
- Deterministic effect resolution
- A heuristic opponent bot for local play
- Peer synchronization for online play
"""

__version__ = "0.1.0"
