"""
Session Module - Manages ephemeral battle sessions.

A session represents one battle:
- Created when a client picks a champion and a deck
- Holds the current battle state (or the PeerSync that owns it)
- Runs opponent turns in local mode
- Dropped when ended or stale

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session, SessionState, BattleMode
from .game_loop import BattleLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "BattleMode",
    "BattleLoop",
    "LoopState",
    "TurnResult",
]
