"""
API Module - Battle client interface.

Exposes the engine via REST API and WebSockets.
A client:
1. Lists champions and cards, validates a deck
2. Starts a local or online battle
3. Submits intents and receives the resulting state
4. Listens for state updates over a WebSocket

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    CreateBattleRequest,
    IntentRequest,
    BattleStateResponse,
    TurnResultResponse,
    ErrorResponse,
    CardInfo,
    ChampionInfo,
    CombatantInfo,
)
from .service import APIService, SessionNotFoundError
from .app import create_app

__all__ = [
    "CreateBattleRequest",
    "IntentRequest",
    "BattleStateResponse",
    "TurnResultResponse",
    "ErrorResponse",
    "CardInfo",
    "ChampionInfo",
    "CombatantInfo",
    "APIService",
    "SessionNotFoundError",
    "create_app",
]
