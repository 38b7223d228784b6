"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a battle client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- UNKNOWN_CHAMPION: Champion id not in the catalog
- INVALID_DECK: Deck is not 8 distinct known cards
- LOBBY_NOT_FOUND: No host waiting under that id
- INTENT_REJECTED: The engine refused the intent (see engine_error)
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    WAITING_PEER = "waiting_peer"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    DISCONNECTED = "disconnected"
    ABANDONED = "abandoned"


class BattleModeName(str, Enum):
    LOCAL = "local"
    ONLINE = "online"


class PeerRoleName(str, Enum):
    HOST = "host"
    JOIN = "join"


class IntentType(str, Enum):
    PLAY_CARD = "play_card"
    USE_ABILITY = "use_ability"
    END_TURN = "end_turn"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_CHAMPION = "UNKNOWN_CHAMPION"
    INVALID_DECK = "INVALID_DECK"
    LOBBY_NOT_FOUND = "LOBBY_NOT_FOUND"
    INTENT_REJECTED = "INTENT_REJECTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Catalog Models
# =============================================================================

class EffectInfo(BaseModel):
    kind: str
    amount: int


class CardInfo(BaseModel):
    """Card information for display."""
    id: str
    name: str
    cost: int
    type: str
    value: int
    description: str
    realm: str
    effects: list[EffectInfo] = Field(default_factory=list)
    image: Optional[str] = None


class AbilityInfo(BaseModel):
    name: str
    description: str
    cost: int
    effect: EffectInfo


class ChampionInfo(BaseModel):
    """Champion information for display."""
    id: str
    name: str
    title: str
    realm: str
    max_health: int
    ability: AbilityInfo
    image: str = ""
    description: str = ""


# =============================================================================
# Battle Models
# =============================================================================

class CombatantInfo(BaseModel):
    """One side of the battle. The opponent's hand is only counted."""
    champion: ChampionInfo
    health: int
    max_health: int
    mana: int
    max_mana: int
    shield: int
    ability_used: bool
    deck_count: int
    hand_count: int
    hand: list[CardInfo] = Field(default_factory=list)
    graveyard: list[CardInfo] = Field(default_factory=list)


class IntentInfo(BaseModel):
    """A currently legal intent for the player."""
    type: IntentType
    card_id: Optional[str] = None


class BattleStateResponse(BaseModel):
    """Read-only snapshot of a session's battle."""
    session_id: str
    mode: BattleModeName
    status: SessionStatus
    lobby_status: Optional[str] = Field(None, description="Online only: IDLE, WAITING, CONNECTING, CONNECTED, DISCONNECTED")
    lobby_error: Optional[str] = None

    turn_number: Optional[int] = None
    active_side: Optional[str] = None
    phase: Optional[str] = None
    winner: Optional[str] = None

    player: Optional[CombatantInfo] = None
    opponent: Optional[CombatantInfo] = None
    battle_log: list[str] = Field(default_factory=list)
    last_played_card: Optional[CardInfo] = None
    legal_intents: list[IntentInfo] = Field(default_factory=list)
    commentary: list[str] = Field(default_factory=list)

    api_version: str = "v1"


class CreateBattleRequest(BaseModel):
    """Start a battle."""
    champion_id: str
    deck: list[str] = Field(description="Exactly 8 distinct card ids")
    mode: BattleModeName = BattleModeName.LOCAL

    # Local mode
    opponent_champion_id: Optional[str] = None
    personality: str = "balanced"

    # Online mode
    role: PeerRoleName = PeerRoleName.HOST
    host_session_id: Optional[str] = Field(None, description="Required to join: the host's session id")

    seed: Optional[int] = None


class IntentRequest(BaseModel):
    """One player intent."""
    type: IntentType
    card_id: Optional[str] = None


class TurnResultResponse(BaseModel):
    """Result of one intent, including the opponent's reply in local mode."""
    session_id: str
    success: bool
    loop_state: str
    changes: list[str] = Field(default_factory=list)
    opponent_actions: list[str] = Field(default_factory=list)
    commentary: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    engine_error: Optional[str] = Field(None, description="Engine rejection code, e.g. INSUFFICIENT_MANA")
    winner: Optional[str] = None
    state: Optional[BattleStateResponse] = None


class DeckValidationRequest(BaseModel):
    card_ids: list[str]


class DeckValidationResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


class TipResponse(BaseModel):
    session_id: str
    tip: str


# =============================================================================
# Misc
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    commentary_enabled: bool = False
