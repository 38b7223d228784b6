"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their battle loops
3. Formats battle snapshots for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from loguru import logger

from .schemas import (
    AbilityInfo,
    BattleModeName,
    BattleStateResponse,
    CardInfo,
    ChampionInfo,
    CombatantInfo,
    CreateBattleRequest,
    DeckValidationResponse,
    EffectInfo,
    IntentInfo,
    IntentRequest,
    IntentType,
    PeerRoleName,
    SessionStatus,
    TurnResultResponse,
)
from ..catalog import CARDS, CHAMPIONS, CardDefinition, Champion, validate_deck
from ..commentary import CommentaryService
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.state import CombatantState, Side
from ..peer import PeerRole
from ..session import BattleLoop, Session, SessionManager


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown."""


_INTENT_TYPES = {
    ActionType.PLAY_CARD: IntentType.PLAY_CARD,
    ActionType.USE_ABILITY: IntentType.USE_ABILITY,
    ActionType.END_TURN: IntentType.END_TURN,
}


@dataclass
class APIService:
    """
    Main API service for battle clients.

    Usage:
        service = APIService()
        state = service.create_battle(CreateBattleRequest(champion_id="c1", deck=[...]))
        result = service.submit_intent(state.session_id, IntentRequest(type="end_turn"))
    """
    commentary: CommentaryService = field(default_factory=CommentaryService)
    session_manager: SessionManager = None  # type: ignore

    # Battle loops per session
    _loops: dict[str, BattleLoop] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(commentary=self.commentary)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def list_champions(self) -> list[ChampionInfo]:
        return [champion_info(c) for c in CHAMPIONS]

    def list_cards(self) -> list[CardInfo]:
        return [card_info(c) for c in CARDS]

    def validate_deck(self, card_ids: list[str]) -> DeckValidationResponse:
        errors = validate_deck(card_ids)
        return DeckValidationResponse(valid=not errors, errors=errors)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def create_battle(self, request: CreateBattleRequest) -> BattleStateResponse:
        """
        Create a session.

        Raises:
            CatalogError: unknown champion
            DeckValidationError: invalid deck
            KeyError: joining a lobby that does not exist
            ValueError: unknown personality
        """
        manager = self.session_manager
        if request.mode == BattleModeName.LOCAL:
            session = manager.create_local_session(
                request.champion_id,
                request.deck,
                opponent_champion_id=request.opponent_champion_id,
                personality=request.personality,
                random_seed=request.seed,
            )
        elif request.role == PeerRoleName.JOIN:
            if not request.host_session_id:
                raise KeyError("host_session_id")
            session = manager.join_online_session(
                request.host_session_id,
                request.champion_id,
                request.deck,
                random_seed=request.seed,
            )
        else:
            session = manager.create_online_session(
                request.champion_id,
                request.deck,
                role=PeerRole.HOST,
                random_seed=request.seed,
            )

        self._loops[session.session_id] = BattleLoop(session, self.commentary)
        return self.battle_state(session.session_id)

    def get_session(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def battle_state(self, session_id: str) -> BattleStateResponse:
        session = self.get_session(session_id)
        session.refresh_state()
        return battle_response(session)

    def submit_intent(self, session_id: str, request: IntentRequest) -> TurnResultResponse:
        """Apply one player intent."""
        session = self.get_session(session_id)
        loop = self._loop(session)
        result = loop.submit(intent_to_action(request))
        if not result.success:
            logger.debug(f"Session {session_id}: intent {request.type.value} rejected: {result.errors}")

        return TurnResultResponse(
            session_id=session_id,
            success=result.success,
            loop_state=result.loop_state.value,
            changes=result.changes,
            opponent_actions=result.opponent_actions,
            commentary=result.commentary,
            errors=result.errors,
            engine_error=result.error_code.value if result.error_code else None,
            winner=result.winner.value if result.winner else None,
            state=battle_response(session),
        )

    def tactical_tip(self, session_id: str) -> str | None:
        session = self.get_session(session_id)
        return self._loop(session).tactical_tip()

    def peer_session_id(self, session_id: str) -> str | None:
        """The in-process opponent session of an online battle, if any."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            return None
        return session.metadata.get("peer_session_id")

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        self._loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason) is not None

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def _loop(self, session: Session) -> BattleLoop:
        loop = self._loops.get(session.session_id)
        if loop is None:
            loop = BattleLoop(session, self.commentary)
            self._loops[session.session_id] = loop
        return loop


# =============================================================================
# Conversion Helpers
# =============================================================================

def card_info(card: CardDefinition) -> CardInfo:
    return CardInfo.model_validate(card.to_dict())


def champion_info(champion: Champion) -> ChampionInfo:
    ability = champion.ability
    return ChampionInfo(
        id=champion.id,
        name=champion.name,
        title=champion.title,
        realm=champion.realm.value,
        max_health=champion.max_health,
        ability=AbilityInfo(
            name=ability.name,
            description=ability.description,
            cost=ability.cost,
            effect=EffectInfo(kind=ability.effect.kind.value, amount=ability.effect.amount),
        ),
        image=champion.image,
        description=champion.description,
    )


def combatant_info(combatant: CombatantState, reveal_hand: bool) -> CombatantInfo:
    return CombatantInfo(
        champion=champion_info(combatant.champion),
        health=combatant.health,
        max_health=combatant.max_health,
        mana=combatant.mana,
        max_mana=combatant.max_mana,
        shield=combatant.shield,
        ability_used=combatant.ability_used,
        deck_count=len(combatant.deck),
        hand_count=len(combatant.hand),
        hand=[card_info(c) for c in combatant.hand] if reveal_hand else [],
        graveyard=[card_info(c) for c in combatant.graveyard],
    )


def battle_response(session: Session) -> BattleStateResponse:
    """Snapshot of a session from the player's point of view."""
    response = BattleStateResponse(
        session_id=session.session_id,
        mode=BattleModeName(session.mode.value),
        status=SessionStatus(session.state.value),
        commentary=list(session.commentary_log),
    )
    if session.peer is not None:
        response.lobby_status = session.peer.status.value
        response.lobby_error = session.peer.error

    battle = session.battle_state
    if battle is None:
        return response

    response.turn_number = battle.turn_number
    response.active_side = battle.active_side.value
    response.phase = battle.phase.value
    response.winner = battle.winner.value if battle.winner else None
    response.player = combatant_info(battle.player, reveal_hand=True)
    response.opponent = combatant_info(battle.opponent, reveal_hand=False)
    response.battle_log = list(battle.battle_log)
    response.last_played_card = card_info(battle.last_played_card) if battle.last_played_card else None
    response.legal_intents = [
        IntentInfo(type=_INTENT_TYPES[a.action_type], card_id=a.payload.card_id)
        for a in legal_actions(battle, Side.PLAYER)
    ]
    return response


def intent_to_action(request: IntentRequest) -> Action:
    """Player-side Action for an intent request."""
    if request.type == IntentType.PLAY_CARD:
        return Action.play_card(Side.PLAYER, request.card_id or "")
    if request.type == IntentType.USE_ABILITY:
        return Action.use_ability(Side.PLAYER)
    return Action.end_turn(Side.PLAYER)
