"""
Action System - Player intents, payloads, and results.

There are exactly three intents:
1. Play a card from hand
2. Use the champion ability
3. End the turn

All state changes flow through actions. Human clicks, opponent bot
decisions and relayed peer messages all become Actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Side
from ..catalog.cards import CardDefinition


class ActionType(Enum):
    """Types of intents."""
    PLAY_CARD = "play_card"
    USE_ABILITY = "use_ability"
    END_TURN = "end_turn"


class ErrorCode(Enum):
    """Reasons an intent is rejected."""
    GAME_OVER = "GAME_OVER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    INSUFFICIENT_MANA = "INSUFFICIENT_MANA"
    ABILITY_ALREADY_USED = "ABILITY_ALREADY_USED"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"
    NOT_CONNECTED = "NOT_CONNECTED"


@dataclass
class ActionPayload:
    """
    Payload for an action.

    `card` is only set for remote plays: a peer relays the card itself
    because its hand is not mirrored locally.
    """
    side: Side
    card_id: str | None = None
    card: CardDefinition | None = None
    remote: bool = False


@dataclass
class Action:
    """
    A complete intent to be applied to the battle state.

    Actions are:
    - Logged for replay
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload

    @property
    def side(self) -> Side:
        return self.payload.side

    @classmethod
    def play_card(cls, side: Side, card_id: str) -> Action:
        """Factory for playing a card from hand."""
        return cls(
            action_type=ActionType.PLAY_CARD,
            payload=ActionPayload(side=side, card_id=card_id),
        )

    @classmethod
    def remote_play_card(cls, side: Side, card: CardDefinition) -> Action:
        """Factory for a card play relayed from a peer."""
        return cls(
            action_type=ActionType.PLAY_CARD,
            payload=ActionPayload(side=side, card_id=card.id, card=card, remote=True),
        )

    @classmethod
    def use_ability(cls, side: Side, remote: bool = False) -> Action:
        """Factory for an ability cast."""
        return cls(
            action_type=ActionType.USE_ABILITY,
            payload=ActionPayload(side=side, remote=remote),
        )

    @classmethod
    def end_turn(cls, side: Side, remote: bool = False) -> Action:
        """Factory for ending the turn."""
        return cls(
            action_type=ActionType.END_TURN,
            payload=ActionPayload(side=side, remote=remote),
        )

    def describe(self) -> str:
        """Short human-readable form for logs."""
        if self.action_type == ActionType.PLAY_CARD:
            return f"{self.side.value}: play {self.payload.card_id}"
        return f"{self.side.value}: {self.action_type.value}"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - The resulting state (the unchanged input state on rejection)
    - Error and error code (if rejected)
    - Human-readable changes (for the battle log / UI)
    """
    success: bool
    new_state: Any | None = None  # BattleState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def rejected(cls, state: Any, error: str, error_code: ErrorCode) -> ActionResult:
        """Create a rejection that hands back the untouched state."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
