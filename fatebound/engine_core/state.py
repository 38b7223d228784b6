"""
Battle State - The two combatants plus turn bookkeeping.

Design principles:
- Immutable-friendly: all mutations return new state
- Explicit: the state is passed to and returned from every intent handler
- Serializable: can be snapshotted for the presentation layer
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
from copy import deepcopy
from enum import Enum

from ..catalog.cards import CardDefinition
from ..catalog.champions import Champion


HAND_LIMIT = 6
MAX_MANA = 10
OPENING_HAND = 3
STARTING_MANA = 1


class Side(Enum):
    """The two sides of a battle, from the local engine's point of view."""
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> Side:
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class BattlePhase(Enum):
    """Turn state machine states."""
    PLAYER_TURN = "player_turn"
    OPPONENT_TURN = "opponent_turn"
    GAME_OVER = "game_over"


@dataclass
class CombatantState:
    """
    State for one side of the battle.

    Invariants:
    - 0 <= health <= max_health
    - 0 <= mana <= MAX_MANA, max_mana <= MAX_MANA
    - shield >= 0
    - len(hand) <= HAND_LIMIT
    """
    champion: Champion
    health: int
    max_health: int
    mana: int = STARTING_MANA
    max_mana: int = STARTING_MANA
    deck: list[CardDefinition] = field(default_factory=list)
    hand: list[CardDefinition] = field(default_factory=list)
    graveyard: list[CardDefinition] = field(default_factory=list)
    shield: int = 0
    ability_used: bool = False

    @classmethod
    def create(cls, champion: Champion, deck: list[CardDefinition]) -> CombatantState:
        """Fresh combatant at full health with an already-shuffled deck."""
        return cls(
            champion=champion,
            health=champion.max_health,
            max_health=champion.max_health,
            deck=list(deck),
        )

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def find_in_hand(self, card_id: str) -> CardDefinition | None:
        """First card in hand with the given id."""
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def can_afford(self, cost: int) -> bool:
        return cost <= self.mana

    @property
    def can_use_ability(self) -> bool:
        return not self.ability_used and self.can_afford(self.champion.ability.cost)

    def draw(self, count: int) -> CombatantState:
        """
        Return new state with up to `count` cards drawn.

        Cards come off the front of the deck. A draw is forfeited when the
        deck is empty or the hand is full.
        """
        deck = list(self.deck)
        hand = list(self.hand)
        for _ in range(count):
            if deck and len(hand) < HAND_LIMIT:
                hand.append(deck.pop(0))
        return self._copy_with(deck=deck, hand=hand)

    def _copy_with(self, **kwargs) -> CombatantState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


@dataclass
class BattleState:
    """
    Complete battle state at a point in time.

    All state changes go through the reducer.
    """
    battle_id: str
    player: CombatantState
    opponent: CombatantState

    turn_number: int = 1
    active_side: Side = Side.PLAYER
    first_side: Side = Side.PLAYER  # turn_number increments when control returns here

    battle_log: list[str] = field(default_factory=list)
    winner: Side | None = None

    # Presentation hint only
    last_played_card: CardDefinition | None = None

    # History (for replay and logging)
    action_history: list[Any] = field(default_factory=list)

    @property
    def phase(self) -> BattlePhase:
        if self.winner is not None:
            return BattlePhase.GAME_OVER
        if self.active_side is Side.PLAYER:
            return BattlePhase.PLAYER_TURN
        return BattlePhase.OPPONENT_TURN

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def active(self) -> CombatantState:
        return self.combatant(self.active_side)

    def combatant(self, side: Side) -> CombatantState:
        return self.player if side is Side.PLAYER else self.opponent

    def with_combatant(self, side: Side, combatant: CombatantState) -> BattleState:
        """Return new state with one side replaced."""
        if side is Side.PLAYER:
            return self._copy_with(player=combatant)
        return self._copy_with(opponent=combatant)

    def with_log(self, *lines: str) -> BattleState:
        """Return new state with lines appended to the battle log."""
        return self._copy_with(battle_log=[*self.battle_log, *lines])

    def _copy_with(self, **kwargs) -> BattleState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def clone(self) -> BattleState:
        """Deep copy the state."""
        return deepcopy(self)
