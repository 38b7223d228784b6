"""
Action Generator - Generates all legal intents from a battle state.

The action generator is used by:
1. Bots to enumerate possible moves
2. The API to show available intents
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import BattleState, Side
from .action import Action


@dataclass
class ActionGenerator:
    """Generates legal intents for one side of a battle."""

    include_end_turn: bool = True

    def generate(self, state: BattleState, side: Side | None = None) -> list[Action]:
        """
        Generate all legal intents for `side` (default: the active side).

        Order: affordable cards in hand order, then the ability, then
        end turn. Nothing is legal once the battle is over or when it is
        not `side`'s turn.
        """
        side = side or state.active_side
        if state.is_over or side is not state.active_side:
            return []

        actions = []
        actions.extend(self.playable_cards(state, side))
        if state.combatant(side).can_use_ability:
            actions.append(Action.use_ability(side))
        if self.include_end_turn:
            actions.append(Action.end_turn(side))
        return actions

    def playable_cards(self, state: BattleState, side: Side) -> list[Action]:
        """One play intent per affordable card in hand."""
        actor = state.combatant(side)
        return [
            Action.play_card(side, card.id)
            for card in actor.hand
            if actor.can_afford(card.cost)
        ]


def legal_actions(state: BattleState, side: Side | None = None) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator()
    return generator.generate(state, side)


def is_legal(state: BattleState, action: Action) -> bool:
    """Check if a specific local intent is legal."""
    for a in legal_actions(state, action.side):
        if (
            a.action_type == action.action_type
            and a.payload.card_id == action.payload.card_id
        ):
            return True
    return False
