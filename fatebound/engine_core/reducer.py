"""
Reducer - Applies intents to battle state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Invalid intents come back as a failed ActionResult holding the
  untouched state; nothing raises to the caller
- Delegates card and ability effects to EffectResolver
"""

from __future__ import annotations
from dataclasses import dataclass, field

from loguru import logger

from .state import BattleState, Side, MAX_MANA
from .action import Action, ActionType, ActionResult, ErrorCode
from .effect_resolver import EffectResolver


def turn_banner(side: Side) -> str:
    return "Player's Turn" if side is Side.PLAYER else "Opponent's Turn"


@dataclass
class Reducer:
    """
    Reducer applies intents to battle state.

    Stateless - all state is in BattleState.
    """
    resolver: EffectResolver = field(default_factory=EffectResolver)

    def apply(self, state: BattleState, action: Action) -> ActionResult:
        """
        Apply an intent to the battle state.

        Returns ActionResult with new state, or the unchanged state and an
        error code.
        """
        rejection = self._validate_action(state, action)
        if rejection:
            message, code = rejection
            logger.debug(f"Rejected {action.describe()}: {message}")
            return ActionResult.rejected(state, message, code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.rejected(
                state,
                f"No handler for action type: {action.action_type}",
                ErrorCode.NO_HANDLER,
            )

        try:
            result = handler(state, action)
        except Exception as e:
            logger.exception(f"Handler failed for {action.describe()}")
            return ActionResult.rejected(state, str(e), ErrorCode.HANDLER_ERROR)

        if result.success and result.new_state is not None:
            result.new_state = result.new_state._copy_with(
                action_history=[*state.action_history, action],
            )
        return result

    def _validate_action(
        self,
        state: BattleState,
        action: Action,
    ) -> tuple[str, ErrorCode] | None:
        """
        Validate that an intent is legal in the current state.

        Returns (message, code) if invalid, None if valid.
        """
        if state.is_over:
            return "Battle is over - no actions allowed", ErrorCode.GAME_OVER

        if action.side is not state.active_side:
            return f"Not {action.side.value}'s turn", ErrorCode.NOT_YOUR_TURN

        actor = state.combatant(action.side)

        if action.action_type == ActionType.PLAY_CARD:
            card = self._resolve_card(state, action)
            if card is None:
                return f"Card {action.payload.card_id} not in hand", ErrorCode.CARD_NOT_IN_HAND
            if not actor.can_afford(card.cost):
                return (
                    f"{card.name} costs {card.cost}, only {actor.mana} mana available",
                    ErrorCode.INSUFFICIENT_MANA,
                )

        elif action.action_type == ActionType.USE_ABILITY:
            ability = actor.champion.ability
            if actor.ability_used:
                return f"{ability.name} already used this turn", ErrorCode.ABILITY_ALREADY_USED
            if not actor.can_afford(ability.cost):
                return (
                    f"{ability.name} costs {ability.cost}, only {actor.mana} mana available",
                    ErrorCode.INSUFFICIENT_MANA,
                )

        return None

    def _resolve_card(self, state: BattleState, action: Action):
        """The card an intent refers to; remote plays carry their own card."""
        if action.payload.remote and action.payload.card is not None:
            return action.payload.card
        if action.payload.card_id is None:
            return None
        return state.combatant(action.side).find_in_hand(action.payload.card_id)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.USE_ABILITY: self._handle_use_ability,
            ActionType.END_TURN: self._handle_end_turn,
        }
        return handlers.get(action_type)

    def _handle_play_card(self, state: BattleState, action: Action) -> ActionResult:
        card = self._resolve_card(state, action)
        new_state, changes = self.resolver.play_card(state, action.side, card)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_use_ability(self, state: BattleState, action: Action) -> ActionResult:
        new_state, changes = self.resolver.cast_ability(state, action.side)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_end_turn(self, state: BattleState, action: Action) -> ActionResult:
        """
        Pass control to the other side.

        The turn number advances when control returns to the side that
        opened the battle. The incoming side is refreshed: mana refilled to
        min(MAX_MANA, turn), shield dropped, ability re-armed, one card drawn.
        """
        next_side = state.active_side.other
        turn_number = state.turn_number
        if next_side is state.first_side:
            turn_number += 1

        incoming = state.combatant(next_side)
        max_mana = min(MAX_MANA, turn_number)
        incoming = incoming._copy_with(
            max_mana=max_mana,
            mana=max_mana,
            shield=0,
            ability_used=False,
        ).draw(1)

        new_state = state.with_combatant(next_side, incoming)._copy_with(
            active_side=next_side,
            turn_number=turn_number,
            last_played_card=None,
        )
        new_state = new_state.with_log(turn_banner(next_side))

        return ActionResult.success_with_state(
            new_state,
            changes=[f"Turn {turn_number}: {turn_banner(next_side)}"],
        )


def apply_action(state: BattleState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)
