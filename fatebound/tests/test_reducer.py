"""
Tests for the reducer (state transitions).

Tests:
- Intent validation and rejection codes
- End-turn refresh and turn numbering
- Invariants over a long random battle
"""

import random
from dataclasses import fields

import pytest

from .factories import cards, make_combatant, make_state
from ..bots.policy import BotDecision
from ..engine_core.action import Action, ActionPayload, ErrorCode
from ..engine_core.action_generator import legal_actions, is_legal
from ..engine_core.reducer import apply_action
from ..engine_core.state import HAND_LIMIT, MAX_MANA, Side


class TestValidation:
    """Tests for rejected intents."""

    def test_not_your_turn(self, battle, reducer):
        result = reducer.apply(battle, Action.end_turn(Side.OPPONENT))
        assert not result.success
        assert result.error_code == ErrorCode.NOT_YOUR_TURN
        assert result.new_state is battle

    def test_card_not_in_hand(self, reducer):
        state = make_state(player=make_combatant("c1", hand=cards("n1")))
        result = reducer.apply(state, Action.play_card(Side.PLAYER, "f1"))
        assert result.error_code == ErrorCode.CARD_NOT_IN_HAND

    def test_unaffordable_card_leaves_state_unchanged(self, reducer):
        state = make_state(player=make_combatant("c1", mana=2, hand=cards("f1")))
        result = reducer.apply(state, Action.play_card(Side.PLAYER, "f1"))
        assert result.error_code == ErrorCode.INSUFFICIENT_MANA
        assert result.new_state is state
        assert state.player.hand == cards("f1")
        assert state.player.mana == 2

    def test_ability_insufficient_mana(self, reducer):
        state = make_state(player=make_combatant("c1", mana=2))
        result = reducer.apply(state, Action.use_ability(Side.PLAYER))
        assert result.error_code == ErrorCode.INSUFFICIENT_MANA
        assert result.new_state.opponent.health == 35

    def test_ability_once_per_turn(self, reducer):
        state = make_state(player=make_combatant("c1", mana=6, max_mana=6))
        state = reducer.apply(state, Action.use_ability(Side.PLAYER)).new_state
        result = reducer.apply(state, Action.use_ability(Side.PLAYER))
        assert result.error_code == ErrorCode.ABILITY_ALREADY_USED
        assert result.new_state.player.mana == 3

    def test_game_over_rejects_everything(self, reducer):
        state = make_state(
            player=make_combatant("c1", mana=1, hand=cards("n1")),
            opponent=make_combatant("c2", health=2),
        )
        state = reducer.apply(state, Action.play_card(Side.PLAYER, "n1")).new_state
        result = reducer.apply(state, Action.end_turn(Side.PLAYER))
        assert result.error_code == ErrorCode.GAME_OVER


class TestPlayCard:

    def test_lethal_ends_battle_immediately(self, reducer):
        state = make_state(
            player=make_combatant("c1", mana=1, hand=cards("n1")),
            opponent=make_combatant("c2", health=2),
        )
        result = reducer.apply(state, Action.play_card(Side.PLAYER, "n1"))
        assert result.success
        assert result.new_state.opponent.health == 0
        assert result.new_state.winner is Side.PLAYER
        assert result.new_state.is_over

    def test_action_history_grows_on_success(self, reducer):
        state = make_state(player=make_combatant("c1", mana=1, hand=cards("n1")))
        action = Action.play_card(Side.PLAYER, "n1")
        new_state = reducer.apply(state, action).new_state
        assert new_state.action_history == [action]
        assert state.action_history == []

    def test_history_entries_are_bare_intents(self, battle):
        assert [f.name for f in fields(Action)] == ["action_type", "payload"]
        assert [f.name for f in fields(ActionPayload)] == ["side", "card_id", "card", "remote"]
        assert not {"metadata", "random_seed"} & {f.name for f in fields(battle)}
        assert "confidence" not in {f.name for f in fields(BotDecision)}

    def test_remote_play_skips_hand_check(self, reducer):
        state = make_state(active_side=Side.OPPONENT)
        laser, = cards("t1")
        state = state.with_combatant(Side.OPPONENT, state.opponent._copy_with(mana=2))

        result = reducer.apply(state, Action.remote_play_card(Side.OPPONENT, laser))

        assert result.success
        assert result.new_state.player.health == 26
        assert result.new_state.opponent.graveyard == [laser]
        assert result.new_state.opponent.mana == 0

    def test_remote_play_still_needs_mana(self, reducer):
        state = make_state(active_side=Side.OPPONENT)
        fireball, = cards("f1")
        result = reducer.apply(state, Action.remote_play_card(Side.OPPONENT, fireball))
        assert result.error_code == ErrorCode.INSUFFICIENT_MANA


class TestEndTurn:
    """Tests for the turn state machine."""

    def test_incoming_side_is_refreshed(self, reducer):
        state = make_state(
            player=make_combatant("c1", mana=0, max_mana=1),
            opponent=make_combatant(
                "c2", mana=0, max_mana=1, shield=6, ability_used=True, deck=cards("n1", "n2"),
            ),
        )
        result = reducer.apply(state, Action.end_turn(Side.PLAYER))

        opponent = result.new_state.opponent
        assert result.new_state.active_side is Side.OPPONENT
        assert result.new_state.turn_number == 1
        assert (opponent.mana, opponent.max_mana) == (1, 1)
        assert opponent.shield == 0
        assert not opponent.ability_used
        assert [c.id for c in opponent.hand] == ["n1"]
        assert result.new_state.battle_log[-1] == "Opponent's Turn"

    def test_turn_number_advances_when_first_side_returns(self, reducer):
        state = make_state()
        state = reducer.apply(state, Action.end_turn(Side.PLAYER)).new_state
        result = reducer.apply(state, Action.end_turn(Side.OPPONENT))

        assert result.new_state.turn_number == 2
        assert result.new_state.player.max_mana == 2
        assert result.new_state.player.mana == 2
        assert result.state_changes == ["Turn 2: Player's Turn"]

    def test_mana_caps_at_ten(self, reducer):
        state = make_state(active_side=Side.OPPONENT, turn_number=12)
        state = reducer.apply(state, Action.end_turn(Side.OPPONENT)).new_state
        assert state.turn_number == 13
        assert state.player.max_mana == MAX_MANA

    def test_full_hand_forfeits_draw(self, reducer):
        hand = cards("n1", "n2", "n3", "f1", "f2", "f3")
        state = make_state(opponent=make_combatant("c2", hand=hand, deck=cards("i1")))
        state = reducer.apply(state, Action.end_turn(Side.PLAYER)).new_state
        assert len(state.opponent.hand) == HAND_LIMIT
        assert [c.id for c in state.opponent.deck] == ["i1"]

    def test_empty_deck_draws_nothing(self, reducer):
        state = make_state()
        state = reducer.apply(state, Action.end_turn(Side.PLAYER)).new_state
        assert state.opponent.hand == []

    def test_last_played_card_cleared(self, reducer):
        state = make_state(player=make_combatant("c1", mana=1, hand=cards("n1")))
        state = reducer.apply(state, Action.play_card(Side.PLAYER, "n1")).new_state
        assert state.last_played_card is not None
        state = reducer.apply(state, Action.end_turn(Side.PLAYER)).new_state
        assert state.last_played_card is None


class TestActionGenerator:

    def test_only_affordable_cards(self):
        state = make_state(player=make_combatant("c1", mana=1, hand=cards("n1", "f1", "t3")))
        actions = legal_actions(state)
        assert [a.payload.card_id for a in actions[:-1]] == ["n1", "t3"]
        assert actions[-1].action_type.value == "end_turn"

    def test_ability_listed_when_castable(self):
        state = make_state(player=make_combatant("c1", mana=3, max_mana=3))
        assert [a.action_type.value for a in legal_actions(state)] == ["use_ability", "end_turn"]

    def test_nothing_for_waiting_side(self, battle):
        assert legal_actions(battle, Side.OPPONENT) == []
        assert not is_legal(battle, Action.end_turn(Side.OPPONENT))
        assert is_legal(battle, Action.end_turn(Side.PLAYER))


class TestInvariants:
    """Random play must never break the battle's bounds."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_random_battle_keeps_bounds(self, seed, battle):
        rng = random.Random(seed)
        state = battle
        initial = {
            side: len(state.combatant(side).deck) + len(state.combatant(side).hand)
            for side in Side
        }

        for _ in range(400):
            if state.is_over:
                break
            action = rng.choice(legal_actions(state))
            result = apply_action(state, action)
            assert result.success, result.error
            state = result.new_state

            for side in Side:
                c = state.combatant(side)
                assert 0 <= c.health <= c.max_health
                assert 0 <= c.mana <= MAX_MANA
                assert c.max_mana <= MAX_MANA
                assert c.shield >= 0
                assert len(c.hand) <= HAND_LIMIT
                assert len(c.deck) + len(c.hand) + len(c.graveyard) == initial[side]

            if state.is_over:
                loser = state.combatant(state.winner.other)
                assert loser.health == 0
