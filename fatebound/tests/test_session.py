"""
Tests for sessions and the battle loop.

Tests:
- Local and online session creation
- Opponent turns run after the player ends the turn
- Session end and stale cleanup
"""

import time

import pytest

from ..catalog import CatalogError, DeckValidationError, get_card_by_id
from ..engine_core.action import Action, ErrorCode
from ..engine_core.state import Side
from ..peer import LobbyStatus
from ..session import BattleLoop, BattleMode, LoopState, SessionManager, SessionState


@pytest.fixture
def manager(offline_commentary):
    return SessionManager(commentary=offline_commentary)


class TestLocalSession:

    def test_create(self, manager, deck_ids):
        session = manager.create_local_session("c1", deck_ids, opponent_champion_id="c3", random_seed=5)
        assert session.mode == BattleMode.LOCAL
        assert session.state == SessionState.ACTIVE
        assert session.battle.opponent.champion.name == "Unit-734"
        assert session.battle.battle_id == session.session_id
        assert manager.get_session(session.session_id) is session

    def test_unknown_champion(self, manager, deck_ids):
        with pytest.raises(CatalogError):
            manager.create_local_session("c9", deck_ids)

    def test_invalid_deck(self, manager):
        with pytest.raises(DeckValidationError):
            manager.create_local_session("c1", ["n1", "n1"])

    def test_unknown_personality(self, manager, deck_ids):
        with pytest.raises(ValueError):
            manager.create_local_session("c1", deck_ids, personality="reckless")


class TestBattleLoop:

    def test_end_turn_runs_opponent(self, manager, deck_ids, offline_commentary):
        session = manager.create_local_session("c1", deck_ids, random_seed=5)
        loop = BattleLoop(session, offline_commentary)

        result = loop.submit(Action.end_turn(Side.PLAYER))

        assert result.success
        assert result.opponent_actions
        assert result.loop_state in (LoopState.WAITING_PLAYER, LoopState.GAME_OVER)
        assert session.battle.active_side is Side.PLAYER
        assert session.battle.turn_number == 2

    def test_card_play_gets_commentary(self, manager, deck_ids, offline_commentary):
        session = manager.create_local_session("c1", deck_ids, random_seed=5)
        loop = BattleLoop(session, offline_commentary)
        strike = get_card_by_id("n1")
        session.battle = session.battle.with_combatant(
            Side.PLAYER, session.battle.player._copy_with(hand=[strike], mana=1),
        )

        result = loop.submit(Action.play_card(Side.PLAYER, "n1"))

        assert result.success
        assert result.commentary == ["You played Quick Strike!"]
        assert session.commentary_log == result.commentary

    def test_rejected_intent(self, manager, deck_ids):
        session = manager.create_local_session("c1", deck_ids, random_seed=5)
        before = session.battle
        result = BattleLoop(session).submit(Action.play_card(Side.PLAYER, "zz"))
        assert not result.success
        assert result.error_code == ErrorCode.CARD_NOT_IN_HAND
        assert session.battle is before

    def test_opponent_side_refused(self, manager, deck_ids):
        session = manager.create_local_session("c1", deck_ids, random_seed=5)
        result = BattleLoop(session).submit(Action.end_turn(Side.OPPONENT))
        assert result.error_code == ErrorCode.NOT_YOUR_TURN

    def test_lethal_ends_session(self, manager, deck_ids):
        session = manager.create_local_session("c1", deck_ids, random_seed=11)
        battle = session.battle
        battle = battle.with_combatant(Side.PLAYER, battle.player._copy_with(hand=[get_card_by_id("n1")], mana=1))
        session.battle = battle.with_combatant(Side.OPPONENT, battle.opponent._copy_with(health=2))
        loop = BattleLoop(session)

        result = loop.submit(Action.play_card(Side.PLAYER, "n1"))

        assert result.winner is Side.PLAYER
        assert result.opponent_actions == []
        assert session.state == SessionState.GAME_OVER
        assert loop.loop_state == LoopState.GAME_OVER


class TestOnlineSession:

    def test_host_waits(self, manager, deck_ids):
        host = manager.create_online_session("c1", deck_ids)
        assert host.state == SessionState.WAITING_PEER
        assert host.peer.status == LobbyStatus.WAITING
        assert host.battle_state is None
        assert BattleLoop(host).loop_state == LoopState.WAITING_REMOTE

    def test_join_pairs_sessions(self, manager, deck_ids):
        host = manager.create_online_session("c1", deck_ids, random_seed=1)
        joiner = manager.join_online_session(host.session_id, "c2", deck_ids, random_seed=2)

        assert host.state == SessionState.ACTIVE
        assert joiner.state == SessionState.ACTIVE
        assert host.metadata["peer_session_id"] == joiner.session_id
        assert host.is_player_turn()
        assert not joiner.is_player_turn()

    def test_intent_reaches_other_session(self, manager, deck_ids):
        host = manager.create_online_session("c1", deck_ids, random_seed=1)
        joiner = manager.join_online_session(host.session_id, "c2", deck_ids, random_seed=2)

        result = BattleLoop(host).submit(Action.end_turn(Side.PLAYER))

        assert result.success
        assert result.loop_state == LoopState.WAITING_REMOTE
        assert joiner.is_player_turn()

    def test_join_unknown_lobby(self, manager, deck_ids):
        with pytest.raises(KeyError):
            manager.join_online_session("nope", "c2", deck_ids)

    def test_lobby_taken_once(self, manager, deck_ids):
        host = manager.create_online_session("c1", deck_ids)
        manager.join_online_session(host.session_id, "c2", deck_ids)
        with pytest.raises(KeyError):
            manager.join_online_session(host.session_id, "c3", deck_ids)

    def test_ending_one_side_disconnects_other(self, manager, deck_ids):
        host = manager.create_online_session("c1", deck_ids)
        joiner = manager.join_online_session(host.session_id, "c2", deck_ids)

        manager.end_session(host.session_id, "user_ended")

        assert host.state == SessionState.ABANDONED
        assert joiner.refresh_state() == SessionState.DISCONNECTED


class TestSessionLifecycle:

    def test_end_and_list(self, manager, deck_ids):
        a = manager.create_local_session("c1", deck_ids)
        b = manager.create_local_session("c2", deck_ids)
        assert set(manager.list_active_sessions()) == {a.session_id, b.session_id}

        ended = manager.end_session(a.session_id)
        assert ended.state == SessionState.ABANDONED
        assert manager.list_active_sessions() == [b.session_id]
        assert manager.end_session(a.session_id) is None

    def test_cleanup_stale(self, manager, deck_ids):
        stale = manager.create_local_session("c1", deck_ids)
        fresh = manager.create_local_session("c2", deck_ids)
        stale.last_active = time.time() - 7200

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh
