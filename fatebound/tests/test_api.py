"""
Tests for API layer.

Tests:
- Catalog endpoints
- Battle lifecycle over HTTP
- Error handling and codes
- WebSocket state updates and the peer relay room
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import IntentRequest
from ..api.service import APIService, SessionNotFoundError
from ..commentary import CommentaryService
from ..peer import encode_message
from ..peer.messages import end_turn, use_ability


@pytest.fixture
def service():
    """A fresh API service without generated commentary."""
    return APIService(commentary=CommentaryService())


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


def start_battle(client, deck_ids, **extra):
    body = {"champion_id": "c1", "deck": deck_ids, "seed": 3, **extra}
    response = client.post("/api/v1/battles", json=body)
    assert response.status_code == 200, response.text
    return response.json()


class TestAPIService:
    """Tests for APIService without HTTP."""

    def test_create_and_get(self, service, deck_ids):
        from ..api.schemas import CreateBattleRequest

        state = service.create_battle(CreateBattleRequest(champion_id="c1", deck=deck_ids, seed=1))

        assert state.status.value == "active"
        assert state.player.champion.name == "Ignis"
        assert len(state.player.hand) == 3
        assert state.opponent.hand == []
        assert state.opponent.hand_count == 3
        assert service.battle_state(state.session_id).session_id == state.session_id

    def test_unknown_session(self, service):
        with pytest.raises(SessionNotFoundError):
            service.battle_state("nonexistent-id")

    def test_end_session(self, service, deck_ids):
        from ..api.schemas import CreateBattleRequest

        state = service.create_battle(CreateBattleRequest(champion_id="c1", deck=deck_ids))
        assert service.end_session(state.session_id)
        assert not service.end_session(state.session_id)
        assert state.session_id not in service.list_sessions()

    def test_rejected_intent_reports_engine_error(self, service, deck_ids):
        from ..api.schemas import CreateBattleRequest

        state = service.create_battle(CreateBattleRequest(champion_id="c1", deck=deck_ids))
        result = service.submit_intent(state.session_id, IntentRequest(type="use_ability"))

        assert not result.success
        assert result.engine_error == "INSUFFICIENT_MANA"


class TestCatalogEndpoints:

    def test_champions(self, client):
        response = client.get("/api/v1/champions")
        assert response.status_code == 200
        names = [c["name"] for c in response.json()]
        assert names == ["Ignis", "Frostbite", "Unit-734", "Sylva"]

    def test_cards(self, client):
        response = client.get("/api/v1/cards")
        assert len(response.json()) == 15

    def test_validate_deck(self, client, deck_ids):
        ok = client.post("/api/v1/decks/validate", json={"card_ids": deck_ids}).json()
        bad = client.post("/api/v1/decks/validate", json={"card_ids": ["n1", "n1"]}).json()
        assert ok == {"valid": True, "errors": []}
        assert not bad["valid"]
        assert "Duplicate card: n1" in bad["errors"]


class TestBattleEndpoints:

    def test_start_local_battle(self, client, deck_ids):
        state = start_battle(client, deck_ids, opponent_champion_id="c4")

        assert state["mode"] == "local"
        assert state["turn_number"] == 1
        assert state["active_side"] == "player"
        assert state["opponent"]["champion"]["name"] == "Sylva"
        assert state["battle_log"] == ["Battle Started!"]
        assert state["legal_intents"][-1] == {"type": "end_turn", "card_id": None}

    def test_end_turn_returns_opponent_reply(self, client, deck_ids):
        state = start_battle(client, deck_ids)

        response = client.post(
            f"/api/v1/battles/{state['session_id']}/intents",
            json={"type": "end_turn"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"]
        assert data["opponent_actions"]
        assert data["state"]["turn_number"] == 2
        assert data["state"]["active_side"] == "player"

    def test_rejected_intent_is_409(self, client, deck_ids):
        state = start_battle(client, deck_ids)

        response = client.post(
            f"/api/v1/battles/{state['session_id']}/intents",
            json={"type": "play_card", "card_id": "zz"},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "INTENT_REJECTED"
        assert body["details"]["engine_error"] == "CARD_NOT_IN_HAND"

    def test_unknown_champion(self, client, deck_ids):
        response = client.post("/api/v1/battles", json={"champion_id": "c9", "deck": deck_ids})
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_CHAMPION"

    def test_invalid_deck(self, client):
        response = client.post("/api/v1/battles", json={"champion_id": "c1", "deck": ["n1"]})
        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_DECK"
        assert body["details"]["errors"]

    def test_unknown_personality(self, client, deck_ids):
        response = client.post(
            "/api/v1/battles",
            json={"champion_id": "c1", "deck": deck_ids, "personality": "reckless"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_missing_battle(self, client):
        response = client.get("/api/v1/battles/nonexistent-id")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

        response = client.post("/api/v1/battles/nonexistent-id/intents", json={"type": "end_turn"})
        assert response.status_code == 404

    def test_tip(self, client, deck_ids):
        state = start_battle(client, deck_ids)
        response = client.get(f"/api/v1/battles/{state['session_id']}/tip")
        assert response.status_code == 200
        assert response.json()["tip"]

    def test_list_and_end(self, client, deck_ids):
        state = start_battle(client, deck_ids)
        listed = client.get("/api/v1/battles").json()
        assert state["session_id"] in listed["sessions"]

        response = client.delete(f"/api/v1/battles/{state['session_id']}")
        assert response.json() == {"success": True, "session_id": state["session_id"]}
        assert client.get(f"/api/v1/battles/{state['session_id']}").status_code == 404


class TestOnlineEndpoints:

    def test_host_and_join(self, client, deck_ids):
        host = start_battle(client, deck_ids, mode="online")
        assert host["status"] == "waiting_peer"
        assert host["lobby_status"] == "WAITING"
        assert host["player"] is None

        joiner = start_battle(
            client, deck_ids, champion_id="c2", mode="online", role="join",
            host_session_id=host["session_id"],
        )
        assert joiner["status"] == "active"
        assert joiner["active_side"] == "opponent"

        host = client.get(f"/api/v1/battles/{host['session_id']}").json()
        assert host["lobby_status"] == "CONNECTED"
        assert host["opponent"]["champion"]["name"] == "Frostbite"

        response = client.post(f"/api/v1/battles/{host['session_id']}/intents", json={"type": "end_turn"})
        assert response.json()["loop_state"] == "waiting_remote"

        joiner = client.get(f"/api/v1/battles/{joiner['session_id']}").json()
        assert joiner["active_side"] == "player"

    def test_join_missing_lobby(self, client, deck_ids):
        response = client.post(
            "/api/v1/battles",
            json={
                "champion_id": "c2", "deck": deck_ids, "mode": "online",
                "role": "join", "host_session_id": "nope",
            },
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "LOBBY_NOT_FOUND"

    def test_tip_before_battle(self, client, deck_ids):
        host = start_battle(client, deck_ids, mode="online")
        response = client.get(f"/api/v1/battles/{host['session_id']}/tip")
        assert response.status_code == 409


class TestWebSockets:

    def test_battle_ws_initial_state_and_ping(self, client, deck_ids):
        state = start_battle(client, deck_ids)

        with client.websocket_connect(f"/api/v1/battles/{state['session_id']}/ws") as ws:
            first = ws.receive_json()
            assert first["type"] == "state_update"
            assert first["payload"]["session_id"] == state["session_id"]

            ws.send_text('{"type": "ping"}')
            assert ws.receive_json() == {"type": "pong"}

            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

    def test_battle_ws_registry_emptied_on_close(self, client, deck_ids):
        session_id = start_battle(client, deck_ids)["session_id"]
        connections = client.app.state.ws_connections

        with client.websocket_connect(f"/api/v1/battles/{session_id}/ws") as ws:
            ws.receive_json()
            assert len(connections[session_id]) == 1

        assert session_id not in connections

    def test_battle_ws_unknown_session(self, client):
        with client.websocket_connect("/api/v1/battles/nope/ws") as ws:
            assert ws.receive_json()["type"] == "error"

    def test_relay_room(self, service):
        with TestClient(create_app(service)) as client:
            with client.websocket_connect("/api/v1/rooms/r1/ws") as a:
                with client.websocket_connect("/api/v1/rooms/r1/ws") as b:
                    assert a.receive_json()["type"] == "PEER_CONNECTED"
                    assert b.receive_json()["type"] == "PEER_CONNECTED"

                    a.send_json(encode_message(end_turn()))
                    assert b.receive_json() == {"type": "END_TURN", "payload": {}}

                    b.send_json(encode_message(use_ability()))
                    assert a.receive_json()["type"] == "USE_ABILITY"

                    a.send_text('{"type": "SURRENDER"}')
                    assert a.receive_json()["type"] == "ERROR"

                assert a.receive_json()["type"] == "PEER_DISCONNECTED"

    def test_relay_room_full(self, service):
        with TestClient(create_app(service)) as client:
            with client.websocket_connect("/api/v1/rooms/r2/ws"):
                with client.websocket_connect("/api/v1/rooms/r2/ws") as b:
                    b.receive_json()
                    with client.websocket_connect("/api/v1/rooms/r2/ws") as c:
                        message = c.receive_json()
                        assert message["type"] == "ERROR"
                        assert message["payload"]["message"] == "Room is full"
