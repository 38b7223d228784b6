"""
FastAPI Application - REST API for battle clients.

Endpoints:
    GET    /api/v1/champions                   List champions
    GET    /api/v1/cards                       List cards
    POST   /api/v1/decks/validate              Validate a deck
    POST   /api/v1/battles                     Start a battle (local or online)
    GET    /api/v1/battles                     List active battles
    GET    /api/v1/battles/{id}                Get battle state
    DELETE /api/v1/battles/{id}                End battle
    POST   /api/v1/battles/{id}/intents        Submit a player intent
    GET    /api/v1/battles/{id}/tip            Tactical tip for the current hand
    WS     /api/v1/battles/{id}/ws             Real-time state updates
    WS     /api/v1/rooms/{room_id}/ws          Two-participant peer message relay

Online battles:
    The host creates a battle with mode=online (role=host) and shares its
    session id. The joiner creates one with role=join and host_session_id.
    Each side then drives its own session; both update together.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import json

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .service import APIService, SessionNotFoundError
from .schemas import (
    BattleStateResponse,
    CardInfo,
    ChampionInfo,
    CreateBattleRequest,
    DeckValidationRequest,
    DeckValidationResponse,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    IntentRequest,
    SessionListResponse,
    TipResponse,
    TurnResultResponse,
)
from ..catalog import CatalogError, DeckValidationError
from ..commentary import CommentaryService
from ..config import ALLOWED_ORIGINS, FATEBOUND_ENV
from ..peer import PeerProtocolError, encode_message, parse_message

API_VERSION = "1.0.0"
ROOM_CAPACITY = 2


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Fatebound Battle API",
        description="""
Fatebound: Duel of Realms - two-champion card battles.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Battle does not exist |
| `UNKNOWN_CHAMPION` | Champion id not in catalog |
| `INVALID_DECK` | Deck is not 8 distinct known cards |
| `LOBBY_NOT_FOUND` | No host waiting under that id |
| `INTENT_REJECTED` | Engine refused the intent |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(commentary=CommentaryService.from_env())

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}
    relay_rooms: dict[str, list[WebSocket]] = {}
    app.state.ws_connections = ws_connections
    app.state.relay_rooms = relay_rooms

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def session_not_found(session_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.SESSION_NOT_FOUND,
            f"Battle {session_id} not found",
            status_code=404,
        )

    def drop_connection(session_id: str, websocket: WebSocket):
        """Forget a battle socket; the session entry goes with its last socket."""
        connections = ws_connections.get(session_id, [])
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            ws_connections.pop(session_id, None)

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                drop_connection(session_id, ws)

    async def broadcast_state(session_id: str):
        try:
            state = api_service.battle_state(session_id)
        except SessionNotFoundError:
            return
        await broadcast_to_session(session_id, {
            "type": "state_update",
            "payload": state.model_dump(mode="json"),
        })
        if state.winner:
            await broadcast_to_session(session_id, {
                "type": "game_over",
                "payload": {"winner": state.winner},
            })

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/champions",
        response_model=list[ChampionInfo],
        tags=["Catalog"],
        summary="List champions",
    )
    async def list_champions() -> list[ChampionInfo]:
        return api_service.list_champions()

    @app.get(
        "/api/v1/cards",
        response_model=list[CardInfo],
        tags=["Catalog"],
        summary="List cards",
    )
    async def list_cards() -> list[CardInfo]:
        return api_service.list_cards()

    @app.post(
        "/api/v1/decks/validate",
        response_model=DeckValidationResponse,
        tags=["Catalog"],
        summary="Check a deck against the deck rules",
    )
    async def validate_deck(request: DeckValidationRequest) -> DeckValidationResponse:
        return api_service.validate_deck(request.card_ids)

    # =========================================================================
    # Battle Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/battles",
        response_model=BattleStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid champion, deck or personality"},
            404: {"model": ErrorResponse, "description": "Lobby not found"},
        },
        tags=["Battles"],
        summary="Start a battle",
    )
    async def create_battle(request: CreateBattleRequest) -> Union[BattleStateResponse, JSONResponse]:
        """
        Start a battle.

        `mode=local` plays against the scripted opponent. `mode=online`
        creates (role=host) or joins (role=join) an online lobby.
        """
        try:
            response = api_service.create_battle(request)
        except DeckValidationError as e:
            return make_error_response(ErrorCode.INVALID_DECK, str(e), details={"errors": e.errors})
        except CatalogError as e:
            return make_error_response(ErrorCode.UNKNOWN_CHAMPION, str(e))
        except KeyError as e:
            return make_error_response(
                ErrorCode.LOBBY_NOT_FOUND,
                f"No host waiting under {e.args[0]}",
                status_code=404,
            )
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

        host_id = api_service.peer_session_id(response.session_id)
        if host_id:
            await broadcast_state(host_id)
        return response

    @app.get(
        "/api/v1/battles",
        response_model=SessionListResponse,
        tags=["Battles"],
        summary="List active battles",
    )
    async def list_battles() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/battles/{session_id}",
        response_model=BattleStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Get battle state",
    )
    async def get_battle(session_id: str) -> Union[BattleStateResponse, JSONResponse]:
        try:
            return api_service.battle_state(session_id)
        except SessionNotFoundError:
            return session_not_found(session_id)

    @app.delete(
        "/api/v1/battles/{session_id}",
        response_model=EndSessionResponse,
        tags=["Battles"],
        summary="End a battle",
    )
    async def end_battle(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        peer_id = api_service.peer_session_id(session_id)
        success = api_service.end_session(session_id, reason)
        if peer_id:
            await broadcast_state(peer_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/battles/{session_id}/intents",
        response_model=TurnResultResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Intent rejected by the engine"},
        },
        tags=["Battles"],
        summary="Submit a player intent",
    )
    async def submit_intent(
        session_id: str,
        request: IntentRequest,
    ) -> Union[TurnResultResponse, JSONResponse]:
        """
        Play a card, use the champion ability, or end the turn.

        In local mode the response includes the opponent's whole reply turn.
        Rejected intents leave the battle unchanged and return 409.
        """
        try:
            result = api_service.submit_intent(session_id, request)
        except SessionNotFoundError:
            return session_not_found(session_id)

        if not result.success:
            return make_error_response(
                ErrorCode.INTENT_REJECTED,
                "; ".join(result.errors) or "Intent rejected",
                status_code=409,
                details={"engine_error": result.engine_error},
            )

        await broadcast_state(session_id)
        peer_id = api_service.peer_session_id(session_id)
        if peer_id:
            await broadcast_state(peer_id)
        return result

    @app.get(
        "/api/v1/battles/{session_id}/tip",
        response_model=TipResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Tactical tip for the current hand",
    )
    async def get_tip(session_id: str) -> Union[TipResponse, JSONResponse]:
        try:
            tip = api_service.tactical_tip(session_id)
        except SessionNotFoundError:
            return session_not_found(session_id)
        if tip is None:
            return make_error_response(ErrorCode.VALIDATION_ERROR, "Battle has not started yet", status_code=409)
        return TipResponse(session_id=session_id, tip=tip)

    # =========================================================================
    # WebSockets
    # =========================================================================

    @app.websocket("/api/v1/battles/{session_id}/ws")
    async def battle_websocket(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Battle state changed
        - game_over: A winner was decided
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        ws_connections.setdefault(session_id, []).append(websocket)

        try:
            try:
                state = api_service.battle_state(session_id)
                await websocket.send_json({
                    "type": "state_update",
                    "payload": state.model_dump(mode="json"),
                })
            except SessionNotFoundError:
                await websocket.send_json({
                    "type": "error",
                    "payload": {"message": f"Battle {session_id} not found"},
                })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            pass
        finally:
            drop_connection(session_id, websocket)

    @app.websocket("/api/v1/rooms/{room_id}/ws")
    async def relay_websocket(websocket: WebSocket, room_id: str):
        """
        Relay for two engines running on separate clients.

        Every frame must be a valid peer message (HANDSHAKE, PLAY_CARD,
        USE_ABILITY, END_TURN); it is forwarded to the other participant.
        The relay itself sends:
        - PEER_CONNECTED: both participants are present (the channel is open)
        - PEER_DISCONNECTED: the other participant left
        - ERROR: room full, or a malformed frame (not forwarded)
        """
        await websocket.accept()
        room = relay_rooms.setdefault(room_id, [])
        if len(room) >= ROOM_CAPACITY:
            await websocket.send_json({"type": "ERROR", "payload": {"message": "Room is full"}})
            await websocket.close(code=1008)
            return

        room.append(websocket)
        logger.info(f"Relay room {room_id}: participant joined ({len(room)}/{ROOM_CAPACITY})")
        if len(room) == ROOM_CAPACITY:
            for ws in room:
                await ws.send_json({"type": "PEER_CONNECTED", "payload": {"room_id": room_id}})

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = parse_message(data)
                except PeerProtocolError as e:
                    logger.warning(f"Relay room {room_id}: dropped frame: {e}")
                    await websocket.send_json({"type": "ERROR", "payload": {"message": str(e)}})
                    continue
                for ws in room:
                    if ws is not websocket:
                        await ws.send_json(encode_message(message))
        except WebSocketDisconnect:
            pass
        finally:
            if websocket in room:
                room.remove(websocket)
            for ws in room:
                try:
                    await ws.send_json({"type": "PEER_DISCONNECTED", "payload": {"room_id": room_id}})
                except (WebSocketDisconnect, RuntimeError):
                    logger.debug(f"Relay room {room_id}: participant already gone")
            if not room:
                relay_rooms.pop(room_id, None)
            logger.info(f"Relay room {room_id}: participant left")

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="fatebound-engine",
            version=API_VERSION,
            commentary_enabled=api_service.commentary.enabled,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Fatebound Battle API",
            "version": API_VERSION,
            "environment": FATEBOUND_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn fatebound.api.app:app
app = create_app()
