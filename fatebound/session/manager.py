"""
Session Manager - Creates and manages battle sessions.

LIFECYCLE:
1. A client picks a champion and an 8-card deck
2. A session is created (in-memory only):
   - LOCAL: against the scripted opponent
   - ONLINE: against a remote human through PeerSync
3. Intents flow through the session's BattleLoop
4. The battle ends -> the session is kept for review until it is ended
   or goes stale

PERSISTENCE RULES:
- No database; sessions live only in this process
- A session's battle state is discarded when the session ends
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import random
import time
import uuid

from loguru import logger

from ..bots import OpponentBot, get_personality
from ..catalog import (
    CatalogError,
    Champion,
    build_deck,
    get_champion_by_id,
)
from ..commentary import CommentaryService
from ..config import SESSION_TTL_SECONDS
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_battle
from ..engine_core.state import BattleState, Side
from ..peer import LocalChannel, LobbyStatus, PeerChannel, PeerRole, PeerSync


class BattleMode(Enum):
    """Who drives the opponent side."""
    LOCAL = "local"  # Scripted opponent
    ONLINE = "online"  # Remote human


class SessionState(Enum):
    """State of a battle session."""
    WAITING_PEER = "waiting_peer"  # Online lobby, no handshake yet
    ACTIVE = "active"  # Battle in progress
    GAME_OVER = "game_over"  # Winner decided
    DISCONNECTED = "disconnected"  # Online peer lost mid-battle
    ABANDONED = "abandoned"  # Ended before a winner


@dataclass
class Session:
    """
    An ephemeral battle session.

    Contains:
    - The battle (owned directly in LOCAL mode, by PeerSync in ONLINE mode)
    - The opponent bot (LOCAL mode)
    - Commentary lines produced so far
    """
    session_id: str
    mode: BattleMode
    champion: Champion
    created_at: float
    last_active: float = 0.0

    state: SessionState = SessionState.ACTIVE
    battle: BattleState | None = None
    reducer: Reducer = field(default_factory=Reducer)

    bot: OpponentBot | None = None
    peer: PeerSync | None = None

    commentary_log: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def battle_state(self) -> BattleState | None:
        """Current battle; in ONLINE mode this is the peer engine's state."""
        if self.peer is not None:
            return self.peer.state
        return self.battle

    def is_active(self) -> bool:
        """Check if session still accepts intents (or is about to)."""
        return self.state in {SessionState.WAITING_PEER, SessionState.ACTIVE}

    def is_player_turn(self) -> bool:
        battle = self.battle_state
        return battle is not None and not battle.is_over and battle.active_side is Side.PLAYER

    def touch(self) -> None:
        self.last_active = time.time()

    def refresh_state(self) -> SessionState:
        """Derive the session state from the battle and peer status."""
        if self.state == SessionState.ABANDONED:
            return self.state
        battle = self.battle_state
        if battle is not None and battle.is_over:
            self.state = SessionState.GAME_OVER
        elif self.peer is not None and self.peer.status == LobbyStatus.DISCONNECTED:
            self.state = SessionState.DISCONNECTED
        elif battle is None:
            self.state = SessionState.WAITING_PEER
        else:
            self.state = SessionState.ACTIVE
        return self.state


class SessionManager:
    """
    Manages battle sessions.

    Responsibilities:
    - Create local and online sessions
    - Pair online sessions hosted in this process
    - Clean up ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        commentary: CommentaryService | None = None,
        session_ttl: float = SESSION_TTL_SECONDS,
    ):
        self._sessions: dict[str, Session] = {}
        self.commentary = commentary or CommentaryService()
        self.session_ttl = session_ttl

    def create_local_session(
        self,
        champion_id: str,
        deck_ids: list[str],
        opponent_champion_id: str | None = None,
        personality: str = "balanced",
        random_seed: int | None = None,
    ) -> Session:
        """
        Create a battle against the scripted opponent.

        Raises:
            CatalogError: unknown champion
            DeckValidationError: invalid deck
            ValueError: unknown personality
        """
        champion = self._champion(champion_id)
        deck = build_deck(deck_ids)
        opponent_champion = (
            self._champion(opponent_champion_id) if opponent_champion_id else None
        )
        bot_personality = get_personality(personality)

        session_id = str(uuid.uuid4())
        battle = create_battle(
            champion,
            deck,
            opponent_champion=opponent_champion,
            random_seed=random_seed,
            battle_id=session_id,
        )
        now = time.time()
        session = Session(
            session_id=session_id,
            mode=BattleMode.LOCAL,
            champion=champion,
            created_at=now,
            last_active=now,
            battle=battle,
            bot=OpponentBot(
                side=Side.OPPONENT,
                personality=bot_personality,
                rng=random.Random(random_seed),
            ),
            metadata={"personality": bot_personality.name},
        )
        self._sessions[session_id] = session
        logger.info(f"Local session {session_id} created ({champion.name})")
        return session

    def create_online_session(
        self,
        champion_id: str,
        deck_ids: list[str],
        role: PeerRole = PeerRole.HOST,
        channel: PeerChannel | None = None,
        random_seed: int | None = None,
    ) -> Session:
        """
        Create one side of an online battle.

        A host without a channel waits in the lobby; pair it later with
        join_online_session() or connect its PeerSync to a channel.
        """
        champion = self._champion(champion_id)
        deck = build_deck(deck_ids)

        session_id = str(uuid.uuid4())
        peer = PeerSync(champion=champion, deck=deck, role=role, random_seed=random_seed)
        now = time.time()
        session = Session(
            session_id=session_id,
            mode=BattleMode.ONLINE,
            champion=champion,
            created_at=now,
            last_active=now,
            state=SessionState.WAITING_PEER,
            peer=peer,
        )
        if channel is not None:
            peer.connect(channel)
        elif role == PeerRole.HOST:
            peer.listen()

        self._sessions[session_id] = session
        session.refresh_state()
        logger.info(f"Online session {session_id} created as {role.value} ({champion.name})")
        return session

    def join_online_session(
        self,
        host_session_id: str,
        champion_id: str,
        deck_ids: list[str],
        random_seed: int | None = None,
    ) -> Session:
        """
        Join a host waiting in this process over an in-memory channel.

        Raises:
            KeyError: no waiting host with that id
        """
        host = self._sessions.get(host_session_id)
        if (
            host is None
            or host.peer is None
            or not host.peer.is_host
            or host.peer.status != LobbyStatus.WAITING
        ):
            raise KeyError(host_session_id)

        host_end, join_end = LocalChannel.pair()
        host.peer.connect(host_end)
        session = self.create_online_session(
            champion_id,
            deck_ids,
            role=PeerRole.JOIN,
            channel=join_end,
            random_seed=random_seed,
        )
        host_end.open()

        host.refresh_state()
        session.refresh_state()
        host.metadata["peer_session_id"] = session.session_id
        session.metadata["peer_session_id"] = host.session_id
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and drop its battle.

        Online sessions close their channel, which the remote side sees
        as a disconnect.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        battle = session.battle_state
        if reason == "completed" and battle is not None and battle.is_over:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED

        if session.peer is not None and session.peer.channel is not None:
            session.peer.channel.close()
        session.battle = None
        logger.info(f"Session {session_id} ended ({reason})")
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: float | None = None) -> int:
        """
        Remove sessions idle for longer than max_age_seconds.

        Returns how many were removed.
        """
        max_age = self.session_ttl if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

    def _champion(self, champion_id: str) -> Champion:
        champion = get_champion_by_id(champion_id)
        if champion is None:
            raise CatalogError(f"Unknown champion: {champion_id}")
        return champion
