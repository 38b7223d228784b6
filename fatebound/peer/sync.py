"""
Peer Sync - Keeps two independent engines in step over a channel.

Each participant runs its own BattleState with itself as `player` and
the remote human as `opponent`. Local intents are applied locally and,
on success, relayed; relayed intents are replayed on the opponent side
through the same reducer.

Lobby flow:
    host:  IDLE -> WAITING -> CONNECTED
    join:  IDLE -> CONNECTING -> CONNECTED
CONNECTED is reached when the remote handshake arrives; the battle is
created at that moment. A transport failure before that returns to IDLE
with a visible error; during the battle it is fatal (DISCONNECTED).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from loguru import logger

from .channel import ChannelEvent, PeerChannel
from .messages import (
    EndTurnMessage,
    HandshakeMessage,
    PeerProtocolError,
    PlayCardMessage,
    UseAbilityMessage,
    encode_message,
    end_turn,
    handshake,
    parse_message,
    play_card,
    use_ability,
)
from ..catalog.cards import CardDefinition
from ..catalog.champions import Champion
from ..engine_core.action import Action, ActionResult, ActionType, ErrorCode
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_peer_battle
from ..engine_core.state import BattleState, Side


class PeerRole(str, Enum):
    HOST = "host"
    JOIN = "join"


class LobbyStatus(str, Enum):
    IDLE = "IDLE"
    WAITING = "WAITING"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"


@dataclass
class PeerSync:
    """
    One participant of an online battle.

    Usage:
        sync = PeerSync(champion=IGNIS, deck=deck, role=PeerRole.HOST)
        sync.connect(channel)
        ...
        sync.submit(Action.play_card(Side.PLAYER, "n1"))
    """
    champion: Champion
    deck: list[CardDefinition]
    role: PeerRole = PeerRole.HOST
    random_seed: int | None = None
    reducer: Reducer = field(default_factory=Reducer)

    status: LobbyStatus = LobbyStatus.IDLE
    error: str | None = None
    channel: PeerChannel | None = None
    remote_champion: Champion | None = None
    state: BattleState | None = None

    # Called with (state, result) after every applied local or remote intent
    listeners: list[Callable[[BattleState, ActionResult], None]] = field(default_factory=list)

    @property
    def is_host(self) -> bool:
        return self.role == PeerRole.HOST

    @property
    def in_battle(self) -> bool:
        return self.state is not None

    def listen(self) -> None:
        """Host only: advertise the lobby before any channel exists."""
        if not self.is_host:
            raise ValueError("Only the host can wait for a peer")
        self.status = LobbyStatus.WAITING
        self.error = None

    def connect(self, channel: PeerChannel) -> None:
        """Attach to a channel and start the lobby handshake."""
        self.channel = channel
        self.error = None
        self.status = LobbyStatus.WAITING if self.is_host else LobbyStatus.CONNECTING
        channel.on(ChannelEvent.OPEN, self._on_open)
        channel.on(ChannelEvent.DATA, self._on_data)
        channel.on(ChannelEvent.ERROR, self._on_error)
        channel.on(ChannelEvent.CLOSE, self._on_close)
        logger.info(f"Peer {self.role.value}: waiting for connection")
        if channel.is_open:
            self._on_open()

    def submit(self, action: Action) -> ActionResult:
        """
        Apply a local intent, then relay it.

        Only `player` side intents are accepted here; the opponent side is
        driven by the remote peer.
        """
        if self.state is None or self.status != LobbyStatus.CONNECTED:
            return ActionResult(
                success=False,
                new_state=self.state,
                error=f"Not connected (status {self.status.value})",
                error_code=ErrorCode.NOT_CONNECTED,
            )
        if action.side is not Side.PLAYER:
            return ActionResult.rejected(self.state, "Opponent side is remote", ErrorCode.NOT_YOUR_TURN)

        card = None
        if action.action_type == ActionType.PLAY_CARD and action.payload.card_id:
            card = self.state.player.find_in_hand(action.payload.card_id)

        result = self.reducer.apply(self.state, action)
        if not result.success:
            return result

        self.state = result.new_state
        self._send(self._message_for(action, card))
        self._notify(result)
        return result

    def _message_for(self, action: Action, card: CardDefinition | None):
        if action.action_type == ActionType.PLAY_CARD:
            return play_card(card)
        if action.action_type == ActionType.USE_ABILITY:
            return use_ability()
        return end_turn()

    def _send(self, message) -> None:
        if self.channel is None:
            return
        self.channel.send(encode_message(message))

    def _notify(self, result: ActionResult) -> None:
        for listener in list(self.listeners):
            listener(self.state, result)

    # -------------------------------------------------------------------------
    # Channel events
    # -------------------------------------------------------------------------

    def _on_open(self) -> None:
        logger.info(f"Peer {self.role.value}: channel open, sending handshake")
        self._send(handshake(self.champion))

    def _on_data(self, data: Any) -> None:
        try:
            message = parse_message(data)
            if isinstance(message, HandshakeMessage):
                self._on_handshake(message)
            else:
                self._apply_remote(message)
        except PeerProtocolError as e:
            logger.warning(f"Peer {self.role.value}: dropped message: {e}")

    def _on_handshake(self, message: HandshakeMessage) -> None:
        if self.state is not None:
            logger.warning(f"Peer {self.role.value}: duplicate handshake ignored")
            return
        self.remote_champion = message.payload.champion.to_champion()
        self.state = create_peer_battle(
            self.champion,
            self.deck,
            self.remote_champion,
            is_host=self.is_host,
            random_seed=self.random_seed,
        )
        self.status = LobbyStatus.CONNECTED
        self.error = None
        logger.info(f"Peer {self.role.value}: connected, opponent is {self.remote_champion.name}")

    def _apply_remote(self, message) -> None:
        if self.state is None or self.status != LobbyStatus.CONNECTED:
            raise PeerProtocolError(f"{message.type} received before handshake")

        if isinstance(message, PlayCardMessage):
            action = Action.remote_play_card(Side.OPPONENT, message.payload.card.to_card())
        elif isinstance(message, UseAbilityMessage):
            action = Action.use_ability(Side.OPPONENT, remote=True)
        elif isinstance(message, EndTurnMessage):
            action = Action.end_turn(Side.OPPONENT, remote=True)
        else:
            raise PeerProtocolError(f"Unexpected message {message.type}")

        result = self.reducer.apply(self.state, action)
        if not result.success:
            logger.warning(
                f"Peer {self.role.value}: remote {action.describe()} rejected: {result.error}"
            )
            return
        self.state = result.new_state
        self._notify(result)

    def _on_error(self, error: Exception) -> None:
        if self.state is None:
            self.error = (
                f"Connection Error: {error}" if self.is_host else "Failed to connect to host."
            )
            self.status = LobbyStatus.IDLE
        else:
            self.error = f"Connection lost: {error}"
            self.status = LobbyStatus.DISCONNECTED
        logger.warning(f"Peer {self.role.value}: {self.error}")

    def _on_close(self) -> None:
        if self.state is None:
            self.status = LobbyStatus.IDLE
        else:
            self.status = LobbyStatus.DISCONNECTED
        logger.info(f"Peer {self.role.value}: channel closed ({self.status.value})")
