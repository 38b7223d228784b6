"""
Peer module - Online battles between two engines.

Provides:
- Wire messages and their validation
- PeerChannel transport abstraction (LocalChannel for in-memory pairs)
- PeerSync: lobby handshake and intent relay
"""

from .messages import (
    PeerProtocolError,
    PeerMessage,
    HandshakeMessage,
    PlayCardMessage,
    UseAbilityMessage,
    EndTurnMessage,
    CardPayload,
    ChampionPayload,
    parse_message,
    encode_message,
)
from .channel import ChannelEvent, PeerChannel, LocalChannel
from .sync import PeerSync, PeerRole, LobbyStatus

__all__ = [
    "PeerProtocolError",
    "PeerMessage",
    "HandshakeMessage",
    "PlayCardMessage",
    "UseAbilityMessage",
    "EndTurnMessage",
    "CardPayload",
    "ChampionPayload",
    "parse_message",
    "encode_message",
    "ChannelEvent",
    "PeerChannel",
    "LocalChannel",
    "PeerSync",
    "PeerRole",
    "LobbyStatus",
]
