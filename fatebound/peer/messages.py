"""
Peer Messages - Wire format for the two-player relay.

Every message is a JSON object {"type": ..., "payload": {...}}:
- HANDSHAKE {champion}: sent once when the channel opens
- PLAY_CARD {card}: the sender played this exact card
- USE_ABILITY {}: the sender cast its champion ability
- END_TURN {}: the sender ended its turn

Card and champion payloads may omit `effects`; they are then classified
from their text.
"""

from __future__ import annotations
import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from ..catalog.cards import CardDefinition, CatalogError, card_from_dict
from ..catalog.champions import Champion, champion_from_dict


class PeerProtocolError(ValueError):
    """Raised when a peer sends something that is not a valid message."""


# =============================================================================
# Payload Models
# =============================================================================

class EffectPayload(BaseModel):
    kind: str
    amount: int = Field(ge=0)


class CardPayload(BaseModel):
    """A card as it travels over the wire."""
    id: str
    name: str
    cost: int = Field(ge=0)
    type: str
    value: int
    description: str = ""
    realm: str
    effects: Optional[list[EffectPayload]] = None
    image: Optional[str] = None

    @classmethod
    def from_card(cls, card: CardDefinition) -> CardPayload:
        return cls.model_validate(card.to_dict())

    def to_card(self) -> CardDefinition:
        try:
            return card_from_dict(self.model_dump(exclude_none=True))
        except CatalogError as e:
            raise PeerProtocolError(str(e)) from e


class AbilityPayload(BaseModel):
    name: str
    description: str = ""
    cost: int = Field(ge=0)
    effect: Optional[EffectPayload] = None


class ChampionPayload(BaseModel):
    """A champion as it travels over the wire."""
    id: str
    name: str
    title: str = ""
    realm: str
    max_health: int = Field(gt=0, validation_alias=AliasChoices("max_health", "maxHealth"))
    ability: AbilityPayload
    image: str = ""
    description: str = ""

    @classmethod
    def from_champion(cls, champion: Champion) -> ChampionPayload:
        return cls.model_validate(champion.to_dict())

    def to_champion(self) -> Champion:
        try:
            return champion_from_dict(self.model_dump(exclude_none=True))
        except CatalogError as e:
            raise PeerProtocolError(str(e)) from e


class HandshakePayload(BaseModel):
    champion: ChampionPayload


class PlayCardPayload(BaseModel):
    card: CardPayload


class EmptyPayload(BaseModel):
    pass


# =============================================================================
# Messages
# =============================================================================

class HandshakeMessage(BaseModel):
    type: Literal["HANDSHAKE"] = "HANDSHAKE"
    payload: HandshakePayload


class PlayCardMessage(BaseModel):
    type: Literal["PLAY_CARD"] = "PLAY_CARD"
    payload: PlayCardPayload


class UseAbilityMessage(BaseModel):
    type: Literal["USE_ABILITY"] = "USE_ABILITY"
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class EndTurnMessage(BaseModel):
    type: Literal["END_TURN"] = "END_TURN"
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


PeerMessage = Annotated[
    Union[HandshakeMessage, PlayCardMessage, UseAbilityMessage, EndTurnMessage],
    Field(discriminator="type"),
]

_MESSAGE_ADAPTER: TypeAdapter[PeerMessage] = TypeAdapter(PeerMessage)


def handshake(champion: Champion) -> HandshakeMessage:
    return HandshakeMessage(payload=HandshakePayload(champion=ChampionPayload.from_champion(champion)))


def play_card(card: CardDefinition) -> PlayCardMessage:
    return PlayCardMessage(payload=PlayCardPayload(card=CardPayload.from_card(card)))


def use_ability() -> UseAbilityMessage:
    return UseAbilityMessage()


def end_turn() -> EndTurnMessage:
    return EndTurnMessage()


def parse_message(data: Any) -> PeerMessage:
    """
    Validate raw channel data into a message.

    Accepts a dict, or a JSON string/bytes. Raises PeerProtocolError.
    """
    try:
        if isinstance(data, (str, bytes, bytearray)):
            return _MESSAGE_ADAPTER.validate_json(data)
        return _MESSAGE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise PeerProtocolError(f"Malformed peer message: {e.error_count()} error(s)") from e


def encode_message(message: BaseModel) -> dict[str, Any]:
    """Plain JSON-safe dict for a channel send."""
    return message.model_dump(mode="json", exclude_none=True)


def encode_message_json(message: BaseModel) -> str:
    return json.dumps(encode_message(message))
