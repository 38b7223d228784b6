"""
Card Catalog - Immutable card definitions.

Card structure:
- Cost (mana, >= 0)
- Type (Attack, Spell, Minion, Weapon)
- Value (the headline number printed on the card)
- Realm (Fire, Ice, Tech, Forest)
- Effects (explicit descriptors, see effects.py)

Cards are never mutated after the catalog is loaded.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .effects import Effect, EffectKind, damage, heal, mana_gain, total_amount


class CatalogError(ValueError):
    """Raised when a catalog entry is missing or malformed."""


class Realm(Enum):
    """Elemental affiliation of cards and champions."""
    FIRE = "Fire Realm"
    ICE = "Ice Realm"
    TECH = "Tech Realm"
    FOREST = "Forest Realm"


class CardType(Enum):
    """Card types. Type plus effects decide how a card resolves."""
    ATTACK = "Attack"
    SPELL = "Spell"
    MINION = "Minion"
    WEAPON = "Weapon"


@dataclass(frozen=True)
class CardDefinition:
    """
    A catalog card.

    `effects` is authoritative for resolution; `value` and `description`
    are what the card shows.
    """
    id: str
    name: str
    cost: int
    card_type: CardType
    value: int
    description: str
    realm: Realm
    effects: tuple[Effect, ...] = field(default_factory=tuple)
    image: str | None = None

    def amount(self, kind: EffectKind) -> int:
        """Amount this card applies for an effect kind."""
        return total_amount(self.effects, kind)

    @property
    def is_healing(self) -> bool:
        return self.amount(EffectKind.HEAL) > 0

    @property
    def is_defensive(self) -> bool:
        return self.is_healing or self.amount(EffectKind.SHIELD) > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the wire or a JSON catalog."""
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "type": self.card_type.value,
            "value": self.value,
            "description": self.description,
            "realm": self.realm.value,
            "effects": [e.to_dict() for e in self.effects],
            "image": self.image,
        }


def card_from_dict(data: dict[str, Any]) -> CardDefinition:
    """
    Build a card from a plain dict.

    When the dict carries no `effects` list, effects are derived from the
    type and description text (see keywords.classify_card_text).
    """
    from .keywords import classify_card_text

    try:
        card_type = CardType(data["type"])
        realm = Realm(data["realm"])
        cost = int(data["cost"])
        value = int(data["value"])
        description = str(data.get("description", ""))
        card_id = str(data["id"])
        name = str(data["name"])
    except (KeyError, ValueError, TypeError) as e:
        raise CatalogError(f"Invalid card entry {data.get('id', '?')}: {e}") from e

    if cost < 0:
        raise CatalogError(f"Card {card_id} has negative cost")

    raw_effects = data.get("effects")
    if raw_effects is None:
        effects = classify_card_text(card_type, value, description)
    else:
        try:
            effects = tuple(Effect.from_dict(e) for e in raw_effects)
        except (KeyError, ValueError, TypeError) as e:
            raise CatalogError(f"Invalid effects on card {card_id}: {e}") from e

    return CardDefinition(
        id=card_id,
        name=name,
        cost=cost,
        card_type=card_type,
        value=value,
        description=description,
        realm=realm,
        effects=effects,
        image=data.get("image"),
    )


# ============================================================================
# Built-in cards
# ============================================================================
#
# Effects are exactly what classify_card_text yields for each card's text.
# Spells reading "damage" or lower-case "shield" therefore resolve to nothing.

# Neutral
QUICK_STRIKE = CardDefinition(
    id="n1", name="Quick Strike", cost=1, card_type=CardType.ATTACK, value=3,
    description="Deal 3 damage.", realm=Realm.FIRE,
    effects=(damage(3),),
)

IRON_SHIELD = CardDefinition(
    id="n2", name="Iron Shield", cost=2, card_type=CardType.SPELL, value=5,
    description="Gain 5 shield.", realm=Realm.TECH,
    effects=(),
)

HEALTH_POTION = CardDefinition(
    id="n3", name="Health Potion", cost=2, card_type=CardType.SPELL, value=4,
    description="Heal 4 health.", realm=Realm.FOREST,
    effects=(heal(4),),
)

# Fire
FIREBALL = CardDefinition(
    id="f1", name="Fireball", cost=3, card_type=CardType.SPELL, value=6,
    description="Deal 6 damage.", realm=Realm.FIRE,
    effects=(),
)

LAVA_GOLEM = CardDefinition(
    id="f2", name="Lava Golem", cost=5, card_type=CardType.MINION, value=8,
    description="Summon a Golem (8 dmg).", realm=Realm.FIRE,
    effects=(damage(8),),
)

FLAME_SWORD = CardDefinition(
    id="f3", name="Flame Sword", cost=3, card_type=CardType.WEAPON, value=5,
    description="Equip: +5 Atk power.", realm=Realm.FIRE,
    effects=(damage(5),),
)

# Ice
ICE_SHARD = CardDefinition(
    id="i1", name="Ice Shard", cost=1, card_type=CardType.ATTACK, value=2,
    description="Deal 2 damage.", realm=Realm.ICE,
    effects=(damage(2),),
)

BLIZZARD = CardDefinition(
    id="i2", name="Blizzard", cost=4, card_type=CardType.SPELL, value=4,
    description="Deal 4 dmg to all enemies.", realm=Realm.ICE,
    effects=(damage(4),),
)

FROST_ARMOR = CardDefinition(
    id="i3", name="Frost Armor", cost=3, card_type=CardType.SPELL, value=8,
    description="Gain 8 shield.", realm=Realm.ICE,
    effects=(),
)

# Tech
LASER_BEAM = CardDefinition(
    id="t1", name="Laser Beam", cost=2, card_type=CardType.ATTACK, value=4,
    description="Deal 4 damage.", realm=Realm.TECH,
    effects=(damage(4),),
)

DRONE_SWARM = CardDefinition(
    id="t2", name="Drone Swarm", cost=4, card_type=CardType.MINION, value=6,
    description="Deploy drones (6 dmg).", realm=Realm.TECH,
    effects=(damage(6),),
)

RECHARGE = CardDefinition(
    id="t3", name="Recharge", cost=0, card_type=CardType.SPELL, value=2,
    description="Gain 2 Mana.", realm=Realm.TECH,
    effects=(mana_gain(2),),
)

# Forest
VINE_WHIP = CardDefinition(
    id="g1", name="Vine Whip", cost=2, card_type=CardType.ATTACK, value=3,
    description="Deal 3 damage.", realm=Realm.FOREST,
    effects=(damage(3),),
)

BEAR_FORM = CardDefinition(
    id="g2", name="Bear Form", cost=5, card_type=CardType.MINION, value=7,
    description="Transform (7 dmg).", realm=Realm.FOREST,
    effects=(damage(7),),
)

NATURES_TOUCH = CardDefinition(
    id="g3", name="Nature's Touch", cost=3, card_type=CardType.SPELL, value=8,
    description="Heal 8 health.", realm=Realm.FOREST,
    effects=(heal(8),),
)


CARDS: list[CardDefinition] = [
    QUICK_STRIKE,
    IRON_SHIELD,
    HEALTH_POTION,
    FIREBALL,
    LAVA_GOLEM,
    FLAME_SWORD,
    ICE_SHARD,
    BLIZZARD,
    FROST_ARMOR,
    LASER_BEAM,
    DRONE_SWARM,
    RECHARGE,
    VINE_WHIP,
    BEAR_FORM,
    NATURES_TOUCH,
]

CARDS_BY_ID: dict[str, CardDefinition] = {card.id: card for card in CARDS}


def get_card_by_id(card_id: str) -> CardDefinition | None:
    """Look up a built-in card."""
    return CARDS_BY_ID.get(card_id)
