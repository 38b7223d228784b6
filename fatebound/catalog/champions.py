"""
Champion Catalog - Immutable champion definitions.

Each champion has a realm, a fixed max health and one ability. The
ability costs mana, may be used once per turn, and maps to exactly one
effect archetype: deal 3 damage, gain 4 shield, heal 3, or draw 2.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from .cards import Realm, CatalogError
from .effects import Effect, damage, shield, heal, draw


@dataclass(frozen=True)
class Ability:
    """A champion's once-per-turn ability."""
    name: str
    description: str
    cost: int
    effect: Effect

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "cost": self.cost,
            "effect": self.effect.to_dict(),
        }


@dataclass(frozen=True)
class Champion:
    """A playable champion."""
    id: str
    name: str
    title: str
    realm: Realm
    max_health: int
    ability: Ability
    image: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "realm": self.realm.value,
            "max_health": self.max_health,
            "ability": self.ability.to_dict(),
            "image": self.image,
            "description": self.description,
        }


def champion_from_dict(data: dict[str, Any]) -> Champion:
    """
    Build a champion from a plain dict.

    Accepts `max_health` or the legacy `maxHealth` key. An ability without
    an `effect` is classified from its name and description.
    """
    from .keywords import classify_ability_text

    try:
        ability_data = data["ability"]
        raw_effect = ability_data.get("effect")
        if raw_effect is None:
            effect = classify_ability_text(ability_data["name"], ability_data.get("description", ""))
        else:
            effect = Effect.from_dict(raw_effect)
        ability = Ability(
            name=str(ability_data["name"]),
            description=str(ability_data.get("description", "")),
            cost=int(ability_data["cost"]),
            effect=effect,
        )
        max_health = int(data.get("max_health", data.get("maxHealth")))
        return Champion(
            id=str(data["id"]),
            name=str(data["name"]),
            title=str(data.get("title", "")),
            realm=Realm(data["realm"]),
            max_health=max_health,
            ability=ability,
            image=str(data.get("image", "")),
            description=str(data.get("description", "")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise CatalogError(f"Invalid champion entry {data.get('id', '?')}: {e}") from e


# ============================================================================
# Built-in champions
# ============================================================================

IGNIS = Champion(
    id="c1",
    name="Ignis",
    title="The Burning Soul",
    realm=Realm.FIRE,
    max_health=30,
    ability=Ability(name="Inferno", description="Deal 3 damage to enemy.", cost=3, effect=damage(3)),
    image="https://picsum.photos/seed/ignis/300/400",
    description="A master of pyromancy who believes the world must be cleansed by fire.",
)

FROSTBITE = Champion(
    id="c2",
    name="Frostbite",
    title="Warden of the North",
    realm=Realm.ICE,
    max_health=35,
    ability=Ability(name="Glacial Wall", description="Gain 4 Shield.", cost=3, effect=shield(4)),
    image="https://picsum.photos/seed/frost/300/400",
    description="Cold and calculating, she freezes her enemies in their tracks.",
)

UNIT_734 = Champion(
    id="c3",
    name="Unit-734",
    title="Prime Sentinel",
    realm=Realm.TECH,
    max_health=32,
    ability=Ability(name="Overclock", description="Draw 2 cards.", cost=4, effect=draw(2)),
    image="https://picsum.photos/seed/mech/300/400",
    description="A rogue AI construct seeking to optimize the realms.",
)

SYLVA = Champion(
    id="c4",
    name="Sylva",
    title="Nature's Wrath",
    realm=Realm.FOREST,
    max_health=40,
    ability=Ability(name="Regrowth", description="Heal 3 Health.", cost=3, effect=heal(3)),
    image="https://picsum.photos/seed/druid/300/400",
    description="Guardian of the ancient woods, she commands the flora and fauna.",
)


CHAMPIONS: list[Champion] = [IGNIS, FROSTBITE, UNIT_734, SYLVA]

CHAMPIONS_BY_ID: dict[str, Champion] = {champion.id: champion for champion in CHAMPIONS}


def get_champion_by_id(champion_id: str) -> Champion | None:
    """Look up a built-in champion."""
    return CHAMPIONS_BY_ID.get(champion_id)
