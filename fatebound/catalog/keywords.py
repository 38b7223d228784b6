"""
Keyword Classifier - Derives effect descriptors from card text.

Catalog entries authored in this package carry explicit effects. Entries
that arrive without them (a JSON catalog written for the text-only card
shape, or a card payload from an older peer) are classified here with the
legacy keyword rules:

- Attack and Minion cards deal their value as damage
- Spells whose lower-cased text contains "dmg" deal damage
- Spells and Weapons: "Heal" heals, "Shield" shields, "Mana" gains mana
- Weapons whose text contains "Atk" deal damage

Matching is case-sensitive except for the "dmg" check.
"""

from __future__ import annotations

from .cards import CardType, CatalogError
from .effects import Effect, damage, heal, shield, mana_gain, draw


ABILITY_DAMAGE = 3
ABILITY_SHIELD = 4
ABILITY_HEAL = 3
ABILITY_DRAW = 2

# (keywords, effect) in match order
_ABILITY_ARCHETYPES: list[tuple[tuple[str, ...], Effect]] = [
    (("Inferno", "damage"), damage(ABILITY_DAMAGE)),
    (("Glacial Wall", "Shield"), shield(ABILITY_SHIELD)),
    (("Regrowth", "Heal"), heal(ABILITY_HEAL)),
    (("Overclock", "Draw"), draw(ABILITY_DRAW)),
]


def classify_card_text(card_type: CardType, value: int, description: str) -> tuple[Effect, ...]:
    """Map a card's type and description to effect descriptors."""
    damage_amount = 0
    heal_amount = 0
    shield_amount = 0
    mana_amount = 0

    if card_type in (CardType.ATTACK, CardType.MINION):
        damage_amount = value
    elif card_type == CardType.SPELL and "dmg" in description.lower():
        damage_amount = value

    if card_type in (CardType.SPELL, CardType.WEAPON):
        if "Heal" in description:
            heal_amount = value
        if "Shield" in description:
            shield_amount = value
        if "Mana" in description:
            mana_amount = value
        if card_type == CardType.WEAPON and "Atk" in description:
            damage_amount = value

    effects: list[Effect] = []
    if damage_amount:
        effects.append(damage(damage_amount))
    if heal_amount:
        effects.append(heal(heal_amount))
    if shield_amount:
        effects.append(shield(shield_amount))
    if mana_amount:
        effects.append(mana_gain(mana_amount))
    return tuple(effects)


def classify_ability_text(name: str, description: str = "") -> Effect:
    """
    Map an ability to its single effect archetype.

    The name is checked first, then the description.
    """
    for text in (name, description):
        for keywords, effect in _ABILITY_ARCHETYPES:
            if any(keyword in text for keyword in keywords):
                return effect
    raise CatalogError(f"Cannot classify ability {name!r}")
