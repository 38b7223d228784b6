"""
Catalog - Cards, champions and deck rules.

This module contains:
- Card and champion definitions (immutable)
- Tagged effect descriptors
- Keyword classifier for text-only entries
- Deck validation and scripted-opponent deck generation
"""

from .effects import Effect, EffectKind
from .cards import (
    CardDefinition,
    CardType,
    Realm,
    CatalogError,
    CARDS,
    CARDS_BY_ID,
    card_from_dict,
    get_card_by_id,
)
from .champions import (
    Ability,
    Champion,
    CHAMPIONS,
    CHAMPIONS_BY_ID,
    champion_from_dict,
    get_champion_by_id,
)
from .keywords import classify_card_text, classify_ability_text
from .deck import (
    DECK_SIZE,
    DeckValidationError,
    validate_deck,
    build_deck,
    pick_opponent_champion,
    generate_opponent_deck,
)

__all__ = [
    "Effect",
    "EffectKind",
    "CardDefinition",
    "CardType",
    "Realm",
    "CatalogError",
    "CARDS",
    "CARDS_BY_ID",
    "card_from_dict",
    "get_card_by_id",
    "Ability",
    "Champion",
    "CHAMPIONS",
    "CHAMPIONS_BY_ID",
    "champion_from_dict",
    "get_champion_by_id",
    "classify_card_text",
    "classify_ability_text",
    "DECK_SIZE",
    "DeckValidationError",
    "validate_deck",
    "build_deck",
    "pick_opponent_champion",
    "generate_opponent_deck",
]
