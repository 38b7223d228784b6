"""
Deck Rules - Deck validation and scripted-opponent setup.

A deck is exactly DECK_SIZE distinct catalog cards. The scripted
opponent gets a champion different from the player's and a deck drawn
from a realm-biased pool.
"""

from __future__ import annotations
import random

from .cards import CARDS, CARDS_BY_ID, CardDefinition
from .champions import CHAMPIONS, Champion


DECK_SIZE = 8

# Chance that an off-realm card makes it into the opponent's pool
OFF_REALM_KEEP_CHANCE = 0.6


class DeckValidationError(ValueError):
    """Raised when a deck does not satisfy the deck rules."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def validate_deck(
    card_ids: list[str],
    catalog: dict[str, CardDefinition] | None = None,
) -> list[str]:
    """
    Validate a deck given as card ids.

    Returns a list of error messages (empty if valid).
    """
    catalog = catalog if catalog is not None else CARDS_BY_ID
    errors: list[str] = []

    if len(card_ids) != DECK_SIZE:
        errors.append(f"Deck must contain exactly {DECK_SIZE} cards, got {len(card_ids)}")

    seen: set[str] = set()
    for card_id in card_ids:
        if card_id in seen:
            errors.append(f"Duplicate card: {card_id}")
        seen.add(card_id)
        if card_id not in catalog:
            errors.append(f"Unknown card: {card_id}")

    return errors


def build_deck(
    card_ids: list[str],
    catalog: dict[str, CardDefinition] | None = None,
) -> list[CardDefinition]:
    """Resolve card ids to definitions, raising DeckValidationError if invalid."""
    catalog = catalog if catalog is not None else CARDS_BY_ID
    errors = validate_deck(card_ids, catalog)
    if errors:
        raise DeckValidationError(errors)
    return [catalog[card_id] for card_id in card_ids]


def pick_opponent_champion(
    exclude_id: str,
    rng: random.Random,
    champions: list[Champion] | None = None,
) -> Champion:
    """Pick a random champion that is not the player's."""
    pool = [c for c in (champions or CHAMPIONS) if c.id != exclude_id]
    if not pool:
        raise ValueError("No opponent champion available")
    return rng.choice(pool)


def generate_opponent_deck(
    champion: Champion,
    rng: random.Random,
    cards: list[CardDefinition] | None = None,
) -> list[CardDefinition]:
    """
    Build a deck for the scripted opponent.

    Cards of the champion's realm are always eligible; other cards are kept
    with OFF_REALM_KEEP_CHANCE. Falls back to the full catalog if the pool
    is smaller than a deck.
    """
    catalog = list(cards or CARDS)
    pool = [
        c for c in catalog
        if c.realm == champion.realm or rng.random() < OFF_REALM_KEEP_CHANCE
    ]
    if len(pool) < DECK_SIZE:
        pool = catalog
    rng.shuffle(pool)
    return pool[:DECK_SIZE]
