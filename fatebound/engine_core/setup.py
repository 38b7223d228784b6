"""
Battle Setup - Creates the initial battle state.

This module handles:
- Shuffling each deck once with a seedable RNG
- Picking the scripted opponent's champion and deck
- Dealing opening hands
- Peer battles, where the remote side's deck is not known locally
"""

from __future__ import annotations
import random
import uuid

from loguru import logger

from .state import BattleState, CombatantState, Side, OPENING_HAND
from ..catalog.cards import CardDefinition
from ..catalog.champions import Champion
from ..catalog.deck import pick_opponent_champion, generate_opponent_deck


def create_battle(
    champion: Champion,
    deck: list[CardDefinition],
    opponent_champion: Champion | None = None,
    opponent_deck: list[CardDefinition] | None = None,
    random_seed: int | None = None,
    first_side: Side = Side.PLAYER,
    battle_id: str | None = None,
) -> BattleState:
    """
    Set up a new battle against the scripted opponent.

    Args:
        champion: The local player's champion
        deck: The local player's deck (already validated)
        opponent_champion: Defaults to a random champion other than the player's
        opponent_deck: Defaults to a realm-biased deck for the opponent
        random_seed: Seed for deterministic shuffling and opponent setup
        first_side: The side that takes turn 1

    Returns:
        Initial BattleState with opening hands dealt
    """
    rng = random.Random(random_seed)

    if opponent_champion is None:
        opponent_champion = pick_opponent_champion(champion.id, rng)
    if opponent_deck is None:
        opponent_deck = generate_opponent_deck(opponent_champion, rng)

    player = _prepare_combatant(champion, deck, rng)
    opponent = _prepare_combatant(opponent_champion, opponent_deck, rng)

    state = BattleState(
        battle_id=battle_id or uuid.uuid4().hex,
        player=player,
        opponent=opponent,
        active_side=first_side,
        first_side=first_side,
        battle_log=["Battle Started!"],
    )
    logger.info(
        f"Battle {state.battle_id} created: {champion.name} vs {opponent_champion.name}"
    )
    return state


def create_peer_battle(
    champion: Champion,
    deck: list[CardDefinition],
    remote_champion: Champion,
    is_host: bool,
    random_seed: int | None = None,
    battle_id: str | None = None,
) -> BattleState:
    """
    Set up the local engine for a battle against a remote human.

    The remote side starts with an empty deck and hand: its cards only
    exist on the peer's engine and arrive one by one with each relayed
    play. The host takes turn 1, so the joiner's engine opens on its
    opponent side.
    """
    rng = random.Random(random_seed)
    first_side = Side.PLAYER if is_host else Side.OPPONENT

    state = BattleState(
        battle_id=battle_id or uuid.uuid4().hex,
        player=_prepare_combatant(champion, deck, rng),
        opponent=CombatantState.create(remote_champion, []),
        active_side=first_side,
        first_side=first_side,
        battle_log=["Battle Started!"],
    )
    logger.info(
        f"Peer battle {state.battle_id} created as {'host' if is_host else 'joiner'}: "
        f"{champion.name} vs {remote_champion.name}"
    )
    return state


def _prepare_combatant(
    champion: Champion,
    deck: list[CardDefinition],
    rng: random.Random,
) -> CombatantState:
    """Shuffle the deck once and deal the opening hand."""
    cards = list(deck)
    rng.shuffle(cards)
    return CombatantState.create(champion, cards).draw(OPENING_HAND)
