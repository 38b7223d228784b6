"""
Builders for battle states with explicit numbers.
"""

from ..catalog import CARDS_BY_ID, get_champion_by_id
from ..engine_core.state import BattleState, CombatantState, Side


DECK_IDS = ["n1", "n2", "n3", "f1", "f2", "i1", "t1", "t3"]


def cards(*card_ids):
    """Catalog cards by id, in order."""
    return [CARDS_BY_ID[card_id] for card_id in card_ids]


def make_combatant(
    champion_id="c1",
    health=None,
    mana=1,
    max_mana=1,
    hand=(),
    deck=(),
    shield=0,
    ability_used=False,
):
    """Build a combatant with explicit numbers."""
    champion = get_champion_by_id(champion_id)
    return CombatantState(
        champion=champion,
        health=champion.max_health if health is None else health,
        max_health=champion.max_health,
        mana=mana,
        max_mana=max_mana,
        hand=list(hand),
        deck=list(deck),
        shield=shield,
        ability_used=ability_used,
    )


def make_state(player=None, opponent=None, active_side=Side.PLAYER, turn_number=1):
    """Build a battle state from two combatants."""
    return BattleState(
        battle_id="test_battle",
        player=player or make_combatant("c1"),
        opponent=opponent or make_combatant("c2"),
        turn_number=turn_number,
        active_side=active_side,
        battle_log=["Battle Started!"],
    )
