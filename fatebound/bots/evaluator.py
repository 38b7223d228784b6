"""
Heuristic Evaluator - Scores candidate intents for the opponent bot.

Cards and the champion ability are scored independently:
- Efficiency (higher cost first)
- Lethal detection
- Defensive play when low on health
- Aggression against a weakened target
- Spending mana exactly

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..catalog.cards import CardType
from ..catalog.effects import EffectKind

if TYPE_CHECKING:
    from ..catalog.cards import CardDefinition
    from ..catalog.champions import Ability
    from ..engine_core.state import CombatantState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    cost_multiplier: float = 10.0
    lethal_bonus: float = 99999.0
    exact_mana_bonus: float = 50.0

    # Cards
    low_health_ratio: float = 0.35
    defensive_bonus: float = 500.0
    overheal_penalty: float = -1000.0
    aggression_threshold: int = 12  # Target health below this
    aggression_bonus: float = 100.0

    # Ability, by archetype
    ability_damage_bonus: float = 40.0
    ability_shield_ratio: float = 0.5
    ability_shield_low_bonus: float = 200.0
    ability_shield_bonus: float = 20.0
    ability_heal_margin: int = 5
    ability_heal_bonus: float = 300.0
    ability_heal_penalty: float = -500.0
    ability_draw_hand_threshold: int = 3
    ability_draw_low_bonus: float = 200.0
    ability_draw_bonus: float = 30.0


def estimated_damage(card: CardDefinition) -> int:
    """
    Damage the bot expects from a card when scoring it.

    Only Attack and Minion cards, or text mentioning "dmg", count. Weapon
    damage is not foreseen even though it resolves.
    """
    if card.card_type in (CardType.ATTACK, CardType.MINION) or "dmg" in card.description:
        return card.value
    return 0


class HeuristicEvaluator:
    """
    Scores cards and abilities from the acting side's point of view.

    `actor` is the side choosing, `target` the side it would hit.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def score_card(
        self,
        card: CardDefinition,
        actor: CombatantState,
        target: CombatantState,
    ) -> float:
        w = self.weights
        score = card.cost * w.cost_multiplier
        damage = estimated_damage(card)

        if damage > 0 and damage >= target.health:
            score += w.lethal_bonus

        if actor.health < actor.max_health * w.low_health_ratio and card.is_defensive:
            score += w.defensive_bonus

        if card.is_healing and actor.health >= actor.max_health:
            score += w.overheal_penalty

        if target.health < w.aggression_threshold and damage > 0:
            score += w.aggression_bonus

        if card.cost == actor.mana:
            score += w.exact_mana_bonus

        return score

    def score_ability(
        self,
        ability: Ability,
        actor: CombatantState,
        target: CombatantState,
    ) -> float:
        w = self.weights
        score = ability.cost * w.cost_multiplier
        effect = ability.effect

        if effect.kind == EffectKind.DAMAGE:
            if effect.amount >= target.health:
                score += w.lethal_bonus
            else:
                score += w.ability_damage_bonus

        elif effect.kind == EffectKind.SHIELD:
            if actor.health < actor.max_health * w.ability_shield_ratio:
                score += w.ability_shield_low_bonus
            else:
                score += w.ability_shield_bonus

        elif effect.kind == EffectKind.HEAL:
            if actor.health < actor.max_health - w.ability_heal_margin:
                score += w.ability_heal_bonus
            else:
                score += w.ability_heal_penalty

        elif effect.kind == EffectKind.DRAW:
            if len(actor.hand) < w.ability_draw_hand_threshold:
                score += w.ability_draw_low_bonus
            else:
                score += w.ability_draw_bonus

        if ability.cost == actor.mana:
            score += w.exact_mana_bonus

        return score
