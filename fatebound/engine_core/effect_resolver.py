"""
Effect Resolver - Maps cards and ability casts to state deltas.

This module handles:
- Folding a card's effect descriptors into one delta
- Damage against shield, then health
- Healing, shield gain, mana gain and ability-driven draws
- The win check after every resolution

The resolver does not validate intents; the reducer does. The one
exception is the ability cast, which re-verifies mana and the
once-per-turn flag and silently does nothing if either fails.
"""

from __future__ import annotations
from dataclasses import dataclass

from loguru import logger

from .state import BattleState, CombatantState, Side, MAX_MANA
from ..catalog.cards import CardDefinition
from ..catalog.champions import Ability
from ..catalog.effects import Effect, EffectKind, total_amount


def actor_label(side: Side) -> str:
    """How the battle log names a side."""
    return "You" if side is Side.PLAYER else "Opponent"


@dataclass(frozen=True)
class EffectDelta:
    """
    Numeric deltas produced by one card or ability.

    At most one amount per kind.
    """
    damage: int = 0
    heal: int = 0
    shield: int = 0
    mana_gain: int = 0
    draw: int = 0

    @classmethod
    def from_effects(cls, effects: tuple[Effect, ...]) -> EffectDelta:
        return cls(
            damage=total_amount(effects, EffectKind.DAMAGE),
            heal=total_amount(effects, EffectKind.HEAL),
            shield=total_amount(effects, EffectKind.SHIELD),
            mana_gain=total_amount(effects, EffectKind.MANA_GAIN),
            draw=total_amount(effects, EffectKind.DRAW),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.damage or self.heal or self.shield or self.mana_gain or self.draw)


def card_delta(card: CardDefinition) -> EffectDelta:
    """Delta for playing a card."""
    return EffectDelta.from_effects(card.effects)


def ability_delta(ability: Ability) -> EffectDelta:
    """Delta for casting an ability."""
    return EffectDelta.from_effects((ability.effect,))


def apply_damage(target: CombatantState, amount: int) -> tuple[CombatantState, int, int]:
    """
    Apply damage to a combatant.

    Shield absorbs first, 1:1. Returns (new target, absorbed, health lost).
    """
    if amount <= 0:
        return target, 0, 0
    absorbed = min(target.shield, amount)
    remainder = amount - absorbed
    new_health = max(0, target.health - remainder)
    new_target = target._copy_with(shield=target.shield - absorbed, health=new_health)
    return new_target, absorbed, target.health - new_health


def check_winner(state: BattleState) -> BattleState:
    """Set the winner if either side has been reduced to 0 health."""
    if state.winner is not None:
        return state
    if state.player.is_defeated:
        return state._copy_with(winner=Side.OPPONENT).with_log("Defeat!")
    if state.opponent.is_defeated:
        return state._copy_with(winner=Side.PLAYER).with_log("Victory!")
    return state


@dataclass
class EffectResolver:
    """
    Resolves card plays and ability casts.

    Stateless: takes a BattleState and returns a new one together with
    the human-readable changes.
    """

    def play_card(
        self,
        state: BattleState,
        side: Side,
        card: CardDefinition,
    ) -> tuple[BattleState, list[str]]:
        """
        Play a card for `side`.

        Removes the card from hand (if present), moves it to the graveyard
        and pays its cost, then applies its effects and checks for a winner.
        """
        actor = state.combatant(side)

        hand = list(actor.hand)
        for i, held in enumerate(hand):
            if held.id == card.id:
                del hand[i]
                break

        actor = actor._copy_with(
            hand=hand,
            graveyard=[*actor.graveyard, card],
            mana=max(0, actor.mana - card.cost),
        )
        state = state.with_combatant(side, actor)._copy_with(last_played_card=card)
        state = state.with_log(f"{actor_label(side)} played {card.name}!")

        state, changes = self.apply_delta(state, side, card_delta(card))
        changes.insert(0, f"{actor_label(side)} played {card.name} ({card.cost} mana)")
        return check_winner(state), changes

    def cast_ability(self, state: BattleState, side: Side) -> tuple[BattleState, list[str]]:
        """
        Cast `side`'s champion ability.

        No-op if the ability was already used this turn or mana is short.
        """
        actor = state.combatant(side)
        ability = actor.champion.ability

        if actor.ability_used or actor.mana < ability.cost:
            logger.debug(f"Ability {ability.name} for {side.value} not castable, ignoring")
            return state, []

        actor = actor._copy_with(mana=actor.mana - ability.cost, ability_used=True)
        state = state.with_combatant(side, actor)
        state = state.with_log(f"{actor_label(side)} used {ability.name}!")

        state, changes = self.apply_delta(state, side, ability_delta(ability))
        changes.insert(0, f"{actor_label(side)} used {ability.name} ({ability.cost} mana)")
        return check_winner(state), changes

    def apply_delta(
        self,
        state: BattleState,
        side: Side,
        delta: EffectDelta,
    ) -> tuple[BattleState, list[str]]:
        """Apply a delta: damage to the enemy, everything else to `side`."""
        changes: list[str] = []

        if delta.damage > 0:
            target_side = side.other
            target, absorbed, lost = apply_damage(state.combatant(target_side), delta.damage)
            state = state.with_combatant(target_side, target)
            if absorbed and not lost:
                changes.append(f"Blocked: shield absorbed {absorbed} damage")
            elif absorbed:
                changes.append(f"Shield absorbed {absorbed}, {lost} damage dealt")
            else:
                changes.append(f"{lost} damage dealt")

        actor = state.combatant(side)

        if delta.heal > 0:
            healed = min(actor.max_health, actor.health + delta.heal)
            changes.append(f"Healed {healed - actor.health}")
            actor = actor._copy_with(health=healed)

        if delta.shield > 0:
            actor = actor._copy_with(shield=actor.shield + delta.shield)
            changes.append(f"+{delta.shield} shield")

        if delta.mana_gain > 0:
            actor = actor._copy_with(mana=min(MAX_MANA, actor.mana + delta.mana_gain))
            changes.append(f"+{delta.mana_gain} mana")

        if delta.draw > 0:
            before = len(actor.hand)
            actor = actor.draw(delta.draw)
            changes.append(f"Drew {len(actor.hand) - before} card(s)")

        return state.with_combatant(side, actor), changes
