"""
Effect Descriptors - Tagged numeric effects attached to catalog entries.

Every card and champion ability declares what it does as a tuple of
descriptors, decided once when the catalog is authored:
- Damage(n): reduce the enemy's shield, then health
- Heal(n): restore own health up to max
- Shield(n): add to own absorption pool
- ManaGain(n): add to own current mana (capped at 10)
- Draw(n): draw cards from own deck

The resolver folds a descriptor tuple into a single delta, so a card
yields at most one amount per kind.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class EffectKind(Enum):
    """Kinds of numeric effect."""
    DAMAGE = "damage"
    HEAL = "heal"
    SHIELD = "shield"
    MANA_GAIN = "mana_gain"
    DRAW = "draw"


@dataclass(frozen=True)
class Effect:
    """A single tagged effect with its amount."""
    kind: EffectKind
    amount: int

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Effect amount must be >= 0, got {self.amount}")

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: dict) -> Effect:
        return cls(kind=EffectKind(data["kind"]), amount=int(data["amount"]))


# ============================================================================
# Factory functions
# ============================================================================

def damage(amount: int) -> Effect:
    """Deal damage to the enemy."""
    return Effect(EffectKind.DAMAGE, amount)


def heal(amount: int) -> Effect:
    """Heal the acting side."""
    return Effect(EffectKind.HEAL, amount)


def shield(amount: int) -> Effect:
    """Grant shield to the acting side."""
    return Effect(EffectKind.SHIELD, amount)


def mana_gain(amount: int) -> Effect:
    """Refund mana to the acting side."""
    return Effect(EffectKind.MANA_GAIN, amount)


def draw(amount: int) -> Effect:
    """Draw cards for the acting side."""
    return Effect(EffectKind.DRAW, amount)


def total_amount(effects: tuple[Effect, ...], kind: EffectKind) -> int:
    """
    Amount of the first effect of the given kind, or 0.

    Only one amount per kind is honoured; later duplicates are ignored.
    """
    for effect in effects:
        if effect.kind == kind:
            return effect.amount
    return 0
