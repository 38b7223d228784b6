"""
Bot Personalities - Named weight presets for the opponent bot.

Personalities adjust:
- Evaluation weights (what the bot values)
- Randomness (chance of playing a random legal intent instead)

BALANCED reproduces the arena opponent exactly and never acts randomly.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .evaluator import EvaluationWeights


@dataclass
class Personality:
    """A bot personality that defines play style."""
    name: str
    description: str = ""
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)
    randomness: float = 0.0  # Probability of a random legal intent


BALANCED = Personality(
    name="Balanced",
    description="The arena opponent: lethal first, defends when low, spends mana fully",
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Pushes damage early and rarely defends",
    weights=EvaluationWeights(
        low_health_ratio=0.2,
        defensive_bonus=200.0,
        aggression_threshold=20,
        aggression_bonus=250.0,
        ability_damage_bonus=120.0,
    ),
)


DEFENSIVE = Personality(
    name="Defensive",
    description="Shields and heals early, attacks when safe",
    weights=EvaluationWeights(
        low_health_ratio=0.6,
        defensive_bonus=600.0,
        ability_shield_ratio=0.8,
        aggression_bonus=50.0,
    ),
)


CHAOTIC = Personality(
    name="Chaotic",
    description="Balanced weights with a one-in-four chance of a random intent",
    randomness=0.25,
)


PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "defensive": DEFENSIVE,
    "chaotic": CHAOTIC,
}


def get_personality(name: str) -> Personality:
    """Get a personality by name (case-insensitive)."""
    personality = PERSONALITIES.get(name.lower())
    if personality is None:
        raise ValueError(f"Unknown personality: {name}")
    return personality
