"""
Bots module - Opponent AI implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- HeuristicEvaluator: Scores cards and abilities
- OpponentBot: The scripted arena opponent
- Personality: Named weight presets
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights, estimated_damage
from .personality import (
    Personality,
    PERSONALITIES,
    get_personality,
    BALANCED,
    AGGRESSIVE,
    DEFENSIVE,
    CHAOTIC,
)
from .opponent_bot import OpponentBot, BotTurn, BotStep

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "estimated_damage",
    "Personality",
    "PERSONALITIES",
    "get_personality",
    "BALANCED",
    "AGGRESSIVE",
    "DEFENSIVE",
    "CHAOTIC",
    "OpponentBot",
    "BotTurn",
    "BotStep",
]
