"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a battle state and the legal intents for one side
and returns a decision: which intent to apply, and why.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine_core.state import BattleState, Side
    from ..engine_core.action import Action


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for logs and the API)
    - The score that won, and how many options were weighed
    """
    action: Action
    explanation: str = ""

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects intents.
    """

    @abstractmethod
    def select_action(
        self,
        state: BattleState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an intent from the legal intents.

        Args:
            state: Current battle state
            side: The side the bot plays
            legal_actions: Legal intents for that side

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects intents uniformly at random.

    Used for:
    - Simulations and property tests
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: BattleState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal intent.

    With the generator's ordering that means: play the first affordable
    card, then the ability, then end the turn.
    """

    def select_action(
        self,
        state: BattleState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )
