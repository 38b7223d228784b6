"""
Commentary Service - Optional generated flavor text.

Wraps an OpenAI chat-completions client. Without a client every call
answers from the local pools immediately; with one, any failure is
logged and answered from the pools as well. Battle correctness never
depends on this module.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from loguru import logger
from openai import OpenAI

from .fallbacks import FALLBACK_COMMENTARY, FALLBACK_TIPS
from .prompts import CommentaryPrompts
from ..catalog.cards import CardDefinition
from ..config import COMMENTARY_MODEL, OPENAI_API_KEY
from ..engine_core.state import Side


def _actor(side: Side) -> str:
    return "You" if side is Side.PLAYER else "Opponent"


@dataclass
class CommentaryService:
    """
    Battle commentary and tactical tips.

    `client` is anything exposing `chat.completions.create` the way
    `openai.OpenAI` does.
    """
    client: OpenAI | None = None
    model: str = COMMENTARY_MODEL
    rng: random.Random = field(default_factory=random.Random)
    max_tokens: int = 60

    @classmethod
    def from_env(cls) -> CommentaryService:
        """Use OPENAI_API_KEY when set, otherwise run on fallbacks only."""
        if not OPENAI_API_KEY:
            logger.info("OPENAI_API_KEY not set, commentary uses local fallbacks")
            return cls()
        return cls(client=OpenAI(api_key=OPENAI_API_KEY))

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def battle_commentary(self, card: CardDefinition, side: Side) -> str:
        """One short dramatic sentence about a card play."""
        if self.client is None:
            return f"{_actor(side)} played {card.name}!"

        prompt = CommentaryPrompts.battle_commentary(card.name, card.realm.value, side is Side.PLAYER)
        try:
            return self._complete(prompt)
        except Exception as e:
            logger.warning(f"Commentary unavailable, using fallback: {e}")
            return f"{_actor(side)} uses {card.name}. {self.rng.choice(FALLBACK_COMMENTARY)}"

    def tactical_tip(self, hand: list[CardDefinition], enemy_health: int, mana: int) -> str:
        """One sentence of advice for the current hand."""
        if self.client is None:
            return self.rng.choice(FALLBACK_TIPS)

        try:
            return self._complete(CommentaryPrompts.tactical_tip(hand, enemy_health, mana))
        except Exception as e:
            logger.warning(f"Tactical tip unavailable, using fallback: {e}")
            return self.rng.choice(FALLBACK_TIPS)

    def _complete(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": CommentaryPrompts.system()},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.max_tokens,
        )
        text = response.choices[0].message.content
        if not text or not text.strip():
            raise ValueError("Empty completion")
        return text.strip()
