"""
Commentary Prompts - Prompts for generated battle flavor text.

Both prompts ask for a single sentence so the reply can be shown as-is.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..catalog.cards import CardDefinition


GAME_TITLE = "Fatebound: Duel of Realms"


@dataclass
class CommentaryPrompts:
    """Collection of prompts for the text-generation collaborator."""

    @staticmethod
    def system() -> str:
        return f"You are the announcer of the fantasy card battle game \"{GAME_TITLE}\"."

    @staticmethod
    def battle_commentary(card_name: str, realm: str, is_player: bool) -> str:
        """Prompt for one dramatic line about a card play."""
        actor = "Player" if is_player else "Enemy"
        return f"""
Context: A fantasy card battle game "{GAME_TITLE}".
Action: The {actor} casts "{card_name}" belonging to the {realm}.
Task: Write a single, short, dramatic sentence (max 15 words) describing this action visually.
Tone: Epic, intense.
"""

    @staticmethod
    def tactical_tip(hand: list[CardDefinition], enemy_health: int, mana: int) -> str:
        """Prompt for one sentence of advice given the current hand."""
        hand_names = ", ".join(
            f"{card.name} (Cost: {card.cost}, Val: {card.value})" for card in hand
        )
        return f"""
Context: Card game strategy.
State: Enemy HP: {enemy_health}, My Mana: {mana}.
Hand: {hand_names}.
Task: Give 1 short sentence of tactical advice on what to prioritize.
"""
