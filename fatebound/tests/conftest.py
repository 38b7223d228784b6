"""
Pytest fixtures for Fatebound tests.
"""

import pytest

from .factories import DECK_IDS
from ..catalog import get_champion_by_id, build_deck
from ..commentary import CommentaryService
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_battle
from ..engine_core.state import BattleState


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def deck_ids() -> list[str]:
    return list(DECK_IDS)


@pytest.fixture
def battle(deck_ids) -> BattleState:
    """Seeded battle: Ignis against Frostbite."""
    return create_battle(
        get_champion_by_id("c1"),
        build_deck(deck_ids),
        opponent_champion=get_champion_by_id("c2"),
        random_seed=42,
    )


@pytest.fixture
def offline_commentary() -> CommentaryService:
    """Commentary without a client: local fallbacks only."""
    return CommentaryService()


class FakeCompletions:
    """Stands in for `client.chat.completions`."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = type("Message", (), {"content": self.reply})()
        choice = type("Choice", (), {"message": message})()
        return type("Completion", (), {"choices": [choice]})()


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.completions = FakeCompletions(reply, error)
        self.chat = type("Chat", (), {"completions": self.completions})()


@pytest.fixture
def fake_client_factory():
    return FakeClient
