"""
Opponent Bot - The scripted arena opponent.

Each step the bot:
- Scores every affordable card in hand
- Scores its champion ability if usable
- Plays the best card, or the ability if it scores strictly higher
- Ends the turn when neither is available

A turn is a loop of such steps, each applied through the reducer as one
transaction. Mana never increases between steps except through a card,
and every card leaves the hand, so the loop always terminates.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from loguru import logger

from .policy import BotPolicy, BotDecision
from .evaluator import HeuristicEvaluator
from .personality import Personality, BALANCED
from ..engine_core.state import BattleState, Side
from ..engine_core.action import Action, ActionType, ActionResult
from ..engine_core.action_generator import legal_actions
from ..engine_core.reducer import Reducer


@dataclass
class BotStep:
    """One applied bot decision."""
    decision: BotDecision
    result: ActionResult


@dataclass
class BotTurn:
    """Everything the bot did during one turn."""
    state: BattleState
    steps: list[BotStep] = field(default_factory=list)

    @property
    def actions(self) -> list[Action]:
        return [step.decision.action for step in self.steps]


@dataclass
class OpponentBot(BotPolicy):
    """
    Greedy one-step opponent.

    Usage:
        bot = OpponentBot(side=Side.OPPONENT)
        turn = bot.run_turn(state)
        state = turn.state
    """
    side: Side = Side.OPPONENT
    personality: Personality = None  # type: ignore
    evaluator: HeuristicEvaluator = None  # type: ignore
    rng: random.Random = None  # type: ignore
    max_steps: int = 50

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.evaluator is None:
            self.evaluator = HeuristicEvaluator(weights=self.personality.weights)
        if self.rng is None:
            self.rng = random.Random()

    def select_action(
        self,
        state: BattleState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Pick the next intent.

        Ties between cards keep the first in hand order. The ability wins
        only with a strictly higher score than the best card.
        """
        if not legal_actions:
            raise ValueError("No legal actions available")

        if self.personality.randomness and self.rng.random() < self.personality.randomness:
            return BotDecision(
                action=self.rng.choice(legal_actions),
                explanation=f"Random action (personality: {self.personality.name})",
                evaluated_actions=0,
            )

        actor = state.combatant(side)
        target = state.combatant(side.other)
        scores: dict[str, float] = {}

        best_action: Action | None = None
        best_score = 0.0
        for action in legal_actions:
            if action.action_type != ActionType.PLAY_CARD:
                continue
            card = actor.find_in_hand(action.payload.card_id)
            if card is None:
                continue
            score = self.evaluator.score_card(card, actor, target)
            scores.setdefault(card.id, score)
            if best_action is None or score > best_score:
                best_action, best_score = action, score

        for action in legal_actions:
            if action.action_type != ActionType.USE_ABILITY:
                continue
            ability = actor.champion.ability
            score = self.evaluator.score_ability(ability, actor, target)
            scores[ability.name] = score
            if best_action is None or score > best_score:
                best_action, best_score = action, score

        if best_action is None:
            end_turn = next(
                (a for a in legal_actions if a.action_type == ActionType.END_TURN),
                Action.end_turn(side),
            )
            return BotDecision(
                action=end_turn,
                explanation="Nothing playable, ending turn",
                evaluated_actions=len(legal_actions),
            )

        return BotDecision(
            action=best_action,
            explanation=self._explain(best_action, actor, best_score),
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details=scores,
        )

    def run_turn(self, state: BattleState, reducer: Reducer | None = None) -> BotTurn:
        """
        Play out the bot's whole turn, ending it when nothing is left.

        Stops early if the battle ends. Does nothing if it is not the
        bot's turn.
        """
        reducer = reducer or Reducer()
        turn = BotTurn(state=state)

        for _ in range(self.max_steps):
            if turn.state.is_over or turn.state.active_side is not self.side:
                return turn

            decision = self.select_action(turn.state, self.side, legal_actions(turn.state, self.side))
            result = reducer.apply(turn.state, decision.action)
            turn.steps.append(BotStep(decision=decision, result=result))

            if not result.success:
                logger.warning(f"Bot intent rejected ({result.error}), ending turn")
                break
            logger.debug(f"Bot: {decision.explanation}")
            turn.state = result.new_state

        if not turn.state.is_over and turn.state.active_side is self.side:
            decision = BotDecision(action=Action.end_turn(self.side), explanation="Forced end of turn")
            result = reducer.apply(turn.state, decision.action)
            turn.steps.append(BotStep(decision=decision, result=result))
            if result.success:
                turn.state = result.new_state
        return turn

    def _explain(self, action: Action, actor, score: float) -> str:
        if action.action_type == ActionType.USE_ABILITY:
            return f"Use {actor.champion.ability.name} (score {score:g})"
        card = actor.find_in_hand(action.payload.card_id)
        return f"Play {card.name if card else action.payload.card_id} (score {score:g})"
