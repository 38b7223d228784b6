"""
Battle Loop - Drives one session's battle, one human intent at a time.

The loop:
1. The human submits an intent
2. The engine applies it (through PeerSync in online mode)
3. Card plays get a commentary line
4. In local mode, if control passed to the opponent, the opponent bot
   plays out its whole turn
5. The caller gets the new state and everything that happened

Presentation delays between opponent steps are a client concern; the
loop runs them back to back.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from ..engine_core.action import Action, ActionResult, ActionType, ErrorCode
from ..engine_core.state import BattleState, Side

if TYPE_CHECKING:
    from .manager import Session
    from ..commentary import CommentaryService


class LoopState(Enum):
    """State of the battle loop after an intent."""
    WAITING_PLAYER = "waiting_player"
    RUNNING_OPPONENT = "running_opponent"
    WAITING_REMOTE = "waiting_remote"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing one human intent.

    Contains the new state, what changed, what the opponent did and any
    commentary produced along the way.
    """
    success: bool
    loop_state: LoopState
    state: BattleState | None = None

    changes: list[str] = field(default_factory=list)

    # Opponent bot actions taken (local mode)
    opponent_actions: list[str] = field(default_factory=list)

    commentary: list[str] = field(default_factory=list)

    # Errors
    errors: list[str] = field(default_factory=list)
    error_code: ErrorCode | None = None

    # Game over info
    winner: Side | None = None


class BattleLoop:
    """
    The battle loop driver.

    Usage:
        loop = BattleLoop(session, commentary)
        result = loop.submit(Action.play_card(Side.PLAYER, "n1"))
        if result.winner:
            ...
    """

    def __init__(self, session: Session, commentary: CommentaryService | None = None):
        self.session = session
        self.commentary = commentary

    @property
    def loop_state(self) -> LoopState:
        battle = self.session.battle_state
        if battle is None:
            return LoopState.WAITING_REMOTE
        if battle.is_over:
            return LoopState.GAME_OVER
        if battle.active_side is Side.PLAYER:
            return LoopState.WAITING_PLAYER
        if self.session.peer is not None:
            return LoopState.WAITING_REMOTE
        return LoopState.RUNNING_OPPONENT

    def submit(self, action: Action) -> TurnResult:
        """Apply one human intent and, in local mode, the opponent's reply."""
        self.session.touch()

        if action.side is not Side.PLAYER:
            return self._failed(f"Intent for {action.side.value} side", ErrorCode.NOT_YOUR_TURN)

        result = self._apply(action)
        if not result.success:
            logger.debug(f"Session {self.session.session_id}: {result.error}")
            return self._failed(result.error or "Rejected", result.error_code)

        turn = TurnResult(
            success=True,
            loop_state=self.loop_state,
            changes=list(result.state_changes),
        )
        self._comment_on(action, result, turn)

        if self.session.bot is not None and self.loop_state == LoopState.RUNNING_OPPONENT:
            self._run_opponent(turn)

        self.session.refresh_state()
        turn.state = self.session.battle_state
        turn.loop_state = self.loop_state
        if turn.state is not None:
            turn.winner = turn.state.winner
        return turn

    def tactical_tip(self) -> str | None:
        """Advice for the player's current hand."""
        battle = self.session.battle_state
        if battle is None or self.commentary is None:
            return None
        return self.commentary.tactical_tip(
            battle.player.hand,
            battle.opponent.health,
            battle.player.mana,
        )

    def _apply(self, action: Action) -> ActionResult:
        if self.session.peer is not None:
            return self.session.peer.submit(action)

        if self.session.battle is None:
            return ActionResult(
                success=False,
                error="Session has no battle",
                error_code=ErrorCode.GAME_OVER,
            )
        result = self.session.reducer.apply(self.session.battle, action)
        if result.success:
            self.session.battle = result.new_state
        return result

    def _run_opponent(self, turn: TurnResult) -> None:
        bot_turn = self.session.bot.run_turn(self.session.battle, self.session.reducer)
        self.session.battle = bot_turn.state
        for step in bot_turn.steps:
            if not step.result.success:
                turn.opponent_actions.append(f"Rejected: {step.result.error}")
                continue
            turn.opponent_actions.append(step.decision.explanation)
            turn.changes.extend(step.result.state_changes)
            self._comment_on(step.decision.action, step.result, turn)

    def _comment_on(self, action: Action, result: ActionResult, turn: TurnResult) -> None:
        if self.commentary is None or action.action_type != ActionType.PLAY_CARD:
            return
        card = result.new_state.last_played_card if result.new_state else None
        if card is None:
            return
        line = self.commentary.battle_commentary(card, action.side)
        turn.commentary.append(line)
        self.session.commentary_log.append(line)

    def _failed(self, error: str, code: ErrorCode | None) -> TurnResult:
        battle = self.session.battle_state
        return TurnResult(
            success=False,
            loop_state=self.loop_state,
            state=battle,
            errors=[error],
            error_code=code,
            winner=battle.winner if battle else None,
        )
