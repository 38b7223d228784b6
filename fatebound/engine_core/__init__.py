"""
Engine Core - Deterministic battle state management and effect resolution.

The engine is the runtime that:
1. Sets up a BattleState
2. Generates legal intents
3. Applies intents via the reducer
4. Resolves card and ability effects
5. Runs the turn/resource state machine
"""

from .state import (
    BattleState,
    BattlePhase,
    CombatantState,
    Side,
    HAND_LIMIT,
    MAX_MANA,
    OPENING_HAND,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions, is_legal
from .effect_resolver import EffectResolver, EffectDelta, apply_damage, check_winner
from .setup import create_battle, create_peer_battle

__all__ = [
    "BattleState",
    "BattlePhase",
    "CombatantState",
    "Side",
    "HAND_LIMIT",
    "MAX_MANA",
    "OPENING_HAND",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
    "EffectResolver",
    "EffectDelta",
    "apply_damage",
    "check_winner",
    "create_battle",
    "create_peer_battle",
]
