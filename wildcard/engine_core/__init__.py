"""
Engine Core - Deterministic session state and rule handling.

The engine is the in-memory part of every action:
1. Holds the Session aggregate
2. Moves the turn cursor
3. Validates actions against session state
4. Resolves card effects
5. Decides what follows a play or an abandonment

Nothing in here touches storage.
"""

from .state import Session, SeatedPlayer, Card, DiscardEntry, SessionStatus, CardColor, CardKind
from .result import Result, Success, Failure, ResultAsync
from .errors import GameError, ErrorCode
from .outcome import Outcome, PostPlayAction, PostAbandonmentAction, ActionReceipt
from .effect_resolver import EffectContext, CardEffect, resolve_effect

__all__ = [
    "Session",
    "SeatedPlayer",
    "Card",
    "DiscardEntry",
    "SessionStatus",
    "CardColor",
    "CardKind",
    "Result",
    "Success",
    "Failure",
    "ResultAsync",
    "GameError",
    "ErrorCode",
    "Outcome",
    "PostPlayAction",
    "PostAbandonmentAction",
    "ActionReceipt",
    "EffectContext",
    "CardEffect",
    "resolve_effect",
]
