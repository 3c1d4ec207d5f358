"""
Outcomes - What happens to a session after a play or an abandonment.

Coordinators decide an Outcome; dispatchers turn it into a store write:
- END_GAME_WITH_WINNER -> finalize with winner_id
- END_GAME_NO_WINNER   -> finalize without a winner
- CONTINUE_GAME / SAVE_GAME -> plain save
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PostPlayAction(str, Enum):
    END_GAME_WITH_WINNER = "END_GAME_WITH_WINNER"
    CONTINUE_GAME = "CONTINUE_GAME"


class PostAbandonmentAction(str, Enum):
    END_GAME_WITH_WINNER = "END_GAME_WITH_WINNER"
    END_GAME_NO_WINNER = "END_GAME_NO_WINNER"
    SAVE_GAME = "SAVE_GAME"


@dataclass
class Outcome:
    """A symbolic decision plus the winner it names, if any."""
    action: Any  # PostPlayAction or PostAbandonmentAction
    winner_id: str | None = None

    @property
    def ends_game(self) -> bool:
        return self.action in {
            PostPlayAction.END_GAME_WITH_WINNER,
            PostAbandonmentAction.END_GAME_WITH_WINNER,
            PostAbandonmentAction.END_GAME_NO_WINNER,
        }

    @classmethod
    def play_won(cls, winner_id: str) -> Outcome:
        return cls(action=PostPlayAction.END_GAME_WITH_WINNER, winner_id=winner_id)

    @classmethod
    def play_continues(cls) -> Outcome:
        return cls(action=PostPlayAction.CONTINUE_GAME)

    @classmethod
    def abandoned_with_winner(cls, winner_id: str) -> Outcome:
        return cls(action=PostAbandonmentAction.END_GAME_WITH_WINNER, winner_id=winner_id)

    @classmethod
    def abandoned_no_winner(cls) -> Outcome:
        return cls(action=PostAbandonmentAction.END_GAME_NO_WINNER)

    @classmethod
    def abandoned_continues(cls) -> Outcome:
        return cls(action=PostAbandonmentAction.SAVE_GAME)


@dataclass
class ActionReceipt:
    """
    Result of a play or abandonment, as reported back to the caller.

    Contains:
    - A human-readable confirmation message
    - The outcome that was dispatched
    - The session as it was persisted
    - What the card effect did, for UI updates
    """
    message: str
    outcome: Outcome
    session: Any | None = None  # Session
    changes: list[str] = field(default_factory=list)

    @property
    def game_over(self) -> bool:
        return self.outcome.ends_game

    @property
    def winner_id(self) -> str | None:
        return self.outcome.winner_id
