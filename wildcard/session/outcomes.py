"""
Outcome Dispatchers - Turn a decided Outcome into the matching store write.

Finalizing writes the whole session, so an ending is never followed by
a second plain save.
"""

from __future__ import annotations
from typing import Any, Awaitable, Callable
import logging

from ..engine_core.state import Session
from ..engine_core.outcome import Outcome, PostPlayAction, PostAbandonmentAction
from .store import SessionStore

logger = logging.getLogger(__name__)

Handler = Callable[[Session, Outcome], Awaitable[Session]]


class OutcomeDispatcher:
    """Looks up the handler for an outcome's action and runs it."""

    label = "outcome"

    def __init__(self, store: SessionStore):
        self.store = store
        self.handlers: dict[Any, Handler] = {}

    async def dispatch(self, outcome: Outcome, session: Session) -> Session:
        handler = self.handlers.get(outcome.action)
        if handler is None:
            logger.error("Unknown %s action: %s", self.label, outcome.action)
            raise ValueError(f"Unknown {self.label} action: {outcome.action}")
        return await handler(session, outcome)

    async def _save(self, session: Session, outcome: Outcome) -> Session:
        return await self.store.save(session)


class PostPlayOutcomeDispatcher(OutcomeDispatcher):
    label = "post-play"

    def __init__(self, store: SessionStore):
        super().__init__(store)
        self.handlers = {
            PostPlayAction.END_GAME_WITH_WINNER: self._end_with_winner,
            PostPlayAction.CONTINUE_GAME: self._save,
        }

    async def _end_with_winner(self, session: Session, outcome: Outcome) -> Session:
        session = await self.store.finalize(session, outcome.winner_id)
        logger.info("Player %s has won game %s!", outcome.winner_id, session.session_id)
        return session


class PostAbandonmentDispatcher(OutcomeDispatcher):
    label = "post-abandonment"

    def __init__(self, store: SessionStore):
        super().__init__(store)
        self.handlers = {
            PostAbandonmentAction.END_GAME_WITH_WINNER: self._end_with_winner,
            PostAbandonmentAction.END_GAME_NO_WINNER: self._end_no_winner,
            PostAbandonmentAction.SAVE_GAME: self._save,
        }

    async def _end_with_winner(self, session: Session, outcome: Outcome) -> Session:
        session = await self.store.finalize(session, outcome.winner_id)
        logger.info(
            "Game %s ended due to last player (%s) remaining after abandonment.",
            session.session_id, outcome.winner_id,
        )
        return session

    async def _end_no_winner(self, session: Session, outcome: Outcome) -> Session:
        session = await self.store.finalize(session, None)
        logger.info("Game %s ended as all players abandoned.", session.session_id)
        return session
