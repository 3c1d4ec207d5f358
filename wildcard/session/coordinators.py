"""
Coordinators - Multi-step actions that end in a store write.

CardPlayCoordinator:
    validate -> resolve effect -> execute effect -> discard -> win check -> dispatch

AbandonmentCoordinator:
    validate -> remove seat -> decide outcome from seats left -> dispatch

Nothing is mutated until every check has passed. Coordinators receive the
dispatcher they write through; they hold no reference back to the manager.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.result import Result, ResultAsync
from ..engine_core.state import Session
from ..engine_core.errors import InvalidCardActionError
from ..engine_core.effect_resolver import EffectContext, resolve_effect
from ..engine_core.outcome import ActionReceipt, Outcome
from ..engine_core import reducer
from ..engine_core.validators import (
    validate_is_active,
    validate_is_current_player,
    validate_holds_card,
    validate_is_seated,
)
from .outcomes import PostPlayOutcomeDispatcher, PostAbandonmentDispatcher

logger = logging.getLogger(__name__)

WIN_MESSAGE = "You played your last card and won!"
PLAYED_MESSAGE = "Card played successfully."
LEFT_MESSAGE = "You left the game"


@dataclass
class _ResolvedPlay:
    session: Session
    outcome: Outcome
    changes: list[str]


class CardPlayCoordinator:
    """
    Plays one card for the current player.

    The coordinator never advances the turn for a plain card; turn
    progression is a separate action. Special cards have already moved
    the cursor as part of their effect.
    """

    def __init__(self, dispatcher: PostPlayOutcomeDispatcher):
        self.dispatcher = dispatcher

    def execute(
        self,
        session: Session,
        actor_id: str,
        card_id: str,
        chosen_color: str | None = None,
    ) -> ResultAsync:
        return (
            Result.success(session)
            .chain(validate_is_active)
            .chain(validate_is_current_player(actor_id))
            .chain(validate_holds_card(actor_id, card_id))
            .chain(lambda s: self._apply(s, actor_id, card_id, chosen_color))
            .to_async()
            .chain(self._dispatch)
        )

    def _apply(
        self,
        session: Session,
        actor_id: str,
        card_id: str,
        chosen_color: str | None,
    ) -> Result:
        player = session.get_player(actor_id)
        card = player.hand[player.find_card(card_id)]

        effect = resolve_effect(card)
        context = EffectContext(session=session, card=card, chosen_color=chosen_color)
        if not effect.can_execute(context):
            return Result.failure(InvalidCardActionError())

        logger.info(
            "Player %s playing card %s (%s) in game %s.",
            actor_id, card.card_id, card.kind, session.session_id,
        )
        effect.execute(context)

        # The effect may have grown other hands; look the card up again.
        reducer.discard_from_hand(session, player, player.find_card(card_id))

        outcome = reducer.check_win_condition(player)
        return Result.success(_ResolvedPlay(session, outcome, context.changes))

    async def _dispatch(self, play: _ResolvedPlay) -> Result:
        session = await self.dispatcher.dispatch(play.outcome, play.session)
        message = WIN_MESSAGE if play.outcome.ends_game else PLAYED_MESSAGE
        return Result.success(ActionReceipt(
            message=message,
            outcome=play.outcome,
            session=session,
            changes=play.changes,
        ))


class AbandonmentCoordinator:
    """Removes a player from an active session and settles what follows."""

    def __init__(self, dispatcher: PostAbandonmentDispatcher):
        self.dispatcher = dispatcher

    def execute(self, session: Session, actor_id: str) -> ResultAsync:
        return (
            Result.success(session)
            .chain(validate_is_seated(actor_id))
            .chain(validate_is_active)
            .map(lambda s: reducer.remove_player(s, actor_id))
            .to_async()
            .chain(self._dispatch)
        )

    async def _dispatch(self, session: Session) -> Result:
        outcome = reducer.determine_post_abandonment(session)
        session = await self.dispatcher.dispatch(outcome, session)
        return Result.success(ActionReceipt(
            message=LEFT_MESSAGE,
            outcome=outcome,
            session=session,
        ))
