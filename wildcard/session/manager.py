"""
Session Manager - Entry point for every action on a game session.

LIFECYCLE:
1. create   -> Waiting, creator seated and ready
2. join     -> more seats while Waiting and not full
   update   -> creator changes title, rules or limits while Waiting
3. ready    -> each seat marks itself ready
4. start    -> creator starts once enough seats are all ready; the deck
               is shuffled and hands are dealt
5. play / advance turn -> while Active
6. abandon  -> seat removed; one or zero seats left ends the game
7. Ended    -> nothing mutates the session again
8. delete   -> creator removes the session in any phase

Every action is one unit of work:

    load -> validate -> mutate in memory -> persist

Each method returns a Result. Rule violations come back as Failure with a
typed GameError; unexpected exceptions from collaborators are captured the
same way. Nothing here raises to the caller.
"""

from __future__ import annotations
from typing import Any, Callable
import asyncio
import logging

from ..engine_core.result import Result, ResultAsync
from ..engine_core.state import Session, plain
from ..engine_core.errors import (
    GameError,
    SessionNotFoundError,
)
from ..engine_core.validators import (
    validate_session_id,
    validate_is_waiting,
    validate_has_room,
    validate_not_seated,
    validate_is_creator,
    validate_not_started,
    validate_minimum_players,
    validate_all_ready,
    validate_is_seated,
    validate_is_active,
    validate_has_players,
    validate_has_started,
    validate_player_limits,
    validate_settings,
    current_player_of,
)
from ..engine_core import reducer
from ..engine_core.deck import shuffled_deck, deal, draw_initial_card
from .store import SessionStore, InMemorySessionStore, PlayerDirectory, InMemoryPlayerDirectory, new_session_id
from .outcomes import PostPlayOutcomeDispatcher, PostAbandonmentDispatcher
from .coordinators import CardPlayCoordinator, AbandonmentCoordinator
from .views import (
    PlayerDetails,
    SessionPlayersView,
    build_discard_top,
    build_simple_discard,
    recent_discards,
    unknown_player,
    UNKNOWN_NAME,
    UNKNOWN_CONTACT,
)

logger = logging.getLogger(__name__)

DEFAULT_HAND_SIZE = 7


def _report(operation: str, **context: Any) -> Callable[[BaseException], None]:
    """
    tap_error observer: rule violations log at WARNING, internal
    inconsistencies and unexpected exceptions at ERROR.
    """
    where = ", ".join(f"{k}={v}" for k, v in context.items())

    def observe(error: BaseException):
        if isinstance(error, GameError) and not error.internal:
            logger.warning("%s failed (%s): %s", operation, where, error.message)
        else:
            logger.error("%s failed (%s): %s", operation, where, error)
    return observe


class SessionManager:
    """
    Runs session actions against a store.

    Usage:
        manager = SessionManager()
        created = await manager.create_session("alice", title="Friday game")
        session_id = created.value.session_id
        await manager.join_session("bob", session_id)
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        directory: PlayerDirectory | None = None,
        hand_size: int = DEFAULT_HAND_SIZE,
        deck_seed: int | None = None,
    ):
        self.store = store or InMemorySessionStore()
        self.directory = directory or InMemoryPlayerDirectory()
        self.hand_size = hand_size
        self.deck_seed = deck_seed

        self.play_coordinator = CardPlayCoordinator(PostPlayOutcomeDispatcher(self.store))
        self.abandon_coordinator = AbandonmentCoordinator(PostAbandonmentDispatcher(self.store))

    # =========================================================================
    # Loading
    # =========================================================================

    def _load(self, session_id: Any) -> ResultAsync:
        return validate_session_id(session_id).to_async().chain(self._fetch)

    async def _fetch(self, session_id: str) -> Result:
        session = await self.store.load(session_id)
        if session is None:
            return Result.failure(SessionNotFoundError())
        return Result.success(session)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def create_session(
        self,
        creator_id: str,
        title: str = "",
        rules: str = "",
        min_players: int = 2,
        max_players: int = 4,
    ) -> Result:
        logger.info("Attempting to create a new game by user ID: %s", creator_id)
        return await (
            validate_player_limits(min_players, max_players)
            .to_async()
            .map(lambda _: reducer.create_session(
                new_session_id(), creator_id, title, rules, min_players, max_players,
            ))
            .map(self.store.create)
            .tap(lambda s: logger.info("Game %s created successfully by user %s.", s.session_id, creator_id))
            .tap_error(_report("Create game", user=creator_id))
        )

    async def update_session(
        self,
        actor_id: str,
        session_id: str,
        title: str | None = None,
        rules: str | None = None,
        min_players: int | None = None,
        max_players: int | None = None,
    ) -> Result:
        """Change lobby settings. Creator only, and only while Waiting."""
        return await (
            self._load(session_id)
            .chain(validate_is_creator(actor_id))
            .chain(validate_not_started)
            .chain(validate_settings(min_players, max_players))
            .map(lambda s: reducer.update_settings(s, title, rules, min_players, max_players))
            .map(self.store.save)
            .tap(lambda s: logger.info("Game %s updated by user %s.", s.session_id, actor_id))
            .tap_error(_report("Update game", user=actor_id, game=session_id))
        )

    async def delete_session(self, actor_id: str, session_id: str) -> Result:
        """Remove the session for good. Success(deleted session id)."""
        async def remove(session: Session) -> Result:
            if not await self.store.delete(session.session_id):
                return Result.failure(SessionNotFoundError())
            return Result.success(session.session_id)

        return await (
            self._load(session_id)
            .chain(validate_is_creator(actor_id))
            .chain(remove)
            .tap(lambda sid: logger.info("Game %s deleted by user %s.", sid, actor_id))
            .tap_error(_report("Delete game", user=actor_id, game=session_id))
        )

    async def join_session(self, actor_id: str, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .chain(validate_is_waiting)
            .chain(validate_has_room)
            .chain(validate_not_seated(actor_id))
            .map(lambda s: reducer.add_player(s, actor_id))
            .map(self.store.save)
            .tap(lambda s: logger.info("User %s successfully joined game %s.", actor_id, s.session_id))
            .tap_error(_report("Join game", user=actor_id, game=session_id))
        )

    async def set_ready(self, actor_id: str, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .chain(validate_is_waiting)
            .chain(validate_is_seated(actor_id))
            .map(lambda s: reducer.mark_ready(s, actor_id))
            .map(self.store.save)
            .tap(lambda s: logger.info("User %s is ready in game %s.", actor_id, s.session_id))
            .tap_error(_report("Set player ready", user=actor_id, game=session_id))
        )

    async def start_session(self, actor_id: str, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .chain(validate_is_creator(actor_id))
            .chain(validate_not_started)
            .chain(validate_minimum_players)
            .chain(validate_all_ready)
            .map(reducer.start_session)
            .map(self._deal)
            .map(self.store.save)
            .tap(lambda s: logger.info("Game %s successfully started by user %s.", s.session_id, actor_id))
            .tap_error(_report("Start game", user=actor_id, game=session_id))
        )

    def _deal(self, session: Session) -> Session:
        session.deck = shuffled_deck(self.deck_seed)
        deal(session, self.hand_size)
        session.initial_card = draw_initial_card(session)
        return session

    # =========================================================================
    # Turns
    # =========================================================================

    async def get_current_player(self, session_id: str) -> Result:
        """Success(player id) of the seat whose turn it is."""
        return await (
            self._load(session_id)
            .chain(validate_is_active)
            .chain(validate_has_players)
            .chain(current_player_of)
            .map(lambda p: p.player_id)
            .tap(lambda pid: logger.info("Current player for game %s is %s.", session_id, pid))
            .tap_error(_report("Current player retrieval", game=session_id))
        )

    async def advance_turn(self, session_id: str) -> Result:
        """Move the cursor one seat and persist. Success(new current player id)."""
        return await (
            self._load(session_id)
            .chain(validate_is_active)
            .chain(validate_has_players)
            .map(reducer.advance_turn)
            .map(self.store.save)
            .chain(current_player_of)
            .map(lambda p: p.player_id)
            .tap(lambda pid: logger.info("Turn advanced for game %s. Next player: %s.", session_id, pid))
            .tap_error(_report("Advance turn", game=session_id))
        )

    async def play_card(
        self,
        session_id: str,
        actor_id: str,
        card_id: str,
        chosen_color: str | None = None,
    ) -> Result:
        """Success(ActionReceipt) once the play is persisted."""
        logger.info("Player %s attempting to play card %s in game %s.", actor_id, card_id, session_id)
        return await (
            self._load(session_id)
            .chain(lambda s: self.play_coordinator.execute(s, actor_id, card_id, chosen_color))
            .tap_error(_report("Play card", user=actor_id, game=session_id, card=card_id))
        )

    async def abandon_session(self, actor_id: str, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .chain(lambda s: self.abandon_coordinator.execute(s, actor_id))
            .tap(lambda _: logger.info("User %s successfully abandoned game %s.", actor_id, session_id))
            .tap_error(_report("Abandon game", user=actor_id, game=session_id))
        )

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_session(self, session_id: str) -> Result:
        return await self._load(session_id).tap_error(_report("Get game", game=session_id))

    async def get_status(self, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .map(lambda s: s.status)
            .tap(lambda status: logger.info("Status for game %s: %s", session_id, plain(status)))
            .tap_error(_report("Get game status", game=session_id))
        )

    async def get_hand(self, session_id: str, actor_id: str) -> Result:
        """Success(list of cards) held by actor_id."""
        return await (
            self._load(session_id)
            .chain(validate_is_seated(actor_id))
            .map(lambda s: list(s.get_player(actor_id).hand))
            .tap_error(_report("Get hand", user=actor_id, game=session_id))
        )

    async def get_discard_top(self, session_id: str) -> Result:
        return await (
            self._load(session_id)
            .chain(validate_has_started)
            .map(build_discard_top)
            .tap(lambda v: logger.info(
                "Top discard for game %s: %s",
                v.session_id, v.top_card.card_id if v.top_card else "empty pile",
            ))
            .tap_error(_report("Get discard top", game=session_id))
        )

    async def get_discard_top_simple(self, session_id: str) -> Result:
        return await (
            ResultAsync(self.get_discard_top(session_id))
            .map(build_simple_discard)
        )

    async def get_recent_discards(self, session_id: str, limit: int = 5) -> Result:
        return await (
            self._load(session_id)
            .map(lambda s: recent_discards(s, limit))
            .tap(lambda cards: logger.info(
                "Retrieved %d recent discards for game %s.", len(cards), session_id,
            ))
            .tap_error(_report("Get recent discards", game=session_id, limit=limit))
        )

    async def get_session_players(self, session_id: str) -> Result:
        """Seats decorated with directory details; lookup failures degrade."""
        return await (
            self._load(session_id)
            .map(self._players_view)
            .tap(lambda v: logger.info(
                "Retrieved %d players for game %s.", v.total_players, v.session_id,
            ))
            .tap_error(_report("Get game players", game=session_id))
        )

    async def _players_view(self, session: Session) -> SessionPlayersView:
        details = await asyncio.gather(*(
            self._player_details(p.player_id, p.ready, p.position) for p in session.players
        ))
        return SessionPlayersView(
            session_id=session.session_id,
            title=session.title,
            status=plain(session.status),
            max_players=session.max_players,
            players=list(details),
        )

    async def _player_details(self, player_id: str, ready: bool, position: int) -> PlayerDetails:
        try:
            profile = await self.directory.lookup(player_id)
        except Exception as e:
            logger.warning("Failed to fetch details for player %s: %s", player_id, e)
            return unknown_player(player_id, ready, position)
        if profile is None:
            return unknown_player(player_id, ready, position)
        return PlayerDetails(
            player_id=player_id,
            username=profile.display_name or UNKNOWN_NAME,
            email=profile.contact or UNKNOWN_CONTACT,
            ready=ready,
            position=position,
        )

    async def list_sessions(self) -> Result:
        """Success(list of session ids)."""
        return await (
            ResultAsync.from_async(self.store.list_ids)
            .tap(lambda ids: logger.info("Retrieved %d games.", len(ids)))
            .tap_error(_report("List games"))
        )

