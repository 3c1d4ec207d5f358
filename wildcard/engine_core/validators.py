"""
Validators - Independent rule checks over a session.

Each validator takes a Session and returns Success(session) or a Failure
carrying the specific GameError. Validators that need to know who is
acting are built by calling them with the actor id first:

    result = (
        Result.success(session)
        .chain(validate_is_waiting)
        .chain(validate_has_room)
        .chain(validate_not_seated(actor_id))
    )

Checks run left to right and the first failure wins, so the order in a
pipeline decides which error a caller sees.
"""

from __future__ import annotations
from typing import Any, Callable

from .result import Result
from .state import Session, SessionStatus
from .errors import (
    InvalidSessionIdError,
    InvalidSessionConfigError,
    NotAcceptingPlayersError,
    SessionFullError,
    AlreadySeatedError,
    NotCreatorError,
    AlreadyStartedError,
    MinimumPlayersUnmetError,
    NotAllReadyError,
    NotSeatedError,
    SessionNotActiveError,
    SessionNotStartedError,
    NoSeatedPlayersError,
    IndeterminateCurrentPlayerError,
    NotYourTurnError,
    CardNotInHandError,
)

Validator = Callable[[Session], Result]


def validate_session_id(session_id: Any) -> Result:
    """Session ids must be non-blank strings. Returns the trimmed id."""
    if not isinstance(session_id, str) or not session_id.strip():
        return Result.failure(InvalidSessionIdError())
    return Result.success(session_id.strip())


def validate_is_waiting(session: Session) -> Result:
    if session.status == SessionStatus.WAITING:
        return Result.success(session)
    return Result.failure(NotAcceptingPlayersError())


def validate_has_room(session: Session) -> Result:
    if len(session.players) < session.max_players:
        return Result.success(session)
    return Result.failure(SessionFullError())


def validate_not_seated(actor_id: str) -> Validator:
    def check(session: Session) -> Result:
        if session.is_seated(actor_id):
            return Result.failure(AlreadySeatedError())
        return Result.success(session)
    return check


def validate_is_creator(actor_id: str) -> Validator:
    def check(session: Session) -> Result:
        if session.creator_id == actor_id:
            return Result.success(session)
        return Result.failure(NotCreatorError())
    return check


def validate_not_started(session: Session) -> Result:
    """Only a Waiting session may be started; Ended sessions never restart."""
    if session.status == SessionStatus.WAITING:
        return Result.success(session)
    return Result.failure(AlreadyStartedError())


def validate_has_started(session: Session) -> Result:
    if session.status != SessionStatus.WAITING:
        return Result.success(session)
    return Result.failure(SessionNotStartedError())


def validate_player_limits(min_players: int, max_players: int, seated: int = 0) -> Result:
    """2 <= min <= max, and max never below the seats already taken."""
    if not 2 <= min_players <= max_players:
        return Result.failure(InvalidSessionConfigError())
    if max_players < seated:
        return Result.failure(InvalidSessionConfigError(
            f"Max players cannot be lower than the {seated} players already seated"
        ))
    return Result.success((min_players, max_players))


def validate_settings(min_players: int | None = None, max_players: int | None = None) -> Validator:
    """Check limits as they would be after an update; None keeps the stored value."""
    def check(session: Session) -> Result:
        return validate_player_limits(
            session.min_players if min_players is None else min_players,
            session.max_players if max_players is None else max_players,
            session.num_players,
        ).map(lambda _: session)
    return check


def validate_minimum_players(session: Session) -> Result:
    if len(session.players) >= session.min_players:
        return Result.success(session)
    return Result.failure(MinimumPlayersUnmetError(session.min_players))


def validate_all_ready(session: Session) -> Result:
    if all(p.ready for p in session.players):
        return Result.success(session)
    return Result.failure(NotAllReadyError())


def validate_is_seated(actor_id: str) -> Validator:
    def check(session: Session) -> Result:
        if session.is_seated(actor_id):
            return Result.success(session)
        return Result.failure(NotSeatedError())
    return check


def validate_is_active(session: Session) -> Result:
    if session.status == SessionStatus.ACTIVE:
        return Result.success(session)
    return Result.failure(SessionNotActiveError())


def validate_has_players(session: Session) -> Result:
    if session.players:
        return Result.success(session)
    return Result.failure(NoSeatedPlayersError())


def validate_is_current_player(actor_id: str) -> Validator:
    """
    It must be actor_id's turn.

    An out-of-range cursor is reported as IndeterminateCurrentPlayerError,
    not as a turn violation: it means the stored session is corrupt.
    """
    def check(session: Session) -> Result:
        current = session.current_player
        if current is None:
            return Result.failure(IndeterminateCurrentPlayerError())
        if current.player_id != actor_id:
            return Result.failure(NotYourTurnError())
        return Result.success(session)
    return check


def validate_holds_card(actor_id: str, card_id: str) -> Validator:
    def check(session: Session) -> Result:
        player = session.get_player(actor_id)
        if player is None:
            return Result.failure(NotSeatedError())
        if player.find_card(card_id) < 0:
            return Result.failure(CardNotInHandError())
        return Result.success(session)
    return check


def current_player_of(session: Session) -> Result:
    """Success(seat at the cursor) or IndeterminateCurrentPlayerError."""
    current = session.current_player
    if current is None:
        return Result.failure(IndeterminateCurrentPlayerError())
    return Result.success(current)
