"""
Game Errors - Typed failure kinds carried through Result pipelines.

Every rule violation has its own class so callers can branch on type.
Each error knows:
- code: stable machine-readable ErrorCode
- status_code: the HTTP status the API layer maps it to
- internal: True when the error means corrupted state, not a user mistake
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_SESSION_ID = "INVALID_SESSION_ID"
    INVALID_SESSION_CONFIG = "INVALID_SESSION_CONFIG"
    NOT_ACCEPTING_PLAYERS = "NOT_ACCEPTING_PLAYERS"
    SESSION_FULL = "SESSION_FULL"
    ALREADY_SEATED = "ALREADY_SEATED"
    NOT_CREATOR = "NOT_CREATOR"
    ALREADY_STARTED = "ALREADY_STARTED"
    MINIMUM_PLAYERS_UNMET = "MINIMUM_PLAYERS_UNMET"
    NOT_ALL_READY = "NOT_ALL_READY"
    NOT_SEATED = "NOT_SEATED"
    SESSION_NOT_ACTIVE = "SESSION_NOT_ACTIVE"
    SESSION_NOT_STARTED = "SESSION_NOT_STARTED"
    NO_SEATED_PLAYERS = "NO_SEATED_PLAYERS"
    INDETERMINATE_CURRENT_PLAYER = "INDETERMINATE_CURRENT_PLAYER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    INVALID_CARD_ACTION = "INVALID_CARD_ACTION"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameError(Exception):
    """Base class for all game rule and state errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    internal: bool = False
    default_message: str = "Game error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SessionNotFoundError(GameError):
    code = ErrorCode.SESSION_NOT_FOUND
    status_code = 404
    default_message = "Game not found"


class InvalidSessionIdError(GameError):
    code = ErrorCode.INVALID_SESSION_ID
    status_code = 400
    default_message = "Invalid game ID"


class InvalidSessionConfigError(GameError):
    code = ErrorCode.INVALID_SESSION_CONFIG
    status_code = 400
    default_message = "Player limits must satisfy 2 <= min_players <= max_players"


class NotAcceptingPlayersError(GameError):
    code = ErrorCode.NOT_ACCEPTING_PLAYERS
    status_code = 400
    default_message = "Game is not accepting new players (Already Active or Ended)"


class SessionFullError(GameError):
    code = ErrorCode.SESSION_FULL
    status_code = 400
    default_message = "Game is full"


class AlreadySeatedError(GameError):
    code = ErrorCode.ALREADY_SEATED
    status_code = 409
    default_message = "User is already in this game"


class NotCreatorError(GameError):
    code = ErrorCode.NOT_CREATOR
    status_code = 403
    default_message = "Only the game creator can perform this action"


class AlreadyStartedError(GameError):
    code = ErrorCode.ALREADY_STARTED
    status_code = 409
    default_message = "Game has already started"


class MinimumPlayersUnmetError(GameError):
    code = ErrorCode.MINIMUM_PLAYERS_UNMET
    status_code = 400

    def __init__(self, min_players: int):
        self.min_players = min_players
        super().__init__(f"Minimum {min_players} players required to start")


class NotAllReadyError(GameError):
    code = ErrorCode.NOT_ALL_READY
    status_code = 400
    default_message = "Not all players are ready"


class NotSeatedError(GameError):
    code = ErrorCode.NOT_SEATED
    status_code = 404
    default_message = "You are not in this game"


class SessionNotActiveError(GameError):
    code = ErrorCode.SESSION_NOT_ACTIVE
    status_code = 400
    default_message = "Game is not active"


class SessionNotStartedError(GameError):
    code = ErrorCode.SESSION_NOT_STARTED
    status_code = 412
    default_message = "Game has not started yet"


class NoSeatedPlayersError(GameError):
    code = ErrorCode.NO_SEATED_PLAYERS
    status_code = 500
    internal = True
    default_message = "No players in game"


class IndeterminateCurrentPlayerError(GameError):
    code = ErrorCode.INDETERMINATE_CURRENT_PLAYER
    status_code = 500
    internal = True
    default_message = "Could not determine current player"


class NotYourTurnError(GameError):
    code = ErrorCode.NOT_YOUR_TURN
    status_code = 400
    default_message = "It is not your turn."


class CardNotInHandError(GameError):
    code = ErrorCode.CARD_NOT_IN_HAND
    status_code = 400
    default_message = "Card not in your hand."


class InvalidCardActionError(GameError):
    code = ErrorCode.INVALID_CARD_ACTION
    status_code = 400
    default_message = "Invalid action for this card (e.g., missing color for Wild)."


class ConcurrentModificationError(GameError):
    code = ErrorCode.CONCURRENT_MODIFICATION
    status_code = 409

    def __init__(self, session_id: str, expected: int, actual: int):
        self.session_id = session_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Game {session_id} was modified concurrently "
            f"(expected version {expected}, stored version {actual})"
        )
