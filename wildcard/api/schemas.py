"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the session manager.
All responses include explicit types for OpenAPI schema generation.

Errors share one shape, ErrorResponse, whose error_code is one of the
engine's ErrorCode values (SESSION_NOT_FOUND, NOT_YOUR_TURN, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.errors import ErrorCode


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    WAITING = "Waiting"
    ACTIVE = "Active"
    ENDED = "Ended"


class ChosenColor(str, Enum):
    """Colors a wild card may name."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """A card as seen in a hand."""
    card_id: str
    color: str
    kind: str
    face_value: Optional[int] = None

    model_config = {"from_attributes": True}


class DiscardInfo(BaseModel):
    """A card on the discard pile."""
    card_id: str
    color: str
    kind: str
    order: int
    face_value: Optional[int] = None
    played_by: Optional[str] = None
    played_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SeatInfo(BaseModel):
    """A seat without its hand; hands are only shown to their owner."""
    player_id: str
    ready: bool
    position: int
    card_count: int = 0


class PlayerDetailsInfo(BaseModel):
    """A seat decorated with directory details."""
    player_id: str
    username: str
    email: str
    ready: bool
    position: int

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new session; the caller takes the first seat."""
    title: str = Field("", max_length=200)
    rules: str = ""
    min_players: int = Field(2, ge=2, le=10)
    max_players: int = Field(4, ge=2, le=10)


class UpdateSessionRequest(BaseModel):
    """Lobby settings to change; omitted fields keep their value."""
    title: Optional[str] = Field(None, max_length=200)
    rules: Optional[str] = None
    min_players: Optional[int] = Field(None, ge=2, le=10)
    max_players: Optional[int] = Field(None, ge=2, le=10)


class PlayCardRequest(BaseModel):
    """Request to play one card from the caller's hand."""
    card_id: str = Field(..., min_length=1)
    chosen_color: Optional[ChosenColor] = Field(
        None, description="Required for wild and wild_draw_four"
    )


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Public view of a session."""
    session_id: str
    creator_id: str
    title: str
    status: SessionStatus
    min_players: int
    max_players: int
    players: list[SeatInfo] = Field(default_factory=list)
    current_player_count: int = 0
    players_ready_count: int = 0
    current_player_id: Optional[str] = None
    turn_direction: int = 1
    current_color: Optional[str] = None
    top_discard: Optional[DiscardInfo] = None
    deck_size: int = 0
    winner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    version: int = 0

    api_version: str = "v1"


class SessionStatusResponse(BaseModel):
    session_id: str
    status: SessionStatus


class CurrentPlayerResponse(BaseModel):
    session_id: str
    current_player_id: str


class HandResponse(BaseModel):
    """The caller's own hand."""
    session_id: str
    player_id: str
    cards: list[CardInfo] = Field(default_factory=list)
    count: int = 0


class ActionResponse(BaseModel):
    """Response after a play or an abandonment."""
    session_id: str
    message: str
    outcome: str = Field(description="Action the dispatcher took")
    game_over: bool = False
    winner_id: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    session: Optional[SessionResponse] = None


class DiscardTopResponse(BaseModel):
    """Top of the discard pile, or the initial card before any play."""
    session_id: str
    top_card: Optional[DiscardInfo] = None
    recent_cards: list[DiscardInfo] = Field(default_factory=list)
    discard_pile_size: int = 0
    initial_card: Optional[CardInfo] = None
    message: Optional[str] = None


class SimpleDiscardResponse(BaseModel):
    """Compact form: session ids with card names like 'Red Seven'."""
    game_ids: list[str]
    top_cards: list[str]


class RecentDiscardsResponse(BaseModel):
    session_id: str
    cards: list[DiscardInfo] = Field(default_factory=list)
    count: int = 0


class SessionPlayersResponse(BaseModel):
    session_id: str
    title: str
    status: SessionStatus
    max_players: int
    players: list[PlayerDetailsInfo] = Field(default_factory=list)
    total_players: int = 0


class SessionListResponse(BaseModel):
    """Response listing stored sessions."""
    sessions: list[str]
    count: int


class DeleteSessionResponse(BaseModel):
    """Confirmation that a session was removed."""
    session_id: str
    message: str = "Game deleted"


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
    status_code: int = Field(400, exclude=True, description="HTTP status, not serialized")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
