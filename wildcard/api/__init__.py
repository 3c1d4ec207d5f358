"""
API Module - HTTP interface to game sessions.

Exposes the session manager via REST API. Clients:
1. Create a session and gather players
2. Mark seats ready and start the game
3. Play cards and pass the turn
4. Leave, or query hands and the discard pile

The acting player's id arrives in the X-Player-Id header.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    UpdateSessionRequest,
    PlayCardRequest,
    # Responses
    SessionResponse,
    ActionResponse,
    DiscardTopResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DiscardInfo,
    SeatInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "UpdateSessionRequest",
    "PlayCardRequest",
    # Responses
    "SessionResponse",
    "ActionResponse",
    "DiscardTopResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "DiscardInfo",
    "SeatInfo",
    # Service
    "APIService",
    "create_app",
]
