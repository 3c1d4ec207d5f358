"""
Session Module - Runs game sessions against a store.

A session is one play-through of a game:
- Created by a player, who takes the first seat
- Filled and readied while Waiting
- Played turn by turn while Active
- Finalized exactly once when it Ends

Every action loads the session, validates it, mutates it in memory and
persists it. The store's version token rejects writes based on stale reads.
"""

from .manager import SessionManager
from .store import (
    SessionStore,
    InMemorySessionStore,
    JsonFileSessionStore,
    PlayerDirectory,
    InMemoryPlayerDirectory,
    PlayerProfile,
)
from .outcomes import PostPlayOutcomeDispatcher, PostAbandonmentDispatcher
from .coordinators import CardPlayCoordinator, AbandonmentCoordinator

__all__ = [
    "SessionManager",
    "SessionStore",
    "InMemorySessionStore",
    "JsonFileSessionStore",
    "PlayerDirectory",
    "InMemoryPlayerDirectory",
    "PlayerProfile",
    "PostPlayOutcomeDispatcher",
    "PostAbandonmentDispatcher",
    "CardPlayCoordinator",
    "AbandonmentCoordinator",
]
