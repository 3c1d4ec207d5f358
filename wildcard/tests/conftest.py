"""
Pytest fixtures for Wildcard tests.
"""

import pytest

from ..engine_core.state import Session
from ..session.store import InMemorySessionStore, InMemoryPlayerDirectory
from ..session.manager import SessionManager
from .factories import build_session


@pytest.fixture
def session_factory():
    """Build sessions with custom seats, hands and cursor."""
    return build_session


@pytest.fixture
def active_session() -> Session:
    """Three active seats, alice to play, forward."""
    return build_session()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def directory() -> InMemoryPlayerDirectory:
    directory = InMemoryPlayerDirectory()
    directory.register("alice", "Alice", "alice@example.com")
    directory.register("bob", "Bob", "bob@example.com")
    return directory


@pytest.fixture
def manager(store, directory) -> SessionManager:
    """Manager with a seeded deck and small hands."""
    return SessionManager(store=store, directory=directory, hand_size=3, deck_seed=7)
