"""
Session Store - Where session documents live between actions.

Each action loads the whole session, mutates it in memory and writes it
back whole. Writes are guarded by Session.version:
- save() and finalize() fail with ConcurrentModificationError when the
  stored version differs from the one the caller loaded
- a successful write bumps the version on both copies

Two stores are provided:
- InMemorySessionStore: process-local, used by tests, the demo and the
  default API app
- JsonFileSessionStore: one JSON file per session under a directory

The player directory is a separate collaborator used only to decorate
player listings with display names.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
import asyncio
import json
import logging
import uuid

import aiofiles
import aiofiles.os

from ..engine_core.state import Session, SessionStatus, session_to_dict, session_from_dict
from ..engine_core.errors import (
    ConcurrentModificationError,
    InvalidSessionIdError,
    SessionNotActiveError,
    SessionNotFoundError,
)
from ..engine_core.reducer import end_session

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionStore(ABC):
    """Persistence contract used by the session manager."""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Persist a brand-new session and return it."""

    @abstractmethod
    async def load(self, session_id: str) -> Session | None:
        """Return a private copy of the stored session, or None."""

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Write the whole session back."""

    @abstractmethod
    async def finalize(self, session: Session, winner_id: str | None = None) -> Session:
        """End the session (status, winner, end time) and write it in one step."""

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Remove the session. False when there was nothing to remove."""

    @abstractmethod
    async def list_ids(self) -> list[str]:
        ...


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store.

    Sessions are deep-copied on the way in and out so callers never share
    objects with the store, the same as a document database would behave.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def create(self, session: Session) -> Session:
        async with self._lock:
            if not session.session_id:
                session.session_id = new_session_id()
            self._sessions[session.session_id] = session.clone()
        return session

    async def load(self, session_id: str) -> Session | None:
        stored = self._sessions.get(session_id)
        return stored.clone() if stored else None

    async def save(self, session: Session) -> Session:
        async with self._lock:
            self._check_version(session)
            session.version += 1
            self._sessions[session.session_id] = session.clone()
        return session

    async def finalize(self, session: Session, winner_id: str | None = None) -> Session:
        async with self._lock:
            stored = self._check_version(session)
            if stored.status == SessionStatus.ENDED:
                raise SessionNotActiveError(f"Game {session.session_id} has already ended")
            end_session(session, winner_id)
            session.version += 1
            self._sessions[session.session_id] = session.clone()
        return session

    async def delete(self, session_id: str) -> bool:
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def list_ids(self) -> list[str]:
        return list(self._sessions)

    def _check_version(self, session: Session) -> Session:
        stored = self._sessions.get(session.session_id)
        if stored is None:
            raise SessionNotFoundError()
        if stored.version != session.version:
            raise ConcurrentModificationError(session.session_id, session.version, stored.version)
        return stored


class JsonFileSessionStore(SessionStore):
    """
    One JSON document per session.

    File access goes through aiofiles so a slow disk never blocks the
    event loop while the write lock is held.

    Usage:
        store = JsonFileSessionStore(base_dir="~/.wildcard/sessions")
    """

    def __init__(self, base_dir: str | Path | None = None):
        if base_dir is None:
            base_dir = Path.home() / ".wildcard" / "sessions"
        self.base_dir = Path(base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    async def create(self, session: Session) -> Session:
        async with self._lock:
            if not session.session_id:
                session.session_id = new_session_id()
            await self._write(session)
        return session

    async def load(self, session_id: str) -> Session | None:
        return await self._read(session_id)

    async def save(self, session: Session) -> Session:
        async with self._lock:
            await self._check_version(session)
            session.version += 1
            await self._write(session)
        return session

    async def finalize(self, session: Session, winner_id: str | None = None) -> Session:
        async with self._lock:
            stored = await self._check_version(session)
            if stored.status == SessionStatus.ENDED:
                raise SessionNotActiveError(f"Game {session.session_id} has already ended")
            end_session(session, winner_id)
            session.version += 1
            await self._write(session)
        return session

    async def delete(self, session_id: str) -> bool:
        path = self._path(session_id)
        async with self._lock:
            if not await aiofiles.os.path.exists(path):
                return False
            await aiofiles.os.remove(path)
        return True

    async def list_ids(self) -> list[str]:
        names = await aiofiles.os.listdir(self.base_dir)
        return [name[:-len(".json")] for name in names if name.endswith(".json")]

    def _path(self, session_id: str) -> Path:
        # Ids become file names; anything path-like is rejected.
        if "/" in session_id or "\\" in session_id or session_id.startswith("."):
            raise InvalidSessionIdError()
        return self.base_dir / f"{session_id}.json"

    async def _read(self, session_id: str) -> Session | None:
        path = self._path(session_id)
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return session_from_dict(json.loads(await f.read()))

    async def _write(self, session: Session):
        path = self._path(session.session_id)
        tmp = path.with_suffix(".json.tmp")
        async with aiofiles.open(tmp, "w", encoding="utf-8") as f:
            await f.write(json.dumps(session_to_dict(session), indent=2))
        await aiofiles.os.replace(tmp, path)

    async def _check_version(self, session: Session) -> Session:
        stored = await self._read(session.session_id)
        if stored is None:
            raise SessionNotFoundError()
        if stored.version != session.version:
            raise ConcurrentModificationError(session.session_id, session.version, stored.version)
        return stored


@dataclass
class PlayerProfile:
    """Human-readable details for a player id."""
    player_id: str
    display_name: str
    contact: str


class PlayerDirectory(ABC):
    """Looks up display details for player ids."""

    @abstractmethod
    async def lookup(self, player_id: str) -> PlayerProfile | None:
        ...


class InMemoryPlayerDirectory(PlayerDirectory):

    def __init__(self, profiles: list[PlayerProfile] | None = None):
        self._profiles = {p.player_id: p for p in profiles or []}

    def register(self, player_id: str, display_name: str, contact: str) -> PlayerProfile:
        profile = PlayerProfile(player_id=player_id, display_name=display_name, contact=contact)
        self._profiles[player_id] = profile
        return profile

    async def lookup(self, player_id: str) -> PlayerProfile | None:
        return self._profiles.get(player_id)
