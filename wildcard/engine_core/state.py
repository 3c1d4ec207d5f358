"""
Game State - The session aggregate and the records embedded in it.

Design principles:
- One Session document is loaded, mutated in memory and saved whole
- Serializable: every field is a plain value, enum or nested dataclass
- Rule checks live in validators.py, mutations in reducer.py
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from copy import deepcopy


class SessionStatus(str, Enum):
    """Lifecycle phases of a session."""
    WAITING = "Waiting"
    ACTIVE = "Active"
    ENDED = "Ended"


class CardColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    WILD = "wild"


# Colors a player may name when playing a wild card.
PLAYABLE_COLORS = frozenset({
    CardColor.RED.value,
    CardColor.BLUE.value,
    CardColor.GREEN.value,
    CardColor.YELLOW.value,
})


class CardKind(str, Enum):
    NUMBER = "number"
    SKIP = "skip"
    REVERSE = "reverse"
    DRAW_TWO = "draw_two"
    WILD = "wild"
    WILD_DRAW_FOUR = "wild_draw_four"


FORWARD = 1
REVERSED = -1


@dataclass
class Card:
    """
    A physical card.

    kind is kept as a plain string so that unknown kinds survive a
    round trip through storage and fall back to number behaviour.
    """
    card_id: str
    color: str
    kind: str = CardKind.NUMBER.value
    face_value: int | None = None

    @property
    def is_wild(self) -> bool:
        return self.color == CardColor.WILD.value

    @property
    def value_label(self) -> str:
        """Value as shown on the card face: a digit or the action kind."""
        if self.kind == CardKind.NUMBER.value and self.face_value is not None:
            return str(self.face_value)
        return self.kind


@dataclass
class DiscardEntry:
    """A card on the discard pile, stamped with who played it and when."""
    card_id: str
    color: str
    kind: str
    order: int
    face_value: int | None = None
    played_by: str | None = None
    played_at: datetime | None = None

    @classmethod
    def from_card(cls, card: Card, order: int, played_by: str | None) -> DiscardEntry:
        return cls(
            card_id=card.card_id,
            color=card.color,
            kind=card.kind,
            face_value=card.face_value,
            order=order,
            played_by=played_by,
            played_at=datetime.now(timezone.utc),
        )


@dataclass
class SeatedPlayer:
    """A player's seat in one session."""
    player_id: str
    ready: bool = False
    position: int = 0  # 1-based; 0 until the seat list is renumbered
    hand: list[Card] = field(default_factory=list)

    def find_card(self, card_id: str) -> int:
        """Index of card_id in hand, or -1."""
        for i, card in enumerate(self.hand):
            if card.card_id == card_id:
                return i
        return -1


@dataclass
class Session:
    """
    One running game.

    players keeps join order while Waiting; once Active, the list order
    matches position and is the turn order.
    """
    session_id: str
    creator_id: str
    title: str = ""
    rules: str = ""
    status: SessionStatus = SessionStatus.WAITING
    min_players: int = 2
    max_players: int = 4

    players: list[SeatedPlayer] = field(default_factory=list)

    # Turn cursor
    current_player_index: int = 0
    turn_direction: int = FORWARD

    current_color: str | None = None
    discard_pile: list[DiscardEntry] = field(default_factory=list)
    deck: list[Card] = field(default_factory=list)
    initial_card: Card | None = None

    winner_id: str | None = None
    created_at: datetime | None = None
    ended_at: datetime | None = None

    # Optimistic concurrency token, bumped by the store on every write
    version: int = 0

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> SeatedPlayer | None:
        """Seat at the cursor, or None if the index is out of range."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def top_discard(self) -> DiscardEntry | None:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def next_discard_order(self) -> int:
        if not self.discard_pile:
            return 1
        return self.discard_pile[-1].order + 1

    def get_player(self, player_id: str) -> SeatedPlayer | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def is_seated(self, player_id: str) -> bool:
        return self.get_player(player_id) is not None

    def clone(self) -> Session:
        """Deep copy the session."""
        return deepcopy(self)


def plain(value: Any) -> Any:
    """Unwrap an Enum member to its value; other values pass through."""
    return value.value if isinstance(value, Enum) else value


# =============================================================================
# Serialization
# =============================================================================

def _dt_out(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _dt_in(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "card_id": card.card_id,
        "color": plain(card.color),
        "kind": plain(card.kind),
        "face_value": card.face_value,
    }


def card_from_dict(data: dict[str, Any]) -> Card:
    return Card(
        card_id=data["card_id"],
        color=data["color"],
        kind=data.get("kind", CardKind.NUMBER.value),
        face_value=data.get("face_value"),
    )


def session_to_dict(session: Session) -> dict[str, Any]:
    """Plain JSON-compatible representation of a session."""
    return {
        "session_id": session.session_id,
        "creator_id": session.creator_id,
        "title": session.title,
        "rules": session.rules,
        "status": plain(session.status),
        "min_players": session.min_players,
        "max_players": session.max_players,
        "players": [
            {
                "player_id": p.player_id,
                "ready": p.ready,
                "position": p.position,
                "hand": [card_to_dict(c) for c in p.hand],
            }
            for p in session.players
        ],
        "current_player_index": session.current_player_index,
        "turn_direction": session.turn_direction,
        "current_color": plain(session.current_color),
        "discard_pile": [
            {
                "card_id": e.card_id,
                "color": plain(e.color),
                "kind": plain(e.kind),
                "face_value": e.face_value,
                "order": e.order,
                "played_by": e.played_by,
                "played_at": _dt_out(e.played_at),
            }
            for e in session.discard_pile
        ],
        "deck": [card_to_dict(c) for c in session.deck],
        "initial_card": card_to_dict(session.initial_card) if session.initial_card else None,
        "winner_id": session.winner_id,
        "created_at": _dt_out(session.created_at),
        "ended_at": _dt_out(session.ended_at),
        "version": session.version,
        "metadata": session.metadata,
    }


def session_from_dict(data: dict[str, Any]) -> Session:
    return Session(
        session_id=data["session_id"],
        creator_id=data["creator_id"],
        title=data.get("title", ""),
        rules=data.get("rules", ""),
        status=SessionStatus(data.get("status", SessionStatus.WAITING.value)),
        min_players=data.get("min_players", 2),
        max_players=data.get("max_players", 4),
        players=[
            SeatedPlayer(
                player_id=p["player_id"],
                ready=p.get("ready", False),
                position=p.get("position", 0),
                hand=[card_from_dict(c) for c in p.get("hand", [])],
            )
            for p in data.get("players", [])
        ],
        current_player_index=data.get("current_player_index", 0),
        turn_direction=data.get("turn_direction", FORWARD),
        current_color=data.get("current_color"),
        discard_pile=[
            DiscardEntry(
                card_id=e["card_id"],
                color=e["color"],
                kind=e["kind"],
                face_value=e.get("face_value"),
                order=e["order"],
                played_by=e.get("played_by"),
                played_at=_dt_in(e.get("played_at")),
            )
            for e in data.get("discard_pile", [])
        ],
        deck=[card_from_dict(c) for c in data.get("deck", [])],
        initial_card=card_from_dict(data["initial_card"]) if data.get("initial_card") else None,
        winner_id=data.get("winner_id"),
        created_at=_dt_in(data.get("created_at")),
        ended_at=_dt_in(data.get("ended_at")),
        version=data.get("version", 0),
        metadata=data.get("metadata", {}),
    )
