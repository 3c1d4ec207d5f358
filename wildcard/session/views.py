"""
Views - Read-only projections of a session for queries.

These are built from a loaded Session and never mutate it.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.state import Card, CardColor, CardKind, DiscardEntry, Session

RECENT_DISCARDS = 5
UNKNOWN_NAME = "Unknown"
UNKNOWN_CONTACT = "unknown@example.com"
DEFAULT_INITIAL_CARD = Card(
    card_id="initial", color=CardColor.BLUE.value, kind=CardKind.NUMBER.value, face_value=0,
)

COLOR_NAMES = {
    "red": "Red",
    "blue": "Blue",
    "green": "Green",
    "yellow": "Yellow",
    "wild": "Wild",
}

VALUE_NAMES = {
    "0": "Zero",
    "1": "One",
    "2": "Two",
    "3": "Three",
    "4": "Four",
    "5": "Five",
    "6": "Six",
    "7": "Seven",
    "8": "Eight",
    "9": "Nine",
    "skip": "Skip",
    "reverse": "Reverse",
    "draw_two": "Draw Two",
    "wild": "Wild",
    "wild_draw_four": "Wild Draw Four",
}


def card_name(color: str, kind: str, face_value: int | None) -> str:
    """'Red Seven', 'Blue Draw Two', 'Wild Draw Four'."""
    value = str(face_value) if kind == CardKind.NUMBER.value and face_value is not None else kind
    value_name = VALUE_NAMES.get(value, value)
    if color == CardColor.WILD.value:
        return value_name
    return f"{COLOR_NAMES.get(color, color)} {value_name}"


@dataclass
class DiscardTopView:
    session_id: str
    top_card: DiscardEntry | None
    recent_cards: list[DiscardEntry] = field(default_factory=list)
    discard_pile_size: int = 0
    initial_card: Card | None = None

    @property
    def is_empty(self) -> bool:
        return self.top_card is None


@dataclass
class SimpleDiscardView:
    """Legacy shape: one id list and one card-name list."""
    game_ids: list[str]
    top_cards: list[str]


@dataclass
class PlayerDetails:
    player_id: str
    username: str
    email: str
    ready: bool
    position: int


@dataclass
class SessionPlayersView:
    session_id: str
    title: str
    status: str
    max_players: int
    players: list[PlayerDetails] = field(default_factory=list)

    @property
    def total_players(self) -> int:
        return len(self.players)


def build_discard_top(session: Session) -> DiscardTopView:
    if not session.discard_pile:
        return DiscardTopView(
            session_id=session.session_id,
            top_card=None,
            discard_pile_size=0,
            initial_card=session.initial_card or DEFAULT_INITIAL_CARD,
        )
    return DiscardTopView(
        session_id=session.session_id,
        top_card=session.discard_pile[-1],
        recent_cards=recent_discards(session, RECENT_DISCARDS),
        discard_pile_size=len(session.discard_pile),
        initial_card=session.initial_card,
    )


def build_simple_discard(view: DiscardTopView) -> SimpleDiscardView:
    if view.top_card is None:
        return SimpleDiscardView(game_ids=[view.session_id], top_cards=[])
    top = view.top_card
    return SimpleDiscardView(
        game_ids=[view.session_id],
        top_cards=[card_name(top.color, top.kind, top.face_value)],
    )


def recent_discards(session: Session, limit: int) -> list[DiscardEntry]:
    """The last limit entries, newest first."""
    if limit <= 0:
        return []
    return list(reversed(session.discard_pile[-limit:]))


def unknown_player(player_id: str, ready: bool, position: int) -> PlayerDetails:
    return PlayerDetails(
        player_id=player_id,
        username=UNKNOWN_NAME,
        email=UNKNOWN_CONTACT,
        ready=ready,
        position=position,
    )
