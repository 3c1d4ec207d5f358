"""
Reducer - The single place where a session is mutated.

Every function here assumes its preconditions were already checked by
validators.py and changes the session in place, returning it so the
calls compose inside Result.map().
"""

from __future__ import annotations
from datetime import datetime, timezone

from .state import (
    Session, SessionStatus, SeatedPlayer, DiscardEntry, FORWARD,
)
from .outcome import Outcome
from . import turn


def create_session(
    session_id: str,
    creator_id: str,
    title: str = "",
    rules: str = "",
    min_players: int = 2,
    max_players: int = 4,
) -> Session:
    """A new Waiting session with the creator seated, ready, at position 1."""
    return Session(
        session_id=session_id,
        creator_id=creator_id,
        title=title,
        rules=rules,
        min_players=min_players,
        max_players=max_players,
        status=SessionStatus.WAITING,
        players=[SeatedPlayer(player_id=creator_id, ready=True, position=1)],
        created_at=datetime.now(timezone.utc),
    )


def add_player(session: Session, player_id: str) -> Session:
    session.players.append(SeatedPlayer(player_id=player_id, ready=False, position=0))
    return session


def mark_ready(session: Session, player_id: str) -> Session:
    player = session.get_player(player_id)
    if player:
        player.ready = True
    return session


def update_settings(
    session: Session,
    title: str | None = None,
    rules: str | None = None,
    min_players: int | None = None,
    max_players: int | None = None,
) -> Session:
    """Overwrite the lobby settings that were given; None leaves a field alone."""
    if title is not None:
        session.title = title
    if rules is not None:
        session.rules = rules
    if min_players is not None:
        session.min_players = min_players
    if max_players is not None:
        session.max_players = max_players
    return session


def renumber_positions(session: Session) -> Session:
    """Positions become 1..N in current list order."""
    for index, player in enumerate(session.players):
        player.position = index + 1
    return session


def start_session(session: Session) -> Session:
    session.status = SessionStatus.ACTIVE
    session.current_player_index = 0
    session.turn_direction = FORWARD
    return renumber_positions(session)


def advance_turn(session: Session) -> Session:
    return turn.advance(session)


def discard_from_hand(session: Session, player: SeatedPlayer, card_index: int) -> DiscardEntry:
    """Move the card at card_index from player's hand onto the discard pile."""
    card = player.hand.pop(card_index)
    entry = DiscardEntry.from_card(card, order=session.next_discard_order, played_by=player.player_id)
    session.discard_pile.append(entry)
    return entry


def has_player_won(hand_size: int) -> bool:
    return hand_size == 0


def check_win_condition(player: SeatedPlayer) -> Outcome:
    if has_player_won(len(player.hand)):
        return Outcome.play_won(player.player_id)
    return Outcome.play_continues()


def remove_player(session: Session, player_id: str) -> Session:
    """Drop player_id's seat, renumber the rest and repair the cursor."""
    removed_index = next(
        (i for i, p in enumerate(session.players) if p.player_id == player_id), None
    )
    if removed_index is None:
        return session
    del session.players[removed_index]
    renumber_positions(session)
    return turn.clamp_after_removal(session, removed_index)


def determine_post_abandonment(session: Session) -> Outcome:
    """Decide from the seat count left after a player abandoned."""
    remaining = len(session.players)
    if remaining == 1:
        return Outcome.abandoned_with_winner(session.players[0].player_id)
    if remaining == 0:
        return Outcome.abandoned_no_winner()
    return Outcome.abandoned_continues()


def end_session(session: Session, winner_id: str | None = None) -> Session:
    """Final transition to Ended. Stores call this exactly once per session."""
    session.status = SessionStatus.ENDED
    session.winner_id = winner_id
    session.ended_at = datetime.now(timezone.utc)
    return session
