"""
Turn cursor - whose turn it is and which way play goes.

The cursor is the pair (current_player_index, turn_direction) on a Session.
All operations are safe on an empty seat list: abandonment can leave a
session with no seats for a moment before it is finalized.
"""

from __future__ import annotations

from .state import Session, SeatedPlayer, FORWARD, REVERSED


def step_index(count: int, index: int, direction: int) -> int:
    """Index one step away from index in direction, wrapping around."""
    if count <= 0:
        return index
    return (index + direction + count) % count


def advance(session: Session) -> Session:
    """Move the cursor to the next seat."""
    session.current_player_index = step_index(
        len(session.players), session.current_player_index, session.turn_direction
    )
    return session


def reverse(session: Session) -> Session:
    """Flip the direction of play. The cursor stays where it is."""
    session.turn_direction = REVERSED if session.turn_direction == FORWARD else FORWARD
    return session


def peek_next(session: Session) -> SeatedPlayer | None:
    """The seat advance() would land on, without moving the cursor."""
    if not session.players:
        return None
    idx = step_index(
        len(session.players), session.current_player_index, session.turn_direction
    )
    return session.players[idx]


def clamp_after_removal(session: Session, removed_index: int) -> Session:
    """
    Repair the cursor after the seat at removed_index was deleted.

    - A seat removed before the cursor shifts it down by one so it keeps
      pointing at the same player.
    - Removing the current seat passes the turn to whoever would have
      played next in the current direction.
    """
    count = len(session.players)
    if count == 0:
        session.current_player_index = 0
        return session

    idx = session.current_player_index
    if removed_index < idx:
        idx -= 1
    elif removed_index == idx and session.turn_direction == REVERSED:
        idx -= 1
    # Removing the current seat going forward: the next player has slid into idx.

    session.current_player_index = idx % count
    return session
