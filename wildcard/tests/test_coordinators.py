"""
Tests for the play and abandonment coordinators.

Tests:
- Card play validation order and failure without writes
- Effects, discard and win check in one play
- Abandonment outcomes and cursor repair
"""

import pytest

from ..engine_core.state import SessionStatus, CardKind, REVERSED
from ..engine_core.errors import (
    SessionNotActiveError,
    NotYourTurnError,
    CardNotInHandError,
    InvalidCardActionError,
    NotSeatedError,
    ConcurrentModificationError,
)
from ..engine_core.outcome import PostPlayAction, PostAbandonmentAction
from ..session.outcomes import PostPlayOutcomeDispatcher, PostAbandonmentDispatcher
from ..session.coordinators import (
    CardPlayCoordinator,
    AbandonmentCoordinator,
    WIN_MESSAGE,
    PLAYED_MESSAGE,
    LEFT_MESSAGE,
)
from .factories import number, action, wild


@pytest.fixture
def play(store):
    return CardPlayCoordinator(PostPlayOutcomeDispatcher(store))


@pytest.fixture
def abandon(store):
    return AbandonmentCoordinator(PostAbandonmentDispatcher(store))


async def seed(store, session):
    """Store the session and hand back a loaded copy, as the manager does."""
    await store.create(session)
    return await store.load(session.session_id)


class TestCardPlay:

    async def test_number_card_continues(self, store, play, session_factory):
        session = await seed(store, session_factory(hands={"alice": [number("red", 5), number("red", 6)]}))

        result = await play.execute(session, "alice", "red-5-1")

        receipt = result.value
        assert receipt.message == PLAYED_MESSAGE
        assert receipt.outcome.action == PostPlayAction.CONTINUE_GAME
        assert not receipt.game_over

        stored = await store.load("game-1")
        assert stored.top_discard.card_id == "red-5-1"
        assert stored.top_discard.order == 1
        assert [c.card_id for c in stored.players[0].hand] == ["red-6-1"]
        # Turn progression is a separate action
        assert stored.current_player_index == 0

    async def test_reverse_flips_direction(self, store, play, session_factory):
        hands = {"alice": [action("red", CardKind.REVERSE), number("red", 2)]}
        session = await seed(store, session_factory(hands=hands))
        deck_before = len(session.deck)

        await play.execute(session, "alice", "red-reverse-1")

        stored = await store.load("game-1")
        assert stored.turn_direction == REVERSED
        assert stored.current_player_index == 0
        assert len(stored.deck) == deck_before
        assert [len(p.hand) for p in stored.players] == [1, 1, 1]

    async def test_last_card_wins(self, store, play, session_factory):
        session = await seed(store, session_factory(hands={"alice": [number("blue", 9)]}))

        result = await play.execute(session, "alice", "blue-9-1")

        receipt = result.value
        assert receipt.message == WIN_MESSAGE
        assert receipt.game_over
        assert receipt.winner_id == "alice"

        stored = await store.load("game-1")
        assert stored.status == SessionStatus.ENDED
        assert stored.winner_id == "alice"
        assert stored.players[0].hand == []
        assert stored.top_discard.card_id == "blue-9-1"

    async def test_last_card_draw_two_still_penalizes(self, store, play, session_factory):
        session = await seed(store, session_factory(hands={"alice": [action("red", CardKind.DRAW_TWO)]}))

        result = await play.execute(session, "alice", "red-draw_two-1")

        assert result.value.game_over
        stored = await store.load("game-1")
        assert len(stored.players[1].hand) == 3

    async def test_wild_sets_color(self, store, play, session_factory):
        session = await seed(store, session_factory(hands={"alice": [wild(), number("red", 2)]}))

        result = await play.execute(session, "alice", "wild-wild-1", chosen_color="yellow")

        assert result.value.changes == ["Color is now yellow"]
        assert (await store.load("game-1")).current_color == "yellow"

    async def test_wild_without_color_fails_without_changes(self, store, play, session_factory):
        session = await seed(store, session_factory(hands={"alice": [wild(), number("red", 2)]}))

        result = await play.execute(session, "alice", "wild-wild-1")

        assert isinstance(result.error, InvalidCardActionError)
        stored = await store.load("game-1")
        assert len(stored.players[0].hand) == 2
        assert stored.discard_pile == []
        assert stored.version == 0

    @pytest.mark.parametrize("actor, card_id, error_type", [
        ("bob", "red-1-2", NotYourTurnError),
        ("alice", "red-9-9", CardNotInHandError),
    ])
    async def test_invalid_play_writes_nothing(self, store, play, active_session, actor, card_id, error_type):
        session = await seed(store, active_session)

        result = await play.execute(session, actor, card_id)

        assert isinstance(result.error, error_type)
        assert (await store.load("game-1")).version == 0

    async def test_inactive_session_rejected_first(self, store, play, session_factory):
        session = await seed(store, session_factory(status=SessionStatus.WAITING))

        result = await play.execute(session, "bob", "no-card")

        assert isinstance(result.error, SessionNotActiveError)

    async def test_stale_session_conflicts(self, store, play, session_factory):
        hands = {"alice": [number("red", 5), number("red", 6)]}
        stale = await seed(store, session_factory(hands=hands))
        fresh = await store.load("game-1")
        await store.save(fresh)

        result = await play.execute(stale, "alice", "red-5-1")

        assert isinstance(result.error, ConcurrentModificationError)


class TestSkipAndDrawSemantics:
    """Effects move the cursor before the play is persisted."""

    async def test_skip_moves_cursor_to_skipped_seat(self, store, play, session_factory):
        hands = {"alice": [action("red", CardKind.SKIP), number("red", 2)]}
        session = await seed(store, session_factory(hands=hands))

        await play.execute(session, "alice", "red-skip-1")

        assert (await store.load("game-1")).current_player.player_id == "bob"

    async def test_draw_two_victim_loses_turn(self, store, play, session_factory):
        hands = {"alice": [action("red", CardKind.DRAW_TWO), number("red", 2)]}
        session = await seed(store, session_factory(hands=hands))

        result = await play.execute(session, "alice", "red-draw_two-1")

        stored = await store.load("game-1")
        assert len(stored.players[1].hand) == 3
        assert stored.current_player.player_id == "bob"
        assert result.value.changes == ["bob draws 2 card(s) and is skipped"]


class TestAbandonment:

    async def test_two_seats_one_leaves_wins(self, store, abandon, session_factory):
        session = await seed(store, session_factory(player_ids=("p1", "p2")))

        result = await abandon.execute(session, "p1")

        receipt = result.value
        assert receipt.message == LEFT_MESSAGE
        assert receipt.outcome.action == PostAbandonmentAction.END_GAME_WITH_WINNER
        assert receipt.winner_id == "p2"

        stored = await store.load("game-1")
        assert stored.status == SessionStatus.ENDED
        assert stored.winner_id == "p2"
        assert [p.player_id for p in stored.players] == ["p2"]

    async def test_last_seat_leaves_no_winner(self, store, abandon, session_factory):
        session = await seed(store, session_factory(player_ids=("p1",)))

        result = await abandon.execute(session, "p1")

        assert result.value.outcome.action == PostAbandonmentAction.END_GAME_NO_WINNER
        stored = await store.load("game-1")
        assert stored.status == SessionStatus.ENDED
        assert stored.winner_id is None
        assert stored.players == []

    async def test_three_seats_game_continues(self, store, abandon, session_factory):
        session = await seed(store, session_factory(index=2))  # carol's turn

        result = await abandon.execute(session, "alice")

        assert result.value.outcome.action == PostAbandonmentAction.SAVE_GAME
        stored = await store.load("game-1")
        assert stored.status == SessionStatus.ACTIVE
        assert stored.current_player.player_id == "carol"
        assert [p.position for p in stored.players] == [1, 2]

    async def test_not_seated_checked_before_status(self, store, abandon, session_factory):
        session = await seed(store, session_factory(status=SessionStatus.ENDED))

        result = await abandon.execute(session, "mallory")

        assert isinstance(result.error, NotSeatedError)

    async def test_ended_session_rejected(self, store, abandon, session_factory):
        session = await seed(store, session_factory(status=SessionStatus.ENDED))

        result = await abandon.execute(session, "alice")

        assert isinstance(result.error, SessionNotActiveError)
        assert (await store.load("game-1")).num_players == 3
