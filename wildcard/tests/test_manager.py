"""
Tests for SessionManager.

Tests:
- Lobby flow from create to start
- Turn queries and advancing
- Play and abandonment through the manager
- Read-side queries and directory fallbacks
"""

import pytest

from ..engine_core.state import SessionStatus, CardKind
from ..engine_core.errors import (
    InvalidSessionIdError,
    InvalidSessionConfigError,
    SessionNotFoundError,
    NotAcceptingPlayersError,
    SessionFullError,
    AlreadySeatedError,
    NotCreatorError,
    AlreadyStartedError,
    MinimumPlayersUnmetError,
    NotAllReadyError,
    NotSeatedError,
    SessionNotActiveError,
    SessionNotStartedError,
)
from ..session.manager import SessionManager
from ..session.store import PlayerDirectory, JsonFileSessionStore
from ..session.views import card_name
from .factories import build_session, number, action, wild


async def lobby(manager, *others, min_players=2, max_players=4):
    """Create a session for alice and seat the others, not ready."""
    created = await manager.create_session("alice", title="Friday", min_players=min_players, max_players=max_players)
    session_id = created.value.session_id
    for player_id in others:
        (await manager.join_session(player_id, session_id)).get_or_throw()
    return session_id


async def started(manager, *others):
    session_id = await lobby(manager, *others)
    for player_id in others:
        (await manager.set_ready(player_id, session_id)).get_or_throw()
    (await manager.start_session("alice", session_id)).get_or_throw()
    return session_id


class TestLobby:

    async def test_create(self, manager):
        result = await manager.create_session("alice", title="Friday")

        session = result.value
        assert session.status == SessionStatus.WAITING
        assert session.creator_id == "alice"
        assert session.players[0].ready
        assert (await manager.get_session(session.session_id)).is_success

    @pytest.mark.parametrize("min_players, max_players", [(1, 4), (3, 2)])
    async def test_create_rejects_bad_limits(self, manager, min_players, max_players):
        result = await manager.create_session("alice", min_players=min_players, max_players=max_players)
        assert isinstance(result.error, InvalidSessionConfigError)
        assert (await manager.list_sessions()).value == []

    async def test_join_then_start_needs_ready(self, manager):
        session_id = await lobby(manager)

        joined = await manager.join_session("bob", session_id)
        assert joined.value.num_players == 2

        result = await manager.start_session("alice", session_id)
        assert isinstance(result.error, NotAllReadyError)

    async def test_ready_then_start(self, manager):
        session_id = await lobby(manager, "bob")
        (await manager.set_ready("bob", session_id)).get_or_throw()

        result = await manager.start_session("alice", session_id)

        session = result.value
        assert session.status == SessionStatus.ACTIVE
        assert session.current_player_index == 0
        assert session.turn_direction == 1
        assert [p.position for p in session.players] == [1, 2]

    async def test_start_deals_hands(self, manager):
        session_id = await started(manager, "bob")
        session = (await manager.get_session(session_id)).value

        assert [len(p.hand) for p in session.players] == [3, 3]
        assert session.initial_card.kind == CardKind.NUMBER.value
        assert len(session.deck) == 108 - 6 - 1

    async def test_join_errors(self, manager):
        session_id = await lobby(manager, "bob", max_players=2)

        assert isinstance((await manager.join_session("bob", session_id)).error, SessionFullError)
        assert isinstance((await manager.join_session("carol", "missing")).error, SessionNotFoundError)
        assert isinstance((await manager.join_session("carol", "   ")).error, InvalidSessionIdError)

    async def test_join_already_seated(self, manager):
        session_id = await lobby(manager, "bob")
        assert isinstance((await manager.join_session("bob", session_id)).error, AlreadySeatedError)

    async def test_join_after_start(self, manager):
        session_id = await started(manager, "bob")
        result = await manager.join_session("carol", session_id)
        assert isinstance(result.error, NotAcceptingPlayersError)

    async def test_start_errors(self, manager):
        session_id = await lobby(manager, min_players=3)

        assert isinstance((await manager.start_session("bob", session_id)).error, NotCreatorError)
        result = await manager.start_session("alice", session_id)
        assert isinstance(result.error, MinimumPlayersUnmetError)
        assert result.error.message == "Minimum 3 players required to start"

    async def test_start_twice(self, manager):
        session_id = await started(manager, "bob")
        result = await manager.start_session("alice", session_id)
        assert isinstance(result.error, AlreadyStartedError)

    async def test_ready_requires_seat(self, manager):
        session_id = await lobby(manager)
        assert isinstance((await manager.set_ready("bob", session_id)).error, NotSeatedError)


class TestSettings:

    async def test_update_lobby_settings(self, manager):
        session_id = await lobby(manager, "bob")

        result = await manager.update_session("alice", session_id, title="Saturday", max_players=6)

        session = result.value
        assert session.title == "Saturday"
        assert session.max_players == 6
        assert session.min_players == 2
        assert (await manager.get_session(session_id)).value.title == "Saturday"

    async def test_update_requires_creator(self, manager):
        session_id = await lobby(manager, "bob")
        result = await manager.update_session("bob", session_id, title="Mine now")
        assert isinstance(result.error, NotCreatorError)

    async def test_update_after_start(self, manager):
        session_id = await started(manager, "bob")
        result = await manager.update_session("alice", session_id, rules="house rules")
        assert isinstance(result.error, AlreadyStartedError)

    @pytest.mark.parametrize("changes", [
        {"min_players": 5},
        {"max_players": 1},
        {"min_players": 3, "max_players": 2},
    ])
    async def test_update_rejects_bad_limits(self, manager, changes):
        session_id = await lobby(manager)
        result = await manager.update_session("alice", session_id, **changes)
        assert isinstance(result.error, InvalidSessionConfigError)

    async def test_update_max_below_seated(self, manager):
        session_id = await lobby(manager, "bob", "carol")

        result = await manager.update_session("alice", session_id, max_players=2)

        assert isinstance(result.error, InvalidSessionConfigError)
        assert "3 players already seated" in result.error.message
        assert (await manager.get_session(session_id)).value.max_players == 4

    async def test_delete(self, manager):
        session_id = await lobby(manager, "bob")

        result = await manager.delete_session("alice", session_id)

        assert result.value == session_id
        assert isinstance((await manager.get_session(session_id)).error, SessionNotFoundError)
        assert (await manager.list_sessions()).value == []

    async def test_delete_requires_creator(self, manager):
        session_id = await lobby(manager, "bob")
        result = await manager.delete_session("bob", session_id)
        assert isinstance(result.error, NotCreatorError)
        assert (await manager.get_session(session_id)).is_success

    async def test_delete_missing(self, manager):
        result = await manager.delete_session("alice", "missing")
        assert isinstance(result.error, SessionNotFoundError)


class TestTurns:

    async def test_current_player_and_advance(self, manager):
        session_id = await started(manager, "bob", "carol")

        assert (await manager.get_current_player(session_id)).value == "alice"
        assert (await manager.advance_turn(session_id)).value == "bob"
        assert (await manager.advance_turn(session_id)).value == "carol"
        assert (await manager.advance_turn(session_id)).value == "alice"

    async def test_skip_then_advance_lands_two_seats_on(self, store, manager):
        hands = {"alice": [action("red", CardKind.SKIP), number("red", 2)]}
        await store.create(build_session(hands=hands))

        (await manager.play_card("game-1", "alice", "red-skip-1")).get_or_throw()

        assert (await manager.advance_turn("game-1")).value == "carol"

    async def test_draw_two_then_advance_passes_victim(self, store, manager):
        hands = {"alice": [action("red", CardKind.DRAW_TWO), number("red", 2)]}
        await store.create(build_session(hands=hands))

        (await manager.play_card("game-1", "alice", "red-draw_two-1")).get_or_throw()

        assert (await manager.advance_turn("game-1")).value == "carol"
        assert len((await manager.get_hand("game-1", "bob")).value) == 3

    async def test_reverse_then_advance_goes_backwards(self, store, manager):
        hands = {"alice": [action("red", CardKind.REVERSE), number("red", 2)]}
        await store.create(build_session(hands=hands))

        (await manager.play_card("game-1", "alice", "red-reverse-1")).get_or_throw()

        assert (await manager.advance_turn("game-1")).value == "carol"
        assert (await manager.advance_turn("game-1")).value == "bob"

    async def test_current_player_requires_active(self, manager):
        session_id = await lobby(manager, "bob")
        result = await manager.get_current_player(session_id)
        assert isinstance(result.error, SessionNotActiveError)

    async def test_play_through_manager(self, manager):
        session_id = await started(manager, "bob")
        hand = (await manager.get_hand(session_id, "alice")).value
        card = hand[0]

        result = await manager.play_card(
            session_id, "alice", card.card_id, "red" if card.is_wild else None,
        )

        assert result.is_success
        session = (await manager.get_session(session_id)).value
        assert session.top_discard.card_id == card.card_id
        assert len(session.get_player("alice").hand) == 2

    async def test_play_unknown_session(self, manager):
        result = await manager.play_card("missing", "alice", "red-1-1")
        assert isinstance(result.error, SessionNotFoundError)

    async def test_win_is_final(self, store, manager):
        await store.create(build_session(player_ids=("alice", "bob"), hands={"alice": [number("red", 3)]}))

        won = await manager.play_card("game-1", "alice", "red-3-1")
        assert won.value.winner_id == "alice"

        again = await manager.play_card("game-1", "bob", "red-1-2")
        assert isinstance(again.error, SessionNotActiveError)
        assert (await manager.get_status("game-1")).value == SessionStatus.ENDED

    async def test_abandon_two_seats(self, manager):
        session_id = await started(manager, "bob")

        result = await manager.abandon_session("bob", session_id)

        assert result.value.winner_id == "alice"
        session = (await manager.get_session(session_id)).value
        assert session.status == SessionStatus.ENDED
        assert session.winner_id == "alice"

    async def test_abandon_not_seated(self, manager):
        session_id = await started(manager, "bob")
        result = await manager.abandon_session("carol", session_id)
        assert isinstance(result.error, NotSeatedError)


class TestQueries:

    async def test_discard_top_before_start(self, manager):
        session_id = await lobby(manager, "bob")
        result = await manager.get_discard_top(session_id)
        assert isinstance(result.error, SessionNotStartedError)

    async def test_discard_top_empty_pile_shows_initial_card(self, manager):
        session_id = await started(manager, "bob")

        view = (await manager.get_discard_top(session_id)).value

        assert view.is_empty
        assert view.discard_pile_size == 0
        assert view.initial_card is not None

    async def test_discard_top_recent_newest_first(self, store, manager):
        hand = [number("red", v) for v in range(1, 9)]
        await store.create(build_session(player_ids=("alice", "bob"), hands={"alice": hand}))
        for card in hand[:7]:
            (await manager.play_card("game-1", "alice", card.card_id)).get_or_throw()

        view = (await manager.get_discard_top("game-1")).value

        assert view.top_card.card_id == "red-7-1"
        assert view.discard_pile_size == 7
        assert [e.order for e in view.recent_cards] == [7, 6, 5, 4, 3]

    async def test_recent_discards_limit(self, store, manager):
        hand = [number("red", v) for v in range(1, 5)]
        await store.create(build_session(player_ids=("alice", "bob"), hands={"alice": hand}))
        for card in hand[:3]:
            (await manager.play_card("game-1", "alice", card.card_id)).get_or_throw()

        recent = (await manager.get_recent_discards("game-1", 2)).value

        assert [e.card_id for e in recent] == ["red-3-1", "red-2-1"]

    async def test_discard_top_simple(self, store, manager):
        hand = [wild(CardKind.WILD_DRAW_FOUR), number("red", 7)]
        await store.create(build_session(player_ids=("alice", "bob"), hands={"alice": hand}))
        (await manager.play_card("game-1", "alice", "red-7-1")).get_or_throw()

        view = (await manager.get_discard_top_simple("game-1")).value

        assert view.game_ids == ["game-1"]
        assert view.top_cards == ["Red Seven"]

    def test_card_names(self):
        assert card_name("blue", CardKind.DRAW_TWO.value, None) == "Blue Draw Two"
        assert card_name("wild", CardKind.WILD_DRAW_FOUR.value, None) == "Wild Draw Four"
        assert card_name("green", CardKind.NUMBER.value, 0) == "Green Zero"

    async def test_hand_requires_seat(self, manager):
        session_id = await started(manager, "bob")
        result = await manager.get_hand(session_id, "mallory")
        assert isinstance(result.error, NotSeatedError)

    async def test_players_with_directory_details(self, manager):
        session_id = await lobby(manager, "bob", "zed")

        view = (await manager.get_session_players(session_id)).value

        assert view.total_players == 3
        assert [(p.username, p.email) for p in view.players] == [
            ("Alice", "alice@example.com"),
            ("Bob", "bob@example.com"),
            ("Unknown", "unknown@example.com"),
        ]

    async def test_players_directory_failure_degrades(self, store):
        class BrokenDirectory(PlayerDirectory):
            async def lookup(self, player_id):
                raise ConnectionError("directory offline")

        manager = SessionManager(store=store, directory=BrokenDirectory())
        await store.create(build_session())

        view = (await manager.get_session_players("game-1")).value

        assert {p.username for p in view.players} == {"Unknown"}
        assert [p.position for p in view.players] == [1, 2, 3]

    async def test_unexpected_store_error_becomes_failure(self, store, manager, monkeypatch):
        async def broken_load(session_id):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(store, "load", broken_load)

        result = await manager.get_session("game-1")

        assert isinstance(result.error, RuntimeError)

    async def test_unsafe_id_on_file_store_is_invalid(self, tmp_path):
        manager = SessionManager(store=JsonFileSessionStore(tmp_path))

        for session_id in (".hidden", "a/b"):
            result = await manager.get_session(session_id)
            assert isinstance(result.error, InvalidSessionIdError)

    async def test_list_sessions_store_failure_is_captured(self, store, manager, monkeypatch):
        async def broken_list():
            raise OSError("disk gone")

        monkeypatch.setattr(store, "list_ids", broken_list)

        result = await manager.list_sessions()

        assert isinstance(result.error, OSError)
