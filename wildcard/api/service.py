"""
API Service - Business logic layer between API and session manager.

The service:
1. Translates API requests to manager calls
2. Folds each Result into a response model or an ErrorResponse
3. Hides hands and deck contents from public views

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    UpdateSessionRequest,
    PlayCardRequest,
    # Responses
    SessionResponse,
    SessionStatusResponse,
    CurrentPlayerResponse,
    HandResponse,
    ActionResponse,
    DiscardTopResponse,
    SimpleDiscardResponse,
    RecentDiscardsResponse,
    SessionPlayersResponse,
    SessionListResponse,
    DeleteSessionResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DiscardInfo,
    SeatInfo,
    PlayerDetailsInfo,
)
from ..engine_core.errors import ErrorCode, GameError
from ..engine_core.outcome import ActionReceipt
from ..engine_core.state import Session, plain
from ..session import SessionManager
from ..session.views import DiscardTopView, SessionPlayersView

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"
NO_DISCARDS_MESSAGE = "No cards in discard pile"


def error_response(error: BaseException) -> ErrorResponse:
    """Map a failure to the shared error shape, keeping its HTTP status."""
    if isinstance(error, GameError):
        return ErrorResponse(
            error=error.message,
            error_code=error.code,
            status_code=error.status_code,
        )
    logger.error("Unexpected failure: %s", error, exc_info=error)
    return ErrorResponse(
        error=INTERNAL_MESSAGE,
        error_code=ErrorCode.INTERNAL_ERROR,
        status_code=500,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        response = await service.create_session("alice", CreateSessionRequest(title="Friday"))

        # Join and play
        await service.join_session("bob", response.session_id)
        await service.play_card("alice", response.session_id, PlayCardRequest(card_id="red-5-1"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def create_session(
        self, actor_id: str, request: CreateSessionRequest,
    ) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.create_session(
            actor_id,
            title=request.title,
            rules=request.rules,
            min_players=request.min_players,
            max_players=request.max_players,
        )
        return result.fold(error_response, self._session_to_response)

    async def update_session(
        self, actor_id: str, session_id: str, request: UpdateSessionRequest,
    ) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.update_session(
            actor_id,
            session_id,
            title=request.title,
            rules=request.rules,
            min_players=request.min_players,
            max_players=request.max_players,
        )
        return result.fold(error_response, self._session_to_response)

    async def delete_session(self, actor_id: str, session_id: str) -> DeleteSessionResponse | ErrorResponse:
        result = await self.session_manager.delete_session(actor_id, session_id)
        return result.fold(error_response, lambda sid: DeleteSessionResponse(session_id=sid))

    async def join_session(self, actor_id: str, session_id: str) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.join_session(actor_id, session_id)
        return result.fold(error_response, self._session_to_response)

    async def set_ready(self, actor_id: str, session_id: str) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.set_ready(actor_id, session_id)
        return result.fold(error_response, self._session_to_response)

    async def start_session(self, actor_id: str, session_id: str) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.start_session(actor_id, session_id)
        return result.fold(error_response, self._session_to_response)

    async def abandon_session(self, actor_id: str, session_id: str) -> ActionResponse | ErrorResponse:
        result = await self.session_manager.abandon_session(actor_id, session_id)
        return result.fold(error_response, lambda r: self._receipt_to_response(session_id, r))

    # =========================================================================
    # Turns
    # =========================================================================

    async def get_current_player(self, session_id: str) -> CurrentPlayerResponse | ErrorResponse:
        result = await self.session_manager.get_current_player(session_id)
        return result.fold(
            error_response,
            lambda pid: CurrentPlayerResponse(session_id=session_id, current_player_id=pid),
        )

    async def advance_turn(self, session_id: str) -> CurrentPlayerResponse | ErrorResponse:
        result = await self.session_manager.advance_turn(session_id)
        return result.fold(
            error_response,
            lambda pid: CurrentPlayerResponse(session_id=session_id, current_player_id=pid),
        )

    async def play_card(
        self, actor_id: str, session_id: str, request: PlayCardRequest,
    ) -> ActionResponse | ErrorResponse:
        chosen = request.chosen_color.value if request.chosen_color else None
        result = await self.session_manager.play_card(session_id, actor_id, request.card_id, chosen)
        return result.fold(error_response, lambda r: self._receipt_to_response(session_id, r))

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        result = await self.session_manager.get_session(session_id)
        return result.fold(error_response, self._session_to_response)

    async def get_status(self, session_id: str) -> SessionStatusResponse | ErrorResponse:
        result = await self.session_manager.get_status(session_id)
        return result.fold(
            error_response,
            lambda status: SessionStatusResponse(session_id=session_id, status=plain(status)),
        )

    async def get_hand(self, actor_id: str, session_id: str) -> HandResponse | ErrorResponse:
        result = await self.session_manager.get_hand(session_id, actor_id)
        return result.fold(
            error_response,
            lambda cards: HandResponse(
                session_id=session_id,
                player_id=actor_id,
                cards=[CardInfo.model_validate(c) for c in cards],
                count=len(cards),
            ),
        )

    async def get_discard_top(self, session_id: str) -> DiscardTopResponse | ErrorResponse:
        result = await self.session_manager.get_discard_top(session_id)
        return result.fold(error_response, self._discard_top_to_response)

    async def get_discard_top_simple(self, session_id: str) -> SimpleDiscardResponse | ErrorResponse:
        result = await self.session_manager.get_discard_top_simple(session_id)
        return result.fold(
            error_response,
            lambda view: SimpleDiscardResponse(game_ids=view.game_ids, top_cards=view.top_cards),
        )

    async def get_recent_discards(
        self, session_id: str, limit: int = 5,
    ) -> RecentDiscardsResponse | ErrorResponse:
        result = await self.session_manager.get_recent_discards(session_id, limit)
        return result.fold(
            error_response,
            lambda entries: RecentDiscardsResponse(
                session_id=session_id,
                cards=[DiscardInfo.model_validate(e) for e in entries],
                count=len(entries),
            ),
        )

    async def get_session_players(self, session_id: str) -> SessionPlayersResponse | ErrorResponse:
        result = await self.session_manager.get_session_players(session_id)
        return result.fold(error_response, self._players_to_response)

    async def list_sessions(self) -> SessionListResponse | ErrorResponse:
        result = await self.session_manager.list_sessions()
        return result.fold(
            error_response,
            lambda ids: SessionListResponse(sessions=ids, count=len(ids)),
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _session_to_response(self, session: Session) -> SessionResponse:
        current = session.current_player if plain(session.status) == "Active" else None
        top = session.top_discard
        return SessionResponse(
            session_id=session.session_id,
            creator_id=session.creator_id,
            title=session.title,
            status=plain(session.status),
            min_players=session.min_players,
            max_players=session.max_players,
            players=[
                SeatInfo(
                    player_id=p.player_id,
                    ready=p.ready,
                    position=p.position,
                    card_count=len(p.hand),
                )
                for p in session.players
            ],
            current_player_count=session.num_players,
            players_ready_count=sum(1 for p in session.players if p.ready),
            current_player_id=current.player_id if current else None,
            turn_direction=session.turn_direction,
            current_color=session.current_color,
            top_discard=DiscardInfo.model_validate(top) if top else None,
            deck_size=len(session.deck),
            winner_id=session.winner_id,
            created_at=session.created_at,
            ended_at=session.ended_at,
            version=session.version,
        )

    def _receipt_to_response(self, session_id: str, receipt: ActionReceipt) -> ActionResponse:
        return ActionResponse(
            session_id=session_id,
            message=receipt.message,
            outcome=plain(receipt.outcome.action),
            game_over=receipt.game_over,
            winner_id=receipt.winner_id,
            changes=receipt.changes,
            session=self._session_to_response(receipt.session) if receipt.session else None,
        )

    def _discard_top_to_response(self, view: DiscardTopView) -> DiscardTopResponse:
        return DiscardTopResponse(
            session_id=view.session_id,
            top_card=DiscardInfo.model_validate(view.top_card) if view.top_card else None,
            recent_cards=[DiscardInfo.model_validate(e) for e in view.recent_cards],
            discard_pile_size=view.discard_pile_size,
            initial_card=CardInfo.model_validate(view.initial_card) if view.initial_card else None,
            message=NO_DISCARDS_MESSAGE if view.is_empty else None,
        )

    def _players_to_response(self, view: SessionPlayersView) -> SessionPlayersResponse:
        return SessionPlayersResponse(
            session_id=view.session_id,
            title=view.title,
            status=view.status,
            max_players=view.max_players,
            players=[PlayerDetailsInfo.model_validate(p) for p in view.players],
            total_players=view.total_players,
        )
