"""
FastAPI Application - REST API over the session manager.

Endpoints:
    GET    /api/v1/health                              Health check
    POST   /api/v1/sessions                            Create session
    GET    /api/v1/sessions                            List sessions
    GET    /api/v1/sessions/{id}                       Get session
    PUT    /api/v1/sessions/{id}                       Update lobby settings (creator)
    DELETE /api/v1/sessions/{id}                       Delete session (creator)
    GET    /api/v1/sessions/{id}/status                Get session status
    POST   /api/v1/sessions/{id}/join                  Take a seat
    POST   /api/v1/sessions/{id}/ready                 Mark own seat ready
    POST   /api/v1/sessions/{id}/start                 Start (creator only)
    POST   /api/v1/sessions/{id}/abandon               Leave the session
    GET    /api/v1/sessions/{id}/turn                  Current player
    POST   /api/v1/sessions/{id}/turn/advance          Pass the turn on
    POST   /api/v1/sessions/{id}/play                  Play a card
    GET    /api/v1/sessions/{id}/hand                  Own hand
    GET    /api/v1/sessions/{id}/discard/top           Top of discard pile
    GET    /api/v1/sessions/{id}/discard/top/simple    Compact top card names
    GET    /api/v1/sessions/{id}/discard/recent        Recent discards
    GET    /api/v1/sessions/{id}/players               Seats with player details

The acting player is identified by the X-Player-Id header. Authentication
happens upstream of this service.

All responses are JSON with explicit Pydantic schemas. Failures use
ErrorResponse with the HTTP status of the underlying error.
"""

from typing import Annotated, Union

from .. import config, __version__


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Header, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        UpdateSessionRequest,
        PlayCardRequest,
        # Response models
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
        HealthResponse,
    )
    from ..session import SessionManager, InMemorySessionStore, JsonFileSessionStore

    app = FastAPI(
        title="Wildcard Session API",
        description="""
Multiplayer sessions of a colour-matching shedding card game.

## Flow

1. `POST /sessions` creates a session; the caller is seated and ready
2. Others `POST /join` and `POST /ready`
3. The creator calls `POST /start`; hands are dealt
4. The current player calls `POST /play`, then `POST /turn/advance`
5. Emptying a hand, or being the last seat left, wins

Send the acting player's id in the `X-Player-Id` header.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `NOT_YOUR_TURN` | Another seat holds the turn |
| `CARD_NOT_IN_HAND` | Card is not in the caller's hand |
| `INVALID_CARD_ACTION` | Wild played without a valid colour |
| `CONCURRENT_MODIFICATION` | Session changed since it was read |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        store = (
            JsonFileSessionStore(config.WILDCARD_STORE_DIR)
            if config.WILDCARD_STORE_DIR else InMemorySessionStore()
        )
        service = APIService(session_manager=SessionManager(
            store=store,
            hand_size=config.HAND_SIZE,
            deck_seed=config.DECK_SEED,
        ))
    api_service = service

    PlayerId = Annotated[str, Header(alias="X-Player-Id", description="Acting player id")]
    error_responses = {
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Render an ErrorResponse with its own status code."""
        return JSONResponse(
            status_code=error.status_code,
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="wildcard", version=__version__)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid player limits"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: CreateSessionRequest,
        player_id: PlayerId,
    ) -> Union[SessionResponse, JSONResponse]:
        """Create a session. The caller takes seat 1 and is ready."""
        return respond(await api_service.create_session(player_id, body))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> Union[SessionListResponse, JSONResponse]:
        return respond(await api_service.list_sessions())

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Get session",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(await api_service.get_session(session_id))

    @app.put(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Update lobby settings",
    )
    async def update_session(
        session_id: str,
        body: UpdateSessionRequest,
        player_id: PlayerId,
    ) -> Union[SessionResponse, JSONResponse]:
        """Change title, rules or player limits. Creator only, before start."""
        return respond(await api_service.update_session(player_id, session_id, body))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=DeleteSessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Delete session",
    )
    async def delete_session(
        session_id: str,
        player_id: PlayerId,
    ) -> Union[DeleteSessionResponse, JSONResponse]:
        return respond(await api_service.delete_session(player_id, session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/status",
        response_model=SessionStatusResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_status(session_id: str) -> Union[SessionStatusResponse, JSONResponse]:
        return respond(await api_service.get_status(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/join",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Join a waiting session",
    )
    async def join_session(session_id: str, player_id: PlayerId) -> Union[SessionResponse, JSONResponse]:
        return respond(await api_service.join_session(player_id, session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/ready",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Mark own seat ready",
    )
    async def set_ready(session_id: str, player_id: PlayerId) -> Union[SessionResponse, JSONResponse]:
        return respond(await api_service.set_ready(player_id, session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Start the session (creator only)",
    )
    async def start_session(session_id: str, player_id: PlayerId) -> Union[SessionResponse, JSONResponse]:
        """Requires the minimum player count and every seat ready."""
        return respond(await api_service.start_session(player_id, session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/abandon",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Leave an active session",
    )
    async def abandon_session(session_id: str, player_id: PlayerId) -> Union[ActionResponse, JSONResponse]:
        """
        Removes the caller's seat. One seat left wins; none left ends the
        session without a winner.
        """
        return respond(await api_service.abandon_session(player_id, session_id))

    # =========================================================================
    # Turn Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/turn",
        response_model=CurrentPlayerResponse,
        responses={**error_responses, 500: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the current player",
    )
    async def get_current_player(session_id: str) -> Union[CurrentPlayerResponse, JSONResponse]:
        return respond(await api_service.get_current_player(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/turn/advance",
        response_model=CurrentPlayerResponse,
        responses={**error_responses, 500: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Pass the turn to the next seat",
    )
    async def advance_turn(session_id: str) -> Union[CurrentPlayerResponse, JSONResponse]:
        return respond(await api_service.advance_turn(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/play",
        response_model=ActionResponse,
        responses={**error_responses, 500: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Play a card from own hand",
    )
    async def play_card(
        session_id: str,
        body: PlayCardRequest,
        player_id: PlayerId,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Plays a card for the current player. Wild cards need `chosen_color`.

        Playing a card does not pass the turn; call `/turn/advance` next.
        Skip, reverse and draw cards have already moved the turn cursor.
        """
        return respond(await api_service.play_card(player_id, session_id, body))

    # =========================================================================
    # Query Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/hand",
        response_model=HandResponse,
        responses=error_responses,
        tags=["Queries"],
        summary="Get own hand",
    )
    async def get_hand(session_id: str, player_id: PlayerId) -> Union[HandResponse, JSONResponse]:
        return respond(await api_service.get_hand(player_id, session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/discard/top",
        response_model=DiscardTopResponse,
        responses={**error_responses, 412: {"model": ErrorResponse}},
        tags=["Queries"],
        summary="Top of the discard pile",
    )
    async def get_discard_top(session_id: str) -> Union[DiscardTopResponse, JSONResponse]:
        return respond(await api_service.get_discard_top(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/discard/top/simple",
        response_model=SimpleDiscardResponse,
        responses={**error_responses, 412: {"model": ErrorResponse}},
        tags=["Queries"],
        summary="Top card name in compact form",
    )
    async def get_discard_top_simple(session_id: str) -> Union[SimpleDiscardResponse, JSONResponse]:
        return respond(await api_service.get_discard_top_simple(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/discard/recent",
        response_model=RecentDiscardsResponse,
        responses=error_responses,
        tags=["Queries"],
        summary="Most recent discards, newest first",
    )
    async def get_recent_discards(
        session_id: str,
        limit: Annotated[int, Query(ge=1, le=50, description="How many entries")] = 5,
    ) -> Union[RecentDiscardsResponse, JSONResponse]:
        return respond(await api_service.get_recent_discards(session_id, limit))

    @app.get(
        "/api/v1/sessions/{session_id}/players",
        response_model=SessionPlayersResponse,
        responses=error_responses,
        tags=["Queries"],
        summary="Seats with player details",
    )
    async def get_session_players(session_id: str) -> Union[SessionPlayersResponse, JSONResponse]:
        return respond(await api_service.get_session_players(session_id))

    return app


# For running directly: uvicorn wildcard.api.app:app
app = create_app()
