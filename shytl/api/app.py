"""
FastAPI Application - HTTP adapter over the session orchestrator.

Endpoints:
    GET /api/newGame?name=                          Create a game, become host
    GET /api/game/{id}?key=                         Get game state
    GET /api/game/{id}/join?name=                   Join a game
    GET /api/game/{id}/leave?key=                   Leave a game
    GET /api/game/{id}/kick?key=&kickId=            Remove a player
    GET /api/game/{id}/draw?key=                    Draw the next card
    GET /api/game/{id}/skip?key=                    Pass the card to the next player
    GET /api/game/{id}/jumpToLevel/{level}?key=     Change level (host only)
    GET /health                                     Health check

The adapter only extracts parameters and maps errors to status codes;
every rule lives in the orchestrator. Handlers are plain functions so
FastAPI runs them in its worker threads, one request per thread.

Run with:
    uvicorn shytl.api.app:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional
import logging

from fastapi import FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..errors import ErrorCode, ShytlError
from ..session import SessionOrchestrator
from .schemas import (
    EmptyResponse,
    ErrorResponse,
    GameInfo,
    GameKeyResponse,
    GameResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.STORAGE_UNAVAILABLE: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}

ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (400, 401, 403, 404, 409, 503)
}

KeyParam = Annotated[Optional[str], Query(description="Secret session key")]
NameParam = Annotated[Optional[str], Query(description="Display name")]


def create_app(
    orchestrator: SessionOrchestrator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        orchestrator: Optional orchestrator (tests); built from settings if missing
        settings: Optional settings; read from the environment if missing

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    orchestrator = orchestrator or SessionOrchestrator(settings.create_store())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        orchestrator.store.open()
        logger.info("SHYTL server started (env=%s, store=%s)", settings.env, settings.store)
        try:
            yield
        finally:
            orchestrator.store.close()
            logger.info("SHYTL server stopped")

    app = FastAPI(
        title="SHYTL API",
        description="Multiplayer party card game sessions.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error handlers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=STATUS_CODES[error_code],
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details or None,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(ShytlError)
    async def handle_shytl_error(request: Request, exc: ShytlError) -> JSONResponse:
        return make_error_response(exc.code, exc.message, exc.details)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return make_error_response(ErrorCode.INTERNAL_ERROR, "Internal server error")

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/newGame",
        response_model=GameKeyResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Create a new game",
    )
    def new_game(name: NameParam = None) -> GameKeyResponse:
        """Create a game with the caller as host. Returns their session key."""
        result = orchestrator.create_game(name)
        return GameKeyResponse(game=GameInfo.from_session(result.game), key=result.key)

    @app.get(
        "/api/game/{game_id}",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Get game state",
    )
    def get_game(game_id: Annotated[str, Path()], key: KeyParam = None) -> GameResponse:
        game = orchestrator.get_game(game_id, key)
        return GameResponse(game=GameInfo.from_session(game))

    @app.get(
        "/api/game/{game_id}/join",
        response_model=GameKeyResponse,
        responses=ERROR_RESPONSES,
        tags=["Players"],
        summary="Join a game",
    )
    def join_game(game_id: Annotated[str, Path()], name: NameParam = None) -> GameKeyResponse:
        result = orchestrator.join_game(game_id, name)
        return GameKeyResponse(game=GameInfo.from_session(result.game), key=result.key)

    @app.get(
        "/api/game/{game_id}/leave",
        response_model=EmptyResponse,
        responses=ERROR_RESPONSES,
        tags=["Players"],
        summary="Leave a game",
    )
    def leave_game(game_id: Annotated[str, Path()], key: KeyParam = None) -> EmptyResponse:
        orchestrator.leave_game(game_id, key)
        return EmptyResponse()

    @app.get(
        "/api/game/{game_id}/kick",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Players"],
        summary="Remove a player from a game",
    )
    def kick_player(
        game_id: Annotated[str, Path()],
        key: KeyParam = None,
        kick_id: Annotated[Optional[str], Query(alias="kickId")] = None,
    ) -> GameResponse:
        """The host may kick anyone; other players may only kick themselves."""
        game = orchestrator.kick_player(game_id, key, kick_id)
        return GameResponse(game=GameInfo.from_session(game))

    @app.get(
        "/api/game/{game_id}/draw",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Draw the next card",
    )
    def draw_card(game_id: Annotated[str, Path()], key: KeyParam = None) -> GameResponse:
        """The current answerer (or the host, before the first card) draws."""
        game = orchestrator.draw_card(game_id, key)
        return GameResponse(game=GameInfo.from_session(game))

    @app.get(
        "/api/game/{game_id}/skip",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Pass the current card to the next player",
    )
    def skip_turn(game_id: Annotated[str, Path()], key: KeyParam = None) -> GameResponse:
        game = orchestrator.skip_turn(game_id, key)
        return GameResponse(game=GameInfo.from_session(game))

    @app.get(
        "/api/game/{game_id}/jumpToLevel/{level}",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Change level (host only)",
    )
    def jump_to_level(
        game_id: Annotated[str, Path()],
        level: Annotated[str, Path()],
        key: KeyParam = None,
    ) -> GameResponse:
        game = orchestrator.jump_to_level(game_id, key, level)
        return GameResponse(game=GameInfo.from_session(game))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__, store=settings.store)

    return app
