"""
FastAPI Application - REST API for game front ends.

Endpoints:
    GET    /api/v1/modes                         List game modes
    POST   /api/v1/sessions                      Create game session
    GET    /api/v1/sessions                      List sessions
    GET    /api/v1/sessions/{id}                 Get game state
    DELETE /api/v1/sessions/{id}                 End session
    GET    /api/v1/sessions/{id}/targets?x=&y=   Legal moves/builds from a cell
    POST   /api/v1/sessions/{id}/select          Select a worker
    POST   /api/v1/sessions/{id}/move            Move the selected worker
    POST   /api/v1/sessions/{id}/build           Build with the selected worker
    POST   /api/v1/sessions/{id}/end-phase       Forfeit the rest of the phase
    GET    /api/v1/sessions/{id}/save            Download a save file (text)
    POST   /api/v1/sessions/{id}/load            Replace the game from a save file

Rejected game actions answer 409 with an ErrorResponse; the state is
unchanged. A malformed save answers 400 SAVE_MALFORMED.
"""

from typing import Annotated, Optional, Union
import logging
import os

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..games import UnknownModeError
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    PositionRequest,
    # Response models
    ActionResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    LegalTargetsResponse,
    ModeListResponse,
    SessionListResponse,
    # Enums
    ErrorCode,
)

# Environment configuration
ASCENT_ENV = os.getenv("ASCENT_ENV", "development")
ASCENT_LOG_LEVEL = os.getenv("ASCENT_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.INVALID_MODE: 400,
    ErrorCode.SAVE_MALFORMED: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.ILLEGAL_ACTION: 409,
    ErrorCode.GAME_OVER: 409,
    ErrorCode.WRONG_PHASE: 409,
    ErrorCode.NO_WORKER_SELECTED: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    logging.getLogger("ascent").setLevel(ASCENT_LOG_LEVEL.upper())

    app = FastAPI(
        title="Ascent Engine API",
        description="""
Tower-building strategy game engine.

## Turn Flow

1. `POST /select` a worker of the current player
2. `POST /move` it (powers may grant one extra move)
3. `POST /build` next to it (powers may grant one extra build)
4. `POST /end-phase` to skip an extra action a power granted

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_MODE` | Unknown game mode |
| `ILLEGAL_ACTION` | Action not allowed right now |
| `GAME_OVER` | The game already has a winner |
| `WRONG_PHASE` | Action does not match the turn phase |
| `NO_WORKER_SELECTED` | Select a worker first |
| `SAVE_MALFORMED` | Save file could not be parsed or written |
| `VALIDATION_ERROR` | Invalid request values (e.g. player names) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_response(error: ErrorResponse) -> JSONResponse:
        return make_error_response(
            error.error_code,
            error.error,
            status_code=ERROR_STATUS.get(error.error_code, 400),
            details=error.details,
        )

    # =========================================================================
    # Modes
    # =========================================================================

    @app.get(
        "/api/v1/modes",
        response_model=ModeListResponse,
        tags=["Modes"],
        summary="List game modes",
    )
    async def list_modes() -> ModeListResponse:
        return api_service.list_modes()

    # =========================================================================
    # Session Management
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid mode or player names"},
        },
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> Union[GameStateResponse, JSONResponse]:
        """
        Create a new game session.

        Powers and starting positions are random; pass `random_seed`
        for a reproducible game.
        """
        try:
            return api_service.create_session(request)
        except UnknownModeError as e:
            return make_error_response(ErrorCode.INVALID_MODE, str(e))
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get game state",
    )
    async def get_session(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Gameplay
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/targets",
        response_model=LegalTargetsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Legal move and build targets from a cell",
    )
    async def legal_targets(
        session_id: str,
        x: Annotated[int, Query(ge=0, description="Column of the worker")],
        y: Annotated[int, Query(ge=0, description="Row of the worker")],
    ) -> Union[LegalTargetsResponse, JSONResponse]:
        response = api_service.legal_targets(session_id, x, y)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/select",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Select the worker standing on a cell",
    )
    async def select_worker(
        session_id: str, request: PositionRequest
    ) -> Union[ActionResponse, JSONResponse]:
        response = api_service.select_worker(session_id, request)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/move",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Move the selected worker",
    )
    async def move(session_id: str, request: PositionRequest) -> Union[ActionResponse, JSONResponse]:
        response = api_service.move(session_id, request)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/build",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Build with the selected worker",
    )
    async def build(session_id: str, request: PositionRequest) -> Union[ActionResponse, JSONResponse]:
        response = api_service.build(session_id, request)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/end-phase",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="End the current phase",
    )
    async def end_phase(session_id: str) -> Union[ActionResponse, JSONResponse]:
        response = api_service.end_phase(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # Save Files
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/save",
        response_class=PlainTextResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Save Files"],
        summary="Download the game as a save file",
    )
    async def save_game(session_id: str):
        response = api_service.save_game(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return PlainTextResponse(response.decode("utf-8"))

    @app.post(
        "/api/v1/sessions/{session_id}/load",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Save Files"],
        summary="Replace the game with an uploaded save file",
    )
    async def load_game(session_id: str, request: Request) -> Union[GameStateResponse, JSONResponse]:
        """The request body is the raw save file text."""
        data = await request.body()
        response = api_service.load_game(session_id, data)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="ascent-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Ascent Engine API",
            "version": __version__,
            "environment": ASCENT_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    logger.info("Ascent API created (%s)", ASCENT_ENV)
    return app


# For running directly: uvicorn ascent.api.app:app
app = create_app()
