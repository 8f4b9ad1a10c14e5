"""
FastAPI Application - REST API for scoreboards and lane controllers.

Endpoints:
    GET    /api/v1/health                 Health check
    POST   /api/v1/games                  Start a game
    GET    /api/v1/games                  List games
    GET    /api/v1/games/{id}             Get scoreboard
    DELETE /api/v1/games/{id}             End game
    POST   /api/v1/games/{id}/throws      Record a delivery
    POST   /api/v1/games/{id}/reset       Start over in the same game
    GET    /api/v1/tally                  Session total across games
    DELETE /api/v1/tally                  Reset the session total
    WS     /api/v1/games/{id}/ws          Scoreboard pushed after every throw

Lane Flow:
    1. Pins settle; the lane controller POSTs /throws with the count
    2. Response carries next_pin_action (reset_all / remove_fallen / none)
    3. Controller applies it to the rack and re-arms the launcher
       unless is_game_over is true

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import json
import logging

from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings
from ..engine_core import EngineError, InvalidState, OutOfRangeThrow
from ..session import SessionManager
from .service import APIService
from .schemas import (
    CreateGameRequest,
    ThrowRequest,
    ErrorResponse,
    ScoreboardResponse,
    GameListResponse,
    EndGameResponse,
    TallyResponse,
    HealthResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Pinfall Score Engine API",
        description="""
Ten-pin bowling score engine.

## Pin Actions

| Value | Meaning |
|-------|---------|
| `reset_all` | Re-rack all ten pins |
| `remove_fallen` | Clear only the pins that fell, keep the standing ones |
| `none` | Game over |

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `OUT_OF_RANGE_THROW` | Pin count outside 0-10 |
| `INVALID_STATE` | Throw after game over |
| `VALIDATION_ERROR` | Malformed request |
        """,
        version=__version__,
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

    api_service = service or APIService(
        session_manager=SessionManager(strict_pin_count=settings.strict_pin_count)
    )

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}
    app.state.ws_connections = ws_connections

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

    def engine_error_response(exc: EngineError) -> JSONResponse:
        if isinstance(exc, OutOfRangeThrow):
            code, status_code = ErrorCode.OUT_OF_RANGE_THROW, 422
        elif isinstance(exc, InvalidState):
            code, status_code = ErrorCode.INVALID_STATE, 409
        else:
            code, status_code = ErrorCode.INTERNAL_ERROR, 500
        return make_error_response(code, exc.message, status_code, details=exc.details or None)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            status_code=422,
            details={"errors": json.loads(json.dumps(exc.errors(), default=str))},
        )

    async def broadcast_to_game(game_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a game."""
        if game_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[game_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[game_id].remove(ws)
            if not ws_connections[game_id]:
                del ws_connections[game_id]

    def drop_connections(game_id: str):
        """Forget the WebSocket list of a game that no longer exists."""
        ws_connections.pop(game_id, None)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=ScoreboardResponse,
        status_code=201,
        tags=["Games"],
        summary="Start a new game",
    )
    async def create_game(body: Optional[CreateGameRequest] = None) -> ScoreboardResponse:
        """Start a new ten-frame game with an empty throw history."""
        return api_service.create_game(body or CreateGameRequest())

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=ScoreboardResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the scoreboard",
    )
    async def get_game(game_id: str) -> Union[ScoreboardResponse, JSONResponse]:
        response = api_service.get_scoreboard(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        return response

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        """End a game and release it from memory."""
        success = api_service.end_game(game_id)
        drop_connections(game_id)
        return EndGameResponse(success=success, game_id=game_id)

    @app.post(
        "/api/v1/games/{game_id}/reset",
        response_model=ScoreboardResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Start over in the same game",
    )
    async def reset_game(game_id: str) -> Union[ScoreboardResponse, JSONResponse]:
        response = api_service.reset_game(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)
        await broadcast_to_game(game_id, {
            "type": "scoreboard",
            "payload": response.model_dump(mode="json"),
        })
        return response

    # =========================================================================
    # Throw Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/throws",
        response_model=ScoreboardResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Game is over"},
            422: {"model": ErrorResponse, "description": "Pin count out of range"},
        },
        tags=["Lane"],
        summary="Record a delivery",
    )
    async def record_throw(game_id: str, body: ThrowRequest) -> Union[ScoreboardResponse, JSONResponse]:
        """
        Record the pins knocked down by one settled delivery.

        **Request Body:**
        ```json
        {"pins_down": 7}
        ```
        """
        try:
            response = api_service.record_throw(game_id, body)
        except EngineError as e:
            logger.info("Rejected throw for game %s: %s", game_id, e.message)
            return engine_error_response(e)

        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code=404)

        await broadcast_to_game(game_id, {
            "type": "scoreboard",
            "payload": response.model_dump(mode="json"),
        })
        if response.is_game_over:
            await broadcast_to_game(game_id, {
                "type": "game_over",
                "payload": {"total_score": response.total_score},
            })
        return response

    # =========================================================================
    # Tally Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/tally",
        response_model=TallyResponse,
        tags=["Tally"],
        summary="Session total across finished games",
    )
    async def get_tally() -> TallyResponse:
        return api_service.get_tally()

    @app.delete(
        "/api/v1/tally",
        response_model=TallyResponse,
        tags=["Tally"],
        summary="Reset the session total",
    )
    async def reset_tally() -> TallyResponse:
        return api_service.reset_tally()

    @app.post(
        "/api/v1/maintenance/cleanup",
        response_model=GameListResponse,
        tags=["System"],
        summary="Remove finished games older than max_age",
    )
    async def cleanup_games(
        max_age: int = Query(settings.session_max_age, ge=0, description="Seconds"),
    ) -> GameListResponse:
        removed = api_service.cleanup(max_age)
        for game_id in removed:
            drop_connections(game_id)
        return GameListResponse(games=removed, count=len(removed))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/games/{game_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, game_id: str):
        """
        WebSocket for real-time scoreboard updates.

        Messages from server:
        - scoreboard: Scoreboard after a throw or reset
        - game_over: Tenth frame closed
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        response = api_service.get_scoreboard(game_id)
        if isinstance(response, ErrorResponse):
            await websocket.send_json({"type": "error", "payload": response.model_dump(mode="json")})
            await websocket.close(code=1008)
            return

        ws_connections.setdefault(game_id, []).append(websocket)

        try:
            # Send initial scoreboard
            await websocket.send_json({
                "type": "scoreboard",
                "payload": response.model_dump(mode="json"),
            })

            # Listen for messages
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if isinstance(message, dict) and message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket for game %s disconnected", game_id)
        finally:
            if websocket in ws_connections.get(game_id, []):
                ws_connections[game_id].remove(websocket)
                if not ws_connections[game_id]:
                    del ws_connections[game_id]

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="pinfall-engine",
            version=__version__,
        )

    return app


# For running directly: uvicorn pinfall.api.app:app
app = create_app()
