"""
FastAPI Application - REST API for match clients.

Endpoints:
    POST   /api/v1/matches                  Create a match (escrows the wager)
    GET    /api/v1/matches                  List matches
    GET    /api/v1/matches/{id}             Get match state
    POST   /api/v1/matches/{id}/moves       Submit a move
    GET    /api/v1/balances/{player_id}     Get a player's balance
    GET    /health                          Health check

Move Flow:
    1. POST /moves with the mover's id and coordinates
    2. In automated matches the opponent replies in the same request
    3. Response includes the opponent's move and the outcome
    4. Once a winner is set, further moves fail with GAME_FINISHED

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union
import logging
import os

from .. import __version__

# Environment configuration
STAKEBOARD_ENV = os.getenv("STAKEBOARD_ENV", "development")
STAKEBOARD_STORE_DIR = os.getenv("STAKEBOARD_STORE_DIR", None)
STAKEBOARD_LOG_LEVEL = os.getenv("STAKEBOARD_LOG_LEVEL", "INFO")
STAKEBOARD_STARTING_BALANCE = int(os.getenv("STAKEBOARD_STARTING_BALANCE", "1000"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        CreateMatchRequest,
        MoveRequest,
        # Response models
        MatchResponse,
        MoveResponse,
        MatchListResponse,
        BalanceResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )
    from ..escrow import FileLedger, InMemoryLedger
    from ..session import MatchSessionManager, FileMatchStore, InMemoryMatchStore

    logging.basicConfig(
        level=getattr(logging, STAKEBOARD_LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Stakeboard API",
        description="""
Turn-based checkers matches with an escrowed wager.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_FINISHED` | Match already has a winner |
| `NOT_YOUR_TURN` | Mover does not hold the turn |
| `INVALID_MOVE` | Source cell is empty |
| `OUT_OF_BOUNDS` | Coordinate off the 8x8 board |
| `ESCROW_FAILED` | Wager could not be escrowed |
| `MATCH_NOT_FOUND` | Match does not exist |
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

    # Service instance
    if service is None:
        if STAKEBOARD_STORE_DIR:
            # Ledger file sits beside the match files
            store = FileMatchStore(STAKEBOARD_STORE_DIR)
            ledger = FileLedger(store.directory / "escrow" / "ledger.json")
        else:
            store = InMemoryMatchStore()
            ledger = InMemoryLedger()
        service = APIService(
            manager=MatchSessionManager(store=store, ledger=ledger),
            starting_balance=STAKEBOARD_STARTING_BALANCE,
        )
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.GAME_FINISHED: 409,
        ErrorCode.NOT_YOUR_TURN: 403,
        ErrorCode.INVALID_MOVE: 400,
        ErrorCode.OUT_OF_BOUNDS: 400,
        ErrorCode.ESCROW_FAILED: 402,
        ErrorCode.MATCH_NOT_FOUND: 404,
        ErrorCode.VALIDATION_ERROR: 422,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchResponse,
        responses={
            402: {"model": ErrorResponse, "description": "Wager could not be escrowed"},
            422: {"model": ErrorResponse, "description": "Invalid parameters"},
        },
        tags=["Matches"],
        summary="Create a new match",
    )
    async def create_match(body: CreateMatchRequest) -> Union[MatchResponse, JSONResponse]:
        """
        Create a new match.

        A positive `wager_amount` is moved from the player's balance into
        escrow before the match exists. If that fails, no match is created.
        """
        response = api_service.create_match(body)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List matches",
    )
    async def list_matches() -> MatchListResponse:
        return api_service.list_matches()

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get match state",
    )
    async def get_match(match_id: str) -> Union[MatchResponse, JSONResponse]:
        """Get the board, turn holder and winner of a match."""
        response = api_service.get_match(match_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/matches/{match_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Empty source or off-board move"},
            403: {"model": ErrorResponse, "description": "Not the mover's turn"},
            404: {"model": ErrorResponse, "description": "Match not found"},
            409: {"model": ErrorResponse, "description": "Match already finished"},
        },
        tags=["Game Loop"],
        summary="Submit a move",
    )
    async def submit_move(match_id: str, body: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Move the piece at (from_x, from_y) to (to_x, to_y).

        **Request Body:**
        ```json
        {"player_id": "alice", "from_x": 0, "from_y": 2, "to_x": 0, "to_y": 3}
        ```
        """
        response = api_service.submit_move(match_id, body)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Ledger Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/balances/{player_id}",
        response_model=BalanceResponse,
        tags=["Ledger"],
        summary="Get a player's balance",
    )
    async def get_balance(player_id: str) -> BalanceResponse:
        return api_service.get_balance(player_id)

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
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="stakeboard",
            version=__version__,
            environment=STAKEBOARD_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Stakeboard API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
