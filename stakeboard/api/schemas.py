"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- GAME_FINISHED: Move submitted to a match that is already decided
- NOT_YOUR_TURN: Move submitted by someone other than the turn holder
- INVALID_MOVE: Source cell is empty
- OUT_OF_BOUNDS: A coordinate is off the 8x8 board
- ESCROW_FAILED: The wager could not be escrowed
- MATCH_NOT_FOUND: Match does not exist
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchMode(str, Enum):
    """Match modes."""
    HEAD_TO_HEAD = "head_to_head"
    AUTOMATED = "automated"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_FINISHED = "GAME_FINISHED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_MOVE = "INVALID_MOVE"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    ESCROW_FAILED = "ESCROW_FAILED"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class MoveInfo(BaseModel):
    """A move as applied to the board."""
    mover_id: str
    from_x: int
    from_y: int
    to_x: int
    to_y: int
    piece: int = 0

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateMatchRequest(BaseModel):
    """Request to start a new match."""
    player_id: str = Field(..., min_length=1, description="Verified id of the creating player")
    mode: MatchMode = Field(MatchMode.HEAD_TO_HEAD, description="head_to_head or automated")
    wager_amount: int = Field(0, ge=0, description="Amount to escrow, 0 for no wager")


class MoveRequest(BaseModel):
    """Request to move one piece. Coordinates are (x=column, y=row)."""
    player_id: str = Field(..., min_length=1, description="Verified id of the mover")
    from_x: int
    from_y: int
    to_x: int
    to_y: int


# =============================================================================
# Response Models
# =============================================================================

class MatchResponse(BaseModel):
    """Full state of one match."""
    match_id: str
    player_one: str
    player_two: str
    mode: MatchMode
    wager_amount: int
    escrow_held: int = 0
    board: list[list[int]]
    turn: str
    winner: Optional[str] = None
    is_active: bool
    move_count: int = 0


class MoveResponse(BaseModel):
    """Result of a successful move."""
    match_id: str
    success: bool = True
    move: MoveInfo
    automated_move: Optional[MoveInfo] = None
    outcome: str = Field(description="undecided, player_one_wins or player_two_wins")
    match: MatchResponse


class MatchListResponse(BaseModel):
    """Stored match ids."""
    matches: list[str] = Field(default_factory=list)
    count: int = 0


class BalanceResponse(BaseModel):
    """A player's spendable balance."""
    player_id: str
    balance: int


class ErrorResponse(BaseModel):
    """Standard error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "stakeboard"
    version: str
    environment: str = "development"
