"""
API Module - HTTP interface for match clients.

Exposes the engine via REST API. A client:
1. Creates a match (optionally with a wager)
2. Submits moves for the turn holder
3. Reads back board, turn and winner

Run with: uvicorn stakeboard.api.app:create_app --factory
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    MoveRequest,
    # Responses
    MatchResponse,
    MoveResponse,
    MatchListResponse,
    BalanceResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    MoveInfo,
    MatchMode,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateMatchRequest",
    "MoveRequest",
    # Responses
    "MatchResponse",
    "MoveResponse",
    "MatchListResponse",
    "BalanceResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "MoveInfo",
    "MatchMode",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
