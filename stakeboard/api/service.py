"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session manager calls
2. Opens ledger accounts for new players
3. Maps engine failures to structured error responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CreateMatchRequest,
    MoveRequest,
    MatchResponse,
    MoveResponse,
    MatchListResponse,
    BalanceResponse,
    ErrorResponse,
    MoveInfo,
    MatchMode,
    ErrorCode,
)
from ..engine_core.state import MatchState, GameMode, NO_PARTICIPANT
from ..engine_core.action import Move, MoveError
from ..escrow import EscrowError, InMemoryLedger
from ..session import MatchSessionManager, MatchNotFoundError

logger = logging.getLogger(__name__)

MOVE_ERROR_CODES = {
    MoveError.GAME_FINISHED: ErrorCode.GAME_FINISHED,
    MoveError.NOT_YOUR_TURN: ErrorCode.NOT_YOUR_TURN,
    MoveError.INVALID_MOVE: ErrorCode.INVALID_MOVE,
    MoveError.OUT_OF_BOUNDS: ErrorCode.OUT_OF_BOUNDS,
}


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a match
        match = service.create_match(CreateMatchRequest(player_id="alice"))

        # Move
        result = service.submit_move(match.match_id, MoveRequest(...))
    """
    manager: MatchSessionManager = field(default_factory=MatchSessionManager)

    # Credited to a player the first time the ledger sees them
    starting_balance: int = 1000

    def create_match(self, request: CreateMatchRequest) -> MatchResponse | ErrorResponse:
        """Start a match, escrowing the wager."""
        if request.player_id == NO_PARTICIPANT:
            return ErrorResponse(
                error=f"{NO_PARTICIPANT!r} is reserved for the opponent seat",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        self._ensure_account(request.player_id)

        try:
            state = self.manager.create_match(
                request.player_id,
                GameMode(request.mode.value),
                wager_amount=request.wager_amount,
            )
        except EscrowError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.ESCROW_FAILED)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        return self._state_to_response(state)

    def get_match(self, match_id: str) -> MatchResponse | ErrorResponse:
        """Get match state."""
        try:
            state = self.manager.get_match(match_id)
        except MatchNotFoundError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.MATCH_NOT_FOUND)
        return self._state_to_response(state)

    def list_matches(self) -> MatchListResponse:
        matches = self.manager.list_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    def submit_move(self, match_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """Apply a move to a match."""
        try:
            result, state = self.manager.submit_move(
                match_id,
                request.player_id,
                request.from_x,
                request.from_y,
                request.to_x,
                request.to_y,
            )
        except MatchNotFoundError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.MATCH_NOT_FOUND)

        if not result.success:
            return ErrorResponse(
                error=result.message or result.error.value,
                error_code=MOVE_ERROR_CODES[result.error],
                details={"turn": state.turn, "is_active": state.is_active},
            )

        return MoveResponse(
            match_id=match_id,
            move=self._move_to_info(result.move),
            automated_move=(
                self._move_to_info(result.automated_move) if result.automated_move else None
            ),
            outcome=result.outcome.value,
            match=self._state_to_response(state),
        )

    def get_balance(self, player_id: str) -> BalanceResponse:
        ledger = self.manager.ledger
        balance = ledger.balance(player_id) if isinstance(ledger, InMemoryLedger) else 0
        return BalanceResponse(player_id=player_id, balance=balance)

    def _ensure_account(self, player_id: str):
        ledger = self.manager.ledger
        if isinstance(ledger, InMemoryLedger) and not ledger.has_account(player_id):
            ledger.credit(player_id, self.starting_balance)
            logger.info("Opened account for %s with %d", player_id, self.starting_balance)

    def _move_to_info(self, move: Move) -> MoveInfo:
        return MoveInfo.model_validate(move)

    def _state_to_response(self, state: MatchState) -> MatchResponse:
        return MatchResponse(
            match_id=state.match_id,
            player_one=state.player_one,
            player_two=state.player_two,
            mode=MatchMode(state.mode.value),
            wager_amount=state.wager_amount,
            escrow_held=self.manager.escrow_held(state.match_id),
            board=[list(row) for row in state.board],
            turn=state.turn,
            winner=state.winner,
            is_active=state.is_active,
            move_count=len(state.move_history),
        )
