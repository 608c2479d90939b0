"""
Reducer - Creates matches and applies moves to them.

The reducer is the single point of match mutation.
All board changes must go through apply_move().

Design principles:
- Stateless: (state, move) -> state mutated in place, or a failure
- Validates everything before touching the board
- Returns MoveResult with success/failure
- The automated opponent replies inside the same call
- Win evaluation runs at the end of every successful move
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging
import uuid

from .state import (
    MatchState, GameMode, Outcome, Board, EMPTY,
    NO_PARTICIPANT, count_pieces, on_board, starting_board,
)
from .action import Move, MoveError, MoveResult

if TYPE_CHECKING:
    from ..bots.policy import AutomatedPolicy
    from ..escrow import EscrowLedger

logger = logging.getLogger(__name__)


def evaluate_winner(board: Board) -> Outcome:
    """
    Decide the match from the pieces left on the board.

    Player one being wiped out is checked first, so a board with no
    pieces at all counts as a player-two win.
    """
    p1, p2 = count_pieces(board)
    if p1 == 0:
        return Outcome.PLAYER_TWO_WINS
    if p2 == 0:
        return Outcome.PLAYER_ONE_WINS
    return Outcome.UNDECIDED


@dataclass
class Reducer:
    """
    Reducer creates and advances matches.

    Stateless - all match state is in MatchState.
    The policy drives the automated opponent (default: FirstDiagonalPolicy).
    """
    policy: AutomatedPolicy | None = None

    def _policy(self) -> AutomatedPolicy:
        if self.policy is None:
            from ..bots.policy import DEFAULT_POLICY
            return DEFAULT_POLICY
        return self.policy

    def initialize(
        self,
        player_one_id: str,
        mode: GameMode,
        wager_amount: int = 0,
        escrow: EscrowLedger | None = None,
        match_id: str | None = None,
    ) -> MatchState:
        """
        Create a new match with the opening layout.

        If wager_amount is positive, it is moved into escrow before the
        state is built. Escrow failures propagate and no match is created.

        Raises:
            ValueError: empty player id or invalid wager
            EscrowError: the wager could not be escrowed
        """
        if not player_one_id:
            raise ValueError("player_one_id is required")
        if player_one_id == NO_PARTICIPANT:
            raise ValueError(f"{NO_PARTICIPANT!r} is reserved")
        if not isinstance(mode, GameMode):
            raise ValueError(f"Unknown mode: {mode!r}")
        if isinstance(wager_amount, bool) or not isinstance(wager_amount, int) or wager_amount < 0:
            raise ValueError(f"wager_amount must be a non-negative integer, got {wager_amount!r}")

        match_id = match_id or uuid.uuid4().hex

        if wager_amount > 0:
            if escrow is None:
                from ..escrow import EscrowError
                raise EscrowError("A wager requires an escrow ledger")
            escrow.hold(match_id, player_one_id, wager_amount)

        state = MatchState(
            match_id=match_id,
            player_one=player_one_id,
            player_two=NO_PARTICIPANT,
            mode=mode,
            wager_amount=wager_amount,
            board=starting_board(),
            turn=player_one_id,
            winner=None,
            is_active=True,
        )
        logger.info(
            "Match %s created for %s (%s, wager %d)",
            match_id, player_one_id, mode.value, wager_amount,
        )
        return state

    def apply_move(
        self,
        state: MatchState,
        mover_id: str,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
    ) -> MoveResult:
        """
        Apply a move to the match.

        Only three things are checked: the match is active, it is the
        mover's turn, and the source cell holds a piece. The destination
        is overwritten whatever it holds.

        Returns MoveResult; state is untouched on failure.
        """
        validation_error = self._validate_move(state, mover_id, from_x, from_y, to_x, to_y)
        if validation_error:
            error, message = validation_error
            logger.debug("Rejected move in %s: %s", state.match_id, message)
            return MoveResult.failure(error, message)

        piece = state.board[from_y][from_x]
        state.board[to_y][to_x] = piece
        state.board[from_y][from_x] = EMPTY
        move = Move(mover_id, from_x, from_y, to_x, to_y, piece=piece)
        state.move_history.append(move)

        automated_move = None
        if state.mode == GameMode.HEAD_TO_HEAD:
            state.turn = state.other_player(mover_id)
        else:
            automated_move = self._policy().select_move(state)
            if automated_move is not None:
                state.move_history.append(automated_move)
            state.turn = state.player_one

        outcome = evaluate_winner(state.board)
        if outcome != Outcome.UNDECIDED:
            state.winner = (
                state.player_one if outcome == Outcome.PLAYER_ONE_WINS else state.player_two
            )
            state.is_active = False
            logger.info("Match %s finished: %s", state.match_id, outcome.value)

        return MoveResult.applied(move, outcome, automated_move=automated_move)

    def _validate_move(
        self,
        state: MatchState,
        mover_id: str,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
    ) -> tuple[MoveError, str] | None:
        """
        Check a move against the current state.

        Returns (error, message) if invalid, None if valid.
        """
        if not state.is_active:
            return MoveError.GAME_FINISHED, "Match is finished - no moves allowed"

        if mover_id != state.turn:
            return MoveError.NOT_YOUR_TURN, f"Not {mover_id}'s turn"

        if not (on_board(from_x, from_y) and on_board(to_x, to_y)):
            return (
                MoveError.OUT_OF_BOUNDS,
                f"Move ({from_x},{from_y}) -> ({to_x},{to_y}) leaves the board",
            )

        if state.board[from_y][from_x] == EMPTY:
            return MoveError.INVALID_MOVE, f"No piece at ({from_x},{from_y})"

        return None


def initialize(
    player_one_id: str,
    mode: GameMode,
    wager_amount: int = 0,
    escrow: EscrowLedger | None = None,
    match_id: str | None = None,
) -> MatchState:
    """
    Convenience function to create a match.

    Creates a Reducer and initializes the match.
    """
    return Reducer().initialize(player_one_id, mode, wager_amount, escrow, match_id)


def apply_move(
    state: MatchState,
    mover_id: str,
    from_x: int,
    from_y: int,
    to_x: int,
    to_y: int,
) -> MoveResult:
    """
    Convenience function to apply a move.

    Creates a Reducer and applies the move.
    """
    return Reducer().apply_move(state, mover_id, from_x, from_y, to_x, to_y)
