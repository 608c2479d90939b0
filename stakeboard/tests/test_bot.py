"""
Tests for the automated opponent policy.

Tests:
- Scan order and direction priority
- Blocked pieces are skipped
- No move available is a silent no-op
- Determinism
"""

import pytest

from ..bots import FirstDiagonalPolicy, AutomatedPolicy, select_automated_move
from ..engine_core.state import (
    MatchState, GameMode, EMPTY, P1_PIECE, P2_PIECE, P2_PROMOTED, NO_PARTICIPANT,
    empty_board,
)
from ..engine_core.reducer import initialize


def _state_with(pieces: dict[tuple[int, int], int]) -> MatchState:
    """Build an automated match whose board holds only the given (x, y) pieces."""
    board = empty_board()
    for (x, y), value in pieces.items():
        board[y][x] = value
    return MatchState(
        match_id="bot-test",
        player_one="alice",
        mode=GameMode.AGAINST_AUTOMATED_OPPONENT,
        board=board,
    )


class TestDirectionPriority:
    """Up-left is tried before up-right."""

    def test_up_left_first(self):
        """With both diagonals free, the piece goes up-left."""
        state = _state_with({(3, 5): P2_PIECE})

        move = select_automated_move(state)

        assert move.source == (3, 5)
        assert move.destination == (2, 4)
        assert state.board[4][2] == P2_PIECE
        assert state.board[5][3] == EMPTY

    def test_up_right_when_up_left_blocked(self):
        """An occupied up-left cell falls back to up-right."""
        state = _state_with({(3, 5): P2_PIECE, (2, 4): P1_PIECE})

        move = select_automated_move(state)

        assert move.destination == (4, 4)
        assert state.board[4][2] == P1_PIECE

    def test_up_right_when_up_left_off_board(self):
        """A piece on the left edge can only go up-right."""
        state = _state_with({(0, 5): P2_PIECE})

        move = select_automated_move(state)

        assert move.destination == (1, 4)


class TestScanOrder:
    """Row-major scan picks the first movable piece."""

    def test_lowest_row_first(self):
        """A piece on a lower row index is found first."""
        state = _state_with({(1, 5): P2_PIECE, (6, 3): P2_PIECE})

        move = select_automated_move(state)

        assert move.source == (6, 3)

    def test_leftmost_column_first(self):
        """Within a row, lower column index is found first."""
        state = _state_with({(6, 5): P2_PIECE, (2, 5): P2_PIECE})

        move = select_automated_move(state)

        assert move.source == (2, 5)

    def test_blocked_piece_skipped(self):
        """A piece with no free diagonal is passed over."""
        state = _state_with({
            (0, 5): P2_PIECE,
            (1, 4): P1_PIECE,
            (4, 6): P2_PIECE,
        })

        move = select_automated_move(state)

        assert move.source == (4, 6)
        assert move.destination == (3, 5)
        assert state.board[5][0] == P2_PIECE

    def test_opening_reply(self):
        """From the opening layout the first reply is (0,5) -> (1,4)."""
        state = initialize("alice", GameMode.AGAINST_AUTOMATED_OPPONENT)

        move = select_automated_move(state)

        assert move.source == (0, 5)
        assert move.destination == (1, 4)


class TestNoMove:
    """Nothing to play is not an error."""

    def test_no_pieces(self):
        """An empty board yields no move."""
        state = _state_with({})
        assert select_automated_move(state) is None
        assert state.board == empty_board()

    def test_all_blocked(self):
        """Top-row pieces have no upward diagonal."""
        state = _state_with({(0, 0): P2_PIECE, (4, 0): P2_PIECE})
        before = [row[:] for row in state.board]

        assert select_automated_move(state) is None
        assert state.board == before

    def test_promoted_pieces_ignored(self):
        """Only plain player-two pieces are moved."""
        state = _state_with({(3, 5): P2_PROMOTED})
        assert select_automated_move(state) is None


class TestPolicy:
    """Tests for the policy classes."""

    def test_deterministic(self):
        """Same board, same move."""
        a = initialize("alice", GameMode.AGAINST_AUTOMATED_OPPONENT)
        b = a.clone()

        assert select_automated_move(a) == select_automated_move(b)
        assert a.board == b.board

    def test_move_attributed_to_opponent(self):
        """The opponent moves as the no-participant seat."""
        state = _state_with({(3, 5): P2_PIECE})
        move = FirstDiagonalPolicy().select_move(state)

        assert move.mover_id == NO_PARTICIPANT
        assert move.piece == P2_PIECE

    def test_is_policy(self):
        """FirstDiagonalPolicy implements the policy interface."""
        policy = FirstDiagonalPolicy()
        assert isinstance(policy, AutomatedPolicy)
        assert policy.get_name() == "FirstDiagonalPolicy"

    def test_abstract_policy(self):
        """The base policy cannot be instantiated."""
        with pytest.raises(TypeError):
            AutomatedPolicy()
