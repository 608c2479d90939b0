"""
Automated Opponent Policy - How the built-in opponent picks its move.

A policy takes a match state and moves at most one player-two piece.
The engine calls it synchronously inside apply_move, so the reply is
part of the same transition as the human move.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..engine_core.state import BOARD_SIZE, EMPTY, P2_PIECE, NO_PARTICIPANT, on_board
from ..engine_core.action import Move

if TYPE_CHECKING:
    from ..engine_core.state import MatchState


class AutomatedPolicy(ABC):
    """
    Abstract base class for automated opponent policies.

    Implementations mutate state.board in place and return the move
    they made, or None when they have nothing to play.
    """

    @abstractmethod
    def select_move(self, state: MatchState) -> Move | None:
        """
        Pick and perform one move for the automated opponent.

        Args:
            state: Match to move in (board is mutated)

        Returns:
            The Move performed, or None if no move was possible
        """
        pass

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class FirstDiagonalPolicy(AutomatedPolicy):
    """
    First-diagonal policy - the simplest deterministic opponent.

    Scans the board row by row, column by column. For the first
    player-two piece that can move, steps up-left if that cell is on the
    board and empty, otherwise up-right. No look-ahead, no captures.
    """

    # (dx, dy) in priority order: up-left, up-right
    DIRECTIONS = ((-1, -1), (1, -1))

    def select_move(self, state: MatchState) -> Move | None:
        board = state.board
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                if board[row][col] != P2_PIECE:
                    continue
                for dx, dy in self.DIRECTIONS:
                    to_x, to_y = col + dx, row + dy
                    if on_board(to_x, to_y) and board[to_y][to_x] == EMPTY:
                        board[to_y][to_x] = board[row][col]
                        board[row][col] = EMPTY
                        return Move(
                            mover_id=NO_PARTICIPANT,
                            from_x=col,
                            from_y=row,
                            to_x=to_x,
                            to_y=to_y,
                            piece=P2_PIECE,
                        )
        return None


DEFAULT_POLICY = FirstDiagonalPolicy()


def select_automated_move(state: MatchState) -> Move | None:
    """Run the default automated opponent policy against state."""
    return DEFAULT_POLICY.select_move(state)
