"""
Engine Core - Match state and move application.

The engine is the runtime that:
1. Creates a match (escrowing any wager)
2. Holds MatchState
3. Applies moves via the reducer
4. Lets the automated opponent reply
5. Evaluates the winner after every move
"""

from .state import (
    MatchState,
    GameMode,
    Outcome,
    BOARD_SIZE,
    EMPTY,
    P1_PIECE,
    P2_PIECE,
    P1_PROMOTED,
    P2_PROMOTED,
    NO_PARTICIPANT,
    count_pieces,
    empty_board,
    starting_board,
    render_board,
)
from .action import Move, MoveError, MoveResult
from .reducer import Reducer, initialize, apply_move, evaluate_winner

__all__ = [
    "MatchState",
    "GameMode",
    "Outcome",
    "BOARD_SIZE",
    "EMPTY",
    "P1_PIECE",
    "P2_PIECE",
    "P1_PROMOTED",
    "P2_PROMOTED",
    "NO_PARTICIPANT",
    "count_pieces",
    "empty_board",
    "starting_board",
    "render_board",
    "Move",
    "MoveError",
    "MoveResult",
    "Reducer",
    "initialize",
    "apply_move",
    "evaluate_winner",
]
