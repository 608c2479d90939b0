"""
Match State - The mutable record of a single match.

Design principles:
- One MatchState per match, one writer at a time
- Serializable: plain dict rendition for stores and the API
- Board is always 8x8, indexed board[y][x]
- Once a winner is set the state is terminal
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum


BOARD_SIZE = 8

# Cell values
EMPTY = 0
P1_PIECE = 1
P2_PIECE = 2
# Counted by win evaluation, never produced by any move
P1_PROMOTED = 3
P2_PROMOTED = 4

P1_CELLS = frozenset({P1_PIECE, P1_PROMOTED})
P2_CELLS = frozenset({P2_PIECE, P2_PROMOTED})

# Stands in for "no participant"; also the automated opponent's identity
NO_PARTICIPANT = "__none__"

Board = list[list[int]]


class GameMode(Enum):
    """Who player one is up against."""
    HEAD_TO_HEAD = "head_to_head"
    AGAINST_AUTOMATED_OPPONENT = "automated"


class Outcome(Enum):
    """Result of evaluating a board."""
    UNDECIDED = "undecided"
    PLAYER_ONE_WINS = "player_one_wins"
    PLAYER_TWO_WINS = "player_two_wins"


def empty_board() -> Board:
    """Create an 8x8 board with every cell empty."""
    return [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def starting_board() -> Board:
    """
    Create the opening layout.

    Rows 0-2 hold player one's pieces and rows 5-7 player two's,
    on the cells where (x + y) is odd. Rows 3 and 4 are empty.
    """
    board = empty_board()
    for y in range(BOARD_SIZE):
        if y <= 2:
            piece = P1_PIECE
        elif y >= 5:
            piece = P2_PIECE
        else:
            continue
        for x in range(BOARD_SIZE):
            if (x + y) % 2 == 1:
                board[y][x] = piece
    return board


def on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def count_pieces(board: Board) -> tuple[int, int]:
    """(player one pieces, player two pieces), promoted included."""
    p1 = sum(1 for row in board for cell in row if cell in P1_CELLS)
    p2 = sum(1 for row in board for cell in row if cell in P2_CELLS)
    return p1, p2


def render_board(board: Board) -> str:
    """Text grid of the board, row 0 at the top."""
    lines = ["   " + " ".join(str(x) for x in range(BOARD_SIZE))]
    for y, row in enumerate(board):
        cells = " ".join("." if cell == EMPTY else str(cell) for cell in row)
        lines.append(f"{y}  {cells}")
    return "\n".join(lines)


@dataclass
class MatchState:
    """
    Complete state of one match.

    This is the canonical state the engine operates on.
    All changes go through the reducer (initialize / apply_move).
    """
    match_id: str
    player_one: str
    player_two: str = NO_PARTICIPANT
    mode: GameMode = GameMode.HEAD_TO_HEAD
    wager_amount: int = 0

    board: Board = field(default_factory=starting_board)
    turn: str = ""
    winner: str | None = None
    is_active: bool = True

    # Every applied move, automated ones included
    move_history: list[Any] = field(default_factory=list)

    def __post_init__(self):
        if not self.turn:
            self.turn = self.player_one
        if len(self.board) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in self.board):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")

    def other_player(self, player_id: str) -> str:
        """The participant who is not player_id."""
        return self.player_two if player_id == self.player_one else self.player_one

    def piece_counts(self) -> tuple[int, int]:
        """(player one pieces, player two pieces), promoted included."""
        return count_pieces(self.board)

    def clone(self) -> MatchState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe rendition."""
        return {
            "match_id": self.match_id,
            "player_one": self.player_one,
            "player_two": self.player_two,
            "mode": self.mode.value,
            "wager_amount": self.wager_amount,
            "board": [list(row) for row in self.board],
            "turn": self.turn,
            "winner": self.winner,
            "is_active": self.is_active,
            "move_history": [m.to_dict() for m in self.move_history],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchState:
        """Rebuild a state produced by to_dict()."""
        from .action import Move

        return cls(
            match_id=data["match_id"],
            player_one=data["player_one"],
            player_two=data.get("player_two", NO_PARTICIPANT),
            mode=GameMode(data["mode"]),
            wager_amount=int(data.get("wager_amount", 0)),
            board=[list(row) for row in data["board"]],
            turn=data["turn"],
            winner=data.get("winner"),
            is_active=bool(data.get("is_active", True)),
            move_history=[Move.from_dict(m) for m in data.get("move_history", [])],
        )
