"""
Move System - Moves, errors, and results.

Moves represent:
1. A participant moving one piece
2. The automated opponent's reply in single-player matches

All board changes flow through moves.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .state import Outcome


class MoveError(Enum):
    """Why a move was rejected."""
    GAME_FINISHED = "GAME_FINISHED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    INVALID_MOVE = "INVALID_MOVE"


@dataclass(frozen=True)
class Move:
    """
    A single piece movement.

    Coordinates are (x, y) = (column, row).
    """
    mover_id: str
    from_x: int
    from_y: int
    to_x: int
    to_y: int
    piece: int = 0  # Value that was moved, filled in once applied

    @property
    def source(self) -> tuple[int, int]:
        return (self.from_x, self.from_y)

    @property
    def destination(self) -> tuple[int, int]:
        return (self.to_x, self.to_y)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mover_id": self.mover_id,
            "from_x": self.from_x,
            "from_y": self.from_y,
            "to_x": self.to_x,
            "to_y": self.to_y,
            "piece": self.piece,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        return cls(
            mover_id=data["mover_id"],
            from_x=int(data["from_x"]),
            from_y=int(data["from_y"]),
            to_x=int(data["to_x"]),
            to_y=int(data["to_y"]),
            piece=int(data.get("piece", 0)),
        )

    def __str__(self) -> str:
        return f"{self.mover_id}: ({self.from_x},{self.from_y}) -> ({self.to_x},{self.to_y})"


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move succeeded
    - The error (if it failed)
    - The automated opponent's reply (single-player matches)
    - The outcome evaluated after the move
    """
    success: bool
    error: MoveError | None = None
    message: str | None = None

    move: Move | None = None
    automated_move: Move | None = None
    outcome: Outcome = Outcome.UNDECIDED

    @property
    def error_code(self) -> str | None:
        return self.error.value if self.error else None

    @classmethod
    def failure(cls, error: MoveError, message: str | None = None) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, message=message or error.value)

    @classmethod
    def applied(
        cls,
        move: Move,
        outcome: Outcome,
        automated_move: Move | None = None,
    ) -> MoveResult:
        """Create a success result."""
        return cls(
            success=True,
            move=move,
            automated_move=automated_move,
            outcome=outcome,
        )
