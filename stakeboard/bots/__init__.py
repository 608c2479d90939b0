"""
Bots module - Automated opponent implementations.

Provides:
- AutomatedPolicy: Interface for opponent move selection
- FirstDiagonalPolicy: Deterministic first-piece, first-diagonal opponent
- select_automated_move: Runs the default policy
"""

from .policy import AutomatedPolicy, FirstDiagonalPolicy, DEFAULT_POLICY, select_automated_move

__all__ = [
    "AutomatedPolicy",
    "FirstDiagonalPolicy",
    "DEFAULT_POLICY",
    "select_automated_move",
]
