"""
Stakeboard - Checkers Match Engine with Wagers

A deterministic, turn-based engine for checkers-style matches played
head-to-head or against a built-in opponent. The engine provides:
- Match state management
- Move application and turn enforcement
- An automated opponent
- Win evaluation
- Wager escrow around each match
"""

__version__ = "0.1.0"
