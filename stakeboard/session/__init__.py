"""
Session Module - Owns matches between calls.

A session is the exclusive-access handle for one match:
- Created when a player starts a match
- Serializes every move on that match
- Loads and stores state through a MatchStore
- Settles the escrow once a winner is known
"""

from .manager import MatchSessionManager, MatchSession
from .store import MatchStore, InMemoryMatchStore, FileMatchStore, MatchNotFoundError

__all__ = [
    "MatchSessionManager",
    "MatchSession",
    "MatchStore",
    "InMemoryMatchStore",
    "FileMatchStore",
    "MatchNotFoundError",
]
