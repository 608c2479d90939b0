"""
Escrow Module - Wager custody for matches.

Provides:
- EscrowLedger: Interface the engine calls when a wager is placed
- InMemoryLedger: Dict-backed ledger used by the API and tests
- FileLedger: InMemoryLedger kept in a JSON file, used with file stores
- EscrowError: Raised when a transfer cannot be made
"""

from .ledger import EscrowLedger, InMemoryLedger, FileLedger, EscrowError, Hold

__all__ = [
    "EscrowLedger",
    "InMemoryLedger",
    "FileLedger",
    "EscrowError",
    "Hold",
]
