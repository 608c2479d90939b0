"""
Escrow Ledger - Holds wagers for the duration of a match.

The ledger:
- Moves a wager from the payer's balance into a match-scoped hold
- Pays the whole hold out to the winner once a match is decided
- Either fully succeeds or raises EscrowError, never half-applies
- Can be kept in a JSON file so holds outlive the process that placed them

Settlement is triggered by the session layer, not the engine.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
import json
import logging
import threading

logger = logging.getLogger(__name__)


class EscrowError(Exception):
    """A transfer into or out of escrow could not be made."""


@dataclass
class Hold:
    """Value held for one match."""
    match_id: str
    payer_id: str
    amount: int


class EscrowLedger(ABC):
    """
    Abstract escrow collaborator.

    Implementations can be in-memory, a database, or an external
    payment service.
    """

    @abstractmethod
    def hold(self, match_id: str, payer_id: str, amount: int) -> Hold:
        """
        Move amount from payer_id's balance into the hold for match_id.

        Raises:
            EscrowError: if the transfer cannot be made. Nothing moves.
        """
        pass

    @abstractmethod
    def held(self, match_id: str) -> int:
        """Amount currently held for match_id (0 if none)."""
        pass

    @abstractmethod
    def release(self, match_id: str, payee_id: str) -> int:
        """
        Pay the full hold for match_id to payee_id.

        Returns the amount paid.
        """
        pass


class InMemoryLedger(EscrowLedger):
    """
    Ledger backed by plain dicts.

    Usage:
        ledger = InMemoryLedger({"alice": 100})
        ledger.hold("match-1", "alice", 40)
        ledger.balance("alice")        # 60
        ledger.release("match-1", "alice")
    """

    def __init__(self, balances: dict[str, int] | None = None):
        self._balances: dict[str, int] = dict(balances or {})
        self._holds: dict[str, Hold] = {}
        self._lock = threading.Lock()

    def balance(self, player_id: str) -> int:
        """Spendable balance of player_id."""
        with self._lock:
            return self._balances.get(player_id, 0)

    def credit(self, player_id: str, amount: int) -> int:
        """Add amount to player_id's balance and return the new balance."""
        if amount < 0:
            raise EscrowError(f"Cannot credit a negative amount: {amount}")
        with self._lock:
            self._balances[player_id] = self._balances.get(player_id, 0) + amount
            self._commit()
            return self._balances[player_id]

    def has_account(self, player_id: str) -> bool:
        with self._lock:
            return player_id in self._balances

    def hold(self, match_id: str, payer_id: str, amount: int) -> Hold:
        if amount <= 0:
            raise EscrowError(f"Wager must be positive, got {amount}")

        with self._lock:
            if match_id in self._holds:
                raise EscrowError(f"Match {match_id} already has a wager in escrow")
            if payer_id not in self._balances:
                raise EscrowError(f"No account for {payer_id}")
            available = self._balances[payer_id]
            if available < amount:
                raise EscrowError(
                    f"Insufficient balance for {payer_id}: has {available}, needs {amount}"
                )

            self._balances[payer_id] = available - amount
            entry = Hold(match_id=match_id, payer_id=payer_id, amount=amount)
            self._holds[match_id] = entry
            self._commit()

        logger.info("Escrowed %d from %s for match %s", amount, payer_id, match_id)
        return entry

    def held(self, match_id: str) -> int:
        with self._lock:
            entry = self._holds.get(match_id)
            return entry.amount if entry else 0

    def release(self, match_id: str, payee_id: str) -> int:
        with self._lock:
            entry = self._holds.pop(match_id, None)
            if entry is None:
                return 0
            self._balances[payee_id] = self._balances.get(payee_id, 0) + entry.amount
            self._commit()

        logger.info("Released %d from match %s to %s", entry.amount, match_id, payee_id)
        return entry.amount

    def _commit(self):
        """Called under the lock after every change. Nothing to do in memory."""
        pass


class FileLedger(InMemoryLedger):
    """
    Ledger kept in a single JSON file.

    Balances and holds are loaded on construction and written back after
    every credit, hold and release, so a wager placed by one process can
    be settled by another.

    Usage:
        ledger = FileLedger("~/.stakeboard/matches/escrow/ledger.json")
        if not ledger.has_account("alice"):
            ledger.credit("alice", 100)
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = Path.home() / ".stakeboard" / "escrow" / "ledger.json"
        self.path = Path(path).expanduser()

        # Ensure ledger directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__()
        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._balances = {k: int(v) for k, v in data.get("balances", {}).items()}
            self._holds = {
                match_id: Hold(match_id=match_id, payer_id=h["payer_id"], amount=int(h["amount"]))
                for match_id, h in data.get("holds", {}).items()
            }

    def _commit(self):
        data = {
            "balances": self._balances,
            "holds": {
                match_id: {"payer_id": h.payer_id, "amount": h.amount}
                for match_id, h in self._holds.items()
            },
        }
        tmp_path = self.path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)
        logger.debug("Saved ledger to %s", self.path)
