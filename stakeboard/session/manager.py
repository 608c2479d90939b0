"""
Match Session Manager - Creates matches and serializes moves on them.

LIFECYCLE:
1. Player creates a match -> wager escrowed, state stored
2. During the match:
   - Caller submits a move for the match
   - Session lock is taken (one writer per match)
   - State is loaded, move applied to the loaded copy
   - On success the copy is stored; on failure it is dropped
3. Match decided -> escrow released to the winner
4. Finished matches stay in the store, read-only

CONCURRENCY:
- Exactly one lock per match, held for the whole load/apply/store
- Different matches never share mutable state
- No background tasks
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading

from ..engine_core.state import MatchState, GameMode, NO_PARTICIPANT
from ..engine_core.action import MoveResult
from ..engine_core.reducer import Reducer
from ..escrow import EscrowLedger, InMemoryLedger
from .store import MatchStore, InMemoryMatchStore

logger = logging.getLogger(__name__)


@dataclass
class MatchSession:
    """
    Exclusive-access handle for one match.

    Whoever holds `lock` is the only writer of the match.
    """
    match_id: str
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    settled: bool = False


class MatchSessionManager:
    """
    Manages matches.

    Responsibilities:
    - Create matches (through the reducer, with escrow)
    - Serialize moves per match
    - Persist states through the store
    - Settle the escrow once a winner is known
    """

    def __init__(
        self,
        store: MatchStore | None = None,
        ledger: EscrowLedger | None = None,
        reducer: Reducer | None = None,
    ):
        self.store = store or InMemoryMatchStore()
        self.ledger = ledger or InMemoryLedger()
        self.reducer = reducer or Reducer()
        self._sessions: dict[str, MatchSession] = {}
        self._sessions_lock = threading.Lock()

    def create_match(
        self,
        player_id: str,
        mode: GameMode,
        wager_amount: int = 0,
    ) -> MatchState:
        """
        Create and store a new match.

        Args:
            player_id: Verified id of the creating participant
            mode: Head-to-head or against the automated opponent
            wager_amount: Amount to escrow (0 for none)

        Returns:
            The new MatchState

        Raises:
            EscrowError: the wager could not be escrowed; nothing is stored

        If the store cannot save the match, the wager is handed back to
        player_id before the store's error propagates.
        """
        state = self.reducer.initialize(
            player_id, mode, wager_amount=wager_amount, escrow=self.ledger,
        )
        session = MatchSession(match_id=state.match_id)
        with session.lock:
            try:
                self.store.save(state)
            except Exception:
                logger.error("Could not store match %s", state.match_id)
                if wager_amount > 0:
                    self.ledger.release(state.match_id, player_id)
                raise
            with self._sessions_lock:
                self._sessions[state.match_id] = session
        return state.clone()

    def get_match(self, match_id: str) -> MatchState:
        """
        Get a copy of the current state.

        Raises:
            MatchNotFoundError: unknown match_id
        """
        return self.store.load(match_id)

    def submit_move(
        self,
        match_id: str,
        player_id: str,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
    ) -> tuple[MoveResult, MatchState]:
        """
        Apply a move to a stored match.

        The whole load/apply/store runs under the match's lock.

        Returns:
            (result, state after the call)

        Raises:
            MatchNotFoundError: unknown match_id
        """
        session = self._get_session(match_id)
        with session.lock:
            state = self.store.load(match_id)
            result = self.reducer.apply_move(state, player_id, from_x, from_y, to_x, to_y)
            if not result.success:
                return result, state

            self.store.save(state)

            if not state.is_active and not session.settled:
                self._settle(state)
                session.settled = True

            return result, state.clone()

    def list_matches(self) -> list[str]:
        """List ids of all stored matches."""
        return self.store.list_ids()

    def list_active_matches(self) -> list[str]:
        """List ids of matches that still accept moves."""
        return [
            match_id for match_id in self.store.list_ids()
            if self.store.load(match_id).is_active
        ]

    def escrow_held(self, match_id: str) -> int:
        return self.ledger.held(match_id)

    def _get_session(self, match_id: str) -> MatchSession:
        """Get the session for a match, opening one for stored matches."""
        with self._sessions_lock:
            session = self._sessions.get(match_id)
            if session is None:
                # Raises MatchNotFoundError for unknown ids
                state = self.store.load(match_id)
                session = MatchSession(match_id=match_id, settled=not state.is_active)
                self._sessions[match_id] = session
            return session

    def _settle(self, state: MatchState):
        """Pay the escrow out to the winner."""
        if state.wager_amount <= 0:
            return
        if state.winner is None or state.winner == NO_PARTICIPANT:
            logger.info(
                "Match %s won by the opponent seat; %d stays in escrow",
                state.match_id, state.wager_amount,
            )
            return
        paid = self.ledger.release(state.match_id, state.winner)
        if paid < state.wager_amount:
            logger.error(
                "Match %s records a wager of %d but only %d was paid to %s",
                state.match_id, state.wager_amount, paid, state.winner,
            )
