"""
Pytest fixtures for Stakeboard tests.
"""

import pytest

from ..engine_core.state import MatchState, GameMode, NO_PARTICIPANT, empty_board
from ..engine_core.reducer import initialize
from ..escrow import InMemoryLedger
from ..session import MatchSessionManager, InMemoryMatchStore


@pytest.fixture
def head_to_head_state() -> MatchState:
    """A fresh head-to-head match for alice, no wager."""
    return initialize("alice", GameMode.HEAD_TO_HEAD)


@pytest.fixture
def automated_state() -> MatchState:
    """A fresh match for alice against the automated opponent."""
    return initialize("alice", GameMode.AGAINST_AUTOMATED_OPPONENT)


@pytest.fixture
def sparse_state() -> MatchState:
    """
    A head-to-head match with one piece per side.

    Player one at (2, 2), player two at (5, 5).
    """
    board = empty_board()
    board[2][2] = 1
    board[5][5] = 2
    return MatchState(
        match_id="sparse",
        player_one="alice",
        player_two=NO_PARTICIPANT,
        mode=GameMode.HEAD_TO_HEAD,
        board=board,
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger where alice holds 100 and bob 10."""
    return InMemoryLedger({"alice": 100, "bob": 10})


@pytest.fixture
def manager(ledger: InMemoryLedger) -> MatchSessionManager:
    """Session manager over an in-memory store and the ledger fixture."""
    return MatchSessionManager(store=InMemoryMatchStore(), ledger=ledger)
