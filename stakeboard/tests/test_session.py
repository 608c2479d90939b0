"""
Tests for match stores and the session manager.

Tests:
- Store round trips and copy semantics
- Move serialization per match
- Failed moves leave the stored state untouched
- Escrow settlement on match end
"""

import logging
import threading

import pytest

from ..engine_core.state import MatchState, GameMode, NO_PARTICIPANT, empty_board
from ..engine_core.action import MoveError
from ..escrow import EscrowError, InMemoryLedger
from ..session import (
    MatchSessionManager, InMemoryMatchStore, FileMatchStore, MatchNotFoundError,
)


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    """Each store implementation."""
    if request.param == "memory":
        return InMemoryMatchStore()
    return FileMatchStore(tmp_path / "matches")


def _sparse(match_id: str, mode: GameMode = GameMode.HEAD_TO_HEAD, wager: int = 0) -> MatchState:
    board = empty_board()
    board[2][2] = 1
    board[5][5] = 2
    return MatchState(
        match_id=match_id,
        player_one="alice",
        mode=mode,
        wager_amount=wager,
        board=board,
    )


class TestStores:
    """Tests shared by both stores."""

    def test_save_and_load(self, store, head_to_head_state):
        """A saved state loads back equal."""
        store.save(head_to_head_state)

        loaded = store.load(head_to_head_state.match_id)

        assert loaded.board == head_to_head_state.board
        assert loaded.turn == head_to_head_state.turn
        assert loaded.mode == head_to_head_state.mode
        assert loaded.is_active

    def test_load_returns_copy(self, store, head_to_head_state):
        """Mutating a loaded state does not touch the store."""
        store.save(head_to_head_state)

        loaded = store.load(head_to_head_state.match_id)
        loaded.board[0][1] = 0

        assert store.load(head_to_head_state.match_id).board[0][1] == 1

    def test_missing(self, store):
        """Unknown ids raise MatchNotFoundError."""
        with pytest.raises(MatchNotFoundError):
            store.load("missing")

    def test_list_and_delete(self, store):
        """Saved ids are listed until deleted."""
        store.save(_sparse("a"))
        store.save(_sparse("b"))

        assert sorted(store.list_ids()) == ["a", "b"]
        assert store.exists("a")

        store.delete("a")
        store.delete("never-there")

        assert store.list_ids() == ["b"]
        assert not store.exists("a")

    def test_history_survives(self, store, head_to_head_state):
        """Move history round-trips through the store."""
        from ..engine_core.reducer import apply_move

        apply_move(head_to_head_state, "alice", 1, 2, 1, 3)
        store.save(head_to_head_state)

        loaded = store.load(head_to_head_state.match_id)

        assert loaded.move_history == head_to_head_state.move_history


class TestFileStore:
    """File store specifics."""

    def test_writes_json_file(self, tmp_path):
        """Each match is one JSON file named after its id."""
        store = FileMatchStore(tmp_path)
        store.save(_sparse("m-1"))

        assert (tmp_path / "m-1.json").exists()
        assert not list(tmp_path.glob("*.tmp"))

    def test_rejects_path_ids(self, tmp_path):
        """Ids that look like paths are treated as missing."""
        store = FileMatchStore(tmp_path)
        with pytest.raises(MatchNotFoundError):
            store.load("../escape")


class TestCreateMatch:
    """Tests for creating matches through the manager."""

    def test_create_stores_match(self, manager):
        """A new match is stored and listed."""
        state = manager.create_match("alice", GameMode.HEAD_TO_HEAD)

        assert manager.list_matches() == [state.match_id]
        assert manager.get_match(state.match_id).turn == "alice"

    def test_create_with_wager(self, manager, ledger):
        """The wager is escrowed and recorded."""
        state = manager.create_match("alice", GameMode.HEAD_TO_HEAD, wager_amount=25)

        assert state.wager_amount == 25
        assert manager.escrow_held(state.match_id) == 25
        assert ledger.balance("alice") == 75

    def test_failed_escrow_stores_nothing(self, manager, ledger):
        """No match exists after an escrow failure."""
        with pytest.raises(EscrowError):
            manager.create_match("bob", GameMode.HEAD_TO_HEAD, wager_amount=500)

        assert manager.list_matches() == []
        assert ledger.balance("bob") == 10

    def test_failed_save_returns_wager(self, ledger):
        """A store error hands the wager back and leaves nothing behind."""
        class BrokenStore(InMemoryMatchStore):
            attempted = []

            def save(self, state):
                self.attempted.append(state.match_id)
                raise OSError("disk full")

        store = BrokenStore()
        manager = MatchSessionManager(store=store, ledger=ledger)

        with pytest.raises(OSError):
            manager.create_match("alice", GameMode.HEAD_TO_HEAD, wager_amount=40)

        assert ledger.balance("alice") == 100
        assert ledger.held(store.attempted[0]) == 0
        assert manager.list_matches() == []


class TestSubmitMove:
    """Tests for moves through the manager."""

    def test_move_is_persisted(self, manager):
        """A successful move is visible on the next load."""
        state = manager.create_match("alice", GameMode.HEAD_TO_HEAD)

        result, after = manager.submit_move(state.match_id, "alice", 1, 2, 1, 3)

        assert result.success
        assert after.turn == NO_PARTICIPANT
        stored = manager.get_match(state.match_id)
        assert stored.board[3][1] == 1
        assert stored.turn == NO_PARTICIPANT

    def test_failed_move_not_persisted(self, manager):
        """A rejected move leaves the stored match as it was."""
        state = manager.create_match("alice", GameMode.HEAD_TO_HEAD)

        result, _ = manager.submit_move(state.match_id, "mallory", 1, 2, 1, 3)

        assert result.error == MoveError.NOT_YOUR_TURN
        stored = manager.get_match(state.match_id)
        assert stored.board == state.board
        assert stored.move_history == []

    def test_unknown_match(self, manager):
        """Moves on unknown matches raise."""
        with pytest.raises(MatchNotFoundError):
            manager.submit_move("missing", "alice", 1, 2, 1, 3)

    def test_existing_store_match(self, ledger):
        """Matches already in the store get a session on first move."""
        store = InMemoryMatchStore()
        store.save(_sparse("pre"))
        manager = MatchSessionManager(store=store, ledger=ledger)

        result, after = manager.submit_move("pre", "alice", 2, 2, 2, 3)

        assert result.success

    def test_concurrent_moves_serialized(self, manager):
        """Two racing moves by the turn holder: exactly one wins."""
        state = manager.create_match("alice", GameMode.HEAD_TO_HEAD)
        barrier = threading.Barrier(2)
        results = []

        def play(from_x):
            barrier.wait()
            result, _ = manager.submit_move(state.match_id, "alice", from_x, 2, from_x, 3)
            results.append(result)

        threads = [threading.Thread(target=play, args=(x,)) for x in (1, 3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(r.success for r in results) == [False, True]
        loser = next(r for r in results if not r.success)
        assert loser.error == MoveError.NOT_YOUR_TURN
        assert len(manager.get_match(state.match_id).move_history) == 1

    def test_active_listing(self, manager):
        """Finished matches drop out of the active list."""
        manager.store.save(_sparse("done"))
        manager.submit_move("done", "alice", 2, 2, 5, 5)
        live = manager.create_match("alice", GameMode.HEAD_TO_HEAD)

        assert manager.list_active_matches() == [live.match_id]


class TestSettlement:
    """Tests for paying out the escrow when a match ends."""

    def test_winner_is_paid(self):
        """Player one's win releases the wager to them."""
        ledger = InMemoryLedger()
        store = InMemoryMatchStore()
        ledger.credit("alice", 20)
        ledger.hold("won", "alice", 20)
        store.save(_sparse("won", wager=20))
        manager = MatchSessionManager(store=store, ledger=ledger)

        result, after = manager.submit_move("won", "alice", 2, 2, 5, 5)

        assert after.winner == "alice"
        assert ledger.held("won") == 0
        assert ledger.balance("alice") == 20

    def test_opponent_seat_win_keeps_escrow(self):
        """A win by the no-participant seat leaves the wager held."""
        ledger = InMemoryLedger({"alice": 20})
        ledger.hold("lost", "alice", 20)
        store = InMemoryMatchStore()
        store.save(_sparse("lost", wager=20))
        manager = MatchSessionManager(store=store, ledger=ledger)

        manager.submit_move("lost", "alice", 2, 2, 2, 3)
        _, after = manager.submit_move("lost", NO_PARTICIPANT, 5, 5, 2, 3)

        assert after.winner == NO_PARTICIPANT
        assert ledger.held("lost") == 20
        assert ledger.balance("alice") == 0

    def test_no_wager_no_settlement(self, manager, ledger):
        """Matches without a wager never touch the ledger."""
        manager.store.save(_sparse("free"))

        manager.submit_move("free", "alice", 2, 2, 5, 5)

        assert ledger.balance("alice") == 100

    def test_missing_escrow_is_logged(self, caplog):
        """A wager the ledger no longer holds is reported, not silently dropped."""
        ledger = InMemoryLedger()
        store = InMemoryMatchStore()
        store.save(_sparse("orphan", wager=30))
        manager = MatchSessionManager(store=store, ledger=ledger)

        with caplog.at_level(logging.ERROR, logger="stakeboard.session.manager"):
            _, after = manager.submit_move("orphan", "alice", 2, 2, 5, 5)

        assert after.winner == "alice"
        assert "only 0 was paid" in caplog.text
