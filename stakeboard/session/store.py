"""
Match Store - Keeps match states between calls.

The store:
- Is keyed by match_id
- Hands out copies, so callers never share a live state
- Comes in two flavours: in-memory, and one JSON file per match

Design decisions:
- Simple file-based storage, no database
- JSON rendition is MatchState.to_dict()
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
import json
import logging
import threading

from ..engine_core.state import MatchState

logger = logging.getLogger(__name__)


class MatchNotFoundError(KeyError):
    """No match is stored under the given id."""

    def __init__(self, match_id: str):
        super().__init__(match_id)
        self.match_id = match_id

    def __str__(self) -> str:
        return f"Match {self.match_id} not found"


class MatchStore(ABC):
    """Abstract persistence collaborator."""

    @abstractmethod
    def load(self, match_id: str) -> MatchState:
        """
        Load a copy of the stored state.

        Raises:
            MatchNotFoundError: nothing stored under match_id
        """
        pass

    @abstractmethod
    def save(self, state: MatchState):
        """Store state under state.match_id, replacing any previous version."""
        pass

    @abstractmethod
    def list_ids(self) -> list[str]:
        """List stored match ids."""
        pass

    @abstractmethod
    def delete(self, match_id: str):
        """Remove a match. Missing ids are ignored."""
        pass

    def exists(self, match_id: str) -> bool:
        return match_id in self.list_ids()


class InMemoryMatchStore(MatchStore):
    """Store that keeps deep copies in a dict."""

    def __init__(self):
        self._states: dict[str, MatchState] = {}
        self._lock = threading.Lock()

    def load(self, match_id: str) -> MatchState:
        with self._lock:
            state = self._states.get(match_id)
            if state is None:
                raise MatchNotFoundError(match_id)
            return state.clone()

    def save(self, state: MatchState):
        with self._lock:
            self._states[state.match_id] = state.clone()

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._states)

    def delete(self, match_id: str):
        with self._lock:
            self._states.pop(match_id, None)

    def exists(self, match_id: str) -> bool:
        with self._lock:
            return match_id in self._states


class FileMatchStore(MatchStore):
    """
    File-based store, one <match_id>.json per match.

    Usage:
        store = FileMatchStore("~/.stakeboard/matches")
        store.save(state)
        state = store.load(state.match_id)
    """

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = Path.home() / ".stakeboard" / "matches"
        self.directory = Path(directory).expanduser()

        # Ensure store directory exists
        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self, match_id: str) -> MatchState:
        path = self._get_path(match_id)
        if not path.exists():
            raise MatchNotFoundError(match_id)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return MatchState.from_dict(data)

    def save(self, state: MatchState):
        path = self._get_path(state.match_id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)
        # Replace in one step so readers never see a partial file
        tmp_path.replace(path)
        logger.debug("Saved match %s to %s", state.match_id, path)

    def list_ids(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(f.stem for f in self.directory.glob("*.json"))

    def delete(self, match_id: str):
        self._get_path(match_id).unlink(missing_ok=True)

    def exists(self, match_id: str) -> bool:
        return self._get_path(match_id).exists()

    def _get_path(self, match_id: str) -> Path:
        """Get file path for a match."""
        if not match_id or "/" in match_id or "\\" in match_id or match_id.startswith("."):
            raise MatchNotFoundError(match_id)
        return self.directory / f"{match_id}.json"
