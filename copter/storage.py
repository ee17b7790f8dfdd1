from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Any, List, Optional, Sequence

from copter.config import DEFAULT_TUNING, Tuning
from copter.logic.leaderboard import ScoreEntry

logger = logging.getLogger(__name__)

_MISSING = object()


def state_dir() -> Path:
    """
    Directory holding the persisted scores.

    Override for tests/dev via `COPTER_STATE_DIR`.
    """

    override = os.environ.get("COPTER_STATE_DIR")
    if override:
        return Path(override)
    return Path.home() / ".copter"


class KeyValueStore:
    """One JSON document per key, stored as `<key>.json` in a directory."""

    def __init__(self, root: Optional[Path] = None):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root if self._root is not None else state_dir()

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """Decoded value for `key`, or `default` when nothing is stored.

        Undecodable documents raise ValueError so callers can decide how to
        recover.
        """
        p = self.path_for(key)
        if not p.exists():
            return default
        return json.loads(p.read_text(encoding="utf-8"))

    def set(self, key: str, value: Any) -> None:
        p = self.path_for(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        # Unique tmp name so parallel writers never share a scratch file
        tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(6)}.tmp")
        tmp.write_text(json.dumps(value, indent=2) + "\n", encoding="utf-8")
        tmp.replace(p)

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class ScoreStore:
    """Best score and leaderboard persistence.

    Nothing here raises on bad data or failed writes: corrupt records are
    logged and discarded, write errors are logged and dropped.
    """

    def __init__(self, kv: Optional[KeyValueStore] = None, tuning: Tuning = DEFAULT_TUNING):
        self._kv = kv if kv is not None else KeyValueStore()
        self._best_key = tuning.best_score_key
        self._leaderboard_key = tuning.leaderboard_key

    @property
    def kv(self) -> KeyValueStore:
        return self._kv

    def load_best_score(self) -> int:
        raw = self._read(self._best_key)
        if raw is _MISSING:
            return 0
        if isinstance(raw, str):
            try:
                raw = int(raw.strip())
            except ValueError:
                raw = None
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            logger.warning("Discarding invalid best score record %r", raw)
            self._discard(self._best_key)
            return 0
        return raw

    def save_best_score(self, score: int) -> None:
        self._write(self._best_key, int(score))

    def load_leaderboard(self) -> List[ScoreEntry]:
        raw = self._read(self._leaderboard_key)
        if raw is _MISSING:
            return []
        if not isinstance(raw, list):
            logger.warning("Discarding leaderboard record that is not a list")
            self._discard(self._leaderboard_key)
            return []
        entries = [ScoreEntry.from_json(item) for item in raw]
        if any(entry is None for entry in entries):
            logger.warning("Discarding leaderboard record with malformed entries")
            self._discard(self._leaderboard_key)
            return []
        return sorted(entries, key=lambda entry: entry.score, reverse=True)

    def save_leaderboard(self, entries: Sequence[ScoreEntry]) -> None:
        self._write(self._leaderboard_key, [entry.to_json() for entry in entries])

    def clear_leaderboard(self) -> None:
        try:
            self._kv.remove(self._leaderboard_key)
        except OSError:
            logger.exception("Error clearing high scores")

    def _read(self, key: str) -> Any:
        try:
            return self._kv.get(key, _MISSING)
        except ValueError:
            logger.warning("Stored record %r is not valid JSON, discarding it", key)
            self._discard(key)
            return _MISSING
        except OSError:
            logger.exception("Error reading stored record %r", key)
            return _MISSING

    def _write(self, key: str, value: Any) -> None:
        try:
            self._kv.set(key, value)
        except OSError:
            logger.exception("Error saving stored record %r", key)

    def _discard(self, key: str) -> None:
        try:
            self._kv.remove(key)
        except OSError:
            logger.exception("Error discarding stored record %r", key)
