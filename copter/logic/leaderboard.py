from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

MAX_HIGH_SCORES = 10
MAX_NAME_LENGTH = 10
DEFAULT_NAME = "Player"


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int

    def to_json(self) -> dict:
        return {"name": self.name, "score": self.score}

    @staticmethod
    def from_json(payload: Any) -> Optional["ScoreEntry"]:
        if not isinstance(payload, dict):
            return None
        name = payload.get("name")
        score = payload.get("score")
        if not isinstance(name, str):
            return None
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            return None
        return ScoreEntry(name=name, score=score)


def normalize_name(
    raw: Optional[str],
    max_length: int = MAX_NAME_LENGTH,
    default: str = DEFAULT_NAME,
) -> str:
    """Trim, fall back to the default for blank input, then cap the length."""
    name = (raw or "").strip()
    if not name:
        name = default
    return name[:max_length]


def ranked(entries: Sequence[ScoreEntry]) -> List[ScoreEntry]:
    # sorted() is stable, so equal scores keep their insertion order
    return sorted(entries, key=lambda entry: entry.score, reverse=True)


def qualifies(
    entries: Sequence[ScoreEntry],
    score: int,
    max_entries: int = MAX_HIGH_SCORES,
) -> bool:
    if score <= 0:
        return False
    board = ranked(entries)
    if len(board) < max_entries:
        return True
    return score >= board[max_entries - 1].score


def insert(
    entries: Sequence[ScoreEntry],
    entry: ScoreEntry,
    max_entries: int = MAX_HIGH_SCORES,
) -> List[ScoreEntry]:
    return ranked([*entries, entry])[:max_entries]


class Leaderboard:
    """Top-N table of named scores backed by a persistent store.

    The store only needs `load_leaderboard`, `save_leaderboard` and
    `clear_leaderboard`; see `copter.storage.ScoreStore`.
    """

    def __init__(
        self,
        store=None,
        max_entries: int = MAX_HIGH_SCORES,
        max_name_length: int = MAX_NAME_LENGTH,
        default_name: str = DEFAULT_NAME,
    ):
        self._store = store
        self.max_entries = max_entries
        self.max_name_length = max_name_length
        self.default_name = default_name
        self._entries: List[ScoreEntry] = []
        self.reload()

    @property
    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def reload(self) -> None:
        if self._store is None:
            return
        self._entries = ranked(self._store.load_leaderboard())[:self.max_entries]

    def qualifies(self, score: int) -> bool:
        return qualifies(self._entries, score, self.max_entries)

    def submit(self, name: Optional[str], score: int) -> ScoreEntry:
        entry = ScoreEntry(
            name=normalize_name(name, self.max_name_length, self.default_name),
            score=max(0, int(score)),
        )
        self._entries = insert(self._entries, entry, self.max_entries)
        if self._store is not None:
            self._store.save_leaderboard(self._entries)
        return entry

    def clear(self) -> None:
        """Drop every entry. Irreversible; callers confirm with the user first."""
        self._entries = []
        if self._store is not None:
            self._store.clear_leaderboard()
