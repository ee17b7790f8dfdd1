from __future__ import annotations

import json
from pathlib import Path

from copter.logic.leaderboard import Leaderboard, ScoreEntry
from copter.storage import KeyValueStore, ScoreStore, state_dir


def _store(tmp_path: Path) -> ScoreStore:
    return ScoreStore(KeyValueStore(tmp_path / "state"))


def test_state_dir_env_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("COPTER_STATE_DIR", str(tmp_path / "custom"))
    assert state_dir() == tmp_path / "custom"
    store = ScoreStore()
    store.save_best_score(12)
    assert (tmp_path / "custom" / "helicopterBestScore.json").exists()


def test_empty_store_defaults(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.load_best_score() == 0
    assert store.load_leaderboard() == []


def test_best_score_roundtrip(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save_best_score(321)
    assert store.load_best_score() == 321


def test_best_score_accepts_numeric_text(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.kv.set("helicopterBestScore", "77")
    assert store.load_best_score() == 77


def test_invalid_best_score_is_discarded(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.kv.set("helicopterBestScore", "lots")
    assert store.load_best_score() == 0
    assert not store.kv.path_for("helicopterBestScore").exists()


def test_leaderboard_roundtrip_is_sorted(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save_leaderboard([ScoreEntry("b", 5), ScoreEntry("a", 9)])
    payload = json.loads(store.kv.path_for("helicopterGameHighScores_v1").read_text(encoding="utf-8"))
    assert payload == [{"name": "b", "score": 5}, {"name": "a", "score": 9}]
    assert store.load_leaderboard() == [ScoreEntry("a", 9), ScoreEntry("b", 5)]


def test_corrupt_leaderboard_is_treated_as_empty_and_removed(tmp_path: Path, caplog) -> None:
    store = _store(tmp_path)
    path = store.kv.path_for("helicopterGameHighScores_v1")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING", logger="copter.storage"):
        assert store.load_leaderboard() == []
    assert not path.exists()
    assert "not valid JSON" in caplog.text


def test_malformed_leaderboard_entries_discard_record(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.kv.set("helicopterGameHighScores_v1", [{"name": "ok", "score": 3}, {"name": "bad"}])
    assert store.load_leaderboard() == []
    assert not store.kv.path_for("helicopterGameHighScores_v1").exists()

    store.kv.set("helicopterGameHighScores_v1", {"name": "x", "score": 1})
    assert store.load_leaderboard() == []


def test_leaderboard_persists_submissions(tmp_path: Path) -> None:
    store = _store(tmp_path)
    board = Leaderboard(store=store)
    board.submit("  Ada ", 40)
    board.submit("Bob", 60)

    reloaded = Leaderboard(store=_store(tmp_path))
    assert reloaded.entries == [ScoreEntry("Bob", 60), ScoreEntry("Ada", 40)]

    reloaded.clear()
    assert store.load_leaderboard() == []
    assert Leaderboard(store=store).entries == []


def test_leaderboard_file_is_capped(tmp_path: Path) -> None:
    store = _store(tmp_path)
    board = Leaderboard(store=store)
    for score in range(1, 16):
        board.submit("p", score)
    stored = store.load_leaderboard()
    assert len(stored) == 10
    assert stored[0].score == 15
    assert stored[-1].score == 6
