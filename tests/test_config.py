from __future__ import annotations

import json
from pathlib import Path

from copter.config import DEFAULT_TUNING, Tuning, load_tuning, tuning_from_dict


def test_defaults() -> None:
    tuning = Tuning()
    assert tuning.gravity == 0.14
    assert tuning.lift == -0.35
    assert tuning.max_velocity == 6.0
    assert tuning.obstacle_speed == 3.5
    assert tuning.obstacle_frequency == 100
    assert tuning.max_high_scores == 10
    assert tuning.scaled(tuning.craft_height, 400) == 25.0


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_tuning(None) is DEFAULT_TUNING
    assert load_tuning(tmp_path / "nope.json") is DEFAULT_TUNING


def test_overrides_are_applied(tmp_path: Path) -> None:
    path = tmp_path / "tuning.json"
    path.write_text(json.dumps({"gravity": 0.2, "obstacle_frequency": 80, "default_name": "Pilot"}), encoding="utf-8")
    tuning = load_tuning(path)
    assert tuning.gravity == 0.2
    assert tuning.obstacle_frequency == 80
    assert tuning.default_name == "Pilot"
    assert tuning.lift == DEFAULT_TUNING.lift


def test_bad_values_are_ignored(caplog) -> None:
    with caplog.at_level("WARNING", logger="copter.config"):
        tuning = tuning_from_dict(
            {
                "gravity": "heavy",
                "obstacle_frequency": 0,
                "max_high_scores": 2.5,
                "lift": True,
                "unknown": 1,
            }
        )
    assert tuning == DEFAULT_TUNING
    assert "unknown" in caplog.text


def test_broken_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "tuning.json"
    path.write_text("[1, 2", encoding="utf-8")
    assert load_tuning(path) is DEFAULT_TUNING
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_tuning(path) is DEFAULT_TUNING
