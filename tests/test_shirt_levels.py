"""Tests for shirt levels by all-time games."""

from __future__ import annotations

import pytest

from domain.shirt_levels import SHIRT_LEVELS, check_shirt_level_up, next_shirt_level, shirt_level


@pytest.mark.parametrize(
    ("games", "expected"),
    [
        (0, "Rookie"),
        (29, "Rookie"),
        (30, "Beginner"),
        (89, "Beginner"),
        (90, "Intermediate"),
        (150, "Experienced"),
        (300, "Advanced"),
        (500, "Expert"),
        (749, "Expert"),
        (750, "Master"),
        (999, "Master"),
        (1000, "Legend"),
        (4000, "Legend"),
    ],
)
def test_shirt_level_tiers(games: int, expected: str) -> None:
    assert shirt_level(games).name == expected


def test_tiers_are_ordered_highest_first() -> None:
    thresholds = [level.min_games for level in SHIRT_LEVELS]

    assert thresholds == sorted(thresholds, reverse=True)
    assert thresholds[-1] == 0


def test_level_up_only_when_crossing_a_threshold() -> None:
    level_up = check_shirt_level_up(7, 29, 30)

    assert level_up is not None
    assert level_up.player_id == 7
    assert (level_up.previous.name, level_up.current.name) == ("Rookie", "Beginner")
    assert level_up.current.color == "white"
    assert level_up.games_played == 30
    assert check_shirt_level_up(7, 30, 31) is None
    assert check_shirt_level_up(7, 998, 999) is None
    assert check_shirt_level_up(7, 999, 1000).current.name == "Legend"


def test_next_level_reports_remaining_games() -> None:
    upcoming = next_shirt_level(25)

    assert upcoming is not None
    assert upcoming.level.name == "Beginner"
    assert upcoming.games_remaining == 5
    assert next_shirt_level(30).level.name == "Intermediate"
    assert next_shirt_level(1000) is None
