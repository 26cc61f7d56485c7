"""Shirt levels earned by all-time games played."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ShirtLevel:
    name: str
    color: str
    min_games: int


# Highest tier first.
SHIRT_LEVELS: tuple[ShirtLevel, ...] = (
    ShirtLevel("Legend", "black", 1000),
    ShirtLevel("Master", "purple", 750),
    ShirtLevel("Expert", "blue", 500),
    ShirtLevel("Advanced", "green", 300),
    ShirtLevel("Experienced", "orange", 150),
    ShirtLevel("Intermediate", "yellow", 90),
    ShirtLevel("Beginner", "white", 30),
    ShirtLevel("Rookie", "#bebebe", 0),
)


@dataclass(frozen=True)
class ShirtLevelUp:
    player_id: int
    previous: ShirtLevel
    current: ShirtLevel
    games_played: int


@dataclass(frozen=True)
class NextShirtLevel:
    level: ShirtLevel
    games_remaining: int


def shirt_level(games_played: int) -> ShirtLevel:
    for level in SHIRT_LEVELS:
        if games_played >= level.min_games:
            return level
    return SHIRT_LEVELS[-1]


def check_shirt_level_up(player_id: int, games_before: int, games_after: int) -> ShirtLevelUp | None:
    """Return the promotion when ``games_after`` crosses into a new tier."""
    previous = shirt_level(games_before)
    current = shirt_level(games_after)
    if previous == current:
        return None
    return ShirtLevelUp(
        player_id=player_id,
        previous=previous,
        current=current,
        games_played=games_after,
    )


def next_shirt_level(games_played: int) -> NextShirtLevel | None:
    """The next tier up and the games still missing; ``None`` at the top tier."""
    for level in reversed(SHIRT_LEVELS):
        if games_played < level.min_games:
            return NextShirtLevel(level=level, games_remaining=level.min_games - games_played)
    return None


__all__ = [
    "NextShirtLevel",
    "SHIRT_LEVELS",
    "ShirtLevel",
    "ShirtLevelUp",
    "check_shirt_level_up",
    "next_shirt_level",
    "shirt_level",
]
