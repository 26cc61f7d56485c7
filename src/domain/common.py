"""Shared types for doubles rating computations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Team(str, Enum):
    """Side of a doubles match."""

    A = "A"
    B = "B"


@dataclass(frozen=True)
class PlayerRating:
    """Narrow engine input: a player id and their pre-match rating."""

    player_id: int
    rating: int


@dataclass(frozen=True)
class MatchScore:
    team_a: int
    team_b: int

    @property
    def difference(self) -> int:
        return abs(self.team_a - self.team_b)


@dataclass(frozen=True)
class ParticipantResult:
    player_id: int
    team: Team
    rating_before: int
    rating_after: int
    rating_delta: int


@dataclass(frozen=True)
class MatchResult:
    """Engine output for one doubles match."""

    team_a: tuple[ParticipantResult, ParticipantResult]
    team_b: tuple[ParticipantResult, ParticipantResult]
    team_a_rating: float
    team_b_rating: float
    team_a_expected: float
    winner: Team

    @property
    def participants(self) -> tuple[ParticipantResult, ...]:
        return self.team_a + self.team_b

    def ratings_after(self) -> dict[int, int]:
        return {participant.player_id: participant.rating_after for participant in self.participants}


@dataclass(frozen=True)
class StoredMatch:
    """A persisted match as seen by the replay fold."""

    match_id: int
    created_at: datetime
    team_a: tuple[int, int]
    team_b: tuple[int, int]
    score: MatchScore

    @property
    def player_ids(self) -> tuple[int, ...]:
        return self.team_a + self.team_b


__all__ = [
    "MatchResult",
    "MatchScore",
    "ParticipantResult",
    "PlayerRating",
    "StoredMatch",
    "Team",
]
