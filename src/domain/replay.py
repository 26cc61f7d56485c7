"""Deterministic replay of a quarter's matches from baseline ratings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from domain.common import MatchResult, PlayerRating, StoredMatch
from domain.elo.calculator import DoublesEloCalculator


@dataclass(frozen=True)
class ReplayedMatch:
    match: StoredMatch
    result: MatchResult


@dataclass(frozen=True)
class ReplayOutcome:
    """Final ratings of every participant plus per-match annotations in replay order."""

    ratings: dict[int, int]
    matches: list[ReplayedMatch]


def replay_order(matches: Iterable[StoredMatch]) -> list[StoredMatch]:
    """Chronological order; match id breaks ties between identical timestamps."""
    return sorted(matches, key=lambda match: (match.created_at, match.match_id))


def replay_matches(
    baselines: Mapping[int, int],
    matches: Iterable[StoredMatch],
    calculator: DoublesEloCalculator,
) -> ReplayOutcome:
    """Fold the matches over the baseline ratings.

    Every participant starts from their baseline, or from the calculator's
    initial rating when they have none. Players that appear in no match are not
    part of the outcome.
    """
    ordered = replay_order(matches)

    ratings: dict[int, int] = {}
    for match in ordered:
        for player_id in match.player_ids:
            if player_id not in ratings:
                ratings[player_id] = baselines.get(player_id, calculator.params.initial_rating)

    replayed: list[ReplayedMatch] = []
    for match in ordered:
        team_a = (
            PlayerRating(match.team_a[0], ratings[match.team_a[0]]),
            PlayerRating(match.team_a[1], ratings[match.team_a[1]]),
        )
        team_b = (
            PlayerRating(match.team_b[0], ratings[match.team_b[0]]),
            PlayerRating(match.team_b[1], ratings[match.team_b[1]]),
        )
        result = calculator.compute_match(team_a, team_b, match.score)
        ratings.update(result.ratings_after())
        replayed.append(ReplayedMatch(match=match, result=result))

    return ReplayOutcome(ratings=ratings, matches=replayed)


__all__ = ["ReplayOutcome", "ReplayedMatch", "replay_matches", "replay_order"]
