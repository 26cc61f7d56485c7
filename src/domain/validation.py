"""Boundary checks applied before a match reaches the rating engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.common import MatchScore
from domain.errors import MatchValidationError


@dataclass(frozen=True)
class MatchRules:
    max_score: int = 7


def validate_match_input(
    team_a: Sequence[int],
    team_b: Sequence[int],
    score: MatchScore,
    rules: MatchRules | None = None,
) -> None:
    """Reject malformed match input; the rating engine assumes all of this holds."""
    rules = rules or MatchRules()

    if len(team_a) != 2 or len(team_b) != 2:
        raise MatchValidationError(
            f"each team needs exactly 2 players, got {len(team_a)}/{len(team_b)}"
        )

    player_ids = [*team_a, *team_b]
    if len(set(player_ids)) != len(player_ids):
        raise MatchValidationError(f"players must be distinct across both teams: {player_ids}")

    for label, value in (("team_a", score.team_a), ("team_b", score.team_b)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise MatchValidationError(f"score.{label} must be an integer, got {value!r}")
        if value < 0 or value > rules.max_score:
            raise MatchValidationError(
                f"score.{label}={value} must be between 0 and {rules.max_score}"
            )

    if score.team_a == score.team_b:
        raise MatchValidationError(f"scores must differ, got {score.team_a}:{score.team_b}")


__all__ = ["MatchRules", "validate_match_input"]
