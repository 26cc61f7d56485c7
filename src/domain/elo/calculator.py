"""Doubles Elo logic."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor

from domain.common import MatchResult, MatchScore, ParticipantResult, PlayerRating, Team


@dataclass(frozen=True)
class EloParameters:
    initial_rating: int = 500
    k_factor: float = 32.0
    scale_factor: float = 400.0
    significant_win_threshold: int = 5
    significant_win_bonus: float = 3.0


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_team_rating(first: PlayerRating, second: PlayerRating) -> float:
    """Unrounded mean of both members' ratings."""
    return (first.rating + second.rating) / 2


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; ratings round .5 towards +inf.
    return int(floor(value + 0.5))


class DoublesEloCalculator:
    """Stateless team-average Elo calculator for 2v2 matches.

    Both members of a team share the expected score and the actual result, so
    they receive the same raw change. Each member's own rating is the base the
    change is added to before rounding.

    The calculator trusts its input: scores must differ and the four players
    must be distinct. See ``domain.validation.validate_match_input``.
    """

    def __init__(self, params: EloParameters | None = None) -> None:
        self.params = params or EloParameters()

    def rating_change(self, *, expected_score: float, actual_score: float, score_difference: int) -> float:
        change = self.params.k_factor * (actual_score - expected_score)
        if score_difference >= self.params.significant_win_threshold:
            if actual_score == 1.0:
                change += self.params.significant_win_bonus
            else:
                change -= self.params.significant_win_bonus
        return change

    def _participant(self, player: PlayerRating, team: Team, change: float) -> ParticipantResult:
        rating_after = round_half_up(player.rating + change)
        return ParticipantResult(
            player_id=player.player_id,
            team=team,
            rating_before=player.rating,
            rating_after=rating_after,
            rating_delta=rating_after - player.rating,
        )

    def compute_match(
        self,
        team_a: tuple[PlayerRating, PlayerRating],
        team_b: tuple[PlayerRating, PlayerRating],
        score: MatchScore,
    ) -> MatchResult:
        team_a_rating = calculate_team_rating(*team_a)
        team_b_rating = calculate_team_rating(*team_b)

        team_a_expected = calculate_expected_score(
            rating=team_a_rating,
            opponent_rating=team_b_rating,
            scale_factor=self.params.scale_factor,
        )
        team_b_expected = calculate_expected_score(
            rating=team_b_rating,
            opponent_rating=team_a_rating,
            scale_factor=self.params.scale_factor,
        )

        # Strict comparison on both sides: equal scores make both teams lose.
        team_a_actual = 1.0 if score.team_a > score.team_b else 0.0
        team_b_actual = 1.0 if score.team_b > score.team_a else 0.0

        team_a_change = self.rating_change(
            expected_score=team_a_expected,
            actual_score=team_a_actual,
            score_difference=score.difference,
        )
        team_b_change = self.rating_change(
            expected_score=team_b_expected,
            actual_score=team_b_actual,
            score_difference=score.difference,
        )

        return MatchResult(
            team_a=(
                self._participant(team_a[0], Team.A, team_a_change),
                self._participant(team_a[1], Team.A, team_a_change),
            ),
            team_b=(
                self._participant(team_b[0], Team.B, team_b_change),
                self._participant(team_b[1], Team.B, team_b_change),
            ),
            team_a_rating=team_a_rating,
            team_b_rating=team_b_rating,
            team_a_expected=team_a_expected,
            winner=Team.A if score.team_a > score.team_b else Team.B,
        )


def compute_match(
    team_a: tuple[PlayerRating, PlayerRating],
    team_b: tuple[PlayerRating, PlayerRating],
    score: MatchScore,
    params: EloParameters | None = None,
) -> MatchResult:
    """Compute one match with default (or explicit) parameters."""
    return DoublesEloCalculator(params).compute_match(team_a, team_b, score)


__all__ = [
    "DoublesEloCalculator",
    "EloParameters",
    "calculate_expected_score",
    "calculate_team_rating",
    "compute_match",
    "round_half_up",
]
