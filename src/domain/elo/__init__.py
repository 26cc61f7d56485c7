"""Doubles Elo calculation."""

from domain.elo.calculator import (
    DoublesEloCalculator,
    EloParameters,
    calculate_expected_score,
    calculate_team_rating,
    compute_match,
)

__all__ = [
    "DoublesEloCalculator",
    "EloParameters",
    "calculate_expected_score",
    "calculate_team_rating",
    "compute_match",
]
