"""Leaderboards, player rank and quarterly awards."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from sqlalchemy.orm import Session

from domain.errors import PlayerNotFoundError
from domain.inactivity import InactivityPolicy, is_inactive
from domain.ledger import QuarterlyReport, ensure_all_quarterly_baselines
from domain.quarters import Quarter
from domain import shirt_levels
from domain.shirt_levels import NextShirtLevel, ShirtLevel
from repositories.baseline_repository import fetch_start_ratings
from repositories.match_repository import count_games_by_player
from repositories.player_repository import count_higher_rated, get_player, list_players


class RankingType(str, Enum):
    """Leaderboard orderings."""

    ELO = "elo"
    QUARTERLY_IMPROVEMENT = "quarterly-improvement"
    QUARTERLY_GAMES = "quarterly-games"
    ALLTIME_GAMES = "alltime-games"


class AwardType(str, Enum):
    BEST_IMPROVEMENT = "best_improvement"
    MOST_GAMES = "most_games"
    BEST_RATING = "best_rating"


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player_id: int
    username: str
    rating: int
    start_rating: int
    quarterly_games: int
    alltime_games: int
    is_inactive: bool

    @property
    def quarterly_rating_change(self) -> int:
        return self.rating - self.start_rating

    @property
    def shirt_level(self) -> ShirtLevel:
        return shirt_levels.shirt_level(self.alltime_games)

    @property
    def next_shirt_level(self) -> NextShirtLevel | None:
        return shirt_levels.next_shirt_level(self.alltime_games)


@dataclass(frozen=True)
class QuarterlyAward:
    award_type: AwardType
    player_id: int
    username: str
    value: int


def build_leaderboard(
    *,
    session_factory,
    as_of: datetime,
    ranking_type: RankingType = RankingType.ELO,
    policy: InactivityPolicy | None = None,
) -> list[LeaderboardEntry]:
    """Rank non-privileged players for the quarter containing ``as_of``.

    Missing baselines for that quarter are created first, so every player has
    a start rating to measure improvement against.
    """
    quarter = Quarter.from_datetime(as_of)

    with session_factory() as session:
        try:
            ensure_all_quarterly_baselines(session, as_of)
            session.commit()
        except Exception:
            session.rollback()
            raise

        players = list_players(session)
        start_ratings = fetch_start_ratings(session, quarter)
        quarterly_games = count_games_by_player(session, quarter=quarter)
        alltime_games = count_games_by_player(session)

    entries = [
        LeaderboardEntry(
            rank=0,
            player_id=player.id,
            username=player.username,
            rating=player.rating,
            start_rating=start_ratings.get(player.id, player.rating),
            quarterly_games=quarterly_games.get(player.id, 0),
            alltime_games=alltime_games.get(player.id, 0),
            is_inactive=is_inactive(player.last_activity, as_of, policy),
        )
        for player in players
    ]

    # Players arrive ordered by rating; the sorts below are stable on top of that.
    if ranking_type is RankingType.QUARTERLY_IMPROVEMENT:
        entries.sort(key=lambda entry: entry.quarterly_rating_change, reverse=True)
    elif ranking_type is RankingType.QUARTERLY_GAMES:
        entries.sort(key=lambda entry: entry.quarterly_games, reverse=True)
    elif ranking_type is RankingType.ALLTIME_GAMES:
        entries.sort(key=lambda entry: entry.alltime_games, reverse=True)

    return [replace(entry, rank=index) for index, entry in enumerate(entries, start=1)]


def player_rank(session: Session, player_id: int) -> int:
    """1-based position among non-privileged players by current rating."""
    player = get_player(session, player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    return count_higher_rated(session, player.rating) + 1


def determine_quarterly_awards(report: QuarterlyReport) -> list[QuarterlyAward]:
    """Pick award winners among players who played at least one game in the quarter.

    Ties go to the player listed first in the report (higher end rating, then
    username).
    """
    active = [stats for stats in report.players if stats.games_played > 0]
    if not active:
        return []

    best_improvement = max(active, key=lambda stats: stats.rating_change)
    most_games = max(active, key=lambda stats: stats.games_played)
    best_rating = max(active, key=lambda stats: stats.end_rating)

    return [
        QuarterlyAward(
            award_type=AwardType.BEST_IMPROVEMENT,
            player_id=best_improvement.player_id,
            username=best_improvement.username,
            value=best_improvement.rating_change,
        ),
        QuarterlyAward(
            award_type=AwardType.MOST_GAMES,
            player_id=most_games.player_id,
            username=most_games.username,
            value=most_games.games_played,
        ),
        QuarterlyAward(
            award_type=AwardType.BEST_RATING,
            player_id=best_rating.player_id,
            username=best_rating.username,
            value=best_rating.end_rating,
        ),
    ]


__all__ = [
    "AwardType",
    "LeaderboardEntry",
    "QuarterlyAward",
    "RankingType",
    "build_leaderboard",
    "determine_quarterly_awards",
    "player_rank",
]
