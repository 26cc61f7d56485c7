"""Quarterly baseline ledger and quarterly reporting."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.errors import PlayerNotFoundError
from domain.quarters import Quarter, is_first_day_of_quarter
from models import QuarterlyBaseline
from repositories.baseline_repository import (
    fetch_quarter_baselines_with_players,
    get_baseline,
    insert_baseline,
)
from repositories.match_repository import count_games_by_player, count_matches
from repositories.player_repository import get_player, list_players


@dataclass(frozen=True)
class QuarterlyPlayerStats:
    player_id: int
    username: str
    start_rating: int
    end_rating: int
    games_played: int

    @property
    def rating_change(self) -> int:
        return self.end_rating - self.start_rating


@dataclass(frozen=True)
class QuarterlyReport:
    quarter: Quarter
    players: list[QuarterlyPlayerStats]
    total_games: int


def ensure_quarterly_baseline(session: Session, player_id: int, as_of: datetime) -> QuarterlyBaseline:
    """Return the player's baseline for the quarter containing ``as_of``, creating it if needed.

    A new baseline captures the player's current rating. If another writer
    inserts the same (player, year, quarter) first, the unique constraint fires
    inside a savepoint and the winner's row is returned instead.
    """
    baseline, _ = _get_or_create_baseline(session, player_id, Quarter.from_datetime(as_of))
    return baseline


def ensure_all_quarterly_baselines(session: Session, as_of: datetime) -> int:
    """Ensure every non-privileged player has a baseline; returns how many were created."""
    quarter = Quarter.from_datetime(as_of)
    created = 0
    for player in list_players(session):
        _, inserted = _get_or_create_baseline(session, player.id, quarter)
        if inserted:
            created += 1
    return created


def get_quarterly_report(session: Session, year: int, quarter_index: int) -> QuarterlyReport:
    """Start/end ratings and games played for every player baselined in the quarter.

    ``end_rating`` is the player's current rating, so the report is only
    meaningful for the active quarter or right after it closes.
    """
    quarter = Quarter(year, quarter_index)
    rows = fetch_quarter_baselines_with_players(session, quarter)
    games = count_games_by_player(
        session,
        quarter=quarter,
        player_ids=[baseline.player_id for baseline, _ in rows],
    )

    players = [
        QuarterlyPlayerStats(
            player_id=player.id,
            username=player.username,
            start_rating=baseline.start_rating,
            end_rating=player.rating,
            games_played=games.get(player.id, 0),
        )
        for baseline, player in rows
    ]
    players.sort(key=lambda stats: (-stats.end_rating, stats.username))

    return QuarterlyReport(
        quarter=quarter,
        players=players,
        total_games=count_matches(session, quarter),
    )


def run_daily_quarter_check(
    *,
    session_factory,
    now: datetime,
    echo: Callable[[str], None] | None = None,
) -> int:
    """Daily job body: sweep baselines when ``now`` is the first day of a quarter."""
    if not is_first_day_of_quarter(now):
        return 0

    with session_factory() as session:
        with session.begin():
            created = ensure_all_quarterly_baselines(session, now)

    if echo is not None:
        echo(f"quarter_start={Quarter.from_datetime(now).label} baselines_created={created}")
    return created


def _get_or_create_baseline(
    session: Session,
    player_id: int,
    quarter: Quarter,
) -> tuple[QuarterlyBaseline, bool]:
    """Return the baseline and whether this call inserted it."""
    existing = get_baseline(session, player_id, quarter)
    if existing is not None:
        return existing, False

    player = get_player(session, player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)

    try:
        with session.begin_nested():
            baseline = insert_baseline(
                session,
                player_id=player_id,
                quarter=quarter,
                start_rating=player.rating,
            )
        return baseline, True
    except IntegrityError:
        # Lost the race to another writer; its row is the baseline.
        existing = get_baseline(session, player_id, quarter)
        if existing is None:
            raise
        return existing, False


__all__ = [
    "QuarterlyPlayerStats",
    "QuarterlyReport",
    "ensure_all_quarterly_baselines",
    "ensure_quarterly_baseline",
    "get_quarterly_report",
    "run_daily_quarter_check",
]
