"""Persistence helpers for quarterly baseline snapshots."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from domain.quarters import Quarter
from models import Player, QuarterlyBaseline


def get_baseline(session: Session, player_id: int, quarter: Quarter) -> QuarterlyBaseline | None:
    statement = select(QuarterlyBaseline).where(
        QuarterlyBaseline.player_id == player_id,
        QuarterlyBaseline.year == quarter.year,
        QuarterlyBaseline.quarter == quarter.index,
    )
    return session.execute(statement).scalar_one_or_none()


def insert_baseline(
    session: Session,
    *,
    player_id: int,
    quarter: Quarter,
    start_rating: int,
) -> QuarterlyBaseline:
    """Insert one baseline and flush so the unique constraint is checked immediately."""
    baseline = QuarterlyBaseline(
        player_id=player_id,
        year=quarter.year,
        quarter=quarter.index,
        start_rating=start_rating,
    )
    session.add(baseline)
    session.flush()
    return baseline


def fetch_start_ratings(
    session: Session,
    quarter: Quarter,
    player_ids: Sequence[int] | None = None,
) -> dict[int, int]:
    """Map player id to start rating for the quarter."""
    statement = select(QuarterlyBaseline.player_id, QuarterlyBaseline.start_rating).where(
        QuarterlyBaseline.year == quarter.year,
        QuarterlyBaseline.quarter == quarter.index,
    )
    if player_ids is not None:
        statement = statement.where(QuarterlyBaseline.player_id.in_(set(player_ids)))
    return {int(player_id): int(rating) for player_id, rating in session.execute(statement)}


def fetch_quarter_baselines_with_players(
    session: Session,
    quarter: Quarter,
) -> list[tuple[QuarterlyBaseline, Player]]:
    statement = (
        select(QuarterlyBaseline, Player)
        .join(Player, Player.id == QuarterlyBaseline.player_id)
        .where(
            QuarterlyBaseline.year == quarter.year,
            QuarterlyBaseline.quarter == quarter.index,
        )
    )
    return [(baseline, player) for baseline, player in session.execute(statement)]


def delete_all_baselines(session: Session) -> int:
    result = session.execute(delete(QuarterlyBaseline))
    return int(result.rowcount or 0)
