"""Persistence helpers for players and their current ratings."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from models import DEFAULT_RATING, Player


def add_player(
    session: Session,
    *,
    username: str,
    rating: int = DEFAULT_RATING,
    is_privileged: bool = False,
    created_at: datetime | None = None,
) -> Player:
    """Insert one player and flush to assign its id."""
    player = Player(username=username, rating=rating, is_privileged=is_privileged)
    if created_at is not None:
        player.created_at = created_at
        player.last_activity = created_at
    session.add(player)
    session.flush()
    return player


def get_player(session: Session, player_id: int) -> Player | None:
    return session.get(Player, player_id)


def lock_players(session: Session, player_ids: Sequence[int]) -> dict[int, Player]:
    """Load players by id with row locks held until the transaction ends.

    Rows are locked in id order so two writers touching overlapping player sets
    cannot deadlock. SQLite ignores FOR UPDATE.
    """
    if not player_ids:
        return {}
    statement = (
        select(Player)
        .where(Player.id.in_(set(player_ids)))
        .order_by(Player.id)
        .with_for_update()
    )
    return {player.id: player for player in session.execute(statement).scalars()}


def list_players(session: Session, *, include_privileged: bool = False) -> list[Player]:
    """Players ordered by rating (highest first), then username."""
    statement = select(Player).order_by(Player.rating.desc(), Player.username)
    if not include_privileged:
        statement = statement.where(Player.is_privileged.is_(False))
    return list(session.execute(statement).scalars())


def count_higher_rated(session: Session, rating: int) -> int:
    """Count non-privileged players strictly above ``rating``."""
    statement = select(func.count(Player.id)).where(
        Player.is_privileged.is_(False),
        Player.rating > rating,
    )
    return int(session.scalar(statement) or 0)


def fetch_penalty_candidates(
    session: Session,
    *,
    inactive_before: datetime,
    penalized_before: datetime,
) -> list[Player]:
    """Non-privileged players idle since ``inactive_before`` and not penalized recently."""
    statement = (
        select(Player)
        .where(
            Player.is_privileged.is_(False),
            Player.last_activity < inactive_before,
            or_(
                Player.last_inactivity_penalty.is_(None),
                Player.last_inactivity_penalty <= penalized_before,
            ),
        )
        .order_by(Player.id)
        .with_for_update()
    )
    return list(session.execute(statement).scalars())


def reset_player_ratings(session: Session, rating: int = DEFAULT_RATING) -> int:
    """Set every non-privileged player's rating; returns the affected row count."""
    result = session.execute(
        update(Player).where(Player.is_privileged.is_(False)).values(rating=rating)
    )
    return int(result.rowcount or 0)
