"""Rating penalty for players who stop playing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from repositories.player_repository import fetch_penalty_candidates


@dataclass(frozen=True)
class InactivityPolicy:
    inactive_days: int = 7
    penalty: int = 10
    cooldown_hours: int = 24


@dataclass(frozen=True)
class InactivityPenalty:
    player_id: int
    username: str
    rating_before: int
    rating_after: int


def is_inactive(last_activity: datetime, now: datetime, policy: InactivityPolicy | None = None) -> bool:
    policy = policy or InactivityPolicy()
    return last_activity < now - timedelta(days=policy.inactive_days)


def penalized_rating(rating: int, policy: InactivityPolicy | None = None) -> int:
    """Deduct the penalty without going below zero."""
    policy = policy or InactivityPolicy()
    return max(rating - policy.penalty, 0)


def apply_inactivity_penalties(
    *,
    session_factory,
    now: datetime,
    policy: InactivityPolicy | None = None,
    echo: Callable[[str], None] | None = None,
) -> list[InactivityPenalty]:
    """Penalize idle non-privileged players, at most once per cooldown window."""
    policy = policy or InactivityPolicy()
    applied: list[InactivityPenalty] = []

    with session_factory() as session:
        try:
            candidates = fetch_penalty_candidates(
                session,
                inactive_before=now - timedelta(days=policy.inactive_days),
                penalized_before=now - timedelta(hours=policy.cooldown_hours),
            )
            for player in candidates:
                rating_before = player.rating
                player.rating = penalized_rating(rating_before, policy)
                player.last_inactivity_penalty = now
                applied.append(
                    InactivityPenalty(
                        player_id=player.id,
                        username=player.username,
                        rating_before=rating_before,
                        rating_after=player.rating,
                    )
                )
                if echo is not None:
                    echo(f"penalized player={player.username} rating={rating_before}->{player.rating}")
            session.commit()
        except Exception:
            session.rollback()
            raise

    if echo is not None:
        echo(f"completed inactivity_check penalized_players={len(applied)}")
    return applied


__all__ = [
    "InactivityPenalty",
    "InactivityPolicy",
    "apply_inactivity_penalties",
    "is_inactive",
    "penalized_rating",
]
