"""Tests for the inactivity penalty job."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import select

from domain.common import MatchScore
from domain.inactivity import (
    InactivityPolicy,
    apply_inactivity_penalties,
    is_inactive,
    penalized_rating,
)
from domain.match_entry import record_match
from models import Player
from repositories.player_repository import add_player

NOW = datetime(2026, 1, 20, 6, 0, 0)


def _ratings(session_factory) -> dict[str, int]:
    with session_factory() as session:
        return {player.username: player.rating for player in session.scalars(select(Player).order_by(Player.id))}


def test_is_inactive_uses_strict_threshold() -> None:
    now = datetime(2026, 1, 20, 12, 0, 0)

    assert is_inactive(now - timedelta(days=7, seconds=1), now)
    assert not is_inactive(now - timedelta(days=7), now)
    assert not is_inactive(now - timedelta(days=2), now, InactivityPolicy(inactive_days=3))
    assert is_inactive(now - timedelta(days=4), now, InactivityPolicy(inactive_days=3))


def test_penalized_rating_floors_at_zero() -> None:
    assert penalized_rating(500) == 490
    assert penalized_rating(6) == 0
    assert penalized_rating(40, InactivityPolicy(penalty=25)) == 15


def test_idle_players_lose_rating(session_factory, player_ids) -> None:
    lines: list[str] = []
    applied = apply_inactivity_penalties(session_factory=session_factory, now=NOW, echo=lines.append)

    assert [penalty.username for penalty in applied] == ["alice", "bob", "carol", "dave"]
    assert all(penalty.rating_after == 490 for penalty in applied)
    assert _ratings(session_factory) == {"alice": 490, "bob": 490, "carol": 490, "dave": 490}
    assert lines[-1] == "completed inactivity_check penalized_players=4"
    with session_factory() as session:
        assert session.get(Player, player_ids[0]).last_inactivity_penalty == NOW


def test_recently_active_and_privileged_players_are_skipped(session_factory, player_ids) -> None:
    alice, bob, carol, dave = player_ids
    with session_factory() as session:
        with session.begin():
            add_player(session, username="admin", rating=900, is_privileged=True, created_at=datetime(2025, 6, 1))
            add_player(session, username="erin", rating=4, created_at=datetime(2025, 6, 1))

    record_match(
        session_factory=session_factory,
        team_a=[alice, bob],
        team_b=[carol, dave],
        score=MatchScore(6, 2),
        played_at=NOW - timedelta(days=1),
    )

    applied = apply_inactivity_penalties(session_factory=session_factory, now=NOW)

    assert [(penalty.username, penalty.rating_after) for penalty in applied] == [("erin", 0)]
    ratings = _ratings(session_factory)
    assert ratings["admin"] == 900
    assert ratings["alice"] == 516


def test_cooldown_limits_penalty_frequency(session_factory, player_ids) -> None:
    apply_inactivity_penalties(session_factory=session_factory, now=NOW)

    assert apply_inactivity_penalties(session_factory=session_factory, now=NOW) == []
    assert apply_inactivity_penalties(session_factory=session_factory, now=NOW + timedelta(hours=23)) == []
    assert _ratings(session_factory)["alice"] == 490

    second_day = apply_inactivity_penalties(session_factory=session_factory, now=NOW + timedelta(hours=24))

    assert len(second_day) == 4
    assert _ratings(session_factory)["alice"] == 480
