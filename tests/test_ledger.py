"""Tests for quarterly baselines and the quarterly report."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import func, select

import domain.ledger as ledger
from domain.common import MatchScore
from domain.errors import PlayerNotFoundError
from domain.ledger import (
    ensure_all_quarterly_baselines,
    ensure_quarterly_baseline,
    get_quarterly_report,
    run_daily_quarter_check,
)
from domain.match_entry import record_match
from domain.quarters import Quarter
from models import Player, QuarterlyBaseline
from repositories.baseline_repository import insert_baseline
from repositories.player_repository import add_player

FEB = datetime(2026, 2, 14, 19, 30, 0)


def _baseline_count(session_factory) -> int:
    with session_factory() as session:
        return int(session.scalar(select(func.count(QuarterlyBaseline.id))) or 0)


def test_baseline_captures_current_rating(session_factory, player_ids) -> None:
    with session_factory() as session:
        with session.begin():
            session.get(Player, player_ids[0]).rating = 540
            baseline = ensure_quarterly_baseline(session, player_ids[0], FEB)

    assert baseline.year == 2026
    assert baseline.quarter == 0
    assert baseline.start_rating == 540


def test_baseline_is_idempotent_and_never_rewritten(session_factory, player_ids) -> None:
    with session_factory() as session:
        with session.begin():
            first = ensure_quarterly_baseline(session, player_ids[0], FEB)

    with session_factory() as session:
        with session.begin():
            session.get(Player, player_ids[0]).rating = 612
            second = ensure_quarterly_baseline(session, player_ids[0], datetime(2026, 3, 30))

    assert second.id == first.id
    assert second.start_rating == 500
    assert _baseline_count(session_factory) == 1


def test_new_quarter_gets_its_own_baseline(session_factory, player_ids) -> None:
    with session_factory() as session:
        with session.begin():
            ensure_quarterly_baseline(session, player_ids[0], FEB)
            session.get(Player, player_ids[0]).rating = 530
            april = ensure_quarterly_baseline(session, player_ids[0], datetime(2026, 4, 1))

    assert (april.year, april.quarter, april.start_rating) == (2026, 1, 530)
    assert _baseline_count(session_factory) == 2


def test_missing_player_creates_nothing(session_factory, player_ids) -> None:
    with session_factory() as session:
        with pytest.raises(PlayerNotFoundError):
            ensure_quarterly_baseline(session, 9_999, FEB)
        session.rollback()

    assert _baseline_count(session_factory) == 0


def test_concurrent_insert_returns_existing_row(session_factory, player_ids, monkeypatch) -> None:
    with session_factory() as session:
        with session.begin():
            insert_baseline(session, player_id=player_ids[0], quarter=Quarter(2026, 0), start_rating=500)
            session.get(Player, player_ids[0]).rating = 650

    real_get_baseline = ledger.get_baseline
    calls: list[int] = []

    def stale_first_read(session, player_id, quarter):
        calls.append(player_id)
        if len(calls) == 1:
            return None
        return real_get_baseline(session, player_id, quarter)

    monkeypatch.setattr(ledger, "get_baseline", stale_first_read)

    with session_factory() as session:
        with session.begin():
            baseline = ensure_quarterly_baseline(session, player_ids[0], FEB)

    assert baseline.start_rating == 500
    assert len(calls) == 2
    assert _baseline_count(session_factory) == 1


def test_sweep_does_not_count_rows_another_writer_inserted(session_factory, player_ids, monkeypatch) -> None:
    with session_factory() as session:
        with session.begin():
            insert_baseline(session, player_id=player_ids[0], quarter=Quarter(2026, 0), start_rating=500)

    real_get_baseline = ledger.get_baseline
    calls: list[int] = []

    def stale_first_read(session, player_id, quarter):
        calls.append(player_id)
        if len(calls) == 1:
            return None
        return real_get_baseline(session, player_id, quarter)

    monkeypatch.setattr(ledger, "get_baseline", stale_first_read)

    with session_factory() as session:
        with session.begin():
            created = ensure_all_quarterly_baselines(session, FEB)

    # alice's row already existed; only the other three are new.
    assert calls[0] == player_ids[0]
    assert created == 3
    assert _baseline_count(session_factory) == 4


def test_sweep_reads_each_baseline_once(session_factory, player_ids, monkeypatch) -> None:
    real_get_baseline = ledger.get_baseline
    calls: list[int] = []

    def counting_read(session, player_id, quarter):
        calls.append(player_id)
        return real_get_baseline(session, player_id, quarter)

    monkeypatch.setattr(ledger, "get_baseline", counting_read)

    with session_factory() as session:
        with session.begin():
            ensure_all_quarterly_baselines(session, FEB)

    assert sorted(calls) == sorted(player_ids)


def test_sweep_skips_privileged_players(session_factory, player_ids) -> None:
    with session_factory() as session:
        with session.begin():
            admin = add_player(session, username="admin", is_privileged=True)
            admin_id = admin.id

    with session_factory() as session:
        with session.begin():
            created = ensure_all_quarterly_baselines(session, FEB)
        with session.begin():
            created_again = ensure_all_quarterly_baselines(session, FEB)

    assert created == 4
    assert created_again == 0
    with session_factory() as session:
        owners = set(session.scalars(select(QuarterlyBaseline.player_id)))
    assert owners == set(player_ids)
    assert admin_id not in owners


def test_quarterly_report_counts_games_inside_window(session_factory, player_ids) -> None:
    alice, bob, carol, dave = player_ids
    record_match(
        session_factory=session_factory,
        team_a=[alice, bob],
        team_b=[carol, dave],
        score=MatchScore(6, 2),
        played_at=datetime(2026, 1, 10, 18, 0),
    )
    record_match(
        session_factory=session_factory,
        team_a=[alice, carol],
        team_b=[bob, dave],
        score=MatchScore(7, 1),
        played_at=datetime(2026, 3, 31, 23, 59, 59),
    )
    record_match(
        session_factory=session_factory,
        team_a=[alice, dave],
        team_b=[bob, carol],
        score=MatchScore(6, 4),
        played_at=datetime(2026, 4, 1, 0, 0, 0),
    )

    with session_factory() as session:
        q1 = get_quarterly_report(session, 2026, 0)
        q2 = get_quarterly_report(session, 2026, 1)

    assert q1.total_games == 2
    assert q2.total_games == 1
    assert [stats.games_played for stats in q1.players] == [2, 2, 2, 2]
    assert all(stats.start_rating == 500 for stats in q1.players)
    end_ratings = [stats.end_rating for stats in q1.players]
    assert end_ratings == sorted(end_ratings, reverse=True)
    for stats in q1.players:
        assert stats.rating_change == stats.end_rating - stats.start_rating


def test_report_only_lists_baselined_players(session_factory, player_ids) -> None:
    with session_factory() as session:
        with session.begin():
            ensure_quarterly_baseline(session, player_ids[1], FEB)

    with session_factory() as session:
        report = get_quarterly_report(session, 2026, 0)

    assert [stats.username for stats in report.players] == ["bob"]
    assert report.players[0].games_played == 0
    assert report.total_games == 0


def test_daily_check_only_sweeps_on_quarter_start(session_factory, player_ids) -> None:
    assert run_daily_quarter_check(session_factory=session_factory, now=datetime(2026, 5, 2)) == 0
    assert _baseline_count(session_factory) == 0

    lines: list[str] = []
    created = run_daily_quarter_check(
        session_factory=session_factory,
        now=datetime(2026, 7, 1, 0, 0, 5),
        echo=lines.append,
    )

    assert created == 4
    assert lines == ["quarter_start=Q3 2026 baselines_created=4"]
