"""Quarter recalculation and full system reset."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from domain.elo.calculator import DoublesEloCalculator, EloParameters
from domain.quarters import Quarter
from domain.replay import replay_matches
from models import DEFAULT_RATING
from repositories.baseline_repository import delete_all_baselines, fetch_start_ratings
from repositories.match_repository import (
    apply_match_result,
    delete_all_matches,
    fetch_quarter_matches,
    to_stored_match,
)
from repositories.player_repository import lock_players, reset_player_ratings


@dataclass(frozen=True)
class RecalculationSummary:
    """Outcome of one quarter replay."""

    quarter: Quarter
    processed_matches: int
    players_updated: int
    players_without_baseline: int


@dataclass(frozen=True)
class ResetSummary:
    players_reset: int
    matches_deleted: int
    baselines_deleted: int


def recalculate_quarter(
    *,
    session_factory,
    year: int,
    quarter_index: int,
    params: EloParameters | None = None,
    echo: Callable[[str], None] | None = None,
) -> RecalculationSummary:
    """Rebuild every match annotation and participant rating of one quarter.

    Participants are reset to their quarterly baseline (initial rating when
    missing) and the quarter's matches are replayed by (created_at, id). The
    whole run is one transaction: any failure rolls back every write.
    """
    quarter = Quarter(year, quarter_index)
    calculator = DoublesEloCalculator(params)

    with session_factory() as session:
        try:
            acquire_quarter_lock(session, quarter)

            matches = fetch_quarter_matches(session, quarter)
            if not matches:
                session.rollback()
                if echo is not None:
                    echo(f"quarter={quarter.label} processed_matches=0 nothing to recalculate")
                return RecalculationSummary(
                    quarter=quarter,
                    processed_matches=0,
                    players_updated=0,
                    players_without_baseline=0,
                )

            stored = [to_stored_match(match) for match in matches]
            participant_ids = sorted({player_id for match in stored for player_id in match.player_ids})
            players = lock_players(session, participant_ids)
            missing_players = [player_id for player_id in participant_ids if player_id not in players]
            if missing_players:
                raise ValueError(
                    f"quarter={quarter.label} references unknown player ids {missing_players}"
                )

            baselines = fetch_start_ratings(session, quarter, participant_ids)
            outcome = replay_matches(baselines, stored, calculator)

            by_id = {match.id: match for match in matches}
            for index, replayed in enumerate(outcome.matches, start=1):
                apply_match_result(by_id[replayed.match.match_id], replayed.result)
                if echo is not None and index % 1_000 == 0:
                    echo(f"quarter={quarter.label} processed_matches={index}/{len(matches)}")

            for player_id, rating in outcome.ratings.items():
                players[player_id].rating = rating

            session.commit()
        except Exception:
            session.rollback()
            raise

    summary = RecalculationSummary(
        quarter=quarter,
        processed_matches=len(outcome.matches),
        players_updated=len(outcome.ratings),
        players_without_baseline=len(set(participant_ids) - set(baselines)),
    )
    if echo is not None:
        echo(
            "completed "
            f"quarter={quarter.label} "
            f"processed_matches={summary.processed_matches} "
            f"players_updated={summary.players_updated} "
            f"players_without_baseline={summary.players_without_baseline}"
        )
    return summary


def reset_system(
    *,
    session_factory,
    echo: Callable[[str], None] | None = None,
) -> ResetSummary:
    """Wipe the season: ratings back to default, all matches and baselines deleted."""
    with session_factory() as session:
        try:
            matches_deleted = delete_all_matches(session)
            baselines_deleted = delete_all_baselines(session)
            players_reset = reset_player_ratings(session, DEFAULT_RATING)
            session.commit()
        except Exception:
            session.rollback()
            raise

    if echo is not None:
        echo(
            "completed reset "
            f"players_reset={players_reset} "
            f"matches_deleted={matches_deleted} "
            f"baselines_deleted={baselines_deleted}"
        )
    return ResetSummary(
        players_reset=players_reset,
        matches_deleted=matches_deleted,
        baselines_deleted=baselines_deleted,
    )


def quarter_lock_key(quarter: Quarter) -> int:
    return quarter.year * 10 + quarter.index


def acquire_quarter_lock(session: Session, quarter: Quarter, *, shared: bool = False) -> None:
    """Take the quarter's transaction-scoped advisory lock on PostgreSQL.

    Recalculation holds it exclusively. Match entry and deletion hold it shared,
    so they run alongside each other but never inside a running recalculation
    of the same quarter. Other dialects rely on their own write locking.
    """
    bind = session.get_bind()
    if bind is None or bind.dialect.name != "postgresql":
        return
    key = quarter_lock_key(quarter)
    if shared:
        session.execute(select(func.pg_advisory_xact_lock_shared(key)))
    else:
        session.execute(select(func.pg_advisory_xact_lock(key)))


__all__ = [
    "RecalculationSummary",
    "ResetSummary",
    "acquire_quarter_lock",
    "quarter_lock_key",
    "recalculate_quarter",
    "reset_system",
]
