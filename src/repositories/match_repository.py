"""Persistence helpers for matches and their per-participant rating annotations."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.common import MatchResult, MatchScore, StoredMatch, Team
from domain.quarters import Quarter
from models import Match, MatchParticipant


def _in_window(quarter: Quarter):
    return (Match.created_at >= quarter.start, Match.created_at < quarter.end)


def fetch_quarter_matches(session: Session, quarter: Quarter) -> list[Match]:
    """Matches created within the quarter in deterministic replay order."""
    statement = (
        select(Match)
        .where(*_in_window(quarter))
        .order_by(Match.created_at, Match.id)
    )
    return list(session.execute(statement).scalars())


def get_match(session: Session, match_id: int) -> Match | None:
    return session.get(Match, match_id)


def to_stored_match(match: Match) -> StoredMatch:
    """Project an ORM match onto the replay input shape."""
    team_a = [participant.player_id for participant in match.team(Team.A.value)]
    team_b = [participant.player_id for participant in match.team(Team.B.value)]
    if len(team_a) != 2 or len(team_b) != 2:
        raise ValueError(
            f"match_id={match.id} needs 2 players per team, got {len(team_a)}/{len(team_b)}"
        )
    return StoredMatch(
        match_id=match.id,
        created_at=match.created_at,
        team_a=(team_a[0], team_a[1]),
        team_b=(team_b[0], team_b[1]),
        score=MatchScore(team_a=match.score_a, team_b=match.score_b),
    )


def insert_match(
    session: Session,
    *,
    result: MatchResult,
    score: MatchScore,
    created_at: datetime,
    created_by_id: int | None = None,
) -> Match:
    """Persist a computed match together with its four participant rows."""
    match = Match(
        score_a=score.team_a,
        score_b=score.team_b,
        team_a_rating=result.team_a_rating,
        team_b_rating=result.team_b_rating,
        winner=result.winner.value,
        created_by_id=created_by_id,
        created_at=created_at,
    )
    for slot, participant in enumerate(result.team_a):
        match.participants.append(_participant_row(participant, slot))
    for slot, participant in enumerate(result.team_b):
        match.participants.append(_participant_row(participant, slot))
    session.add(match)
    session.flush()
    return match


def apply_match_result(match: Match, result: MatchResult) -> None:
    """Overwrite rating annotations in place; score and timestamp are left alone."""
    match.team_a_rating = result.team_a_rating
    match.team_b_rating = result.team_b_rating
    match.winner = result.winner.value

    by_player = {participant.player_id: participant for participant in result.participants}
    for row in match.participants:
        computed = by_player.get(row.player_id)
        if computed is None:
            raise ValueError(
                f"match_id={match.id} has no computed result for player_id={row.player_id}"
            )
        row.rating_before = computed.rating_before
        row.rating_after = computed.rating_after
        row.rating_delta = computed.rating_delta


def count_matches(session: Session, quarter: Quarter | None = None) -> int:
    statement = select(func.count(Match.id))
    if quarter is not None:
        statement = statement.where(*_in_window(quarter))
    return int(session.scalar(statement) or 0)


def count_games_by_player(
    session: Session,
    *,
    quarter: Quarter | None = None,
    player_ids: Sequence[int] | None = None,
) -> Counter[int]:
    """Number of matches each player appears in, optionally within one quarter."""
    statement = (
        select(MatchParticipant.player_id, func.count(MatchParticipant.id))
        .join(Match, Match.id == MatchParticipant.match_id)
        .group_by(MatchParticipant.player_id)
    )
    if quarter is not None:
        statement = statement.where(*_in_window(quarter))
    if player_ids is not None:
        statement = statement.where(MatchParticipant.player_id.in_(set(player_ids)))

    counts: Counter[int] = Counter()
    for player_id, games in session.execute(statement):
        counts[int(player_id)] = int(games)
    return counts


def delete_match(session: Session, match: Match) -> None:
    session.delete(match)
    session.flush()


def delete_all_matches(session: Session) -> int:
    """Hard-delete every match; returns the number of matches removed."""
    session.execute(delete(MatchParticipant))
    result = session.execute(delete(Match))
    return int(result.rowcount or 0)


def _participant_row(participant, slot: int) -> MatchParticipant:
    return MatchParticipant(
        player_id=participant.player_id,
        team=participant.team.value,
        slot=slot,
        rating_before=participant.rating_before,
        rating_after=participant.rating_after,
        rating_delta=participant.rating_delta,
    )
