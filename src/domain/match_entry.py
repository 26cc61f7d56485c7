"""Recording and deleting matches against current player ratings."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from domain.common import MatchResult, MatchScore, PlayerRating
from domain.elo.calculator import DoublesEloCalculator, EloParameters
from domain.errors import MatchNotFoundError, PlayerNotFoundError
from domain.ledger import ensure_quarterly_baseline
from domain.quarters import Quarter
from domain.recalculation import RecalculationSummary, acquire_quarter_lock, recalculate_quarter
from domain.shirt_levels import ShirtLevelUp, check_shirt_level_up
from domain.validation import MatchRules, validate_match_input
from repositories.match_repository import delete_match as delete_match_row
from repositories.match_repository import count_games_by_player, get_match, insert_match
from repositories.player_repository import lock_players


@dataclass(frozen=True)
class RecordedMatch:
    match_id: int
    created_at: datetime
    result: MatchResult
    level_ups: list[ShirtLevelUp] = field(default_factory=list)


@dataclass(frozen=True)
class DeletedMatch:
    match_id: int
    restored_ratings: dict[int, int]
    recalculation: RecalculationSummary | None


def record_match(
    *,
    session_factory,
    team_a: Sequence[int],
    team_b: Sequence[int],
    score: MatchScore,
    played_at: datetime,
    created_by_id: int | None = None,
    params: EloParameters | None = None,
    rules: MatchRules | None = None,
) -> RecordedMatch:
    """Validate, baseline, compute and persist one match in a single transaction.

    The four player rows stay locked from the rating read until commit, so two
    concurrent entries involving the same player apply in sequence. A shared
    lock on the match's quarter keeps the entry out of a running recalculation.
    """
    validate_match_input(team_a, team_b, score, rules)
    calculator = DoublesEloCalculator(params)
    player_ids = [*team_a, *team_b]

    with session_factory() as session:
        try:
            acquire_quarter_lock(session, Quarter.from_datetime(played_at), shared=True)
            players = lock_players(session, player_ids)
            for player_id in player_ids:
                if player_id not in players:
                    raise PlayerNotFoundError(player_id)

            for player_id in player_ids:
                ensure_quarterly_baseline(session, player_id, played_at)

            result = calculator.compute_match(
                (
                    PlayerRating(team_a[0], players[team_a[0]].rating),
                    PlayerRating(team_a[1], players[team_a[1]].rating),
                ),
                (
                    PlayerRating(team_b[0], players[team_b[0]].rating),
                    PlayerRating(team_b[1], players[team_b[1]].rating),
                ),
                score,
            )
            games_before = count_games_by_player(session, player_ids=player_ids)
            match = insert_match(
                session,
                result=result,
                score=score,
                created_at=played_at,
                created_by_id=created_by_id,
            )
            for participant in result.participants:
                player = players[participant.player_id]
                player.rating = participant.rating_after
                player.last_activity = played_at

            level_ups: list[ShirtLevelUp] = []
            for player_id in player_ids:
                games = games_before.get(player_id, 0)
                level_up = check_shirt_level_up(player_id, games, games + 1)
                if level_up is not None:
                    level_ups.append(level_up)

            session.commit()
        except Exception:
            session.rollback()
            raise

    return RecordedMatch(match_id=match.id, created_at=played_at, result=result, level_ups=level_ups)


def delete_match(
    *,
    session_factory,
    match_id: int,
    recalculate: bool = False,
    params: EloParameters | None = None,
    echo: Callable[[str], None] | None = None,
) -> DeletedMatch:
    """Delete a match and put each participant back on their pre-match rating.

    Reverting is exact only for a player's latest match. With ``recalculate``
    the match's quarter is replayed afterwards so later matches are repaired too.
    """
    with session_factory() as session:
        try:
            match = get_match(session, match_id)
            if match is None:
                raise MatchNotFoundError(match_id)

            quarter = Quarter.from_datetime(match.created_at)
            acquire_quarter_lock(session, quarter, shared=True)
            # A recalculation may have rewritten the annotations before the lock was granted.
            session.expire_all()
            match = get_match(session, match_id)
            if match is None:
                raise MatchNotFoundError(match_id)
            restored = {participant.player_id: participant.rating_before for participant in match.participants}
            players = lock_players(session, list(restored))
            for player_id, rating in restored.items():
                if player_id in players:
                    players[player_id].rating = rating

            delete_match_row(session, match)
            session.commit()
        except Exception:
            session.rollback()
            raise

    recalculation = None
    if recalculate:
        recalculation = recalculate_quarter(
            session_factory=session_factory,
            year=quarter.year,
            quarter_index=quarter.index,
            params=params,
            echo=echo,
        )

    return DeletedMatch(match_id=match_id, restored_ratings=restored, recalculation=recalculation)


__all__ = ["DeletedMatch", "RecordedMatch", "delete_match", "record_match"]
