"""Schema bootstrap for the rating tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base, Match, MatchParticipant, Player, QuarterlyBaseline


def ensure_schema(engine: Engine) -> None:
    """Create players, matches, match_participants and quarterly_baselines if missing."""
    Base.metadata.create_all(
        bind=engine,
        tables=[
            Player.__table__,
            Match.__table__,
            MatchParticipant.__table__,
            QuarterlyBaseline.__table__,
        ],
    )
