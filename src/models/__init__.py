"""ORM models."""

from models.base import Base
from models.match import Match, MatchParticipant
from models.player import DEFAULT_RATING, Player
from models.quarterly_baseline import QuarterlyBaseline

__all__ = [
    "Base",
    "DEFAULT_RATING",
    "Match",
    "MatchParticipant",
    "Player",
    "QuarterlyBaseline",
]
