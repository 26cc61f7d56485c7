"""Rating-system domain modules."""

from domain.common import MatchResult, MatchScore, ParticipantResult, PlayerRating, StoredMatch, Team

__all__ = ["MatchResult", "MatchScore", "ParticipantResult", "PlayerRating", "StoredMatch", "Team"]
