"""Domain error types."""

from __future__ import annotations


class MatchValidationError(ValueError):
    """Match input rejected at the boundary before reaching the rating engine."""


class PlayerNotFoundError(LookupError):
    def __init__(self, player_id: int) -> None:
        super().__init__(f"player_id={player_id} not found")
        self.player_id = player_id


class MatchNotFoundError(LookupError):
    def __init__(self, match_id: int) -> None:
        super().__init__(f"match_id={match_id} not found")
        self.match_id = match_id


__all__ = ["MatchNotFoundError", "MatchValidationError", "PlayerNotFoundError"]
