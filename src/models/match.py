"""matches and match_participants table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


class Match(Base):
    """One completed doubles match with its rating snapshot."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("score_a >= 0 AND score_b >= 0", name="ck_matches_score_non_negative"),
        CheckConstraint("winner IN ('A', 'B')", name="ck_matches_winner"),
        Index("idx_matches_created_at", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    score_a: Mapped[int] = mapped_column(Integer, nullable=False)
    score_b: Mapped[int] = mapped_column(Integer, nullable=False)
    team_a_rating: Mapped[float] = mapped_column(Float, nullable=False)
    team_b_rating: Mapped[float] = mapped_column(Float, nullable=False)
    winner: Mapped[str] = mapped_column(String(1), nullable=False)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    participants: Mapped[list[MatchParticipant]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by=lambda: [MatchParticipant.team, MatchParticipant.slot],
        lazy="selectin",
    )

    def team(self, team: str) -> list[MatchParticipant]:
        return [participant for participant in self.participants if participant.team == team]

    def player_ids(self) -> list[int]:
        return [participant.player_id for participant in self.participants]


class MatchParticipant(Base):
    """Rating annotation for one player in one match."""

    __tablename__ = "match_participants"
    __table_args__ = (
        UniqueConstraint("match_id", "team", "slot", name="uq_match_participants_slot"),
        UniqueConstraint("match_id", "player_id", name="uq_match_participants_player"),
        CheckConstraint("team IN ('A', 'B')", name="ck_match_participants_team"),
        CheckConstraint("slot IN (0, 1)", name="ck_match_participants_slot"),
        CheckConstraint(
            "rating_after = rating_before + rating_delta",
            name="ck_match_participants_delta",
        ),
        Index("idx_match_participants_player", "player_id", "match_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
    )
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team: Mapped[str] = mapped_column(String(1), nullable=False)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_before: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_after: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_delta: Mapped[int] = mapped_column(Integer, nullable=False)

    match: Mapped[Match] = relationship(back_populates="participants")
