"""quarterly_baselines table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class QuarterlyBaseline(Base):
    """A player's rating frozen at the start of one calendar quarter."""

    __tablename__ = "quarterly_baselines"
    __table_args__ = (
        UniqueConstraint("player_id", "year", "quarter", name="uq_quarterly_baselines_player_period"),
        CheckConstraint("quarter >= 0 AND quarter <= 3", name="ck_quarterly_baselines_quarter"),
        Index("idx_quarterly_baselines_period", "year", "quarter"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    start_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
