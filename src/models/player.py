"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

DEFAULT_RATING = 500


class Player(Base):
    """A rated player holding one canonical current rating."""

    __tablename__ = "players"
    __table_args__ = (Index("idx_players_privileged_rating", "is_privileged", "rating"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_RATING)
    is_privileged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    last_inactivity_penalty: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
