"""Calendar-quarter arithmetic for quarterly rating bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, order=True)
class Quarter:
    """A 3-month accounting period; ``index`` is zero-based (Jan-Mar = 0)."""

    year: int
    index: int

    def __post_init__(self) -> None:
        if self.index < 0 or self.index > 3:
            raise ValueError(f"quarter index must be between 0 and 3, got {self.index}")

    @classmethod
    def from_datetime(cls, value: datetime) -> Quarter:
        return cls(year=value.year, index=quarter_index(value))

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.index * 3 + 1, 1)

    @property
    def end(self) -> datetime:
        """Exclusive upper bound: the first instant of the next quarter."""
        return self.next().start

    @property
    def label(self) -> str:
        return f"Q{self.index + 1} {self.year}"

    def contains(self, value: datetime) -> bool:
        return self.start <= value < self.end

    def next(self) -> Quarter:
        if self.index == 3:
            return Quarter(self.year + 1, 0)
        return Quarter(self.year, self.index + 1)

    def previous(self) -> Quarter:
        if self.index == 0:
            return Quarter(self.year - 1, 3)
        return Quarter(self.year, self.index - 1)


def quarter_index(value: datetime) -> int:
    return (value.month - 1) // 3


def is_first_day_of_quarter(value: datetime) -> bool:
    return value.day == 1 and value.month in (1, 4, 7, 10)


def recent_quarters(as_of: datetime, count: int = 5) -> list[Quarter]:
    """Current quarter followed by the ``count - 1`` quarters before it."""
    if count <= 0:
        raise ValueError("count must be greater than 0")

    quarters = [Quarter.from_datetime(as_of)]
    while len(quarters) < count:
        quarters.append(quarters[-1].previous())
    return quarters


__all__ = ["Quarter", "is_first_day_of_quarter", "quarter_index", "recent_quarters"]
