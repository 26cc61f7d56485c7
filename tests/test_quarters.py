"""Tests for calendar-quarter arithmetic."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.quarters import Quarter, is_first_day_of_quarter, quarter_index, recent_quarters


def test_march_belongs_to_first_quarter_and_april_to_second() -> None:
    assert quarter_index(datetime(2026, 3, 31, 23, 59, 59)) == 0
    assert quarter_index(datetime(2026, 4, 1, 0, 0, 0)) == 1
    assert quarter_index(datetime(2026, 12, 31)) == 3


def test_quarter_window_is_start_inclusive_end_exclusive() -> None:
    quarter = Quarter(2026, 0)
    assert quarter.start == datetime(2026, 1, 1)
    assert quarter.end == datetime(2026, 4, 1)
    assert quarter.contains(datetime(2026, 1, 1))
    assert quarter.contains(datetime(2026, 3, 31, 23, 59, 59, 999999))
    assert not quarter.contains(datetime(2026, 4, 1))


def test_last_quarter_rolls_into_next_year() -> None:
    quarter = Quarter(2026, 3)
    assert quarter.end == datetime(2027, 1, 1)
    assert quarter.next() == Quarter(2027, 0)
    assert Quarter(2027, 0).previous() == quarter


def test_invalid_quarter_index_is_rejected() -> None:
    with pytest.raises(ValueError, match="between 0 and 3"):
        Quarter(2026, 4)


def test_label_is_one_based() -> None:
    assert Quarter(2026, 0).label == "Q1 2026"
    assert Quarter.from_datetime(datetime(2026, 10, 19)).label == "Q4 2026"


def test_first_day_of_quarter_detection() -> None:
    assert is_first_day_of_quarter(datetime(2026, 7, 1, 0, 0))
    assert not is_first_day_of_quarter(datetime(2026, 7, 2))
    assert not is_first_day_of_quarter(datetime(2026, 8, 1))


def test_recent_quarters_walks_backwards_across_years() -> None:
    quarters = recent_quarters(datetime(2026, 5, 10))
    assert [q.label for q in quarters] == ["Q2 2026", "Q1 2026", "Q4 2025", "Q3 2025", "Q2 2025"]
