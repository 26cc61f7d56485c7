"""Shared fixtures: a throwaway SQLite database per test."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from db import create_db_engine, create_session_factory
from repositories import ensure_schema
from repositories.player_repository import add_player

SEASON_START = datetime(2026, 1, 1, 9, 0, 0)


@pytest.fixture()
def session_factory(tmp_path: Path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'padel.db'}")
    ensure_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def player_ids(session_factory) -> list[int]:
    """Four regular players at the default rating: alice, bob, carol, dave."""
    with session_factory() as session:
        with session.begin():
            players = [
                add_player(session, username=username, created_at=SEASON_START)
                for username in ("alice", "bob", "carol", "dave")
            ]
    return [player.id for player in players]
