"""Database engine/session helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def create_db_engine(db_url: str) -> Engine:
    """Create a SQLAlchemy engine with conservative defaults for scripts."""
    engine = create_engine(db_url, pool_pre_ping=True, future=True)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_transactions(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the provided engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def _enable_sqlite_transactions(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write, which breaks SAVEPOINT and
    # read-then-write atomicity; take over transaction control explicitly.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")
