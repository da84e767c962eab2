"""Database engine setup for SQLite with WAL mode.

The store lives at ``{data_path}/bootcfg.db``. WAL mode lets the API
server's request threads read while a writer holds the database.

SQLAlchemy Core (not ORM) is used because the store holds a single flat
table of group records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from bootcfg.infrastructure.database.schema import metadata

DB_FILENAME = "bootcfg.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(data_path: Path) -> Engine:
    """Initialize the store database at ``{data_path}/bootcfg.db``.

    Creates all tables from :data:`schema.metadata`. Idempotent — safe to
    call on a data directory that already holds a store.

    Returns the engine ready for use.
    """
    engine = create_db_engine(data_path / DB_FILENAME)
    metadata.create_all(engine)
    return engine
