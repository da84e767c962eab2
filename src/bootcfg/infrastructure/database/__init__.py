"""SQLite database engine and schema via SQLAlchemy Core."""

from bootcfg.infrastructure.database.engine import DB_FILENAME, create_db_engine, init_database
from bootcfg.infrastructure.database.schema import groups, metadata

__all__ = [
    "DB_FILENAME",
    "create_db_engine",
    "groups",
    "init_database",
    "metadata",
]
