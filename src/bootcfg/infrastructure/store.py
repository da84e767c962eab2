"""Store — persistent group configuration rooted at the data directory.

The store is opened once during startup, optionally seeded from the
bootstrap file, then shared with the API server for the process lifetime.

Seeding policy: :meth:`Store.bootstrap_groups` replaces the stored group
set wholesale inside one transaction. Seeding the same document twice
leaves the store unchanged; seeding a different document discards groups
that are not in it.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from bootcfg.domain.groups import Group
from bootcfg.infrastructure.database.engine import init_database
from bootcfg.infrastructure.database.schema import groups as groups_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.engine import Engine, RowMapping

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """The store could not be opened, read, or written."""


class Store:
    """SQLite-backed group store.

    Use :func:`open_store` rather than constructing directly.
    """

    def __init__(self, data_path: Path, engine: Engine) -> None:
        self.data_path = data_path
        self._engine = engine

    def bootstrap_groups(self, groups: Sequence[Group]) -> int:
        """Replace all stored groups with *groups*, keeping their order.

        Returns the number of groups written.

        Raises:
            StoreError: If the write fails. Nothing is changed in that case.
        """
        created = datetime.now(UTC).isoformat()
        try:
            rows = [
                {
                    "name": group.name,
                    "position": position,
                    "spec": group.spec,
                    "require": json.dumps(group.require, sort_keys=True, default=str),
                    "metadata": json.dumps(group.metadata, sort_keys=True, default=str),
                    "created": created,
                }
                for position, group in enumerate(groups)
            ]
            with self._engine.begin() as conn:
                conn.execute(delete(groups_table))
                if rows:
                    conn.execute(insert(groups_table), rows)
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            msg = f"failed to seed groups: {exc}"
            raise StoreError(msg) from exc
        logger.debug("Seeded %d groups into %s", len(rows), self.data_path)
        return len(rows)

    def list_groups(self) -> list[Group]:
        """Return every stored group in seeding order."""
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(groups_table).order_by(groups_table.c.position)
                ).mappings()
                return [_row_to_group(row) for row in rows]
        except SQLAlchemyError as exc:
            msg = f"failed to list groups: {exc}"
            raise StoreError(msg) from exc

    def get_group(self, name: str) -> Group | None:
        """Return the group called *name*, or None."""
        try:
            with self._engine.connect() as conn:
                row = (
                    conn.execute(select(groups_table).where(groups_table.c.name == name))
                    .mappings()
                    .first()
                )
        except SQLAlchemyError as exc:
            msg = f"failed to read group {name!r}: {exc}"
            raise StoreError(msg) from exc
        return _row_to_group(row) if row is not None else None

    def close(self) -> None:
        """Dispose of the database engine."""
        self._engine.dispose()


def open_store(data_path: Path | str) -> Store:
    """Open (creating if needed) the store rooted at *data_path*.

    Raises:
        StoreError: If the database cannot be created or opened.
    """
    root = Path(data_path)
    try:
        engine = init_database(root)
    except SQLAlchemyError as exc:
        msg = f"failed to open store in {root}: {exc}"
        raise StoreError(msg) from exc
    return Store(root, engine)


def _row_to_group(row: RowMapping) -> Group:
    return Group(
        name=row["name"],
        spec=row["spec"],
        require=json.loads(row["require"]),
        metadata=json.loads(row["metadata"]),
    )
