"""BootstrapService — seed the store from the bootstrap group config.

Pipeline: READ → PARSE → SEED. The store is seeded exactly once with the
fully parsed group list, or not at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from bootcfg.domain.groups import ConfigFormatError, parse_group_config
from bootcfg.infrastructure.store import StoreError
from bootcfg.services.result import (
    CONFIG_FORMAT_ERROR,
    IO_ERROR,
    STORE_ERROR,
    ServiceResult,
)

if TYPE_CHECKING:
    from bootcfg.infrastructure.store import Store

OP = "bootstrap"


class BootstrapService:
    """Reads a bootstrap file and hands its groups to the store."""

    def __init__(self, store: Store, *, log: structlog.stdlib.BoundLogger | None = None) -> None:
        self._store = store
        self._log = log if log is not None else structlog.stdlib.get_logger("bootcfg.bootstrap")

    def bootstrap(self, config_path: str) -> ServiceResult:
        """Seed the store from *config_path*; an empty path is a no-op."""
        if not config_path:
            self._log.debug("bootstrap disabled, keeping existing store state")
            return ServiceResult(ok=True, op=OP, data={"skipped": True, "groups": 0})

        path = Path(config_path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            return ServiceResult.failure(
                OP, IO_ERROR, f"error reading config file: {exc}", path=config_path
            )

        try:
            group_config = parse_group_config(data)
        except ConfigFormatError as exc:
            return ServiceResult.failure(
                OP, CONFIG_FORMAT_ERROR, f"error parsing group config: {exc}", path=config_path
            )

        try:
            count = self._store.bootstrap_groups(group_config.groups)
        except StoreError as exc:
            return ServiceResult.failure(OP, STORE_ERROR, str(exc), path=config_path)

        self._log.info("bootstrapped groups", path=config_path, groups=count)
        return ServiceResult(
            ok=True,
            op=OP,
            data={
                "skipped": False,
                "groups": count,
                "names": [group.name for group in group_config.groups],
            },
        )
