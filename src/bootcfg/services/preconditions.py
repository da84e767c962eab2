"""Precondition checks run before startup touches anything.

Checks run in a fixed order and stop at the first failure:

1. ``address`` parses as a ``host:port`` network address
2. ``data_path`` is an existing directory
3. ``images_path`` is an existing directory

Nothing is written and no locks are taken.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from bootcfg.domain.address import parse_listen_address
from bootcfg.services.result import VALIDATION_ERROR, ServiceResult

if TYPE_CHECKING:
    from bootcfg.config.settings import BootcfgSettings

OP = "validate"


def validate_settings(settings: BootcfgSettings) -> ServiceResult:
    """Validate *settings*, failing fast on the first unusable value.

    On success ``data["address"]`` holds the parsed
    :class:`~bootcfg.domain.address.ListenAddress`.
    """
    try:
        address = parse_listen_address(settings.address)
    except ValueError as exc:
        return ServiceResult.failure(
            OP,
            VALIDATION_ERROR,
            "A valid HTTP listen address is required",
            setting="address",
            value=settings.address,
            reason=str(exc),
        )

    if not Path(settings.data_path).is_dir():
        return ServiceResult.failure(
            OP,
            VALIDATION_ERROR,
            "A path to a data directory is required",
            setting="data_path",
            value=settings.data_path,
        )

    if not Path(settings.images_path).is_dir():
        return ServiceResult.failure(
            OP,
            VALIDATION_ERROR,
            "A path to an assets directory is required",
            setting="images_path",
            value=settings.images_path,
        )

    return ServiceResult(ok=True, op=OP, data={"address": address})
