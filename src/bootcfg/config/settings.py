"""Unified settings — CLI flags and env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs   — flags given explicitly on the command line
  2. Env vars      — ``BOOTCFG_*`` prefix (``BOOTCFG_DATA_PATH`` for ``-data-path``)
  3. Code defaults — baked into the model fields

The CLI only forwards values the operator actually typed, so an unset flag
never shadows an environment override.
"""

from __future__ import annotations

from typing import Any

import click
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bootcfg.config.logging import parse_level

ENV_PREFIX = "BOOTCFG_"


class ArgumentError(click.UsageError):
    """Malformed command-line input or an environment override that cannot apply."""


class BootcfgSettings(BaseSettings):
    """Resolved startup settings, frozen after construction.

    Attributes:
        address: HTTP listen address as ``host:port``.
        config: Bootstrap group-config path; empty disables bootstrapping.
        data_path: Directory holding the persistent store.
        images_path: Directory of static boot assets.
        log_level: Lower-cased level name understood by :mod:`bootcfg.config.logging`.
        log_json: Emit JSON log lines instead of console output.
    """

    model_config = {
        "frozen": True,
        "env_prefix": ENV_PREFIX,
        "extra": "ignore",
    }

    address: str = "127.0.0.1:8080"
    config: str = "./data/config.yaml"
    data_path: str = "./data"
    images_path: str = "./images"
    log_level: str = "info"
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        parse_level(value)
        return value.strip().lower()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Only explicit CLI values and the environment feed settings."""
        return (init_settings, env_settings)

    @classmethod
    def from_cli(cls, **cli_values: Any) -> BootcfgSettings:
        """Construct settings from the flags given on the command line.

        ``None`` values are treated as "not given" and dropped so the
        environment and defaults can apply.

        Raises:
            ArgumentError: If a CLI or environment value fails validation.
        """
        explicit = {key: value for key, value in cli_values.items() if value is not None}
        try:
            return cls(**explicit)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
                for err in exc.errors()
            )
            msg = f"Invalid setting ({problems})"
            raise ArgumentError(msg) from exc
