"""Group configuration — the bootstrap document seeded into the store.

A bootstrap file is YAML::

    api_version: v1alpha1
    groups:
      - name: node1
        spec: worker
        require:
          mac: 52:54:00:89:d8:10
        metadata:
          networkd_name: ens3

Groups keep their document order. Parsing is all-or-nothing: any problem
raises :class:`ConfigFormatError` and no partial GroupConfig is returned.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

# Six octets separated by ":" or "-" (EUI-48).
_MAC_RE = re.compile(r"^[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$")


class ConfigFormatError(ValueError):
    """Bootstrap bytes could not be parsed into a GroupConfig."""


class Group(BaseModel):
    """A named unit of provisioning configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(min_length=1)
    spec: str = Field(min_length=1)
    require: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("require", mode="before")
    @classmethod
    def _scalar_selectors(cls, value: Any) -> Any:
        """Read YAML scalars such as ``serial: 12345`` as their text form."""
        if not isinstance(value, dict):
            return value
        return {key: _selector_text(item) for key, item in value.items()}


class GroupConfig(BaseModel):
    """Ordered collection of groups parsed from a bootstrap document."""

    model_config = {"frozen": True, "extra": "forbid"}

    api_version: str = ""
    groups: list[Group] = Field(default_factory=list)


def normalize_mac(value: str) -> str:
    """Return *value* as lower-case colon-separated MAC.

    Raises:
        ValueError: If *value* is not a 48-bit MAC address.
    """
    if not _MAC_RE.match(value):
        msg = f"invalid MAC address {value!r}"
        raise ValueError(msg)
    return value.replace("-", ":").lower()


def parse_group_config(data: bytes) -> GroupConfig:
    """Parse bootstrap file bytes into a :class:`GroupConfig`.

    Raises:
        ConfigFormatError: On YAML syntax errors, schema violations,
            duplicate group names, or malformed ``mac`` selectors.
    """
    try:
        raw = YAML(typ="safe").load(data)
    except (YAMLError, UnicodeDecodeError) as exc:
        msg = f"invalid YAML: {exc}"
        raise ConfigFormatError(msg) from exc

    if raw is None:
        return GroupConfig()
    if not isinstance(raw, dict):
        msg = f"expected a mapping at top level, got {type(raw).__name__}"
        raise ConfigFormatError(msg)

    try:
        config = GroupConfig.model_validate(raw)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        msg = f"{where}: {first['msg']}"
        raise ConfigFormatError(msg) from exc

    seen: set[str] = set()
    groups: list[Group] = []
    for group in config.groups:
        if group.name in seen:
            msg = f"duplicate group name {group.name!r}"
            raise ConfigFormatError(msg)
        seen.add(group.name)
        groups.append(_normalize_selectors(group))

    return config.model_copy(update={"groups": groups})


def _selector_text(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float | date):
        return str(value)
    return value


def _normalize_selectors(group: Group) -> Group:
    require: dict[str, str] = {}
    for key, value in group.require.items():
        if key.lower() == "mac":
            try:
                value = normalize_mac(value)
            except ValueError as exc:
                msg = f"group {group.name!r}: {exc}"
                raise ConfigFormatError(msg) from exc
        require[key] = value
    return group.model_copy(update={"require": require})
