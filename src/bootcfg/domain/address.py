"""Listen address parsing.

A listen address is ``host:port``. The host may be empty (all interfaces),
an IPv4 literal, a bracketed IPv6 literal, or a DNS hostname.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass

# RFC 1123 hostname: dot-separated labels of alphanumerics and inner hyphens.
_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}$)([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?)"
    r"(\.[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*\.?$"
)


@dataclass(frozen=True)
class ListenAddress:
    """A parsed ``host:port`` pair."""

    host: str
    port: int

    @property
    def bind_host(self) -> str:
        """Host to resolve for binding.

        An empty host maps to ``0.0.0.0``; the server prefers a dual-stack
        ``::`` listener for it where the platform has one.
        """
        return self.host or "0.0.0.0"

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


def parse_listen_address(value: str) -> ListenAddress:
    """Parse *value* as ``host:port``.

    Raises:
        ValueError: If *value* is empty or not a valid network address.
    """
    if not value or not value.strip():
        msg = "listen address is empty"
        raise ValueError(msg)

    host, sep, port_text = value.rpartition(":")
    if not sep:
        msg = f"missing port in address {value!r}"
        raise ValueError(msg)

    if host.startswith("[") or host.endswith("]"):
        if not (host.startswith("[") and host.endswith("]")):
            msg = f"unbalanced brackets in address {value!r}"
            raise ValueError(msg)
        host = host[1:-1]
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            msg = f"invalid IPv6 host in address {value!r}"
            raise ValueError(msg) from None
    elif ":" in host:
        msg = f"too many colons in address {value!r}"
        raise ValueError(msg)
    elif host and not _is_host(host):
        msg = f"invalid host in address {value!r}"
        raise ValueError(msg)

    if not port_text.isdigit():
        msg = f"invalid port in address {value!r}"
        raise ValueError(msg)
    port = int(port_text)
    if port > 65535:
        msg = f"port out of range in address {value!r}"
        raise ValueError(msg)

    return ListenAddress(host=host, port=port)


def _is_host(host: str) -> bool:
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        return bool(_HOSTNAME_RE.match(host))
    return True
