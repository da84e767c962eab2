"""structlog configuration for bootcfg.

Two output modes, both on stderr:
- Human (default): console renderer, colored when stderr is a TTY
- JSON (--log-json): structured JSON lines

Level names follow the provisioning service's historical set
(``critical`` through ``trace``); ``notice`` and ``trace`` are registered
with stdlib logging as extra levels.
"""

from __future__ import annotations

import logging
import sys

import structlog

NOTICE = 25
TRACE = 5

LOG_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "NOTICE": NOTICE,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(TRACE, "TRACE")


def parse_level(name: str) -> int:
    """Map a level name (any case) to its stdlib numeric level.

    Raises:
        ValueError: If *name* is not a recognized level.
    """
    try:
        return LOG_LEVELS[name.strip().upper()]
    except KeyError:
        choices = ", ".join(level.lower() for level in LOG_LEVELS)
        msg = f"unknown log level {name!r} (expected one of: {choices})"
        raise ValueError(msg) from None


def configure_logging(
    *,
    level: str = "info",
    log_json: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog processors and output routing.

    Returns the ``bootcfg`` logger, ready to be injected into startup
    stages.

    Args:
        level: Level name for the ``bootcfg`` and ``uvicorn`` loggers.
        log_json: Use JSON renderer instead of console renderer.
    """
    bootcfg_level = parse_level(level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("bootcfg").setLevel(bootcfg_level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
        uv_logger.setLevel(bootcfg_level)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    return structlog.stdlib.get_logger("bootcfg")
