import logging
from typing import Any

import structlog

from slothrules.config.settings import get_settings
from slothrules.core.errors import ConfigurationError


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"unknown log level: {level}", details={"level": level})
    return resolved


def configure_logging(level: int | str | None = None, log_format: str | None = None) -> None:
    """Configure structlog/standard logging bridge.

    Level and format default to SLOTHRULES_LOG_LEVEL / SLOTHRULES_LOG_FORMAT.
    """
    settings = get_settings()
    level_no = _resolve_level(level if level is not None else settings.log_level)
    log_format = log_format or settings.log_format

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    elif log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        raise ConfigurationError(
            f"unknown log format: {log_format}", details={"format": log_format}
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level_no, format="%(message)s")
    logging.getLogger().setLevel(level_no)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Return a logger carrying the given fields (component, slo, sink...)."""

    return structlog.get_logger().bind(**kwargs)
