"""Structured logging setup using structlog.

Records at ERROR and above are written to stderr, everything else to
stdout, so the hosting platform can tell failures apart without parsing.
"""

from __future__ import annotations

import logging
import sys

import structlog

from tmbreaker.core.config import get_settings


class _LevelRangeFilter(logging.Filter):
    """Pass records whose level lies in ``[low, high)``."""

    def __init__(self, low: int, high: int) -> None:
        super().__init__()
        self._low = low
        self._high = high

    def filter(self, record: logging.LogRecord) -> bool:
        return self._low <= record.levelno < self._high


def _stream_handler(
    stream: object,
    formatter: logging.Formatter,
    low: int,
    high: int,
) -> logging.Handler:
    handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    handler.setFormatter(formatter)
    handler.addFilter(_LevelRangeFilter(low, high))
    return handler


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog with JSON or console renderer.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer format override ("json" or "console"). Uses config if None.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.logging.level).upper(), logging.INFO)
    log_format = fmt or settings.logging.format

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(
        _stream_handler(sys.stdout, formatter, logging.NOTSET, logging.ERROR),
    )
    root_logger.addHandler(
        _stream_handler(sys.stderr, formatter, logging.ERROR, logging.CRITICAL + 1),
    )
    root_logger.setLevel(log_level)

    # aiohttp logs every request at INFO; keep it out of the decision trail.
    logging.getLogger("aiohttp.access").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("azure").setLevel(max(log_level, logging.WARNING))
