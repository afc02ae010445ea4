"""Structured logging configuration using structlog.

The client only emits log events; applications decide how they are rendered.
Nothing here runs on import. An application may call `setup_logging` once at
startup to get either JSON lines or colored console output.

Usage:
    from tracemoe.utils.logger import setup_logging

    setup_logging(log_level="DEBUG", log_format="console")

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("event_name", key="value")
"""
from __future__ import annotations

import logging

import structlog


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    configure_stdlib: bool = False,
) -> None:
    """Configure structlog for the client and the host application.

    The stdlib root logger is left alone unless `configure_stdlib` is set,
    so an application that already configured `logging` keeps its handlers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Output format, 'json' or 'console'.
        configure_stdlib: Also attach a root handler at `log_level`, which
            makes httpx's own stdlib log records visible.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if configure_stdlib:
        logging.basicConfig(format="%(message)s", level=level)
