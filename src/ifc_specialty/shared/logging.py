"""Structured logging configuration.

structlog renders through the stdlib logging handlers so library logs
(uvicorn, mcp) share one format. Output goes to stderr because the MCP
stdio transport owns stdout.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from ifc_specialty.shared.config import Settings, get_settings

_configured = False

_QUIET_LOGGERS = ("asyncio", "uvicorn.access", "multipart")


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root logger once per process.

    Args:
        settings: Application settings (defaults to the cached settings)
    """
    global _configured
    if _configured:
        return
    settings = settings or get_settings()

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    root_logger = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring logging on first use.

    Args:
        name: Logger name (typically __name__)
    """
    configure_logging()
    return structlog.get_logger(name)
