"""
Tool: Logging
Purpose: structlog setup for hydrotime's engine, service and CLI

Engine modules log structured debug events (weights_update, forecast_batch);
the service and notifier log at info. The CLI prints its JSON result on
stdout, so every log line goes to stderr.

Environment:
    HYDROTIME_LOG_LEVEL   DEBUG shows engine events (default INFO)
    HYDROTIME_LOG_FORMAT  "json" for one JSON object per line, else console

The weather and telemetry calls go through httpx, which logs every request
at INFO. Those loggers are held at WARNING unless DEBUG is asked for.

Usage:
    from hydrotime.logging_config import get_logger, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    logger.info("reminders_scheduled", count=16)
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


HTTP_LOGGERS = ("httpx", "httpcore")


def _is_ours(handler: logging.Handler) -> bool:
    return isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog and the root handler. Safe to call more than once."""
    if level is None:
        level = os.environ.get("HYDROTIME_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("HYDROTIME_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Also applied to records from plain stdlib loggers (httpx)
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
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

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    # Replace only a handler installed by an earlier call
    root = logging.getLogger()
    for existing in [h for h in root.handlers if _is_ours(h)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)

    http_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger bound with its component, e.g. "forecaster" for hydrotime.learning.forecaster."""
    if not name:
        return structlog.get_logger()
    # Initial values stay lazy; module-level loggers are created before setup_logging runs
    return structlog.get_logger(name, component=name.rsplit(".", 1)[-1])


__all__ = ["get_logger", "setup_logging"]
