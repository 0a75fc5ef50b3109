"""
Structured logging for the Matchday flow service.
structlog in front of stdlib logging; console output in dev, JSON elsewhere.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from shared.config import Environment, get_settings
from shared.utils.clock import Clock, SystemClock, to_local


def add_host_time(clock: Clock) -> structlog.types.Processor:
    """
    Stamp each entry with the host-local wall clock next to the UTC timestamp.
    "today" and kickoff times in flow tokens are host-local readings.
    """

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("host_time", to_local(clock, clock.now()).strftime("%Y-%m-%d %H:%M:%S"))
        return event_dict

    return processor


def setup_logging(
    service_name: str,
    extra_context: dict[str, Any] | None = None,
    clock: Clock | None = None,
) -> None:
    """
    Configure structured logging for a service.

    Args:
        service_name: The service identifier bound to every entry (api, refresh).
        extra_context: Additional static context fields bound to every log entry.
        clock: Source of the host-local timestamp; defaults to the system clock.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_host_time(clock or SystemClock(settings)),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == Environment.DEV:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

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
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    for noisy in ("uvicorn.access", "httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    bound: dict[str, Any] = {
        "service": service_name,
        "instance_id": settings.instance_id,
        "timezone": settings.timezone,
    }
    if extra_context:
        bound.update(extra_context)
    structlog.contextvars.bind_contextvars(**bound)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
