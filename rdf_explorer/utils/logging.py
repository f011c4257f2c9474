"""structlog setup shared by the API, the services and the scripts."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Request lines from the SPARQL/index clients drown out resolver events.
_NOISY_LOGGERS = ("httpx", "httpcore")

# Event fields that can carry whole SPARQL queries or response bodies.
_BULKY_FIELDS = ("query", "error", "body")


def truncate_bulky_fields(max_length: int) -> structlog.types.Processor:
    """Shorten long query/error/body strings so one event stays one readable line."""

    def processor(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key in _BULKY_FIELDS:
            value = event_dict.get(key)
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = f"{value[:max_length]}... ({len(value)} chars)"
        return event_dict

    return processor


def setup_logging(log_level: str = "INFO", log_format: str = "json", max_field_length: int = 500) -> None:
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_bulky_fields(max_field_length),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for name in ("uvicorn", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
        logging.getLogger(name).propagate = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
