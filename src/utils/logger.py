"""structlog setup for slip generation: coloured console lines plus a JSONL file under OUTPUT_DIR/logs."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from src.config import LOG_FILE, LOG_LEVEL, OTEL_SERVICE_NAME, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# One request line per order fetch; keep these at WARNING.
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "uvicorn.access")

_configured = False


def _resolve_level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    return getattr(logging, LOG_LEVEL, logging.INFO)


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", OTEL_SERVICE_NAME)
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _handler(handler: logging.Handler, renderer: Any, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _resolve_level()
    console = _handler(
        logging.StreamHandler(sys.stderr),
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        level,
    )
    jsonl = _handler(
        logging.FileHandler(LOG_FILE, encoding="utf-8"),
        structlog.processors.JSONRenderer(),
        level,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(console)
    root.addHandler(jsonl)
    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            _add_service,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "dispatch_slips", **bindings: Any) -> BoundLogger:
    """Module logger; configures logging on first use."""
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    """Attach context (command, slip kind, ...) to every event in this task."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_step(component: str, step: str, data: Any = None) -> None:
    """Log a pipeline step (route grouping, consolidation, render) with an optional data payload."""
    logger = get_logger().bind(component=component)
    if data is None:
        logger.info(step)
    elif VERBOSE_LOGGING:
        logger.debug(step, data=data)
    else:
        logger.info(step, data=data)
