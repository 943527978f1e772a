"""Structured logging for the trading core.

Every module logs through ``get_logger(__name__)`` with snake_case event names
and key/value context. Venue builds tag their lines with ``venue=<name>`` via
``bind_venue``; credentials are never passed to a logger.
"""

import logging
import os

import structlog


def setup_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib logging (ccxt included) through one handler.

    Context bound with structlog.contextvars, such as the venue tag, is merged
    into every line. LOG_FORMAT=json switches the console renderer to JSON.
    ccxt is capped at WARNING because it logs each HTTP request at DEBUG.

    Args:
        log_level: Root level name, e.g. "DEBUG". Unknown names fall back to INFO.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
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
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    logging.getLogger("ccxt").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return the module logger; bind per-call context with keyword arguments."""
    return structlog.get_logger(name)


def bind_venue(venue: str):
    """Bind ``venue=<name>`` to every log line emitted inside the returned context.

    Relies on structlog.contextvars, so concurrent venue builds running in
    separate asyncio tasks keep their own venue tag.
    """
    return structlog.contextvars.bound_contextvars(venue=venue)
