"""
PULSE SIGNAL — Structured Logging Utility
Uses structlog for structured, key/value operator logs.
"""
import structlog
import logging
import sys
from pulse_signal.config.settings import get_settings


def setup_logging() -> None:
    """Configure structured logging for the entire application."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and friends go through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a structured logger tagged with its component.
    Event names are snake_case and prefixed by source where one applies,
    e.g. coingecko_price, gemini_price_exception, telegram_hash_mismatch.
    """
    component = name or "pulse_signal"
    return structlog.get_logger(component, component=component)


def bind_request_context(**values) -> None:
    """Attach per-request values (request_id, path) to every log line."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
