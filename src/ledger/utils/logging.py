"""Logging configuration for the Shipment Ledger domain.

Every ledger log line is a structlog event dict. Correlation and causation ids
from the command being processed are injected by Protean's processor, so all
lines emitted while handling one command can be stitched together.

Environment:
    LEDGER_LOG_LEVEL   - stdlib level name (default: INFO)
    LEDGER_LOG_FORMAT  - "console" (default) or "json"
"""

import logging
import os

import structlog
from protean.integrations.logging import protean_correlation_processor


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger for the ledger."""
    level = getattr(logging, os.environ.get("LEDGER_LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)

    # Suppress noisy library loggers
    logging.getLogger("protean").setLevel(logging.WARNING)

    if os.environ.get("LEDGER_LOG_FORMAT", "console") == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            protean_correlation_processor,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
