"""Observability module - structured logging and Prometheus metrics."""

from vts_tracking.observability.logging import (
    AdaptorLogger,
    configure_logging,
    get_logger,
    init_logging,
)

__all__ = [
    "AdaptorLogger",
    "configure_logging",
    "get_logger",
    "init_logging",
]
