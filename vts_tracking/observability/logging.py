"""Structured Logging - key/value logs for the adaptor.

Provides structured logging for:
- Adaptor lifecycle (start, stop, restart, bind failures)
- Keep-alive send failures
- Frame decode failures

Loop threads log at debug level for transient failures so that a flaky
network does not flood the host application's output.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON; else human-readable
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def bind_peer(phone_ip: str) -> None:
    """Bind the phone address to all logs in current context."""
    structlog.contextvars.bind_contextvars(phone_ip=phone_ip)


def unbind_peer() -> None:
    """Remove the phone address from log context."""
    structlog.contextvars.unbind_contextvars("phone_ip")


class AdaptorLogger:
    """Logger for adaptor lifecycle events."""

    def __init__(self, adaptor: str = "vts") -> None:
        self._log = get_logger("adaptor").bind(adaptor=adaptor)

    def started(self, phone_ip: str, app_name: str, listen_port: int) -> None:
        """Log a successful start."""
        self._log.info(
            "adaptor_started",
            event_type="adaptor.started",
            phone_ip=phone_ip,
            app_name=app_name,
            listen_port=listen_port,
        )

    def start_skipped(self, reason: str) -> None:
        """Log a start call that left the adaptor idle."""
        self._log.info(
            "adaptor_start_skipped",
            event_type="adaptor.start_skipped",
            reason=reason,
        )

    def restarting(self) -> None:
        """Log start while already running."""
        self._log.info("adaptor_restarting", event_type="adaptor.restarting")

    def stopped(self, stats: dict[str, Any]) -> None:
        """Log a completed stop with the run's packet counters."""
        self._log.info(
            "adaptor_stopped",
            event_type="adaptor.stopped",
            **stats,
        )

    def bind_failed(self, host: str, port: int, error: str) -> None:
        """Log an inbound bind failure."""
        self._log.error(
            "adaptor_bind_failed",
            event_type="adaptor.bind_failed",
            host=host,
            port=port,
            error=error,
        )

    def join_timeout(self, thread_name: str, timeout_s: float) -> None:
        """Log a loop thread that did not exit in time."""
        self._log.warning(
            "adaptor_join_timeout",
            event_type="adaptor.join_timeout",
            thread=thread_name,
            timeout_s=timeout_s,
        )

    def teardown_failed(self, error: dict[str, Any]) -> None:
        """Log a stop that failed while the adaptor was garbage collected."""
        self._log.warning(
            "adaptor_teardown_failed",
            event_type="adaptor.teardown_failed",
            **error,
        )

    def state_change(self, old_state: str, new_state: str, reason: str) -> None:
        """Log state transition."""
        self._log.debug(
            "state_change",
            event_type="adaptor.state_change",
            old_state=old_state,
            new_state=new_state,
            reason=reason,
        )


def init_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Initialize logging with defaults.

    Call this once at application startup.
    """
    configure_logging(level=level, json_format=json_format)
