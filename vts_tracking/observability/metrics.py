"""Prometheus Metrics - adaptor observability.

Exports:
- Keep-alive send counts and failures
- Packet, frame and decode-failure counts
- Receive rate and running state

The host application decides whether to expose the default registry.
"""

from prometheus_client import Counter, Gauge

# -----------------------------------------------------------------------------
# Counters
# -----------------------------------------------------------------------------

KEEPALIVES_SENT = Counter(
    "vts_keepalives_sent_total",
    "Keep-alive requests sent to the phone",
)

SEND_ERRORS = Counter(
    "vts_send_errors_total",
    "Keep-alive sends that failed or timed out",
)

PACKETS_RECEIVED = Counter(
    "vts_packets_received_total",
    "Datagrams received on the tracking port",
)

FRAMES_DECODED = Counter(
    "vts_frames_decoded_total",
    "Datagrams decoded into tracking frames",
)

DECODE_ERRORS = Counter(
    "vts_decode_errors_total",
    "Datagrams dropped because they did not match the frame schema",
)

# -----------------------------------------------------------------------------
# Gauges
# -----------------------------------------------------------------------------

ADAPTOR_RUNNING = Gauge(
    "vts_adaptor_running",
    "1 while the adaptor owns live sockets and threads",
)

RECEIVE_RATE = Gauge(
    "vts_receive_rate_hz",
    "Datagrams received during the last full second",
)


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def record_keepalive_sent() -> None:
    """Record a keep-alive datagram handed to the socket."""
    KEEPALIVES_SENT.inc()


def record_send_error() -> None:
    """Record a failed keep-alive send."""
    SEND_ERRORS.inc()


def record_packet_received() -> None:
    """Record an inbound datagram."""
    PACKETS_RECEIVED.inc()


def record_frame_decoded() -> None:
    """Record a successfully decoded frame."""
    FRAMES_DECODED.inc()


def record_decode_error() -> None:
    """Record a dropped datagram."""
    DECODE_ERRORS.inc()


def update_running(running: bool) -> None:
    """Update the running gauge."""
    ADAPTOR_RUNNING.set(1 if running else 0)


def update_receive_rate(rate_hz: float) -> None:
    """Update the receive rate gauge."""
    RECEIVE_RATE.set(rate_hz)
