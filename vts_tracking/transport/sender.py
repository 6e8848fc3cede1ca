"""Keep-Alive Sender - periodic tracking requests to the phone.

VTube Studio only streams for the duration named in the last request it
received, so the request is re-sent on a fixed interval for as long as
the adaptor runs.

Retry policy: a failed or timed-out send is counted, logged at debug
level and dropped. The loop keeps its schedule; the next keep-alive is
the retry.
"""

import socket
import threading
from dataclasses import dataclass

from vts_tracking.config.constants import VTS
from vts_tracking.exceptions import SendError
from vts_tracking.observability import metrics
from vts_tracking.observability.logging import get_logger

logger = get_logger(__name__)


def keepalive_interval_ms(
    per_second: float,
    min_interval_ms: float = VTS.KEEPALIVE_MIN_INTERVAL_MS,
    max_interval_ms: float = VTS.KEEPALIVE_MAX_INTERVAL_MS,
) -> float:
    """Convert a keep-alive rate into a clamped interval.

    Args:
        per_second: Requested keep-alives per second
        min_interval_ms: Lower bound (prevents flooding the phone)
        max_interval_ms: Upper bound (keeps the stream alive)

    Returns:
        Interval in milliseconds
    """
    if per_second <= 0:
        return float(max_interval_ms)
    return float(max(min_interval_ms, min(max_interval_ms, 1000.0 / per_second)))


@dataclass
class SenderStats:
    """Counters owned by the sender thread."""

    sent: int = 0
    errors: int = 0


class KeepAliveSender:
    """Sends one pre-encoded request every ``interval_ms`` until shutdown.

    Usage:
        sender = KeepAliveSender(sock, payload, ("192.168.1.20", 21412),
                                 interval_ms=200, shutdown=event)
        thread = threading.Thread(target=sender.run)
        thread.start()
        ...
        event.set()
        thread.join()
    """

    def __init__(
        self,
        sock: socket.socket,
        payload: bytes,
        peer: tuple[str, int],
        interval_ms: float,
        shutdown: threading.Event,
        metrics_enabled: bool = True,
    ) -> None:
        self._sock = sock
        self._payload = payload
        self._peer = peer
        self._interval_s = interval_ms / 1000.0
        self._shutdown = shutdown
        self._metrics_enabled = metrics_enabled
        self._stats = SenderStats()

    def send_once(self) -> None:
        """Send the request a single time.

        Raises:
            SendError: If the socket rejects the datagram or times out
        """
        try:
            self._sock.sendto(self._payload, self._peer)
        except OSError as e:
            raise SendError(self._peer[0], self._peer[1], str(e)) from e

        self._stats.sent += 1
        if self._metrics_enabled:
            metrics.record_keepalive_sent()

    def run(self) -> None:
        """Loop body for the keep-alive thread."""
        while not self._shutdown.is_set():
            try:
                self.send_once()
            except SendError as e:
                self._stats.errors += 1
                if self._metrics_enabled:
                    metrics.record_send_error()
                logger.debug("vts_keepalive_send_failed", **e.to_dict())

            # Returns early once stop is requested
            self._shutdown.wait(self._interval_s)

    @property
    def interval_ms(self) -> float:
        """Interval between keep-alives."""
        return self._interval_s * 1000.0

    @property
    def stats(self) -> SenderStats:
        """Send counters for this run."""
        return self._stats
