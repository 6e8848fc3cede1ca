"""Frame Receiver - inbound datagrams to the frame exchange.

Runs a tight receive loop on its own thread:

    recvfrom (short timeout)
        timeout      -> loop again, re-checking shutdown
        datagram     -> decode_frame -> exchange.write
        DecodeError  -> drop, pause briefly, continue
        OSError      -> pause briefly, continue (or exit on shutdown)

A malformed datagram never reaches the exchange, so the consumer keeps
seeing the last good frame.
"""

import socket
import threading
import time
from dataclasses import asdict, dataclass

from vts_tracking.config.constants import VTS
from vts_tracking.exceptions import DecodeError
from vts_tracking.observability import metrics
from vts_tracking.observability.logging import get_logger
from vts_tracking.protocol.messages import TrackingFrame, decode_frame
from vts_tracking.transport.exchange import FrameExchange

logger = get_logger(__name__)


@dataclass
class ReceiverStats:
    """Packet counters owned by the receiver thread."""

    packets_total: int = 0
    frames_total: int = 0
    decode_errors: int = 0
    packets_last_second: int = 0
    rate_hz: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return asdict(self)


class FrameReceiver:
    """Receives, decodes and publishes tracking frames until shutdown.

    Usage:
        receiver = FrameReceiver(sock, exchange, shutdown=event)
        thread = threading.Thread(target=receiver.run)
        thread.start()
    """

    def __init__(
        self,
        sock: socket.socket,
        exchange: FrameExchange,
        shutdown: threading.Event,
        recv_buffer_bytes: int = VTS.RECV_BUFFER_BYTES,
        decode_retry_ms: float = VTS.DECODE_RETRY_MS,
        metrics_enabled: bool = True,
    ) -> None:
        self._sock = sock
        self._exchange = exchange
        self._shutdown = shutdown
        self._bufsize = recv_buffer_bytes
        self._retry_s = decode_retry_ms / 1000.0
        self._metrics_enabled = metrics_enabled

        self._stats = ReceiverStats()
        self._window_count = 0
        self._window_start = time.monotonic()

    def handle_datagram(self, data: bytes) -> TrackingFrame:
        """Decode one datagram and publish it.

        Raises:
            DecodeError: If the datagram is not a tracking frame; the
                exchange is left untouched
        """
        frame = decode_frame(data)
        self._exchange.write(frame)
        self._stats.frames_total += 1
        if self._metrics_enabled:
            metrics.record_frame_decoded()
        return frame

    def run(self) -> None:
        """Loop body for the receiver thread."""
        while not self._shutdown.is_set():
            try:
                data, addr = self._sock.recvfrom(self._bufsize)
            except socket.timeout:
                self._update_rate()
                continue
            except OSError as e:
                if self._shutdown.is_set():
                    break
                logger.debug("vts_receive_failed", error=str(e))
                self._shutdown.wait(self._retry_s)
                continue

            self._count_packet()

            try:
                self.handle_datagram(data)
            except DecodeError as e:
                self._stats.decode_errors += 1
                if self._metrics_enabled:
                    metrics.record_decode_error()
                logger.debug("vts_decode_failed", sender=addr[0], **e.to_dict())
                self._shutdown.wait(self._retry_s)

    def _count_packet(self) -> None:
        self._stats.packets_total += 1
        self._window_count += 1
        if self._metrics_enabled:
            metrics.record_packet_received()
        self._update_rate()

    def _update_rate(self) -> None:
        """Roll the one-second packet window."""
        now = time.monotonic()
        dt = now - self._window_start
        if dt >= 1.0:
            self._stats.packets_last_second = self._window_count
            self._stats.rate_hz = self._window_count / dt
            self._window_count = 0
            self._window_start = now
            if self._metrics_enabled:
                metrics.update_receive_rate(self._stats.rate_hz)

    @property
    def stats(self) -> ReceiverStats:
        """Packet counters for this run."""
        return self._stats
