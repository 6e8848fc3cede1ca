"""UDP transport - keep-alive sender, frame receiver and the exchange between them."""

from vts_tracking.transport.exchange import FrameExchange
from vts_tracking.transport.receiver import FrameReceiver, ReceiverStats
from vts_tracking.transport.sender import (
    KeepAliveSender,
    SenderStats,
    keepalive_interval_ms,
)

__all__ = [
    "FrameExchange",
    "FrameReceiver",
    "KeepAliveSender",
    "ReceiverStats",
    "SenderStats",
    "keepalive_interval_ms",
]
