"""Single-slot frame exchange between the receiver thread and poll().

Newest-wins handoff: each write replaces whatever is stored, read or not.
There is no queue and no backpressure; a consumer polling slower than
frames arrive simply skips the intermediate ones.

The lock guards exactly the stored frame and the unread flag and is held
only for a reference swap. Frames are immutable, so the reference handed
out by read_and_clear() can never be observed half-written.
"""

import threading

from vts_tracking.protocol.messages import TrackingFrame


class FrameExchange:
    """Latest-frame cell with an unread flag.

    Usage:
        exchange = FrameExchange()

        # Receiver thread
        exchange.write(frame)

        # Render tick
        if exchange.has_unread():
            frame = exchange.read_and_clear()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._frame: TrackingFrame | None = None
        self._unread = False
        self._write_count = 0

    def write(self, frame: TrackingFrame) -> None:
        """Store frame, replacing any unread one."""
        with self._lock:
            self._frame = frame
            self._unread = True
            self._write_count += 1

    def has_unread(self) -> bool:
        """Whether a frame arrived since the last read."""
        with self._lock:
            return self._unread

    def read_and_clear(self) -> TrackingFrame | None:
        """Return the current frame and mark it read.

        Returns:
            The most recent frame, or None if nothing was ever written
        """
        with self._lock:
            self._unread = False
            return self._frame

    @property
    def write_count(self) -> int:
        """Total writes since construction."""
        with self._lock:
            return self._write_count
