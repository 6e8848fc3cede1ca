"""Tests for the KeepAliveSender loop.

Tests cover:
- Interval clamping
- Single sends and SendError wrapping
- Loop keeps its schedule through send failures
- Prompt exit on shutdown
"""

import socket
import threading
import time

import pytest

from vts_tracking.exceptions import SendError
from vts_tracking.protocol.messages import decode_request, encode_request
from vts_tracking.transport.sender import KeepAliveSender, keepalive_interval_ms


class FlakySocket:
    """Socket stub whose sendto fails on chosen calls."""

    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls = 0
        self.sent: list[tuple[bytes, tuple[str, int]]] = []

    def sendto(self, payload: bytes, addr: tuple[str, int]) -> int:
        self.calls += 1
        if self.calls in self.fail_on:
            raise OSError(101, "Network is unreachable")
        self.sent.append((payload, addr))
        return len(payload)


class TestKeepaliveInterval:
    """Tests for keepalive_interval_ms."""

    def test_default_rate(self):
        """5 per second is 200ms."""
        assert keepalive_interval_ms(5) == 200.0

    def test_clamped_low(self):
        """Very high rates are clamped to 10ms."""
        assert keepalive_interval_ms(1000) == 10.0

    def test_clamped_high(self):
        """Very low rates are clamped to 5000ms."""
        assert keepalive_interval_ms(0.01) == 5000.0

    def test_non_positive_rate(self):
        """Zero rate uses the slowest interval."""
        assert keepalive_interval_ms(0) == 5000.0

    def test_custom_bounds(self):
        """Bounds can be overridden."""
        assert keepalive_interval_ms(5, min_interval_ms=300, max_interval_ms=400) == 300.0


class TestSendOnce:
    """Tests for KeepAliveSender.send_once."""

    def test_sends_payload_to_peer(self):
        """Payload goes to the configured peer."""
        sock = FlakySocket()
        sender = KeepAliveSender(
            sock, b"payload", ("10.0.0.2", 21412), 200, threading.Event(),
            metrics_enabled=False,
        )

        sender.send_once()

        assert sock.sent == [(b"payload", ("10.0.0.2", 21412))]
        assert sender.stats.sent == 1

    def test_wraps_os_error(self):
        """Socket failures surface as recoverable SendError."""
        sender = KeepAliveSender(
            FlakySocket(fail_on={1}), b"x", ("10.0.0.2", 21412), 200, threading.Event(),
            metrics_enabled=False,
        )

        with pytest.raises(SendError) as exc_info:
            sender.send_once()

        assert exc_info.value.recoverable is True
        assert exc_info.value.details["port"] == 21412
        assert sender.stats.sent == 0


class TestSenderLoop:
    """Tests for KeepAliveSender.run."""

    def test_failures_do_not_stop_loop(self):
        """Failed sends are counted and the loop keeps going."""
        sock = FlakySocket(fail_on={1, 3})
        shutdown = threading.Event()
        sender = KeepAliveSender(
            sock, b"x", ("10.0.0.2", 21412), 10, shutdown, metrics_enabled=False
        )
        thread = threading.Thread(target=sender.run)
        thread.start()

        deadline = time.monotonic() + 2.0
        while sock.calls < 6 and time.monotonic() < deadline:
            time.sleep(0.005)
        shutdown.set()
        thread.join(timeout=1.0)

        assert not thread.is_alive()
        assert sender.stats.errors == 2
        assert sender.stats.sent >= 4

    def test_exits_promptly_on_shutdown(self):
        """Shutdown interrupts a long interval wait."""
        shutdown = threading.Event()
        sender = KeepAliveSender(
            FlakySocket(), b"x", ("10.0.0.2", 21412), 5000, shutdown,
            metrics_enabled=False,
        )
        thread = threading.Thread(target=sender.run)
        thread.start()
        time.sleep(0.05)

        started = time.monotonic()
        shutdown.set()
        thread.join(timeout=1.0)

        assert not thread.is_alive()
        assert time.monotonic() - started < 0.5
        assert sender.interval_ms == 5000.0

    def test_same_request_resent_over_udp(self, phone):
        """Every keep-alive carries the identical request."""
        payload = encode_request("facetrack-d", 1.0, [21412])
        shutdown = threading.Event()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sender = KeepAliveSender(
            sock, payload, phone.getsockname(), 10, shutdown, metrics_enabled=False
        )
        thread = threading.Thread(target=sender.run)
        thread.start()

        try:
            first, _ = phone.recvfrom(65535)
            second, _ = phone.recvfrom(65535)
        finally:
            shutdown.set()
            thread.join(timeout=1.0)
            sock.close()

        assert first == second == payload
        assert decode_request(first).sent_by == "facetrack-d"
