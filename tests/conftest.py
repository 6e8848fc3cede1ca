"""Pytest configuration and shared fixtures."""

import json
import socket
from typing import Callable, Generator

import pytest

from vts_tracking.adaptor.vts import VTSAdaptor, VTSAdaptorConfig
from vts_tracking.protocol.messages import TrackingFrame


SAMPLE_FRAME = {
    "Timestamp": 1000,
    "Hotkey": -1,
    "FaceFound": True,
    "Rotation": {"x": 1, "y": 2, "z": 3},
    "Position": {"x": 0.1, "y": 0.2, "z": 0.3},
    "BlendShapes": [{"k": "jawOpen", "v": 0.5}],
}


@pytest.fixture
def sample_frame_bytes() -> bytes:
    """The datagram VTube Studio sends for a simple open-jaw frame."""
    return json.dumps(SAMPLE_FRAME, separators=(",", ":")).encode("utf-8")


@pytest.fixture
def frame_factory() -> Callable[[int], TrackingFrame]:
    """Build frames whose every field is derived from one integer."""

    def make(value: int, shapes: list[tuple[str, float]] | None = None) -> TrackingFrame:
        return TrackingFrame.model_validate(
            {
                "Timestamp": value,
                "Hotkey": value % 10,
                "FaceFound": value % 2 == 0,
                "Rotation": {"x": value, "y": value, "z": value},
                "Position": {"x": value, "y": value, "z": value},
                "BlendShapes": [
                    {"k": name, "v": weight}
                    for name, weight in (shapes or [("marker", float(value))])
                ],
            }
        )

    return make


@pytest.fixture
def phone() -> Generator[socket.socket, None, None]:
    """UDP socket standing in for the phone on loopback."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def loopback_config(phone: socket.socket) -> VTSAdaptorConfig:
    """Adaptor config bound to an ephemeral loopback port, peering with ``phone``."""
    return VTSAdaptorConfig(
        bind_host="127.0.0.1",
        listen_port=0,
        peer_port=phone.getsockname()[1],
        keepalive_per_second=50,
        decode_retry_ms=10,
        metrics_enabled=False,
    )


@pytest.fixture
def adaptor(loopback_config: VTSAdaptorConfig) -> Generator[VTSAdaptor, None, None]:
    """Adaptor that is always stopped after the test."""
    instance = VTSAdaptor(loopback_config)
    yield instance
    instance.stop()
