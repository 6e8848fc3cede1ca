"""VTube Studio wire messages - request encoding and frame decoding.

Two JSON messages travel over UDP port 21412:

Outbound keep-alive (client -> phone):
{
    "messageType": "iOSTrackingDataRequest",
    "time": 1.0,
    "sentBy": "facetrack-d",
    "ports": [21412]
}

Inbound tracking frame (phone -> client):
{
    "Timestamp": 1000,
    "Hotkey": -1,
    "FaceFound": true,
    "Rotation": {"x": 1.0, "y": 2.0, "z": 3.0},
    "Position": {"x": 0.1, "y": 0.2, "z": 0.3},
    "BlendShapes": [{"k": "jawOpen", "v": 0.5}, ...]
}

Models are frozen; a decoded frame can be handed between threads
without copying.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from vts_tracking.config.constants import VTS
from vts_tracking.exceptions import DecodeError


class Vector3(BaseModel):
    """Three floats; rotations are per-axis degrees."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float


class ShapeEntry(BaseModel):
    """One blendshape as transmitted: ``{"k": name, "v": weight}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="k")
    weight: float = Field(alias="v")


class TrackingRequest(BaseModel):
    """Keep-alive asking the phone to stream frames to ``ports``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_type: str = Field(default=VTS.REQUEST_MESSAGE_TYPE, alias="messageType")
    time: float = Field(gt=0)
    sent_by: str = Field(
        alias="sentBy",
        min_length=VTS.APP_NAME_MIN_LENGTH,
        max_length=VTS.APP_NAME_MAX_LENGTH,
    )
    ports: tuple[int, ...]


class TrackingFrame(BaseModel):
    """A single decoded tracking frame.

    ``blend_shapes`` keeps the wire order. ``blend_shapes_dict`` is built
    once after validation; when a name repeats, the later entry wins.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(alias="Timestamp")
    hotkey: int = Field(default=VTS.NO_HOTKEY, alias="Hotkey")
    face_found: bool = Field(alias="FaceFound")
    rotation: Vector3 = Field(alias="Rotation")
    position: Vector3 = Field(alias="Position")
    blend_shapes: tuple[ShapeEntry, ...] = Field(alias="BlendShapes")

    _blend_shapes_dict: dict[str, float] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        """Index blendshapes by name."""
        self._blend_shapes_dict = {
            entry.name: entry.weight for entry in self.blend_shapes
        }

    @property
    def blend_shapes_dict(self) -> Mapping[str, float]:
        """Read-only blendshape weight by name (not part of the wire format)."""
        return MappingProxyType(self._blend_shapes_dict)

    @property
    def hotkey_pressed(self) -> bool:
        """Whether an on-screen hotkey was pressed."""
        return self.hotkey != VTS.NO_HOTKEY


def encode_request(
    name: str,
    duration_s: float,
    ports: Iterable[int],
) -> bytes:
    """Encode a keep-alive request.

    Args:
        name: Client name shown in VTube Studio (1-32 characters)
        duration_s: Seconds of frames requested
        ports: Local UDP ports the phone should send frames to

    Returns:
        Compact UTF-8 JSON payload
    """
    request = TrackingRequest(sent_by=name, time=duration_s, ports=tuple(ports))
    return request.model_dump_json(by_alias=True).encode("utf-8")


def decode_request(data: bytes) -> TrackingRequest:
    """Decode a keep-alive request (phone side, used by simulators and tests).

    Raises:
        DecodeError: If the payload is not a valid request
    """
    try:
        return TrackingRequest.model_validate_json(data)
    except ValidationError as e:
        raise DecodeError(_summarize(e), size=len(data)) from e


def decode_frame(data: bytes) -> TrackingFrame:
    """Decode a received datagram into a TrackingFrame.

    Args:
        data: Raw UDP payload

    Returns:
        Frame with its name -> weight mapping populated

    Raises:
        DecodeError: If the payload is truncated, not JSON, or does not
            match the frame schema
    """
    try:
        return TrackingFrame.model_validate_json(data)
    except ValidationError as e:
        raise DecodeError(_summarize(e), size=len(data)) from e


def encode_frame(frame: TrackingFrame) -> bytes:
    """Encode a frame the way the phone sends it."""
    return frame.model_dump_json(by_alias=True).encode("utf-8")


def _summarize(error: ValidationError) -> str:
    """First validation problem as a short string."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{location}: {first.get('msg', 'invalid')} ({error.error_count()} errors)"
