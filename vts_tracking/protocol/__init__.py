"""VTube Studio wire protocol."""

from vts_tracking.protocol.messages import (
    ShapeEntry,
    TrackingFrame,
    TrackingRequest,
    Vector3,
    decode_frame,
    decode_request,
    encode_frame,
    encode_request,
)

__all__ = [
    "ShapeEntry",
    "TrackingFrame",
    "TrackingRequest",
    "Vector3",
    "decode_frame",
    "decode_request",
    "encode_frame",
    "encode_request",
]
