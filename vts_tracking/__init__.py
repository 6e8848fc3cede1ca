"""VTS Tracking - VTube Studio face tracking ingestion adaptor."""

__version__ = "0.1.0"

# Export exception hierarchy for easy importing
from vts_tracking.exceptions import (
    VTSTrackingError,
    ConfigurationError,
    ConfigError,
    InvalidConfigError,
    AdaptorStateError,
    TransportError,
    BindError,
    SendError,
    ProtocolError,
    DecodeError,
)

__all__ = [
    "__version__",
    # Base
    "VTSTrackingError",
    # Configuration
    "ConfigurationError",
    "ConfigError",
    "InvalidConfigError",
    # Lifecycle
    "AdaptorStateError",
    # Transport
    "TransportError",
    "BindError",
    "SendError",
    # Protocol
    "ProtocolError",
    "DecodeError",
]
