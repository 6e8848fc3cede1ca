"""VTube Studio protocol constants.

Fixed values of the VTube Studio iOS tracking protocol and the default
pacing of the adaptor loops. Runtime overrides live in settings.py and
VTSAdaptorConfig; these are the documented defaults.

All timing values in milliseconds unless otherwise noted.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class VTSConstants:
    """Immutable VTube Studio protocol values and loop defaults."""

    # Transport
    PORT: Final[int] = 21412  # Inbound listen port and outbound peer port
    BIND_HOST: Final[str] = "0.0.0.0"  # All local interfaces
    RECV_BUFFER_BYTES: Final[int] = 65535  # Largest UDP payload

    # Request message
    REQUEST_MESSAGE_TYPE: Final[str] = "iOSTrackingDataRequest"
    REQUEST_DURATION_S: Final[float] = 1.0  # Frames requested per keep-alive
    DEFAULT_APP_NAME: Final[str] = "facetrack-d"
    APP_NAME_MIN_LENGTH: Final[int] = 1
    APP_NAME_MAX_LENGTH: Final[int] = 32

    # Keep-alive pacing
    KEEPALIVE_PER_SECOND: Final[int] = 5
    KEEPALIVE_MIN_INTERVAL_MS: Final[int] = 10
    KEEPALIVE_MAX_INTERVAL_MS: Final[int] = 5000

    # Socket timeouts
    SOCKET_TIMEOUT_MS: Final[int] = 16  # Send and receive
    DECODE_RETRY_MS: Final[int] = 100  # Pause after a bad datagram
    JOIN_TIMEOUT_S: Final[float] = 2.0  # Upper bound when joining loop threads

    # Wire
    NO_HOTKEY: Final[int] = -1

    # Start options
    OPTION_PHONE_IP: Final[str] = "phoneIP"
    OPTION_APP_NAME: Final[str] = "appName"


# Singleton instance for import convenience
VTS = VTSConstants()
