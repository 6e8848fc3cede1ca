"""VTS Tracking Exception Hierarchy.

Structured exception classes shared by the adaptor, the transport loops
and the frame codec.

Hierarchy:
    VTSTrackingError (base)
    ├── ConfigurationError (ConfigError)
    │   └── InvalidConfigError
    ├── AdaptorStateError
    ├── TransportError
    │   ├── BindError
    │   └── SendError
    └── ProtocolError
        └── DecodeError

Only configuration and bind failures ever reach the caller of
``VTSAdaptor.start``. SendError and DecodeError are recoverable and are
absorbed inside the loops that raise them.
"""

from typing import Any


class VTSTrackingError(Exception):
    """Base exception for all VTS tracking errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(VTSTrackingError):
    """Base exception for configuration-related errors."""

    pass


ConfigError = ConfigurationError


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: str,
    ) -> None:
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            details={
                "config_key": config_key,
                "value": str(value),
                "reason": reason,
            },
            recoverable=False,
        )


# =============================================================================
# Lifecycle Errors
# =============================================================================


class AdaptorStateError(VTSTrackingError):
    """Raised for invalid adaptor state transitions."""

    def __init__(
        self,
        message: str,
        current_state: str | None = None,
        target_state: str | None = None,
    ) -> None:
        details = {}
        if current_state:
            details["current_state"] = current_state
        if target_state:
            details["target_state"] = target_state
        super().__init__(message, details, recoverable=False)


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(VTSTrackingError):
    """Base exception for UDP transport errors."""

    pass


class BindError(TransportError):
    """Raised when the inbound socket cannot be bound."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(
            message=f"Failed to bind UDP socket to {host}:{port}: {reason}",
            details={"host": host, "port": port, "reason": reason},
            recoverable=False,
        )
        self.host = host
        self.port = port


class SendError(TransportError):
    """Raised when a keep-alive datagram cannot be sent."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(
            message=f"Failed to send to {host}:{port}: {reason}",
            details={"host": host, "port": port, "reason": reason},
            recoverable=True,  # Next keep-alive retries on schedule
        )


# =============================================================================
# Protocol Errors
# =============================================================================


class ProtocolError(VTSTrackingError):
    """Base exception for wire format errors."""

    pass


class DecodeError(ProtocolError):
    """Raised when a datagram does not match the tracking frame schema."""

    def __init__(self, reason: str, size: int | None = None) -> None:
        details: dict[str, Any] = {"reason": reason}
        if size is not None:
            details["size"] = size
        super().__init__(
            message=f"Tracking frame decode failed: {reason}",
            details=details,
            recoverable=True,  # Datagram is dropped, receiving continues
        )
