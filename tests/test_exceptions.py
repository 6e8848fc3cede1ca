"""Tests for Exception Hierarchy.

Tests cover:
- VTSTrackingError base class
- Configuration exceptions
- Lifecycle exceptions
- Transport exceptions
- Protocol exceptions
"""

import pytest

from vts_tracking import (
    AdaptorStateError,
    BindError,
    ConfigError,
    ConfigurationError,
    DecodeError,
    InvalidConfigError,
    ProtocolError,
    SendError,
    TransportError,
    VTSTrackingError,
)


class TestVTSTrackingError:
    """Tests for VTSTrackingError base class."""

    def test_basic_creation(self):
        """Create basic error with message."""
        error = VTSTrackingError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details == {}
        assert error.recoverable is False

    def test_with_details(self):
        """Details are appended to the string form."""
        error = VTSTrackingError("Operation failed", details={"port": 21412})
        assert "21412" in str(error)

    def test_to_dict(self):
        """Convert error to dictionary."""
        result = VTSTrackingError("Test error", {"key": "value"}, True).to_dict()

        assert result == {
            "type": "VTSTrackingError",
            "message": "Test error",
            "details": {"key": "value"},
            "recoverable": True,
        }


class TestConfigurationErrors:
    """Tests for configuration exceptions."""

    def test_config_error_alias(self):
        """ConfigError is ConfigurationError."""
        assert ConfigError is ConfigurationError

    def test_invalid_config(self):
        """InvalidConfigError records key, value and reason."""
        error = InvalidConfigError("appName", "x" * 33, "too long")

        assert isinstance(error, ConfigError)
        assert error.details["config_key"] == "appName"
        assert error.details["reason"] == "too long"
        assert error.recoverable is False


class TestLifecycleErrors:
    """Tests for AdaptorStateError."""

    def test_states_in_details(self):
        """Current and target state are recorded."""
        error = AdaptorStateError("bad", current_state="stopped", target_state="running")
        assert error.details == {"current_state": "stopped", "target_state": "running"}

    def test_no_states(self):
        """States are optional."""
        assert AdaptorStateError("bad").details == {}


class TestTransportErrors:
    """Tests for transport exceptions."""

    def test_bind_error_fatal(self):
        """BindError is not recoverable."""
        error = BindError("0.0.0.0", 21412, "Address already in use")

        assert isinstance(error, TransportError)
        assert error.recoverable is False
        assert error.host == "0.0.0.0"
        assert error.port == 21412
        assert "21412" in error.message

    def test_send_error_recoverable(self):
        """SendError is recoverable."""
        error = SendError("10.0.0.2", 21412, "unreachable")

        assert isinstance(error, TransportError)
        assert error.recoverable is True


class TestProtocolErrors:
    """Tests for protocol exceptions."""

    def test_decode_error(self):
        """DecodeError is recoverable and records size."""
        error = DecodeError("truncated", size=12)

        assert isinstance(error, ProtocolError)
        assert error.recoverable is True
        assert error.details == {"reason": "truncated", "size": 12}

    def test_decode_error_without_size(self):
        """Size is optional."""
        assert "size" not in DecodeError("bad").details

    def test_all_share_base(self):
        """Everything derives from VTSTrackingError."""
        for cls in (ConfigError, AdaptorStateError, BindError, SendError, DecodeError):
            assert issubclass(cls, VTSTrackingError)

    def test_catchable_as_base(self):
        """Raising a subclass is caught by the base."""
        with pytest.raises(VTSTrackingError):
            raise DecodeError("bad")
