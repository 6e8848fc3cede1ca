"""Tests for structured logging helpers."""

import pytest
import structlog

from vts_tracking.observability.logging import (
    AdaptorLogger,
    bind_peer,
    configure_logging,
    get_logger,
    init_logging,
    unbind_peer,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize("json_format", [True, False])
    def test_configures(self, json_format):
        """Both renderers configure without error."""
        configure_logging(level="DEBUG", json_format=json_format)
        get_logger("test").info("test_event", value=1)

    def test_json_output(self, capsys):
        """JSON rendering emits the event name and fields."""
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("adaptor_probe", port=21412)

        out = capsys.readouterr().out
        assert '"event": "adaptor_probe"' in out
        assert '"port": 21412' in out

    def test_level_filters(self, capsys):
        """Records below the configured level are dropped."""
        init_logging(json_format=True, level="WARNING")
        get_logger("test").info("hidden_event")

        assert "hidden_event" not in capsys.readouterr().out


class TestPeerContext:
    """Tests for bind_peer / unbind_peer."""

    def test_bind_and_unbind(self, capsys):
        """The phone address is attached until unbound."""
        configure_logging(level="INFO", json_format=True)
        log = get_logger("test")

        bind_peer("192.168.1.20")
        log.info("with_peer")
        unbind_peer()
        log.info("without_peer")

        lines = capsys.readouterr().out.strip().splitlines()
        assert "192.168.1.20" in lines[0]
        assert "192.168.1.20" not in lines[1]


class TestAdaptorLogger:
    """Tests for AdaptorLogger lifecycle events."""

    def test_all_events(self, capsys):
        """Every lifecycle event renders with the adaptor tag."""
        configure_logging(level="DEBUG", json_format=True)
        log = AdaptorLogger()

        log.started("10.0.0.2", "facetrack-d", 21412)
        log.start_skipped("no_phone_ip")
        log.restarting()
        log.stopped({"packets_total": 3, "frames_total": 2})
        log.bind_failed("0.0.0.0", 21412, "Address already in use")
        log.join_timeout("vts-receiver", 2.0)
        log.state_change("stopped", "starting", "start_requested")
        log.teardown_failed({"type": "AdaptorStateError", "message": "bad"})

        out = capsys.readouterr().out
        for event in (
            "adaptor_started",
            "adaptor_start_skipped",
            "adaptor_restarting",
            "adaptor_stopped",
            "adaptor_bind_failed",
            "adaptor_join_timeout",
            "state_change",
            "adaptor_teardown_failed",
        ):
            assert event in out
        assert '"adaptor": "vts"' in out
