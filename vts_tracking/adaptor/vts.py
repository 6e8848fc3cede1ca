"""VTube Studio Adaptor - receive iOS face tracking over UDP.

VTube Studio on the phone streams tracking frames to whoever keeps
asking for them. The adaptor owns two threads for the duration of a run:

    [keep-alive thread] --request every 200ms--> phone:21412
    [receiver thread]   <--tracking frames-----  phone
            |
            v
      FrameExchange (newest wins)
            |
            v
        poll() on the render tick -> bones / blendshapes

Lifecycle: STOPPED -> STARTING -> RUNNING -> STOPPING -> STOPPED.
Starting while running restarts; stopping while stopped does nothing.
Only configuration and bind failures propagate out of start().

Usage:
    adaptor = VTSAdaptor()
    adaptor.start({"phoneIP": "192.168.1.20", "appName": "my-app"})

    while rendering:
        adaptor.poll()
        head = adaptor.bones.get(BoneName.FT_HEAD)

    adaptor.stop()
"""

import math
import socket
import threading
from dataclasses import dataclass
from typing import Any, Mapping

from vts_tracking.adaptor.base import Adaptor, Bone, BoneName
from vts_tracking.adaptor.state import AdaptorState, AdaptorStateMachine
from vts_tracking.config.constants import VTS
from vts_tracking.config.settings import Settings
from vts_tracking.exceptions import BindError, InvalidConfigError, VTSTrackingError
from vts_tracking.observability import metrics
from vts_tracking.observability.logging import AdaptorLogger
from vts_tracking.protocol.messages import TrackingFrame, encode_request
from vts_tracking.transport.exchange import FrameExchange
from vts_tracking.transport.receiver import FrameReceiver
from vts_tracking.transport.sender import KeepAliveSender, keepalive_interval_ms


@dataclass
class VTSAdaptorConfig:
    """Configuration for the VTube Studio adaptor."""

    # Sockets
    bind_host: str = VTS.BIND_HOST
    listen_port: int = VTS.PORT  # 0 binds an ephemeral port (tests)
    peer_port: int = VTS.PORT
    recv_buffer_bytes: int = VTS.RECV_BUFFER_BYTES
    socket_timeout_ms: int = VTS.SOCKET_TIMEOUT_MS

    # Keep-alive
    keepalive_per_second: float = VTS.KEEPALIVE_PER_SECOND
    keepalive_min_interval_ms: int = VTS.KEEPALIVE_MIN_INTERVAL_MS
    keepalive_max_interval_ms: int = VTS.KEEPALIVE_MAX_INTERVAL_MS
    request_duration_s: float = VTS.REQUEST_DURATION_S
    default_app_name: str = VTS.DEFAULT_APP_NAME

    # Receiver
    decode_retry_ms: int = VTS.DECODE_RETRY_MS

    # Shutdown
    join_timeout_s: float = VTS.JOIN_TIMEOUT_S

    metrics_enabled: bool = True

    @property
    def keepalive_interval_ms(self) -> float:
        """Keep-alive interval, clamped."""
        return keepalive_interval_ms(
            self.keepalive_per_second,
            self.keepalive_min_interval_ms,
            self.keepalive_max_interval_ms,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "VTSAdaptorConfig":
        """Build a config from environment settings."""
        return cls(
            bind_host=settings.bind_host,
            listen_port=settings.listen_port,
            peer_port=settings.peer_port,
            socket_timeout_ms=settings.socket_timeout_ms,
            keepalive_per_second=settings.keepalive_per_second,
            request_duration_s=settings.request_duration_s,
            default_app_name=settings.app_name,
            decode_retry_ms=settings.decode_retry_ms,
            join_timeout_s=settings.join_timeout_s,
            metrics_enabled=settings.metrics_enabled,
        )


def validate_app_name(app_name: str) -> str:
    """Check the announced client name.

    Raises:
        InvalidConfigError: If the name is empty or longer than 32 characters
    """
    if len(app_name) < VTS.APP_NAME_MIN_LENGTH:
        raise InvalidConfigError(VTS.OPTION_APP_NAME, app_name, "App Name can't be empty")
    if len(app_name) > VTS.APP_NAME_MAX_LENGTH:
        raise InvalidConfigError(
            VTS.OPTION_APP_NAME,
            app_name,
            f"App Name can't be longer than {VTS.APP_NAME_MAX_LENGTH} characters",
        )
    return app_name


def head_bone(frame: TrackingFrame) -> Bone:
    """Head pose from a frame.

    Position X is mirrored; rotation is applied Y, X, Z from degrees.
    """
    return Bone.from_euler(
        position=(-frame.position.x, frame.position.y, frame.position.z),
        heading=math.radians(frame.rotation.y),
        attitude=math.radians(frame.rotation.x),
        bank=math.radians(frame.rotation.z),
    )


class VTSAdaptor(Adaptor):
    """Adaptor receiving VTube Studio iOS tracking data.

    The tracking API of VTube Studio is not versioned; fields are read
    exactly as the app sends them today.
    """

    def __init__(self, config: VTSAdaptorConfig | None = None) -> None:
        super().__init__()
        self._config = config or VTSAdaptorConfig()
        self._log = AdaptorLogger("vts")
        self._fsm = AdaptorStateMachine()
        self._fsm.on_state_change(
            lambda t: self._log.state_change(t.old_state.value, t.new_state.value, t.reason)
        )

        self._app_name = self._config.default_app_name
        self._phone_ip: str | None = None
        self._exchange = FrameExchange()

        # Sockets
        self._sock_in: socket.socket | None = None
        self._sock_out: socket.socket | None = None

        # Threading
        self._shutdown = threading.Event()
        self._sender: KeepAliveSender | None = None
        self._receiver: FrameReceiver | None = None
        self._sending_thread: threading.Thread | None = None
        self._listening_thread: threading.Thread | None = None
        self._last_stats: dict[str, Any] = {}

        self.last_frame: TrackingFrame | None = None

    def __enter__(self) -> "VTSAdaptor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def __del__(self) -> None:
        if getattr(self, "_sock_out", None) is None:
            return
        try:
            self.stop()
        except VTSTrackingError as e:
            self._log.teardown_failed(e.to_dict())

    def close(self) -> None:
        """Alias for stop()."""
        self.stop()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, options: Mapping[str, str] | None = None) -> None:
        """Start keep-alive and receiver threads.

        Args:
            options: ``phoneIP`` (required) and ``appName`` (optional)

        Raises:
            InvalidConfigError: If appName, or the configured default name,
                is empty or longer than 32 characters
            BindError: If the inbound port cannot be bound
        """
        options = options or {}

        # VTube Studio wants an app name to be known by
        app_name = validate_app_name(self._config.default_app_name)
        if VTS.OPTION_APP_NAME in options:
            app_name = validate_app_name(options[VTS.OPTION_APP_NAME])

        phone_ip = options.get(VTS.OPTION_PHONE_IP)
        if not phone_ip:
            self._log.start_skipped(f"{VTS.OPTION_PHONE_IP} not set")
            return

        # No zombie threads
        if self.is_running():
            self._log.restarting()
            self.stop()

        self._app_name = app_name
        self._phone_ip = phone_ip
        self._fsm.transition_to(AdaptorState.STARTING, "start_requested")

        try:
            self._open_sockets()

            self._shutdown = threading.Event()
            self._exchange = FrameExchange()
            self._last_stats = {}
            self.last_frame = None

            listen_port = self._sock_in.getsockname()[1]
            self._sender = KeepAliveSender(
                self._sock_out,
                encode_request(app_name, self._config.request_duration_s, [listen_port]),
                (phone_ip, self._config.peer_port),
                interval_ms=self._config.keepalive_interval_ms,
                shutdown=self._shutdown,
                metrics_enabled=self._config.metrics_enabled,
            )
            self._receiver = FrameReceiver(
                self._sock_in,
                self._exchange,
                shutdown=self._shutdown,
                recv_buffer_bytes=self._config.recv_buffer_bytes,
                decode_retry_ms=self._config.decode_retry_ms,
                metrics_enabled=self._config.metrics_enabled,
            )

            self._sending_thread = threading.Thread(
                target=self._sender.run, name="vts-keepalive", daemon=True
            )
            self._listening_thread = threading.Thread(
                target=self._receiver.run, name="vts-receiver", daemon=True
            )
            self._sending_thread.start()
            self._listening_thread.start()
        except BaseException as e:
            reason = "bind_failed" if isinstance(e, BindError) else "start_failed"
            self._abort_start(reason)
            raise

        self._fsm.transition_to(AdaptorState.RUNNING, "threads_started")
        if self._config.metrics_enabled:
            metrics.update_running(True)
        self._log.started(phone_ip, app_name, listen_port)

    def _abort_start(self, reason: str) -> None:
        """Undo a partial start: no sockets, no threads, STOPPED."""
        self._shutdown.set()
        for thread in (self._sending_thread, self._listening_thread):
            if thread is not None and thread.is_alive():
                thread.join(timeout=self._config.join_timeout_s)
        self._close_sockets()
        self._sending_thread = None
        self._listening_thread = None
        self._sender = None
        self._receiver = None
        self._fsm.transition_to(AdaptorState.STOPPED, reason)

    def stop(self) -> None:
        """Stop both threads and close both sockets.

        Returns once both threads observed shutdown; bounded by the
        keep-alive interval plus the socket timeout.
        """
        if not self.is_running():
            return

        self._fsm.transition_to(AdaptorState.STOPPING, "stop_requested")
        self._shutdown.set()

        for thread in (self._sending_thread, self._listening_thread):
            if thread is None:
                continue
            thread.join(timeout=self._config.join_timeout_s)
            if thread.is_alive():
                self._log.join_timeout(thread.name, self._config.join_timeout_s)

        self._close_sockets()
        self._last_stats = self._collect_stats()

        self._sending_thread = None
        self._listening_thread = None
        self._sender = None
        self._receiver = None

        self._fsm.transition_to(AdaptorState.STOPPED, "threads_joined")
        if self._config.metrics_enabled:
            metrics.update_running(False)
        self._log.stopped(self._last_stats)

    def is_running(self) -> bool:
        """Whether an outbound socket is currently owned."""
        return self._sock_out is not None

    def option_names(self) -> list[str]:
        """Option keys accepted by start()."""
        return [VTS.OPTION_PHONE_IP, VTS.OPTION_APP_NAME]

    # -------------------------------------------------------------------------
    # Consumer
    # -------------------------------------------------------------------------

    def poll(self) -> None:
        """Publish the newest frame, if one arrived since the last poll."""
        if not self._exchange.has_unread():
            return

        frame = self._exchange.read_and_clear()
        if frame is None:
            return

        self.bones[BoneName.FT_HEAD] = head_bone(frame)
        self.blendshapes = dict(frame.blend_shapes_dict)
        self.last_frame = frame

    # -------------------------------------------------------------------------
    # Sockets
    # -------------------------------------------------------------------------

    def _open_sockets(self) -> None:
        timeout_s = self._config.socket_timeout_ms / 1000.0
        host, port = self._config.bind_host, self._config.listen_port

        sock_in = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock_in.settimeout(timeout_s)
        try:
            sock_in.bind((host, port))
        except OSError as e:
            sock_in.close()
            self._log.bind_failed(host, port, str(e))
            raise BindError(host, port, str(e)) from e

        sock_out = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock_out.settimeout(timeout_s)

        self._sock_in = sock_in
        self._sock_out = sock_out

    def _close_sockets(self) -> None:
        for sock in (self._sock_in, self._sock_out):
            if sock is not None:
                sock.close()
        self._sock_in = None
        self._sock_out = None

    def _collect_stats(self) -> dict[str, Any]:
        stats: dict[str, Any] = {}
        if self._receiver is not None:
            stats.update(self._receiver.stats.to_dict())
        if self._sender is not None:
            stats["keepalives_sent"] = self._sender.stats.sent
            stats["send_errors"] = self._sender.stats.errors
        return stats

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AdaptorState:
        """Current lifecycle state."""
        return self._fsm.state

    @property
    def state_machine(self) -> AdaptorStateMachine:
        """Lifecycle state machine (transition history)."""
        return self._fsm

    @property
    def stats(self) -> dict[str, Any]:
        """Packet counters of the current run, or of the last one."""
        if self.is_running():
            return self._collect_stats()
        return dict(self._last_stats)

    @property
    def listen_address(self) -> tuple[str, int] | None:
        """Bound inbound address while running."""
        if self._sock_in is None:
            return None
        return self._sock_in.getsockname()

    @property
    def app_name(self) -> str:
        """Client name announced in keep-alives."""
        return self._app_name

    @property
    def phone_ip(self) -> str | None:
        """Phone address of the current or last run."""
        return self._phone_ip

    @property
    def exchange(self) -> FrameExchange:
        """Frame exchange of the current run."""
        return self._exchange

    @property
    def config(self) -> VTSAdaptorConfig:
        """Current configuration."""
        return self._config


def create_vts_adaptor(settings: Settings | None = None) -> VTSAdaptor:
    """Factory function to create an adaptor from settings.

    Args:
        settings: Environment settings (defaults apply when omitted)

    Returns:
        Configured VTSAdaptor
    """
    if settings is None:
        return VTSAdaptor()
    return VTSAdaptor(VTSAdaptorConfig.from_settings(settings))
