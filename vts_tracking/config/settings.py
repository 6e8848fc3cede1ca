"""Application Settings - Environment-based configuration.

Uses Pydantic Settings for validation and type coercion. Every variable
is prefixed with ``VTS_`` (for example ``VTS_PHONE_IP=192.168.1.20``) and
may also be placed in a ``.env`` file.

Settings feed VTSAdaptorConfig and the monitor CLI; the adaptor itself
only ever sees the explicit config object.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vts_tracking.config.constants import VTS


class Settings(BaseSettings):
    """Adaptor settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_json: bool = Field(default=False, description="Render logs as JSON")

    # Observability
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    # Peer
    phone_ip: str | None = Field(
        default=None, description="Address of the phone running VTube Studio"
    )
    app_name: str = Field(
        default=VTS.DEFAULT_APP_NAME,
        min_length=VTS.APP_NAME_MIN_LENGTH,
        max_length=VTS.APP_NAME_MAX_LENGTH,
        description="Client name announced to VTube Studio",
    )

    # Transport
    bind_host: str = Field(default=VTS.BIND_HOST, description="Inbound bind address")
    listen_port: int = Field(
        default=VTS.PORT, ge=1, le=65535, description="Inbound UDP port"
    )
    peer_port: int = Field(
        default=VTS.PORT, ge=1, le=65535, description="Phone UDP port"
    )

    # Pacing
    keepalive_per_second: float = Field(
        default=VTS.KEEPALIVE_PER_SECOND,
        gt=0,
        description="Keep-alive requests per second (interval is clamped)",
    )
    request_duration_s: float = Field(
        default=VTS.REQUEST_DURATION_S,
        gt=0,
        description="Seconds of frames requested by each keep-alive",
    )
    socket_timeout_ms: int = Field(
        default=VTS.SOCKET_TIMEOUT_MS,
        ge=1,
        le=1000,
        description="Send/receive timeout; bounds shutdown latency",
    )
    decode_retry_ms: int = Field(
        default=VTS.DECODE_RETRY_MS,
        ge=0,
        le=5000,
        description="Pause after a malformed datagram",
    )
    join_timeout_s: float = Field(
        default=VTS.JOIN_TIMEOUT_S,
        gt=0,
        description="Upper bound when joining loop threads on stop",
    )

    @field_validator("phone_ip", mode="before")
    @classmethod
    def empty_phone_ip_is_unset(cls, v: str | None) -> str | None:
        """Treat an empty VTS_PHONE_IP as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
