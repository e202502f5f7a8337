"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class SktorrentConfig(BaseModel):
    """Tracker endpoint and session credentials (YAML section: sktorrent.*).

    The session is two opaque cookie values copied from a logged-in
    browser; nothing here performs a login.
    """

    base_url: str = Field(
        default="https://sktorrent.eu",
        description="Tracker base URL (no trailing slash).",
    )
    uid: str = Field(default="", description="Session cookie 'uid'.")
    password: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("password", "pass"),
        description="Session cookie 'pass'.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def cookie_header(self) -> str:
        """``Cookie`` header value for tracker requests."""
        return f"uid={self.uid}; pass={self.password.get_secret_value()}"


class StremioConfig(BaseModel):
    """Configuration for stream resolution (YAML section: stremio.*)."""

    max_concurrent_fetches: int = Field(
        default=5,
        description="Max parallel .torrent downloads per stream request.",
    )
    fetch_timeout_seconds: float = Field(
        default=20.0,
        description="Per-hit timeout (download + decode) in seconds.",
    )
    min_video_size_mb: int = Field(
        default=20,
        description="Files at or below this size (MiB) are treated as samples.",
    )
    tmdb_language: str = Field(
        default="en-US",
        description="Locale for TMDB title lookups.",
    )

    @field_validator("max_concurrent_fetches")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_concurrent_fetches must be > 0")
        return v

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def _validate_fetch_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch_timeout_seconds must be > 0")
        return v

    @field_validator("min_video_size_mb")
    @classmethod
    def _validate_min_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("min_video_size_mb must be >= 0")
        return v

    @property
    def min_video_size_bytes(self) -> int:
        return self.min_video_size_mb * 1024 * 1024


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/sktorrent/stremio).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="sktorrent", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for every outbound request.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="SKTorrent-Stremio/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # TMDB API key (optional; tmdb: ids resolve to nothing without it)
    tmdb_api_key: SecretStr | None = Field(
        default=None,
        description="TMDB API key for tmdb: identifiers.",
    )

    sktorrent: SktorrentConfig = Field(default_factory=SktorrentConfig)
    stremio: StremioConfig = Field(default_factory=StremioConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("tmdb_api_key", mode="before")
    @classmethod
    def _empty_key_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        Secrets are masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "tmdb_api_key": "**********" if self.tmdb_api_key is not None else None,
            "sktorrent": {
                "base_url": self.sktorrent.base_url,
                "uid": self.sktorrent.uid,
                "password": (
                    "**********" if self.sktorrent.password.get_secret_value() else ""
                ),
            },
            "stremio": self.stremio.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read SKTORRENT_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - SKTORRENT_HTTP_TIMEOUT_SECONDS
    - SKTORRENT_LOG_LEVEL
    - SKTORRENT_UID / SKT_UID
    - SKTORRENT_PASS / SKT_PASS
    - SKTORRENT_TMDB_API_KEY / TMDB_API_KEY
    - SKTORRENT_MAX_CONCURRENT_FETCHES
    """

    model_config = SettingsConfigDict(
        env_prefix="SKTORRENT_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    # validation_alias bypasses env_prefix, so the prefixed name is listed too.
    tmdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SKTORRENT_TMDB_API_KEY", "TMDB_API_KEY"),
    )
    sktorrent_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SKTORRENT_BASE_URL"),
    )
    sktorrent_uid: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SKTORRENT_UID", "SKT_UID"),
    )
    sktorrent_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SKTORRENT_PASS", "SKT_PASS"),
    )

    max_concurrent_fetches: Optional[int] = None
    fetch_timeout_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
