"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from minuteflow.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class APIConfig(BaseSettings):
    """Staging/job backend endpoints."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = "http://localhost:8888"
    # upload_chunk and check_status share one synchronous endpoint
    staging_path: str = "/.netlify/functions/gemini"
    start_path: str = "/.netlify/functions/gemini-background"
    timeout_s: float = Field(default=60.0, gt=0)
    access_token: str = ""

    @model_validator(mode="after")
    def _validate_paths(self) -> "APIConfig":
        for name in ("staging_path", "start_path"):
            value = str(getattr(self, name) or "").strip()
            if not value.startswith("/"):
                raise ConfigurationError(f"API_{name.upper()} must start with '/' (got {value!r})")
        return self


class PollingConfig(BaseSettings):
    """Job status polling policy."""

    model_config = SettingsConfigDict(
        env_prefix="POLL_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    interval_s: float = Field(default=3.0, gt=0)
    # 1200 * 3s = 60 minutes of client patience
    max_attempts: int = Field(default=1200, ge=1)

    @property
    def max_wait_s(self) -> float:
        return float(self.interval_s) * int(self.max_attempts)


class AudioConfig(BaseSettings):
    """Audio preparation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ffmpeg_bin: str = "ffmpeg"
    ffmpeg_timeout_s: float | None = None
    segment_seconds: float = Field(default=1800.0, gt=0)
    target_sample_rate: int = Field(default=16000, ge=1000)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    library_level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    log_dir: str = "./logs"
    default_model: str = "gemini-3-flash-preview"
    default_media_type: str = "audio/webm"

    api: APIConfig = APIConfig()
    poll: PollingConfig = PollingConfig()
    audio: AudioConfig = AudioConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        self.log_dir = _resolve_repo_path(self.log_dir)
        if not str(self.default_model or "").strip():
            raise ConfigurationError("DEFAULT_MODEL must not be empty")
        return self

    def endpoint(self, name: str) -> str:
        """Return the absolute URL for `staging` or `start`."""
        base = str(self.api.base_url or "").rstrip("/")
        match name:
            case "staging":
                return f"{base}{self.api.staging_path}"
            case "start":
                return f"{base}{self.api.start_path}"
            case _:
                raise ConfigurationError(f"Unknown endpoint: {name!r} (expected: staging/start)")

    def summary(self) -> dict[str, Any]:
        """Non-secret settings snapshot for logs."""
        return {
            "api_base_url": self.api.base_url,
            "default_model": self.default_model,
            "poll_interval_s": self.poll.interval_s,
            "poll_max_attempts": self.poll.max_attempts,
            "segment_seconds": self.audio.segment_seconds,
            "target_sample_rate": self.audio.target_sample_rate,
        }
