from enum import StrEnum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DetectionMode(StrEnum):
    """How the lifecycle hook is searched for."""

    STRUCTURAL = "structural"
    TEXT = "text"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Every variable is prefixed with ``PLUGINCHECK_``, e.g.
    ``PLUGINCHECK_DETECTION_MODE=text`` or ``PLUGINCHECK_FETCH_RETRIES=5``.

    Network settings are handed to the source tree at construction time;
    nothing in the engine reads them from ambient state.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLUGINCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Detection
    hook_name: str = "onload"
    detection_mode: DetectionMode = DetectionMode.STRUCTURAL
    whole_project: bool = True
    fallback_entry_file: str = "index.js"

    # Project graph limits
    max_project_files: int = 200
    max_file_size: int = 1024 * 1024

    # Raw file fetching
    raw_base_url: str = "https://raw.githubusercontent.com"
    user_agent: str = "bazaar-plugin-analyzer"
    fetch_timeout_seconds: float = 30.0
    fetch_retries: int = 3
    fetch_retry_backoff_seconds: float = 1.0
    max_fetches: int = 300

    # Logging: console renderer when true, JSON lines otherwise.
    debug: bool = False

    @field_validator("raw_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("fetch_retries", "max_fetches", "max_project_files")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


def get_settings() -> Settings:
    return Settings()
