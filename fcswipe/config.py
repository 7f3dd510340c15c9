"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


DEFAULT_FALLBACK_AVATAR_URL = (
    "https://images.unsplash.com/photo-1535713875002-d1d0cf377fde"
    "?w=150&h=150&fit=crop&crop=face"
)


class SwipeConfig(BaseSettings):
    """Configuration for the fcswipe profile deck."""

    # Neynar API
    neynar_api_key: str = "NEYNAR_API_DOCS"
    neynar_base_url: str = "https://api.neynar.com"
    request_timeout_s: float | None = None

    # Feed
    target_fid: int = 3
    batch_limit: int = Field(default=25, ge=1, le=100)

    # Avatars
    fallback_avatar_url: str = DEFAULT_FALLBACK_AVATAR_URL
    probe_avatars: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "FCSWIPE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
