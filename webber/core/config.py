"""
Configuration management for Webber.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for the click build pipeline.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

APPLICATION_ID = "webber.timsueberkrueb"


def default_staging_root() -> Path:
    """Resolve the per-user cache directory used for click builds."""
    cache_home = os.environ.get("XDG_CACHE_HOME", "")
    base = Path(cache_home) if cache_home else Path("~/.cache").expanduser()
    return base / APPLICATION_ID / "click-build"


class StagingConfig(BaseModel):
    """Staging area configuration."""

    root: Path = Field(
        default_factory=default_staging_root,
        description="Default staging root when a build does not name one",
    )


class NetworkConfig(BaseModel):
    """HTTP configuration for the icon fetch."""

    icon_timeout_seconds: float | None = Field(
        default=None, gt=0, description="Icon download timeout, None waits indefinitely"
    )
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    user_agent: str = Field(default="webber-click-builder/1.0", description="User-Agent header")


class Config(BaseModel):
    """Root configuration for Webber."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    staging: StagingConfig = Field(default_factory=StagingConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        staging_root = os.environ.get("WEBBER_STAGING_ROOT")
        timeout = os.environ.get("WEBBER_ICON_TIMEOUT")
        return cls(
            log_level=os.environ.get("WEBBER_LOG_LEVEL", "INFO"),  # type: ignore
            staging=StagingConfig(root=Path(staging_root)) if staging_root else StagingConfig(),
            network=NetworkConfig(
                icon_timeout_seconds=float(timeout) if timeout else None,
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
