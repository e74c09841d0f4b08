"""Core infrastructure components for Webber."""

from .config import Config, get_config
from .exceptions import (
    ArchiveError,
    IconFetchError,
    PipelineError,
    ServiceError,
    StagingError,
    WebberError,
)
from .logging import get_logger, setup_logging
from .types import ArtifactPath, BuildResult, ErrorKind, Hash, StageResult, StageStatus

__all__ = [
    "Config",
    "get_config",
    "WebberError",
    "ServiceError",
    "StagingError",
    "IconFetchError",
    "ArchiveError",
    "PipelineError",
    "get_logger",
    "setup_logging",
    "ArtifactPath",
    "BuildResult",
    "ErrorKind",
    "Hash",
    "StageResult",
    "StageStatus",
]
