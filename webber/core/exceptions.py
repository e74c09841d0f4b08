"""
Custom exception hierarchy for Webber.

All exceptions inherit from WebberError to enable consistent error handling
across the build pipeline. Each exception type includes context for debugging
and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WebberError(Exception):
    """Base exception for all Webber errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ServiceError(WebberError):
    """Raised when a service operation fails."""

    service_name: str = ""
    operation: str = ""

    def __str__(self) -> str:
        return f"[{self.service_name}.{self.operation}] {super().__str__()}"


@dataclass
class StagingError(ServiceError):
    """Raised when the staging area cannot be created, cleared or written."""

    path: str = ""

    def __post_init__(self) -> None:
        self.service_name = "staging"


@dataclass
class IconFetchError(ServiceError):
    """Raised when a remote icon cannot be downloaded."""

    url: str = ""
    status_code: int | None = None

    def __post_init__(self) -> None:
        self.service_name = "icon"

    def __str__(self) -> str:
        base = super().__str__()
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{base} [url: {self.url}{status}]"


@dataclass
class ArchiveError(ServiceError):
    """Raised when tarball or container writing fails."""

    artifact_path: str = ""

    def __post_init__(self) -> None:
        self.service_name = "archive"


@dataclass
class PipelineError(WebberError):
    """Raised when pipeline orchestration fails."""

    stage: str = ""
    pipeline_run_id: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"Pipeline error at stage '{self.stage}' (run: {self.pipeline_run_id}): {base}"
