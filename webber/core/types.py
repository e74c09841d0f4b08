"""
Result types for click builds.

A build is a fixed sequence of stages; each stage reports a ``StageResult``
and the whole run is summarized by a ``BuildResult``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


ArtifactPath = Path
Hash = str  # hex SHA-256


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StageStatus(str, Enum):
    """Lifecycle of a single build stage."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Category of a fatal build failure."""

    FILESYSTEM = "filesystem"
    NETWORK = "network"
    ARCHIVE = "archive"


class StageResult(BaseModel):
    """What one stage of a click build did, and how long it took."""

    stage_name: str = Field(description="Stage identifier, e.g. 'control_tarball'")
    status: StageStatus = Field(default=StageStatus.RUNNING)
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None
    duration_seconds: float = 0.0
    output_hash: Hash = Field(default="", description="SHA-256 over the files the stage wrote")
    artifacts: list[ArtifactPath] = Field(default_factory=list, description="Files written by the stage")
    error_message: str | None = None

    def _finish(self, status: StageStatus) -> None:
        self.status = status
        self.completed_at = utc_now()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    def mark_completed(self, output_hash: Hash = "", artifacts: list[ArtifactPath] | None = None) -> None:
        self.output_hash = output_hash
        self.artifacts = artifacts or []
        self._finish(StageStatus.COMPLETED)

    def mark_failed(self, error: str) -> None:
        self.error_message = error
        self._finish(StageStatus.FAILED)


class BuildResult(BaseModel):
    """Outcome of one click build.

    On success ``package_path`` points at the finished ``shortcut.click``.
    On failure ``error_kind`` and ``failed_stage`` say what went wrong and
    where; the staging directory is left in whatever state the failed stage
    produced.
    """

    run_id: str
    success: bool
    appname: str = ""
    staging_root: Path | None = None
    package_path: Path | None = None
    icon_filename: str | None = None
    stages: list[StageResult] = Field(default_factory=list)

    error: str | None = None
    error_kind: ErrorKind | None = None
    failed_stage: str | None = None

    started_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None

    def get_stage(self, name: str) -> StageResult | None:
        """Return the result for ``name``, or None if the stage never ran."""
        return next((stage for stage in self.stages if stage.stage_name == name), None)
