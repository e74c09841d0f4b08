"""
Click build pipeline for Webber.

Runs the build stages strictly in order and stops at the first failure:

1. prepare         reset the staging area, write control files and markers
2. icon            download or copy the icon into the data tree
3. desktop_entry   write the desktop entry referencing the staged icon
4. control_tarball compress control/ into control.tar.gz
5. data_tarball    compress data/ into data.tar.gz
6. container       assemble shortcut.click
"""

from __future__ import annotations

import hashlib
import time
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path

import httpx

from ..core.config import Config, get_config
from ..core.exceptions import ArchiveError, IconFetchError, PipelineError, StagingError, WebberError
from ..core.logging import build_context, get_logger, stage_logger
from ..core.types import BuildResult, ErrorKind, StageResult, utc_now
from ..models.package import Identity, PackageRequest
from ..services.archive import click_members, write_container, write_tarball
from ..services.icon import IconService, resolve_icon_source
from ..services.metadata import content
from ..services.metadata.identity import derive_identity
from ..storage.staging import (
    CLICK_BINARY,
    CONTROL_TARBALL,
    DATA_TARBALL,
    DEBIAN_BINARY,
    StagingArea,
)

logger = get_logger(__name__)

StageAction = Callable[[], Awaitable[list[Path]]]


def error_kind_for(error: WebberError) -> ErrorKind | None:
    """Map a service error onto the failure category reported to callers."""
    if isinstance(error, StagingError):
        return ErrorKind.FILESYSTEM
    if isinstance(error, IconFetchError):
        return ErrorKind.NETWORK
    if isinstance(error, ArchiveError):
        return ErrorKind.ARCHIVE
    return None


def _digest(paths: list[Path]) -> str:
    sha256 = hashlib.sha256()
    for path in paths:
        if path.is_file():
            sha256.update(path.read_bytes())
    return sha256.hexdigest()


class ClickPackagePipeline:
    """Builds one click package per call.

    The staging root is exclusively owned by a build while it runs. Builds
    sharing a root must not overlap; give concurrent builds distinct roots.
    """

    def __init__(
        self,
        config: Config | None = None,
        icon_service: IconService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Configuration. Uses global config if not provided.
            icon_service: Icon service override.
            transport: httpx transport for the default icon service.
        """
        self.config = config or get_config()
        self.icon_service = icon_service or IconService(self.config.network, transport=transport)

    async def run(self, request: PackageRequest, staging_root: Path | None = None) -> BuildResult:
        """Build a click package and report the outcome.

        Fatal errors are captured in the returned result instead of raised.

        Args:
            request: Web app description.
            staging_root: Build directory; defaults to ``config.staging.root``.

        Returns:
            BuildResult; on success ``package_path`` is ``<root>/shortcut.click``.
        """
        identity, staging, result = self._begin(request, staging_root)
        try:
            await self._execute(request, identity, staging, result)
        except PipelineError as e:
            result.completed_at = utc_now()
            result.error = str(e.cause or e)
            result.failed_stage = e.stage
            result.error_kind = error_kind_for(e.cause) if isinstance(e.cause, WebberError) else None
        return result

    async def run_or_raise(self, request: PackageRequest, staging_root: Path | None = None) -> BuildResult:
        """Build a click package, raising on failure.

        Raises:
            PipelineError: With the failed stage and the underlying error as cause.
        """
        identity, staging, result = self._begin(request, staging_root)
        await self._execute(request, identity, staging, result)
        return result

    def _begin(
        self, request: PackageRequest, staging_root: Path | None
    ) -> tuple[Identity, StagingArea, BuildResult]:
        identity = derive_identity(request.url)
        staging = StagingArea(staging_root or self.config.staging.root)
        result = BuildResult(
            run_id=uuid.uuid4().hex[:8],
            success=False,
            appname=identity.appname,
            staging_root=staging.root,
        )
        return identity, staging, result

    async def _execute(
        self,
        request: PackageRequest,
        identity: Identity,
        staging: StagingArea,
        result: BuildResult,
    ) -> None:
        with build_context(run_id=result.run_id, appname=identity.appname, staging_root=str(staging.root)):
            logger.info(
                "Starting click build",
                url=request.url,
                host_source=identity.resolution.kind,
            )
            start_time = time.perf_counter()

            await self._run_stage(result, "prepare", lambda: self._prepare(request, identity, staging))
            await self._run_stage(result, "icon", lambda: self._stage_icon(request, staging, result))
            await self._run_stage(result, "desktop_entry", lambda: self._write_desktop(request, staging, result))
            await self._run_stage(
                result,
                "control_tarball",
                lambda: self._tarball(staging.control_dir, staging.path(CONTROL_TARBALL)),
            )
            await self._run_stage(
                result,
                "data_tarball",
                lambda: self._tarball(staging.data_dir, staging.path(DATA_TARBALL)),
            )
            await self._run_stage(result, "container", lambda: self._assemble(staging))

            result.success = True
            result.package_path = staging.package_path
            result.completed_at = utc_now()

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info("Click build completed", package=str(result.package_path), duration_ms=duration_ms)

    async def _run_stage(self, result: BuildResult, name: str, action: StageAction) -> None:
        stage = StageResult(stage_name=name)
        result.stages.append(stage)
        log = stage_logger(name)
        log.debug("Stage started")

        try:
            artifacts = await action()
        except WebberError as e:
            stage.mark_failed(str(e))
            log.error("Stage failed", error=str(e))
            raise PipelineError(
                message=e.message,
                stage=name,
                pipeline_run_id=result.run_id,
                cause=e,
            )

        stage.mark_completed(_digest(artifacts), artifacts)
        log.debug("Stage completed", duration_seconds=stage.duration_seconds)

    async def _prepare(self, request: PackageRequest, identity: Identity, staging: StagingArea) -> list[Path]:
        await staging.reset()
        appname = identity.appname
        return [
            await staging.write_text(CLICK_BINARY, f"{content.CLICK_VERSION}\n"),
            await staging.write_text(DEBIAN_BINARY, f"{content.DEBIAN_BINARY_VERSION}\n"),
            await staging.write_text("control/control", content.control_content(appname)),
            await staging.write_text("control/manifest", content.manifest_content(appname, request.name)),
            await staging.write_text("data/preinst", content.preinst_content()),
            await staging.write_text(f"data/{content.APPARMOR_FILENAME}", content.apparmor_content()),
        ]

    async def _stage_icon(self, request: PackageRequest, staging: StagingArea, result: BuildResult) -> list[Path]:
        source = resolve_icon_source(request.icon_url)
        if source.is_fallback:
            logger.info("Icon URL has no file extension, using bundled icon", icon_url=request.icon_url)
        result.icon_filename = await self.icon_service.stage_icon(source, staging)
        return [staging.data_dir / result.icon_filename]

    async def _write_desktop(self, request: PackageRequest, staging: StagingArea, result: BuildResult) -> list[Path]:
        desktop = content.desktop_content(
            title=request.name,
            url=request.url,
            url_patterns=request.url_patterns,
            icon_filename=result.icon_filename or "",
            theme_color=request.theme_color,
        )
        return [await staging.write_text(f"data/{content.DESKTOP_FILENAME}", desktop)]

    async def _tarball(self, directory: Path, target: Path) -> list[Path]:
        write_tarball(directory, target)
        return [target]

    async def _assemble(self, staging: StagingArea) -> list[Path]:
        return [write_container(staging.package_path, click_members(staging.root))]


async def build_package(
    request: PackageRequest,
    staging_root: Path | None = None,
    config: Config | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BuildResult:
    """Convenience function to build one click package.

    Args:
        request: Web app description.
        staging_root: Build directory; defaults to the configured cache path.
        config: Optional configuration override.
        transport: Optional httpx transport for the icon download.

    Returns:
        BuildResult describing the build.
    """
    pipeline = ClickPackagePipeline(config=config, transport=transport)
    return await pipeline.run(request, staging_root=staging_root)
