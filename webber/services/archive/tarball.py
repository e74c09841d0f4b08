"""
Gzip tarball builder for the click control and data sections.

Entries are rooted at ``.``: a staged ``control/manifest`` is stored as
``./manifest`` so installers unpack it without an extra directory level.
"""

from __future__ import annotations

import gzip
import io
import tarfile
from pathlib import Path

from ...core.exceptions import ArchiveError
from ...core.logging import get_logger

logger = get_logger(__name__)

ROOT_ARCNAME = "."


def _normalize(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
    tarinfo.mtime = 0
    tarinfo.uid = tarinfo.gid = 0
    tarinfo.uname = tarinfo.gname = ""
    tarinfo.mode = 0o755 if tarinfo.isdir() else 0o644
    tarinfo.pax_headers = {}
    return tarinfo


def arcname_for(path: Path, root: Path) -> str:
    """Archive name of ``path`` inside a tarball rooted at ``root``."""
    relative = path.relative_to(root).as_posix()
    return ROOT_ARCNAME if relative == "." else f"./{relative}"


def build_tarball(directory: Path) -> bytes:
    """Compress a directory into a reproducible ``.tar.gz``.

    The directory's own name never appears in the archive. Entries are
    written in sorted order with zeroed timestamps and ownership, and the
    gzip header carries no mtime or file name, so identical trees produce
    identical bytes.

    Args:
        directory: Subtree to archive.

    Returns:
        The compressed archive.

    Raises:
        ArchiveError: If the directory is missing or cannot be read.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ArchiveError(
            message=f"Not a directory: {directory}",
            operation="build_tarball",
            artifact_path=str(directory),
        )

    buffer = io.BytesIO()
    try:
        with gzip.GzipFile(filename="", mode="wb", fileobj=buffer, mtime=0) as gz:
            with tarfile.open(fileobj=gz, mode="w", format=tarfile.GNU_FORMAT) as tar:
                tar.add(directory, arcname=ROOT_ARCNAME, recursive=False, filter=_normalize)
                for path in sorted(directory.rglob("*")):
                    tar.add(path, arcname=arcname_for(path, directory), recursive=False, filter=_normalize)
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(
            message=f"Cannot archive {directory.name}: {e}",
            operation="build_tarball",
            artifact_path=str(directory),
            cause=e,
        )
    return buffer.getvalue()


def write_tarball(directory: Path, target: Path) -> bytes:
    """Build a tarball of ``directory`` and write it to ``target``.

    Returns:
        The bytes written.
    """
    data = build_tarball(directory)
    try:
        Path(target).write_bytes(data)
    except OSError as e:
        raise ArchiveError(
            message=f"Cannot write tarball: {e.strerror or e}",
            operation="write_tarball",
            artifact_path=str(target),
            cause=e,
        )
    logger.debug("Tarball written", target=str(target), size_bytes=len(data))
    return data
