"""
Click build staging area.

A directory tree owned by exactly one build. It is wiped and recreated at the
start of every build and left in place afterwards for inspection.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import aiofiles
import aiofiles.os

from ..core.exceptions import StagingError
from ..core.logging import get_logger

logger = get_logger(__name__)

CONTROL_DIR = "control"
DATA_DIR = "data"
CLICK_BINARY = "click_binary"
DEBIAN_BINARY = "debian-binary"
CONTROL_TARBALL = "control.tar.gz"
DATA_TARBALL = "data.tar.gz"
PACKAGE_FILENAME = "shortcut.click"


class StagingArea:
    """Filesystem layout of a single click build."""

    def __init__(self, root: Path) -> None:
        """Initialize the staging area.

        Args:
            root: Directory owned by this build. Everything below it is
                deleted by :meth:`reset`.
        """
        self.root = Path(root).expanduser().resolve()

    @property
    def control_dir(self) -> Path:
        return self.root / CONTROL_DIR

    @property
    def data_dir(self) -> Path:
        return self.root / DATA_DIR

    @property
    def package_path(self) -> Path:
        return self.root / PACKAGE_FILENAME

    def path(self, relpath: str | Path) -> Path:
        """Get the full path for a file inside the staging area.

        Args:
            relpath: Path relative to the staging root.

        Returns:
            The absolute path below the staging root.

        Raises:
            StagingError: If the path escapes the staging root.
        """
        full_path = (self.root / relpath).resolve()
        try:
            full_path.relative_to(self.root)
        except ValueError:
            raise StagingError(
                message=f"Path escapes staging root: {relpath}",
                operation="resolve",
                path=str(relpath),
            )
        return full_path

    async def reset(self) -> None:
        """Delete the staging root if present and recreate the empty layout.

        Raises:
            StagingError: If the tree cannot be removed or created.
        """
        try:
            if self.root.exists():
                shutil.rmtree(self.root)
            await aiofiles.os.makedirs(self.root, exist_ok=True)
            await aiofiles.os.mkdir(self.control_dir)
            await aiofiles.os.mkdir(self.data_dir)
        except OSError as e:
            raise StagingError(
                message=f"Cannot reset staging area: {e.strerror or e}",
                operation="reset",
                path=str(self.root),
                cause=e,
            )
        logger.debug("Staging area reset", root=str(self.root))

    async def write_bytes(self, relpath: str | Path, data: bytes) -> Path:
        """Create or truncate a file and write raw bytes.

        Args:
            relpath: Path relative to the staging root.
            data: Content to write.

        Returns:
            The absolute path written.

        Raises:
            StagingError: On any filesystem error.
        """
        full_path = self.path(relpath)
        try:
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise StagingError(
                message=f"Cannot write staged file: {e.strerror or e}",
                operation="write",
                path=str(full_path),
                cause=e,
            )
        return full_path

    async def write_text(self, relpath: str | Path, content: str) -> Path:
        """Create or truncate a file and write UTF-8 text."""
        return await self.write_bytes(relpath, content.encode("utf-8"))

    def list_files(self, subdir: str | Path = "") -> list[str]:
        """List staged files below a subdirectory, relative to it, sorted."""
        base = self.path(subdir) if subdir else self.root
        if not base.exists():
            return []
        return sorted(p.relative_to(base).as_posix() for p in base.rglob("*") if p.is_file())
