"""
ar container writer and reader for click packages.

A click package is a common-format ar archive: the global ``!<arch>\\n``
header followed by members, each a 60-byte ASCII header and the raw content,
padded to an even offset with ``\\n``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ...core.exceptions import ArchiveError
from ...core.logging import get_logger
from ...models.archive import ArchiveMember, ContainerEntry
from ...storage.staging import CLICK_BINARY, CONTROL_TARBALL, DATA_TARBALL, DEBIAN_BINARY

logger = get_logger(__name__)

AR_MAGIC = b"!<arch>\n"
AR_HEADER_SIZE = 60
AR_FMAG = b"`\n"
AR_NAME_MAX = 16
AR_SIZE_DIGITS = 10
MEMBER_MODE = "100644"

CLICK_MEMBER_NAMES = ("debian-binary", "control.tar.gz", "data.tar.gz", "_click-binary")


def encode_header(name: str, size: int) -> bytes:
    """Encode one member header with zeroed mtime and ownership.

    Raises:
        ArchiveError: If the name does not fit the 16-byte ASCII name field
            or the size does not fit the 10-digit size field.
    """
    if len(name) > AR_NAME_MAX or not name.isascii() or " " in name:
        raise ArchiveError(
            message=f"Invalid ar member name: {name!r}",
            operation="encode_header",
        )
    if size < 0 or len(str(size)) > AR_SIZE_DIGITS:
        raise ArchiveError(
            message=f"Size of member {name!r} does not fit an ar header: {size}",
            operation="encode_header",
        )
    header = (
        name.ljust(16)
        + "0".ljust(12)
        + "0".ljust(6)
        + "0".ljust(6)
        + MEMBER_MODE.ljust(8)
        + str(size).ljust(10)
    ).encode("ascii") + AR_FMAG
    return header


def click_members(root: Path) -> list[ArchiveMember]:
    """Members of a click package staged under ``root``, in container order.

    The click version marker goes last, under ``_click-binary``.
    """
    sources = (DEBIAN_BINARY, CONTROL_TARBALL, DATA_TARBALL, CLICK_BINARY)
    return [
        ArchiveMember(source=Path(root) / source, name=name)
        for source, name in zip(sources, CLICK_MEMBER_NAMES)
    ]


def write_container(target: Path, members: Sequence[ArchiveMember]) -> Path:
    """Write an ar archive holding ``members`` in the given order.

    Member contents are copied as-is. A partially written archive is removed
    on failure.

    Args:
        target: Output file, truncated if present.
        members: Source files and their member names.

    Returns:
        The target path.

    Raises:
        ArchiveError: If a source cannot be read or the target written.
    """
    target = Path(target)
    try:
        with target.open("wb") as out:
            out.write(AR_MAGIC)
            for member in members:
                content = member.source.read_bytes()
                out.write(encode_header(member.name, len(content)))
                out.write(content)
                if len(content) % 2:
                    out.write(b"\n")
    except ArchiveError:
        target.unlink(missing_ok=True)
        raise
    except OSError as e:
        target.unlink(missing_ok=True)
        raise ArchiveError(
            message=f"Cannot write container: {e.strerror or e}",
            operation="write_container",
            artifact_path=str(target),
            cause=e,
        )

    logger.debug("Container written", target=str(target), members=[m.name for m in members])
    return target


def parse_container(data: bytes) -> list[ContainerEntry]:
    """Parse ar archive bytes into entries, in stored order.

    Raises:
        ArchiveError: If the data is not a well-formed ar archive.
    """
    if not data.startswith(AR_MAGIC):
        raise ArchiveError(message="Not an ar archive", operation="parse_container")

    entries: list[ContainerEntry] = []
    offset = len(AR_MAGIC)
    while offset < len(data):
        header = data[offset:offset + AR_HEADER_SIZE]
        if len(header) < AR_HEADER_SIZE or header[58:60] != AR_FMAG:
            raise ArchiveError(
                message=f"Corrupt member header at offset {offset}",
                operation="parse_container",
            )
        try:
            fields = header[:58].decode("ascii")
            name = fields[0:16].rstrip(" ").rstrip("/")
            mtime = int(fields[16:28].strip() or 0)
            uid = int(fields[28:34].strip() or 0)
            gid = int(fields[34:40].strip() or 0)
            mode = int(fields[40:48].strip() or "0", 8)
            size = int(fields[48:58].strip())
        except (UnicodeDecodeError, ValueError) as e:
            raise ArchiveError(
                message=f"Unreadable member header at offset {offset}",
                operation="parse_container",
                cause=e,
            )

        start = offset + AR_HEADER_SIZE
        content = data[start:start + size]
        if len(content) != size:
            raise ArchiveError(
                message=f"Truncated member {name!r}",
                operation="parse_container",
            )
        entries.append(ContainerEntry(name=name, data=content, mtime=mtime, uid=uid, gid=gid, mode=mode))
        offset = start + size + (size % 2)

    return entries


def read_container(path: Path) -> list[ContainerEntry]:
    """Read an ar archive from disk. See :func:`parse_container`."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ArchiveError(
            message=f"Cannot read container: {e.strerror or e}",
            operation="read_container",
            artifact_path=str(path),
            cause=e,
        )
    return parse_container(data)
