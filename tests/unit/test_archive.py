"""Unit tests for tarball and container writing."""

import io
import os
import tarfile

import pytest

from webber.core.exceptions import ArchiveError
from webber.models.archive import ArchiveMember
from webber.services.archive import (
    CLICK_MEMBER_NAMES,
    build_tarball,
    click_members,
    parse_container,
    read_container,
    write_container,
    write_tarball,
)
from webber.services.archive.container import AR_MAGIC, encode_header


@pytest.fixture
def subtree(temp_dir):
    """A small directory tree named ``control``."""
    root = temp_dir / "control"
    (root / "sub").mkdir(parents=True)
    (root / "manifest").write_text("{}\n")
    (root / "control").write_text("Package: x\n")
    (root / "sub" / "nested.txt").write_text("nested")
    return root


def _open(data: bytes) -> tarfile.TarFile:
    return tarfile.open(fileobj=io.BytesIO(data), mode="r:gz")


class TestBuildTarball:
    """Tests for the root-relative tarball builder."""

    def test_entries_are_rooted_at_dot(self, subtree):
        with _open(build_tarball(subtree)) as tar:
            names = tar.getnames()

        assert names == [".", "./control", "./manifest", "./sub", "./sub/nested.txt"]
        assert not any(name.startswith("control/") for name in names)

    def test_file_contents_preserved(self, subtree):
        with _open(build_tarball(subtree)) as tar:
            assert tar.extractfile("./manifest").read() == b"{}\n"
            assert tar.extractfile("./sub/nested.txt").read() == b"nested"

    def test_metadata_is_normalized(self, subtree):
        with _open(build_tarball(subtree)) as tar:
            for member in tar.getmembers():
                assert member.mtime == 0
                assert member.uid == 0 and member.gid == 0
                assert member.uname == "" and member.gname == ""
                assert member.mode == (0o755 if member.isdir() else 0o644)

    def test_reproducible(self, subtree):
        first = build_tarball(subtree)
        os.utime(subtree / "manifest", (1_000_000, 1_000_000))
        second = build_tarball(subtree)

        assert first == second
        assert first[4:8] == b"\x00\x00\x00\x00"  # gzip mtime

    def test_empty_directory(self, temp_dir):
        with _open(build_tarball(temp_dir)) as tar:
            assert tar.getnames() == ["."]

    def test_missing_directory(self, temp_dir):
        with pytest.raises(ArchiveError) as exc_info:
            build_tarball(temp_dir / "missing")

        assert exc_info.value.service_name == "archive"

    def test_write_tarball(self, subtree, temp_dir):
        target = temp_dir / "control.tar.gz"
        data = write_tarball(subtree, target)

        assert target.read_bytes() == data

    def test_write_tarball_unwritable_target(self, subtree, temp_dir):
        with pytest.raises(ArchiveError) as exc_info:
            write_tarball(subtree, temp_dir / "missing" / "control.tar.gz")

        assert exc_info.value.operation == "write_tarball"


class TestContainer:
    """Tests for the ar container."""

    def _members(self, temp_dir, contents):
        members = []
        for index, (name, data) in enumerate(contents):
            source = temp_dir / f"member{index}"
            source.write_bytes(data)
            members.append(ArchiveMember(source=source, name=name))
        return members

    def test_header_layout(self):
        header = encode_header("debian-binary", 4)

        assert len(header) == 60
        assert header == (
            b"debian-binary".ljust(16)
            + b"0".ljust(12)
            + b"0".ljust(6)
            + b"0".ljust(6)
            + b"100644".ljust(8)
            + b"4".ljust(10)
            + b"`\n"
        )

    def test_largest_size_fits_header(self):
        assert len(encode_header("big", 10**10 - 1)) == 60

    def test_oversized_member_rejected(self):
        with pytest.raises(ArchiveError) as exc_info:
            encode_header("big", 10**10)

        assert exc_info.value.operation == "encode_header"

    def test_round_trip_preserves_order_and_content(self, temp_dir):
        contents = [("b-first", b"2.0\n"), ("a-second", b"odd"), ("c-third", b"")]
        target = write_container(temp_dir / "out.ar", self._members(temp_dir, contents))

        entries = read_container(target)

        assert [(e.name, e.data) for e in entries] == contents
        assert all(e.mode == 0o100644 and e.mtime == 0 for e in entries)

    def test_odd_member_is_padded(self, temp_dir):
        target = write_container(temp_dir / "out.ar", self._members(temp_dir, [("odd", b"abc")]))
        raw = target.read_bytes()

        assert raw.startswith(AR_MAGIC)
        assert len(raw) == len(AR_MAGIC) + 60 + 3 + 1
        assert raw.endswith(b"abc\n")

    def test_overwrites_existing_target(self, temp_dir):
        target = temp_dir / "out.ar"
        target.write_bytes(b"stale" * 100)

        write_container(target, self._members(temp_dir, [("x", b"1")]))

        assert [e.name for e in read_container(target)] == ["x"]

    def test_long_name_rejected_and_target_removed(self, temp_dir):
        target = temp_dir / "out.ar"
        members = self._members(temp_dir, [("a-name-longer-than-16", b"x")])

        with pytest.raises(ArchiveError):
            write_container(target, members)

        assert not target.exists()

    def test_missing_source_removes_partial_target(self, temp_dir):
        target = temp_dir / "out.ar"
        members = self._members(temp_dir, [("ok", b"data")])
        members.append(ArchiveMember(source=temp_dir / "missing", name="missing"))

        with pytest.raises(ArchiveError) as exc_info:
            write_container(target, members)

        assert exc_info.value.operation == "write_container"
        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert not target.exists()

    def test_click_members_order(self, temp_dir):
        members = click_members(temp_dir)

        assert [m.name for m in members] == list(CLICK_MEMBER_NAMES)
        assert [m.name for m in members] == ["debian-binary", "control.tar.gz", "data.tar.gz", "_click-binary"]
        assert [m.source.name for m in members] == [
            "debian-binary",
            "control.tar.gz",
            "data.tar.gz",
            "click_binary",
        ]

    @pytest.mark.parametrize(
        "data",
        [
            b"not an archive",
            AR_MAGIC + b"short header",
            AR_MAGIC + encode_header("x", 10) + b"abc",
            AR_MAGIC + b"x".ljust(48) + b"notanumber" + b"`\n",
        ],
    )
    def test_parse_rejects_malformed(self, data):
        with pytest.raises(ArchiveError):
            parse_container(data)

    def test_read_missing_file(self, temp_dir):
        with pytest.raises(ArchiveError):
            read_container(temp_dir / "missing.click")
