"""Tarball and ar container handling for click packages."""

from .container import (
    CLICK_MEMBER_NAMES,
    click_members,
    parse_container,
    read_container,
    write_container,
)
from .tarball import build_tarball, write_tarball

__all__ = [
    "CLICK_MEMBER_NAMES",
    "click_members",
    "parse_container",
    "read_container",
    "write_container",
    "build_tarball",
    "write_tarball",
]
