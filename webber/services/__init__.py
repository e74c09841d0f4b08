"""Services package for Webber."""

from .archive import build_tarball, click_members, read_container, write_container
from .icon import IconService, resolve_icon_source
from .metadata import derive_appname, derive_identity, resolve_host

__all__ = [
    "IconService",
    "resolve_icon_source",
    "derive_appname",
    "derive_identity",
    "resolve_host",
    "build_tarball",
    "click_members",
    "read_container",
    "write_container",
]
