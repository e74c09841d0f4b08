"""Appname derivation and click metadata generation."""

from .content import (
    apparmor_content,
    control_content,
    desktop_content,
    manifest_content,
    package_name,
    preinst_content,
)
from .identity import default_url_patterns, derive_appname, derive_identity, resolve_host, sanitize

__all__ = [
    "apparmor_content",
    "control_content",
    "desktop_content",
    "manifest_content",
    "package_name",
    "preinst_content",
    "default_url_patterns",
    "derive_appname",
    "derive_identity",
    "resolve_host",
    "sanitize",
]
