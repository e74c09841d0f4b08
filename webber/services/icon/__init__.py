"""Icon acquisition service."""

from .service import BUNDLED_ICON, IconService, bundled_icon_bytes, resolve_icon_source

__all__ = ["BUNDLED_ICON", "IconService", "bundled_icon_bytes", "resolve_icon_source"]
