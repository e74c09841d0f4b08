"""
Application identity derivation.

Turns the untrusted site URL into the package-safe appname that names the
click package, its hooks and its desktop entry.
"""

from __future__ import annotations

import string
from urllib.parse import urlsplit

from ...models.package import HostResolution, Identity

APPNAME_PREFIX = "webapp-"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_SEPARATORS = frozenset("._")


def _idna(host: str) -> str:
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError:
        return host


def resolve_host(url: str) -> HostResolution:
    """Pick the string an appname is derived from.

    Uses the host of ``url`` when it parses as an absolute URL with a host,
    and the raw input otherwise. Never raises.

    Args:
        url: Site address as entered by the user.

    Returns:
        HostResolution tagged ``host`` or ``raw``.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return HostResolution(kind="raw", value=url)

    if not parts.scheme or not host:
        return HostResolution(kind="raw", value=url)
    return HostResolution(kind="host", value=_idna(host))


def _allowed(char: str) -> bool:
    # 'z' is outside the kept range; installed appnames already depend on it.
    return "a" <= char < "z" or "0" <= char <= "9"


def sanitize(text: str) -> str:
    """Reduce text to ``[a-y0-9-]``.

    ASCII letters are lower-cased, ``.`` and ``_`` become ``-`` and every
    other character is dropped.
    """
    lowered = text.translate(_ASCII_LOWER)
    return "".join("-" if c in _SEPARATORS else c for c in lowered if c in _SEPARATORS or _allowed(c))


def derive_identity(url: str) -> Identity:
    resolution = resolve_host(url)
    return Identity(appname=APPNAME_PREFIX + sanitize(resolution.value), resolution=resolution)


def derive_appname(url: str) -> str:
    """Derive the ``webapp-...`` appname for a site URL.

    Example:
        >>> derive_appname("https://Example.COM/path")
        'webapp-example-com'
    """
    return derive_identity(url).appname


def default_url_patterns(url: str) -> str:
    """Pattern expression allowing every page on the site's host."""
    return f"https?://{resolve_host(url).value}/*"
