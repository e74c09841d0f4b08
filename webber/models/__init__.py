"""
Webber Data Models.

Pydantic models describing the build input, the values derived from it and the
archive members produced for the click container.
"""

from .archive import ArchiveMember, ContainerEntry
from .package import HostResolution, IconSource, Identity, PackageRequest

__all__ = [
    # Request models
    "PackageRequest",
    "HostResolution",
    "Identity",
    "IconSource",
    # Archive models
    "ArchiveMember",
    "ContainerEntry",
]
