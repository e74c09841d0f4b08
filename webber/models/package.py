"""
Package request and derived identity models.

These models describe the web app to be packaged and the values derived from
it before anything touches the filesystem.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PackageRequest(BaseModel):
    """Immutable description of the web app to package."""

    url: str = Field(description="Address of the web site")
    name: str = Field(description="Display title shown to the user")
    theme_color: str = Field(default="", description="Splash color, embedded verbatim")
    icon_url: str = Field(default="", description="Icon location; may not be a resolvable URL")
    url_patterns: str = Field(default="", description="webapp-container URL pattern expression")

    model_config = {"frozen": True}


class HostResolution(BaseModel):
    """Which string the appname was derived from.

    ``kind`` is ``"host"`` when the URL parsed and had a host component,
    ``"raw"`` when the input string itself was used.
    """

    kind: Literal["host", "raw"]
    value: str

    model_config = {"frozen": True}

    @property
    def is_fallback(self) -> bool:
        return self.kind == "raw"


class Identity(BaseModel):
    """Sanitized application identity derived from a URL."""

    appname: str = Field(description="webapp-<sanitized host or url>")
    resolution: HostResolution = Field(description="Source string of the appname")

    model_config = {"frozen": True}

    @property
    def package_name(self) -> str:
        """Click package / hook name for this app."""
        return f"{self.appname}.webber"


class IconSource(BaseModel):
    """Where the package icon comes from.

    ``kind`` is ``"remote"`` when the icon URL names a file with an extension
    and will be downloaded, ``"bundled"`` when the default SVG is used.
    """

    kind: Literal["remote", "bundled"]
    extension: str = Field(description="File extension of the staged icon")
    url: str | None = Field(default=None, description="Download URL for remote icons")

    model_config = {"frozen": True}

    @property
    def filename(self) -> str:
        return f"icon.{self.extension}"

    @property
    def is_fallback(self) -> bool:
        return self.kind == "bundled"
