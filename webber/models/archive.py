"""
Archive member models used when assembling and inspecting click containers.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ArchiveMember(BaseModel):
    """A staged file and the name it is stored under in the container."""

    source: Path = Field(description="File whose bytes become the member content")
    name: str = Field(description="Member name inside the ar container")

    model_config = {"frozen": True}


class ContainerEntry(BaseModel):
    """A member read back from an ar container."""

    name: str
    data: bytes = Field(repr=False)
    mtime: int = 0
    uid: int = 0
    gid: int = 0
    mode: int = 0o100644

    @property
    def size(self) -> int:
        return len(self.data)
