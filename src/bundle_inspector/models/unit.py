"""Deployable unit, file entry and directory group models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


ROOT_GROUP = "(root)"


@dataclass(frozen=True)
class DeployableUnit:
    """A ``*.func`` directory found under the output root."""

    path: Path
    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Unit name must be non-empty")


@dataclass(frozen=True)
class FileEntry:
    """One file inside a unit, addressed relative to the unit root."""

    path: str
    size: int

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("File path must be non-empty")
        if self.size < 0:
            raise ValueError("File size must be non-negative")

    @property
    def top_level(self) -> str:
        """First path segment, or the root sentinel for files at the unit root."""
        head, sep, _ = self.path.partition("/")
        return head if sep else ROOT_GROUP


@dataclass(frozen=True)
class DirectoryGroup:
    """Files sharing the same top-level segment, with their combined size."""

    name: str
    file_count: int
    total_size: int
    advisory: str | None = None

    @property
    def suspicious(self) -> bool:
        return self.advisory is not None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "files": self.file_count,
            "size": self.total_size,
            "suspicious": self.suspicious,
        }
        if self.advisory is not None:
            data["advisory"] = self.advisory
        return data
