"""Unit descriptor model."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any


@dataclass(frozen=True)
class UnitDescriptor:
    """Entry point and runtime declared by a unit's descriptor file."""

    handler: str
    runtime: str

    def to_dict(self) -> dict[str, str]:
        return {"handler": self.handler, "runtime": self.runtime}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UnitDescriptor:
        # Unknown keys (launcherType, shouldAddHelpers, ...) are ignored.
        return cls(handler=str(data["handler"]), runtime=str(data["runtime"]))
