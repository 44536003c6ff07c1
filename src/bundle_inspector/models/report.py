"""Per-unit and per-run report models."""

from __future__ import annotations

from dataclasses import dataclass

from .descriptor import UnitDescriptor
from .unit import DeployableUnit, DirectoryGroup


@dataclass(frozen=True)
class InventoryError:
    """A directory that could not be listed, relative to where the walk started."""

    path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True)
class UnitReport:
    """Everything known about one deployable unit, ready to be rendered."""

    unit: DeployableUnit
    descriptor: UnitDescriptor | None
    descriptor_error: str | None
    file_count: int
    total_size: int
    groups: tuple[DirectoryGroup, ...]
    handler_warnings: tuple[str, ...] = ()
    inventory_errors: tuple[InventoryError, ...] = ()

    def __post_init__(self) -> None:
        if sum(g.file_count for g in self.groups) != self.file_count:
            raise ValueError("Group file counts must add up to the unit file count")
        if sum(g.total_size for g in self.groups) != self.total_size:
            raise ValueError("Group sizes must add up to the unit total size")

    @property
    def suspicious_groups(self) -> tuple[DirectoryGroup, ...]:
        return tuple(g for g in self.groups if g.suspicious)

    @property
    def is_partial(self) -> bool:
        return bool(self.inventory_errors)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.unit.name,
            "descriptor": self.descriptor.to_dict() if self.descriptor else None,
            "totals": {"files": self.file_count, "size": self.total_size},
            "groups": [g.to_dict() for g in self.groups],
            "hasSuspicious": bool(self.suspicious_groups),
            "partial": self.is_partial,
        }
        if self.descriptor_error is not None:
            data["descriptorError"] = self.descriptor_error
        if self.handler_warnings:
            data["handlerWarnings"] = list(self.handler_warnings)
        if self.inventory_errors:
            data["inventoryErrors"] = [e.to_dict() for e in self.inventory_errors]
        return data


@dataclass(frozen=True)
class RunReport:
    """Result of analysing one output root."""

    root: str
    root_exists: bool
    units: tuple[UnitReport, ...]
    locate_errors: tuple[InventoryError, ...] = ()

    @property
    def has_suspicious(self) -> bool:
        return any(u.suspicious_groups for u in self.units)

    def to_dict(self) -> dict[str, object]:
        return {
            "version": "1",
            "root": self.root,
            "rootExists": self.root_exists,
            "hasSuspicious": self.has_suspicious,
            "units": [u.to_dict() for u in self.units],
            "locateErrors": [e.to_dict() for e in self.locate_errors],
            "totals": {
                "units": len(self.units),
                "files": sum(u.file_count for u in self.units),
                "size": sum(u.total_size for u in self.units),
            },
        }
