"""Data models for build-output inspection."""

from __future__ import annotations

from .descriptor import UnitDescriptor
from .report import InventoryError, RunReport, UnitReport
from .unit import DeployableUnit, DirectoryGroup, FileEntry

__all__ = [
    "DeployableUnit",
    "DirectoryGroup",
    "FileEntry",
    "InventoryError",
    "RunReport",
    "UnitDescriptor",
    "UnitReport",
]
