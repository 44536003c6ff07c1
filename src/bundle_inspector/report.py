"""Per-unit aggregation: grouping, suspicion detection and report assembly."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import replace

from .config import Settings
from .errors import DescriptorError
from .inventory import walk_files
from .models import DeployableUnit, DirectoryGroup, FileEntry, UnitDescriptor, UnitReport
from .parsers.descriptor import parse as parse_descriptor


logger = logging.getLogger(__name__)


def group_files(files: Iterable[FileEntry]) -> list[DirectoryGroup]:
    """Partition files by top-level segment, largest group first, ties by name."""
    counts: dict[str, int] = defaultdict(int)
    sizes: dict[str, int] = defaultdict(int)
    for f in files:
        counts[f.top_level] += 1
        sizes[f.top_level] += f.size

    groups = [
        DirectoryGroup(name=name, file_count=counts[name], total_size=sizes[name])
        for name in counts
    ]
    groups.sort(key=lambda g: (-g.total_size, g.name))
    return groups


def match_pattern(name: str, patterns: Mapping[str, str]) -> str | None:
    """Return the advisory of the first pattern that prefixes ``name``, ignoring case."""
    lowered = name.lower()
    for pattern, advisory in patterns.items():
        if lowered.startswith(pattern.lower()):
            return advisory
    return None


def flag_suspicious(
    groups: Iterable[DirectoryGroup], patterns: Mapping[str, str]
) -> list[DirectoryGroup]:
    """Attach the matching advisory to each group whose name hits a pattern."""
    flagged = []
    for group in groups:
        advisory = match_pattern(group.name, patterns)
        flagged.append(replace(group, advisory=advisory) if advisory is not None else group)
    return flagged


def handler_warnings(handler: str, markers: Mapping[str, str]) -> list[str]:
    """Structural warnings for marker substrings found in the handler path."""
    return [
        f'Handler contains "{marker}": {advisory}'
        for marker, advisory in markers.items()
        if marker in handler
    ]


def build_unit_report(unit: DeployableUnit, settings: Settings) -> UnitReport:
    """Read, inventory and classify one unit.

    Descriptor and filesystem problems are captured in the returned report
    rather than raised.
    """
    descriptor: UnitDescriptor | None = None
    descriptor_error: str | None = None
    try:
        descriptor = parse_descriptor(unit.path / settings.descriptor_name)
    except DescriptorError as exc:
        logger.warning("Unit %s: %s", unit.name, exc)
        descriptor_error = str(exc)

    warnings: list[str] = []
    if descriptor is not None:
        warnings = handler_warnings(descriptor.handler, settings.handler_markers)

    inventory = walk_files(unit.path)
    groups = flag_suspicious(group_files(inventory.files), settings.suspicious_patterns)
    logger.debug(
        "Unit %s: %d files, %d bytes, %d group(s)",
        unit.name,
        inventory.file_count,
        inventory.total_size,
        len(groups),
    )

    return UnitReport(
        unit=unit,
        descriptor=descriptor,
        descriptor_error=descriptor_error,
        file_count=inventory.file_count,
        total_size=inventory.total_size,
        groups=tuple(groups),
        handler_warnings=tuple(warnings),
        inventory_errors=tuple(inventory.errors),
    )
