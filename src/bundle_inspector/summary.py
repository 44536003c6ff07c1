"""Plain-text rendering of inspection reports for build logs."""

from __future__ import annotations

from .config import Settings
from .models import DirectoryGroup, RunReport, UnitReport


BANNER = "========================================"
TITLE = "  Function Bundle Analysis (post-build)"
RULE = "-" * 50

KB = 1024
MB = 1024 * 1024


def format_size(num: int) -> str:
    """Human-scaled size: ``512 B``, ``2.0 KB``, ``5.0 MB``."""
    if num >= MB:
        return f"{num / MB:.1f} MB"
    if num >= KB:
        return f"{num / KB:.1f} KB"
    return f"{num} B"


def _group_line(group: DirectoryGroup) -> str:
    return f"    {group.name}: {group.file_count} files, {format_size(group.total_size)}"


def render_unit(report: UnitReport, settings: Settings) -> str:
    """Render one self-contained report block."""
    lines = [f"Function: {report.unit.name}", RULE]

    if report.descriptor is not None:
        lines.append(f"  Handler: {report.descriptor.handler}")
        lines.append(f"  Runtime: {report.descriptor.runtime}")
    else:
        lines.append("  Descriptor: none found")
    if report.descriptor_error is not None:
        lines.append(f"  ⚠ Descriptor unreadable: {report.descriptor_error}")
    for warning in report.handler_warnings:
        lines.append(f"  ⚠ {warning}")

    lines.append(f"  Total files: {report.file_count}")
    lines.append(f"  Total size: {format_size(report.total_size)}")
    for error in report.inventory_errors:
        lines.append(f"  ⚠ Inventory is partial: could not read {error.path} ({error.reason})")

    lines.append("")
    lines.append("  Top-level directories:")
    if not report.groups:
        lines.append("    (empty)")
    lines.extend(_group_line(g) for g in report.groups)

    lines.append("")
    flagged = report.suspicious_groups
    if flagged:
        lines.append("  ⚠ SYSTEM DIRECTORIES DETECTED IN BUNDLE:")
        for group in flagged:
            lines.append(f"{_group_line(group)} ({group.advisory})")
        lines.append("")
        lines.append(f"  {settings.advisory}")
        if settings.reference_url:
            lines.append(f"  See: {settings.reference_url}")
    else:
        lines.append("  ✓ No system directories detected in bundle.")

    return "\n".join(lines) + "\n"


def render_run(run: RunReport, settings: Settings) -> str:
    """Render the full run: banner, locate warnings, one block per unit, banner."""
    lines = ["", BANNER, TITLE, BANNER, ""]

    if not run.root_exists:
        lines.append(f"Nothing to analyze: no output directory at {run.root}.")
    else:
        for error in run.locate_errors:
            lines.append(f"⚠ Could not search {error.path} ({error.reason})")
        if not run.units:
            lines.append(
                f"Nothing to analyze: no *{settings.unit_suffix} directories found in {run.root}."
            )

    for unit in run.units:
        lines.append("")
        lines.append(render_unit(unit, settings))

    lines.extend(["", BANNER, ""])
    return "\n".join(lines)
