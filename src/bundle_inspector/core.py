"""Core inspection entrypoint.

This module does no printing so the same run can be rendered as text for build
logs or as JSON for tooling.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Settings
from .discovery import locate
from .inventory import describe_error, display_path
from .models import InventoryError, RunReport
from .report import build_unit_report


logger = logging.getLogger(__name__)


def analyze_output(root: Path, settings: Settings | None = None) -> RunReport:
    """Locate every unit under root and build its report.

    Params:
        root: the build output directory holding ``*.func`` units
        settings: inspection settings; defaults when None

    A missing root is not an error: the returned report has ``root_exists``
    False and no units.
    """
    settings = settings or Settings()
    root = Path(root)

    if not root.is_dir():
        logger.info("No output directory at %s, skipping analysis", root)
        return RunReport(root=display_path(root), root_exists=False, units=())

    locate_errors: list[InventoryError] = []

    def on_error(path: Path, exc: OSError) -> None:
        logger.warning("Cannot list %s: %s", path, exc)
        rel = display_path(path.relative_to(root).as_posix())
        locate_errors.append(InventoryError(path=rel, reason=describe_error(exc)))

    units = locate(root, unit_suffix=settings.unit_suffix, on_error=on_error)
    reports = tuple(build_unit_report(unit, settings) for unit in units)

    return RunReport(
        root=display_path(root),
        root_exists=True,
        units=reports,
        locate_errors=tuple(locate_errors),
    )
