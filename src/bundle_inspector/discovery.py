"""Deployable unit discovery."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Callable
from pathlib import Path

from .config import DEFAULT_UNIT_SUFFIX
from .inventory import display_path
from .models import DeployableUnit


logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, OSError], None]


def _log_error(path: Path, exc: OSError) -> None:
    logger.warning("Cannot list %s: %s", path, exc)


def locate(
    root: Path,
    *,
    unit_suffix: str = DEFAULT_UNIT_SUFFIX,
    on_error: ErrorCallback | None = None,
) -> list[DeployableUnit]:
    """Find unit directories (``*.func``) recursively under root.

    A directory whose name ends with ``unit_suffix`` is a unit and is not
    descended into. Directory symlinks are searched after all real directories,
    and each real directory is listed at most once, so link cycles terminate and
    a link never hides the real path of a unit. A missing root yields an empty
    list. Entries that cannot be listed or stat'ed are passed to ``on_error`` and
    skipped; their siblings are still searched.
    """
    root = Path(root)
    if not root.is_dir():
        logger.debug("Output root %s does not exist", root)
        return []

    report_error = on_error or _log_error
    found: list[DeployableUnit] = []
    visited: set[str] = set()
    links: deque[Path] = deque()

    def search(directory: Path) -> None:
        real = os.path.realpath(directory)
        if real in visited:
            logger.debug("Skipping %s, already visited as %s", directory, real)
            return
        visited.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            report_error(directory, exc)
            return

        for entry in entries:
            path = Path(entry.path)
            try:
                if not entry.is_dir():
                    continue
                is_link = entry.is_symlink()
            except OSError as exc:
                report_error(path, exc)
                continue
            if entry.name.endswith(unit_suffix):
                name = display_path(path.relative_to(root).as_posix())
                found.append(DeployableUnit(path=path, name=name))
            elif is_link:
                links.append(path)
            else:
                search(path)

    search(root)
    while links:
        search(links.popleft())
    found.sort(key=lambda unit: unit.name)
    logger.debug("Found %d unit(s) under %s", len(found), root)
    return found
