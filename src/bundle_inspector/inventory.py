"""File inventory of a single unit directory."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from .models import FileEntry, InventoryError


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Inventory:
    """Files found under a unit plus the subtrees that could not be read."""

    files: list[FileEntry] = field(default_factory=list)
    errors: list[InventoryError] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


def describe_error(exc: OSError) -> str:
    """Short reason for an OSError, without the path it already carries."""
    return exc.strerror or exc.__class__.__name__


def display_path(path: Path | str) -> str:
    """Printable form of a path; bytes that are not UTF-8 become ``\\xNN`` escapes."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def _relative(path: Path, base: Path) -> str:
    rel = display_path(path.relative_to(base).as_posix())
    return "." if rel in ("", ".") else rel


def _entry_size(entry: os.DirEntry) -> int:
    # Symlinks are dereferenced; a dangling link counts as the link itself.
    try:
        return entry.stat().st_size
    except FileNotFoundError:
        return entry.stat(follow_symlinks=False).st_size


def walk_files(unit_dir: Path) -> Inventory:
    """Recursively list every non-directory entry under ``unit_dir`` with its size.

    Real directories are walked first and directory symlinks only afterwards,
    each real directory once. A link into the unit therefore adds nothing, and
    files always stay under their real top-level directory. A directory that
    cannot be listed, or a file that cannot be stat'ed, is recorded in
    ``Inventory.errors`` and left out of the totals.
    """
    unit_dir = Path(unit_dir)
    inventory = Inventory()
    visited: set[str] = set()
    links: deque[Path] = deque()

    def visit(directory: Path) -> None:
        real = os.path.realpath(directory)
        if real in visited:
            logger.debug("Skipping %s, already visited as %s", directory, real)
            return
        visited.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            inventory.errors.append(
                InventoryError(path=_relative(directory, unit_dir), reason=describe_error(exc))
            )
            return

        for entry in entries:
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir()
                is_link = entry.is_symlink()
            except OSError:
                is_dir = is_link = False
            if is_dir:
                if is_link:
                    links.append(path)
                else:
                    visit(path)
                continue

            try:
                size = _entry_size(entry)
            except OSError as exc:
                logger.warning("Cannot stat %s: %s", path, exc)
                inventory.errors.append(
                    InventoryError(path=_relative(path, unit_dir), reason=describe_error(exc))
                )
                continue
            inventory.files.append(FileEntry(path=_relative(path, unit_dir), size=size))

    visit(unit_dir)
    while links:
        visit(links.popleft())
    return inventory
