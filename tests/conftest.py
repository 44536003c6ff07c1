"""Shared fixtures for building synthetic build output trees."""

import json
import os
from pathlib import Path

import pytest


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


def make_unit(root: Path, name: str, files: dict, descriptor: dict | None = None) -> Path:
    """Create ``root/name`` with files given as {relative path: size in bytes}."""
    unit = root / name
    unit.mkdir(parents=True, exist_ok=True)
    for rel, size in files.items():
        write_file(unit / rel, size)
    if descriptor is not None:
        (unit / ".vc-config.json").write_text(json.dumps(descriptor), encoding="utf-8")
    return unit


@pytest.fixture
def output_root(tmp_path):
    """Empty ``.vercel/output/functions`` directory."""
    root = tmp_path / ".vercel" / "output" / "functions"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def two_unit_root(output_root):
    """One clean unit and one with a 50-file ``proc`` directory."""
    make_unit(
        output_root,
        "index.func",
        {f"src/file{i}.js": 100 for i in range(5)},
    )
    proc_files = {f"proc/{i}/status": 20 for i in range(50)}
    proc_files.update({"src/app.js": 300})
    make_unit(output_root, "api/config.func", proc_files)
    return output_root


@pytest.fixture
def deny_listing(monkeypatch):
    """Make os.scandir raise PermissionError for chosen directories.

    Works regardless of whether tests run as root, where chmod cannot deny reads.
    """
    real_scandir = os.scandir
    denied: set[str] = set()

    def fake_scandir(path="."):
        if os.path.realpath(path) in denied:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    def deny(path: Path) -> None:
        denied.add(os.path.realpath(path))

    return deny


def make_raw_dir(parent: Path, raw_name: bytes) -> bytes:
    """Create a directory whose name is arbitrary bytes, skipping where the FS refuses."""
    path = os.path.join(os.fsencode(parent), raw_name)
    try:
        os.mkdir(path)
    except (OSError, ValueError) as exc:
        pytest.skip(f"filesystem rejects non-UTF-8 names: {exc}")
    return path
