"""Parse a unit's ``.vc-config.json`` descriptor."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from jsonschema import Draft202012Validator

from ..errors import DescriptorError
from ..models import UnitDescriptor


DESCRIPTOR_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["handler", "runtime"],
    "properties": {
        "handler": {"type": "string"},
        "runtime": {"type": "string"},
    },
}

_validator = Draft202012Validator(DESCRIPTOR_SCHEMA)


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"{pointer or '<root>'}: {error.message}")
    return "; ".join(messages)


def parse(path: Path) -> UnitDescriptor | None:
    """Return the descriptor at ``path``, or None when the file does not exist.

    Raises:
        DescriptorError: If the file exists but is unreadable, not JSON, or is
            missing a string ``handler``/``runtime``.
    """
    if not path.is_file():
        return None

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DescriptorError(f"cannot read {path.name}: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"invalid JSON in {path.name}: {exc}") from exc

    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        raise DescriptorError(f"invalid {path.name}: {_format_errors(errors)}")

    return UnitDescriptor.from_mapping(data)
