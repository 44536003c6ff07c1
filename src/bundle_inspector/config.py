"""Settings loader for bundle inspection.

Settings come from a JSON file when one is given (``--config`` or the
``BUNDLE_INSPECTOR_CONFIG`` environment variable); otherwise the built-in
defaults below apply. Every key is optional and falls back to its default:

.. code-block:: json

    {
      "unitSuffix": ".func",
      "descriptorName": ".vc-config.json",
      "suspiciousPatterns": {"node22": "Node.js runtime install"},
      "handlerMarkers": {"vercel/path0": "common ancestor likely dropped to /"},
      "advisory": "...",
      "referenceUrl": "https://..."
    }

Validation is done by hand so that error messages can name the offending key.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError


CONFIG_PATH_ENV_VAR = "BUNDLE_INSPECTOR_CONFIG"
OUTPUT_ROOT_ENV_VAR = "BUNDLE_INSPECTOR_ROOT"

DEFAULT_OUTPUT_ROOT = Path(".vercel") / "output" / "functions"
DEFAULT_UNIT_SUFFIX = ".func"
DEFAULT_DESCRIPTOR_NAME = ".vc-config.json"

# Top-level names a bundler should never capture from the build machine.
DEFAULT_SUSPICIOUS_PATTERNS: dict[str, str] = {
    "uv": "uv-managed Python toolchain from the build image",
    "node22": "Node.js 22 runtime install from the build image",
    "node20": "Node.js 20 runtime install from the build image",
    "node18": "Node.js 18 runtime install from the build image",
    ".vercel": "build output copied back into itself",
    "usr": "system /usr tree",
    "opt": "system /opt tree",
    "tmp": "system /tmp contents",
    "proc": "procfs snapshot of the build process",
    "etc": "system /etc configuration",
}

DEFAULT_HANDLER_MARKERS: dict[str, str] = {
    "vercel/path0": "common ancestor likely dropped to /",
}

DEFAULT_ADVISORY = (
    "This confirms the dependency tracing bug: system files are being bundled."
)
DEFAULT_REFERENCE_URL = "https://github.com/sveltejs/kit/issues/13764"


@dataclass(slots=True, frozen=True)
class Settings:
    """Inspection settings."""

    unit_suffix: str = DEFAULT_UNIT_SUFFIX
    descriptor_name: str = DEFAULT_DESCRIPTOR_NAME
    suspicious_patterns: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SUSPICIOUS_PATTERNS)
    )
    handler_markers: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_HANDLER_MARKERS)
    )
    advisory: str = DEFAULT_ADVISORY
    reference_url: str | None = DEFAULT_REFERENCE_URL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a decoded JSON object, validating each key."""
        defaults = cls()

        unit_suffix = _string(data, "unitSuffix", defaults.unit_suffix)
        descriptor_name = _string(data, "descriptorName", defaults.descriptor_name)
        advisory = _string(data, "advisory", defaults.advisory)

        reference_url = data.get("referenceUrl", defaults.reference_url)
        if reference_url is not None and not isinstance(reference_url, str):
            raise ConfigError("'referenceUrl' must be a string or null")

        return cls(
            unit_suffix=unit_suffix,
            descriptor_name=descriptor_name,
            suspicious_patterns=_string_map(
                data, "suspiciousPatterns", defaults.suspicious_patterns
            ),
            handler_markers=_string_map(data, "handlerMarkers", defaults.handler_markers),
            advisory=advisory,
            reference_url=reference_url or None,
        )


def _string(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value


def _string_map(data: dict[str, Any], key: str, default: dict[str, str]) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return dict(default)
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object mapping pattern to advisory text")

    result: dict[str, str] = {}
    for pattern, advisory in value.items():
        if not pattern:
            raise ConfigError(f"'{key}' contains an empty pattern")
        if not isinstance(advisory, str):
            raise ConfigError(f"'{key}' entry '{pattern}' must map to a string")
        result[pattern] = advisory
    return result


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the settings file path.

    Priority:
    1. Explicit path argument
    2. BUNDLE_INSPECTOR_CONFIG environment variable
    3. None (built-in defaults)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Optional path to a JSON settings file. If not provided, uses the
            BUNDLE_INSPECTOR_CONFIG env var or falls back to the defaults.

    Raises:
        ConfigError: If a settings file was named but cannot be read or is invalid.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return Settings()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return Settings.from_dict(data)


def resolve_output_root(root: Path | str | None = None) -> Path:
    """Return the output root: explicit argument, then env var, then the default."""
    if root is not None:
        return Path(root)

    env_root = os.environ.get(OUTPUT_ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)

    return Path.cwd() / DEFAULT_OUTPUT_ROOT
