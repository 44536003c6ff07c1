"""Exception types raised by bundle-inspector."""

from __future__ import annotations


class InspectorError(RuntimeError):
    """Base error for bundle-inspector failures."""


class ConfigError(InspectorError):
    """Raised when the settings file cannot be loaded or is invalid."""


class DescriptorError(InspectorError):
    """Raised when a unit descriptor exists but cannot be read or parsed."""
