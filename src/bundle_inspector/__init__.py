"""bundle-inspector core package.

Inspects serverless build output (``*.func`` directories) and reports bundle
footprint plus system directories that a dependency tracer swept in by mistake.
"""

__all__ = [
    "cli",
    "config",
    "core",
    "discovery",
    "errors",
    "inventory",
    "models",
    "report",
    "summary",
]
