#!/usr/bin/env python3
"""Post-build entrypoint for CI steps that run from an app directory.

Usage:
  python scripts/analyze_build_output.py [--root .vercel/output/functions] [--strict]

This calls the same CLI as the ``bundle-inspector`` console script.
"""

from __future__ import annotations

from bundle_inspector.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
