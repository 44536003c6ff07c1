"""CLI entrypoint: inspect build output and print a report.

Usage:
  bundle-inspector [--root DIR] [--config FILE] [--format text|json] [--strict]

Findings are reported, never enforced, unless strict mode is enabled with
``--strict`` or ``BUNDLE_INSPECTOR_STRICT``.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .config import load_settings, resolve_output_root
from .core import analyze_output
from .errors import ConfigError
from .logging_config import setup_logging
from .summary import render_run


STRICT_ENV_VAR = "BUNDLE_INSPECTOR_STRICT"
EXIT_SUSPICIOUS = 10

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bundle-inspector",
        description="Report function bundle sizes and system directories swept in by tracing.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Output directory holding *.func units (default: .vercel/output/functions)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file overriding the built-in patterns",
    )
    parser.add_argument("--format", choices=("text", "json"), default="text")
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with status {EXIT_SUSPICIOUS} when system directories are found",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser.parse_args(argv)


def _strict_from_env() -> bool:
    return os.getenv(STRICT_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "y"}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    root = resolve_output_root(args.root)
    run = analyze_output(root, settings)

    if args.format == "json":
        output = json.dumps(run.to_dict(), indent=2) + "\n"
    else:
        output = render_run(run, settings)

    if hasattr(sys.stdout, "reconfigure"):
        # Non-UTF-8 consoles get escapes instead of a UnicodeEncodeError.
        sys.stdout.reconfigure(errors="backslashreplace")

    try:
        sys.stdout.write(output)
        sys.stdout.flush()
    except BrokenPipeError:
        # Reader went away; nothing left to report to.
        return 1

    if run.has_suspicious and (args.strict or _strict_from_env()):
        return EXIT_SUSPICIOUS
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
