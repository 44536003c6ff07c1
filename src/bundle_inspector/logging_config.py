"""
Logging configuration for bundle-inspector.

Diagnostics go to stderr through rich so they never interleave with the report
printed on stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure logging with a rich handler on stderr.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging

    Returns:
        Configured logger instance for bundle_inspector
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])

    logger = logging.getLogger("bundle_inspector")
    logger.setLevel(level)
    return logger

