"""Logging configuration for gmc."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(debug: bool = False, color: bool = True) -> None:
    """Configure logging for the application.

    Log records go to stderr so they never mix with the status lines.

    Args:
        debug: If True, show DEBUG level messages from the git layer
        color: If False, log without ANSI styling
    """
    level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger("gmc")
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=not color),
        show_time=debug,
        show_path=debug,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a gmc module (typically ``__name__``)."""
    return logging.getLogger(name)
