"""Root logger setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from gqlforge.config import settings


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr through Rich at the configured level."""
    level = logging.DEBUG if debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
