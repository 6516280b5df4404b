"""Logging configuration for the build."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "POSTGEN_LOG_LEVEL"
DEFAULT_LEVEL_NAME = "INFO"

console = Console(stderr=True)


def resolve_level(level_name: str | None = None) -> int:
    name = (level_name or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LEVEL_NAME).upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str | None = None) -> None:
    """Install a single Rich handler on the root logger."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_postgen_managed", False):
            root_logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._postgen_managed = True
    root_logger.addHandler(handler)
    root_logger.setLevel(resolve_level(level_name))
