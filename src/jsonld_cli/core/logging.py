"""Logging setup.

Diagnostics go to stderr through Rich so they never mix with the document
written to stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from jsonld_cli.core.config import AppSettings

_HANDLER_NAME = "jsonld-cli"


def setup_logging(*, verbose: bool = False, settings: AppSettings | None = None) -> None:
    """Configure the package logger once per invocation."""

    settings = settings or AppSettings()
    level = logging.DEBUG if verbose else logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("jsonld_cli")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
