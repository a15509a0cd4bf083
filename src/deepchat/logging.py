"""Logging configuration for deepchat.

Log records go through the standard library loggers under the
``deepchat`` namespace and are rendered by Rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "deepchat"


def setup_logging(
    level: int | str = logging.WARNING,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``deepchat`` logger.

    Installs a single RichHandler writing to stderr (or the given console).
    Calling it again only updates the level.

    Args:
        level: Logging level, as a number or a name such as "debug"
        console: Optional Rich console to render log records on

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a deepchat component.

    Args:
        name: Component name (prefixed with 'deepchat.')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
