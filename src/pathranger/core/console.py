"""Rich consoles and the pathranger log handler.

stdout carries command output only (the shell wrapper reads `goto` output
verbatim), so log records always go to ``stderr_console``.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

APP_LOGGER = "pathranger"

console = Console()
stderr_console = Console(stderr=True)


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | int = logging.WARNING, verbose: bool = False) -> logging.Logger:
    """Attach a stderr RichHandler to the ``pathranger`` logger and return it.

    Only the package logger is configured; records from other libraries keep
    whatever handling the host process gave them. ``verbose`` forces DEBUG and
    adds timestamps and logger names, which the `cd` hook never needs.
    """
    numeric_level = logging.DEBUG if verbose else _level_number(level)

    handler = RichHandler(
        console=stderr_console,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        show_time=verbose,
        show_path=False,
    )
    handler.setFormatter(
        logging.Formatter("%(name)s: %(message)s" if verbose else "%(message)s")
    )

    logger = logging.getLogger(APP_LOGGER)
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = False
    logger.addHandler(handler)
    return logger


__all__ = ["APP_LOGGER", "console", "setup_logging", "stderr_console"]
