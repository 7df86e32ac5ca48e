from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import typer
from rich.markup import escape

from pathranger.core import console as console_mod
from pathranger.core.result import PathRangerError

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def _handle_exception(exc: PathRangerError) -> NoReturn:
    logger.debug("Command failed: %r", exc)
    console_mod.stderr_console.print(f"[red]{escape(str(exc))}[/red]", highlight=False)
    raise typer.Exit(code=exc.exit_code)


def handle_exceptions(func: F) -> F:
    """Decorate CLI entrypoints to present friendly errors and exit with the error's code."""

    @functools.wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except PathRangerError as exc:
            _handle_exception(exc)

    return sync_wrapper  # type: ignore[return-value]


__all__ = ["handle_exceptions"]
