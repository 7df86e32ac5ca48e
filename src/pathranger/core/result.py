"""
Result types and the pathranger error hierarchy.

Core operations return ``Ok``/``Err`` for expected failures (missing tag,
missing directory) and raise ``StorageUnavailableError`` when the store
itself fails. Commands re-raise ``Err`` payloads so one top-level handler
maps every error kind to its exit code.

Usage:
    match resolve_tag(store, "work"):
        case Ok(record):
            typer.echo(record.path)
        case Err(err):
            raise err
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the contained error."""
        raise self.error


Result = Ok[T] | Err[E]


class PathRangerError(Exception):
    """Base exception for all pathranger errors.

    Every subclass carries the process exit code the CLI reports when the
    error reaches the top-level handler.
    """

    exit_code: int = 1

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class NotFoundError(PathRangerError):
    """Raised when a tag or path lookup misses.

    Examples:
    - `goto` with an unregistered tag
    - Resolving a tag that was removed
    """


class InvalidTargetError(PathRangerError):
    """Raised when a mutation targets something that cannot be stored.

    Examples:
    - Tagging a directory that does not exist
    - Tag names containing whitespace or path separators
    """


class StorageUnavailableError(PathRangerError):
    """Raised when the backing store cannot be created, opened or written.

    Fatal: nothing else can proceed without the store.
    """

    exit_code = 2


__all__ = [
    "Err",
    "InvalidTargetError",
    "NotFoundError",
    "Ok",
    "PathRangerError",
    "Result",
    "StorageUnavailableError",
]
