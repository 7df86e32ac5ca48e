"""Tests for core/decorators.py - mapping error kinds to exit codes."""

from __future__ import annotations

import pytest
import typer

from pathranger.core.decorators import handle_exceptions
from pathranger.core.result import (
    InvalidTargetError,
    NotFoundError,
    PathRangerError,
    StorageUnavailableError,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (NotFoundError("missing"), 1),
        (InvalidTargetError("bad"), 1),
        (StorageUnavailableError("gone"), 2),
    ],
)
def test_errors_map_to_exit_codes(error: PathRangerError, code: int) -> None:
    @handle_exceptions
    def command() -> None:
        raise error

    with pytest.raises(typer.Exit) as excinfo:
        command()
    assert excinfo.value.exit_code == code


def test_success_passes_through() -> None:
    @handle_exceptions
    def command(value: int) -> int:
        return value * 2

    assert command(21) == 42


def test_unrelated_errors_propagate() -> None:
    @handle_exceptions
    def command() -> None:
        raise KeyError("boom")

    with pytest.raises(KeyError):
        command()


def test_error_message_includes_context() -> None:
    error = StorageUnavailableError("Store read failed", context={"path": "/x"})
    assert str(error) == "Store read failed [path=/x]"
