"""Shell integration setup.

Prints the script that wraps `cd` so every directory change is recorded,
plus a `pr` helper whose `pr goto <tag>` jumps to tagged directories.
"""

from __future__ import annotations

import typer

from pathranger.core.decorators import handle_exceptions
from pathranger.core.result import Err, Ok
from pathranger.core.templates import DEFAULT_ALIAS, DEFAULT_EXECUTABLE, render_shell_init


@handle_exceptions
def init(
    shell: str = typer.Option("bash", "--shell", "-s", help="Shell type (bash, zsh, fish)."),
    executable: str = typer.Option(
        DEFAULT_EXECUTABLE, "--cmd", help="Executable the generated hooks should call."
    ),
    alias: str = typer.Option(DEFAULT_ALIAS, "--alias", help="Name of the goto helper function."),
) -> None:
    """Generate shell integration code."""
    match render_shell_init(shell, executable=executable, alias=alias):
        case Err(err):
            raise err
        case Ok(script):
            typer.echo(script, nl=False)
