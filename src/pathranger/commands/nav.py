"""Directory tracking, tagging and search commands.

Provides CLI commands for quick directory navigation:
    - Tags (mark, goto, tags, untag)
    - Visit history (add, record, top, recent)
    - Fuzzy search over visited directories
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import typer
from rich import box
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pathranger.core import fuzzy, tags as tags_core, visits
from pathranger.core.console import console
from pathranger.core.decorators import handle_exceptions
from pathranger.core.paths import collapse_home
from pathranger.core.result import Err, InvalidTargetError, Ok
from pathranger.core.store import Store, open_store
from pathranger.core.visits import DirectoryRecord


@contextmanager
def _open_store(ctx: typer.Context) -> Iterator[Store]:
    store_config = ctx.obj.config.store
    with open_store(store_config.db_path, busy_timeout=store_config.busy_timeout) as store:
        yield store


def _current_dir() -> str:
    try:
        return str(Path.cwd())
    except OSError as exc:
        raise InvalidTargetError(
            "Could not get current directory", context={"error": str(exc)}
        ) from exc


def _human_time(moment: datetime) -> str:
    return moment.astimezone().strftime("%Y-%m-%d %H:%M")


def _display_path(ctx: typer.Context, path: str) -> str:
    if ctx.obj.config.display.collapse_home:
        return collapse_home(path)
    return path


def _highlight(path: str, display: str, positions: tuple[int, ...]) -> Text:
    """Style matched characters; ``display`` may be ``path`` with its home prefix collapsed."""
    text = Text(display, style="blue")
    offset = len(path) - len(display)
    for position in positions:
        index = position - offset
        if 0 <= index < len(display):
            text.stylize("bold yellow", index, index + 1)
    return text


def _visit_table(ctx: typer.Context, title: str, records: list[DirectoryRecord]) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY, expand=False)
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Visits", style="yellow", no_wrap=True, justify="right")
    table.add_column("Last visited", style="white", no_wrap=True)
    table.add_column("Path", style="blue", no_wrap=True)
    for idx, record in enumerate(records, start=1):
        table.add_row(
            str(idx),
            str(record.visit_count),
            _human_time(record.last_visited),
            escape(_display_path(ctx, record.path)),
        )
    return table


@handle_exceptions
def mark(
    ctx: typer.Context,
    tag: str = typer.Argument(..., help="Tag name."),
    path: str | None = typer.Argument(
        None, help="Directory to tag (defaults to the current directory)."
    ),
) -> None:
    """Mark a directory with a tag."""
    target = path if path is not None else _current_dir()

    with _open_store(ctx) as store:
        match tags_core.set_tag(store, tag, target):
            case Err(err):
                raise err
            case Ok(change):
                pass

    name = f"[bold green]{escape(tag)}[/bold green]"
    shown = f"[blue]{escape(_display_path(ctx, change.record.path))}[/blue]"
    if change.created:
        console.print(f"Created tag '{name}' for '{shown}'")
    else:
        console.print(f"Updated tag '{name}' to point to '{shown}'")


@handle_exceptions
def goto(
    ctx: typer.Context,
    tag: str = typer.Argument(..., help="Tag name."),
) -> None:
    """Print the directory behind a tag (the shell wrapper cds into it)."""
    with _open_store(ctx) as store:
        match tags_core.resolve_tag(store, tag):
            case Err(err):
                raise err
            case Ok(tag_record):
                pass

        visits.record_visit(store, tag_record.path)

    # Printed only once the visit is stored; the shell wrapper cds into stdout verbatim.
    typer.echo(tag_record.path)


@handle_exceptions
def add(ctx: typer.Context) -> None:
    """Add the current directory to tracked paths."""
    with _open_store(ctx) as store:
        record = visits.record_visit(store, _current_dir())

    if record is None:
        return
    console.print(
        f"Added '[blue]{escape(_display_path(ctx, record.path))}[/blue]' to tracked directories"
    )


@handle_exceptions
def top(
    ctx: typer.Context,
    count: int | None = typer.Option(
        None, "--count", "-c", min=1, help="Number of directories to show."
    ),
) -> None:
    """List your most visited directories."""
    limit = count or ctx.obj.config.display.default_count
    with _open_store(ctx) as store:
        records = visits.list_top(store, limit)

    if not records:
        console.print("[yellow]No directories recorded yet.[/yellow]")
        return
    console.print(_visit_table(ctx, "Your most frequently visited directories", records))


@handle_exceptions
def recent(
    ctx: typer.Context,
    count: int | None = typer.Option(
        None, "--count", "-c", min=1, help="Number of directories to show."
    ),
) -> None:
    """Show recently visited directories."""
    limit = count or ctx.obj.config.display.default_count
    with _open_store(ctx) as store:
        records = visits.list_recent(store, limit)

    if not records:
        console.print("[yellow]No directories recorded yet.[/yellow]")
        return
    console.print(_visit_table(ctx, "Your recently visited directories", records))


@handle_exceptions
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to search for."),
) -> None:
    """Search across your visited directories."""
    with _open_store(ctx) as store:
        matches = fuzzy.search(store, query, limit=ctx.obj.config.display.search_limit)

    if not matches:
        console.print(f"[yellow]No matching directories found for '{escape(query)}'[/yellow]")
        return

    table = Table(title=f"Search results for '{escape(query)}'", box=box.SIMPLE_HEAVY)
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Score", style="yellow", no_wrap=True, justify="right")
    table.add_column("Path", no_wrap=True)
    for idx, match in enumerate(matches, start=1):
        display = _display_path(ctx, match.path)
        table.add_row(str(idx), str(match.score), _highlight(match.path, display, match.positions))
    console.print(table)


@handle_exceptions
def tags(ctx: typer.Context) -> None:
    """List all tags."""
    with _open_store(ctx) as store:
        records = tags_core.list_tags(store)

    if not records:
        console.print("[yellow]No tags yet. Create one with `pathranger mark <tag>`.[/yellow]")
        return

    table = Table(title="Your tags", box=box.SIMPLE_HEAVY)
    table.add_column("Tag", style="bold green", no_wrap=True)
    table.add_column("Path", style="blue", no_wrap=True)
    for record in records:
        table.add_row(escape(record.name), escape(_display_path(ctx, record.path)))
    console.print(table)


@handle_exceptions
def untag(
    ctx: typer.Context,
    tag: str = typer.Argument(..., help="Tag to remove."),
) -> None:
    """Remove a tag."""
    with _open_store(ctx) as store:
        removed = tags_core.remove_tag(store, tag)

    if removed:
        console.print(f"Tag '{escape(tag)}' removed")
    else:
        console.print(f"[yellow]Tag '{escape(tag)}' not found[/yellow]")


@handle_exceptions
def record(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory path."),
) -> None:
    """Record a visit to a directory (usually called from shell integration)."""
    with _open_store(ctx) as store:
        visits.record_visit(store, path)
