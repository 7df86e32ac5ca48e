"""Path normalisation helpers.

`normalize_path` produces the canonical storage key for a directory; every
write and lookup goes through it so that `~/src`, `/home/u/src/` and
`../u/src` collapse to one row.
"""

from __future__ import annotations

import os
from pathlib import Path


def normalize_path(raw: str | os.PathLike[str], cwd: Path | None = None) -> str:
    """Return the canonical absolute form of ``raw``.

    ``~`` is expanded, relative paths are anchored at ``cwd`` (or the process
    working directory), ``.``/``..`` segments and symlinks are resolved.
    Blank input and input that cannot be normalised is returned unchanged;
    callers check existence afterwards.
    """
    text = os.fspath(raw)
    if not text.strip():
        return text

    try:
        candidate = Path(text).expanduser()
        if not candidate.is_absolute():
            candidate = (cwd or Path.cwd()) / candidate
        return str(candidate.resolve(strict=False))
    except (RuntimeError, OSError, ValueError):
        return text


def is_directory(path: str) -> bool:
    """True only for an absolute path naming an existing directory."""
    # Path("") means ".", so blank keys must be rejected before touching disk.
    if not path or not os.path.isabs(path):
        return False
    try:
        return Path(path).is_dir()
    except (OSError, ValueError):
        return False


def collapse_home(path: str, home: Path | None = None) -> str:
    """Replace a leading home directory with ``~`` for display."""
    home_str = str(home or Path.home()).rstrip(os.sep)
    if not home_str:
        return path
    if path == home_str:
        return "~"
    if path.startswith(home_str + os.sep):
        return "~" + path[len(home_str) :]
    return path


__all__ = ["collapse_home", "is_directory", "normalize_path"]
