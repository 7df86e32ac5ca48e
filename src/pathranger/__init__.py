"""pathranger - track visited directories, tag them and jump back fast.

This package provides the `pathranger` command-line tool: a frecency-ranked
visit history, named directory tags, fuzzy search and shell integration.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
