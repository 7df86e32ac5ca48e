"""CLI command modules for pathranger.

    - init: Shell integration script generation
    - nav: Tags, visit history and fuzzy search
"""

from __future__ import annotations

from . import init, nav

__all__ = ["init", "nav"]
