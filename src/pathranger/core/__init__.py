"""Core shared infrastructure for pathranger.

This package contains the persistence model and its query algorithms:
    - paths: Canonical path normalisation
    - store: SQLite store handle and transactions
    - visits: Visit recorder and frecency listings
    - tags: Tag registry
    - fuzzy: Fuzzy search ranking
    - result: Error handling patterns
    - config / console: Configuration, output and logging
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
