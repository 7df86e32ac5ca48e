from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pathranger.core.store import Store, open_store  # noqa: E402


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config and the store to temp paths so tests don't touch user state."""
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("PATHRANGER_CONFIG", str(cfg_path))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("PATHRANGER_DISPLAY__COLLAPSE_HOME", "false")
    for name in ("PATHRANGER_STORE__DATA_DIR", "PATHRANGER_DISPLAY__LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use wide, colourless consoles so table rows never wrap in assertions."""
    test_console = Console(width=400, color_system=None, force_terminal=False)
    test_stderr = Console(width=400, color_system=None, force_terminal=False, stderr=True)
    import pathranger.commands.nav as nav_cmd
    import pathranger.core.console as core_console
    import pathranger.main as app_main

    monkeypatch.setattr(core_console, "console", test_console)
    monkeypatch.setattr(core_console, "stderr_console", test_stderr)
    monkeypatch.setattr(nav_cmd, "console", test_console)
    monkeypatch.setattr(app_main, "console", test_console)
    monkeypatch.setattr(app_main, "stderr_console", test_stderr)
    return test_console


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Store directory the CLI uses under `isolate_config`."""
    return tmp_path / "xdg-data" / "pathranger"


@pytest.fixture
def store(tmp_path: Path) -> Iterator[Store]:
    with open_store(tmp_path / "store" / "pathranger.db") as handle:
        yield handle


@pytest.fixture
def make_dir(tmp_path: Path):
    """Create a real directory under tmp_path and return its canonical string."""

    def _make(*parts: str) -> str:
        target = tmp_path.joinpath("dirs", *parts)
        target.mkdir(parents=True, exist_ok=True)
        return str(target.resolve())

    return _make
