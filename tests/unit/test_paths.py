"""Tests for core/paths.py - canonical path keys and display helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from pathranger.core.paths import collapse_home, is_directory, normalize_path


class TestNormalizePath:
    def test_expands_tilde(self, tmp_path: Path, monkeypatch: Any) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "work").mkdir()
        assert normalize_path("~/work") == str((tmp_path / "work").resolve())

    def test_relative_path_anchored_at_cwd(self, tmp_path: Path) -> None:
        assert normalize_path("a/b", cwd=tmp_path) == str(tmp_path.resolve() / "a" / "b")

    def test_relative_path_uses_process_cwd(self, tmp_path: Path, monkeypatch: Any) -> None:
        monkeypatch.chdir(tmp_path)
        assert normalize_path("sub") == str(tmp_path.resolve() / "sub")

    def test_equivalent_spellings_collapse(self, tmp_path: Path) -> None:
        target = tmp_path / "proj"
        target.mkdir()
        spellings = [
            str(target),
            f"{target}/",
            f"{target}/.",
            f"{target}/../proj",
            f"{tmp_path}//proj",
        ]
        assert {normalize_path(s) for s in spellings} == {str(target.resolve())}

    def test_symlink_resolves_to_target(self, tmp_path: Path) -> None:
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)
        assert normalize_path(str(link)) == normalize_path(str(real))

    @pytest.mark.parametrize("raw", ["", "   ", "\t"])
    def test_blank_input_passes_through(self, raw: str) -> None:
        assert normalize_path(raw) == raw

    def test_unknown_user_passes_through(self) -> None:
        raw = "~no_such_user_pathranger_test/dir"
        assert normalize_path(raw) == raw

    def test_accepts_path_objects(self, tmp_path: Path) -> None:
        assert normalize_path(tmp_path) == str(tmp_path.resolve())


def test_is_directory(tmp_path: Path) -> None:
    file_path = tmp_path / "file.txt"
    file_path.write_text("x")
    assert is_directory(str(tmp_path))
    assert not is_directory(str(file_path))
    assert not is_directory(str(tmp_path / "missing"))


@pytest.mark.parametrize("raw", ["", "   ", "."])
def test_is_directory_rejects_blank_and_relative(
    raw: str, tmp_path: Path, monkeypatch: Any
) -> None:
    monkeypatch.chdir(tmp_path)
    assert not is_directory(raw)


class TestCollapseHome:
    def test_collapses_prefix(self) -> None:
        assert collapse_home("/home/u/work", home=Path("/home/u")) == "~/work"

    def test_home_itself(self) -> None:
        assert collapse_home("/home/u", home=Path("/home/u")) == "~"

    def test_requires_component_boundary(self) -> None:
        assert collapse_home("/home/u2/work", home=Path("/home/u")) == "/home/u2/work"

    def test_unrelated_path_unchanged(self) -> None:
        assert collapse_home("/tmp/other", home=Path("/home/u")) == "/tmp/other"
