"""Tests for photo folder enumeration helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from infrastructure.utils import has_photo_extension, list_photo_paths, sidecar_path_for


def test_list_photo_paths_filters_and_sorts(photo_dir: Path):
    paths = list_photo_paths(str(photo_dir))

    assert paths == [str(photo_dir / n) for n in ("a.jpg", "b.jpg", "c.heic")]
    assert paths == sorted(paths)


def test_extensions_match_case_insensitively(tmp_path: Path):
    for name in ("B.JPEG", "a.Png", "c.HEIC", "d.JpG", "e.tiff", "f"):
        (tmp_path / name).write_bytes(b"")

    names = [Path(p).name for p in list_photo_paths(str(tmp_path))]

    # Upper-case letters sort before lower-case ones in a plain string sort.
    assert names == ["B.JPEG", "a.Png", "c.HEIC", "d.JpG"]


def test_relative_folder_yields_absolute_paths(photo_dir: Path, monkeypatch):
    monkeypatch.chdir(photo_dir.parent)

    paths = list_photo_paths(photo_dir.name)

    assert all(Path(p).is_absolute() for p in paths)


def test_custom_extensions(photo_dir: Path):
    paths = list_photo_paths(str(photo_dir), [".GIF"])

    assert [Path(p).name for p in paths] == ["d.gif"]


def test_missing_folder_raises(tmp_path: Path):
    with pytest.raises(OSError):
        list_photo_paths(str(tmp_path / "nope"))


def test_has_photo_extension():
    assert has_photo_extension("x/y.HeIc")
    assert not has_photo_extension("x/y.txt")
    assert not has_photo_extension("jpg")


def test_sidecar_path_for():
    assert sidecar_path_for("/p/holiday.photo.jpeg") == str(Path("/p/holiday.photo.txt"))
