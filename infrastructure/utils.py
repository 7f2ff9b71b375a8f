"""Filesystem helpers for photo folders and annotation sidecars.

Enumeration raises `OSError` on unreadable or vanished folders; callers decide
how to recover. Path helpers never touch the disk.
"""

from __future__ import annotations

from collections.abc import Iterable
import os
from pathlib import Path

PHOTO_EXTENSIONS: tuple[str, ...] = ("jpg", "jpeg", "png", "heic")
SIDECAR_SUFFIX = ".txt"


def normalize_extensions(extensions: Iterable[str] | None) -> frozenset[str]:
    """Lower-case extensions and strip any leading dot."""
    if extensions is None:
        extensions = PHOTO_EXTENSIONS
    return frozenset(str(e).strip().lstrip(".").lower() for e in extensions if str(e).strip())


def has_photo_extension(path: str, extensions: Iterable[str] | None = None) -> bool:
    """True if `path` ends in one of `extensions` (case-insensitive)."""
    allowed = normalize_extensions(extensions)
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    return bool(ext) and ext in allowed


def list_photo_paths(folder: str, extensions: Iterable[str] | None = None) -> list[str]:
    """Return absolute paths of photos directly inside `folder`, sorted.

    Only immediate children are considered; directories are skipped even if
    their names carry a photo extension. Sorting is a plain string comparison
    of the absolute paths.
    """
    allowed = normalize_extensions(extensions)
    root = os.path.abspath(folder)
    paths: list[str] = []
    with os.scandir(root) as entries:
        for entry in entries:
            if not has_photo_extension(entry.name, allowed):
                continue
            try:
                if entry.is_dir():
                    continue
            except OSError:
                continue
            paths.append(os.path.join(root, entry.name))
    paths.sort()
    return paths


def sidecar_path_for(photo_path: str) -> str:
    """Map `dir/name.ext` to `dir/name.txt`."""
    return str(Path(photo_path).with_suffix(SIDECAR_SUFFIX))
