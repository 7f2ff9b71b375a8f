"""Pytest fixtures shared by the photo session tests."""

from __future__ import annotations

from pathlib import Path
import struct
import zlib

from PIL import Image
import pytest

from app.viewmodels.session_vm import PhotoSessionVM
from core.models import Coordinate, PhotoMetadata, UnsavedResolution
from core.services.interfaces import SaveResult
from infrastructure.annotation_repository import SidecarAnnotationRepository


def write_jpeg(path: Path, gps: dict | None = None, exif_ifd: dict | None = None) -> Path:
    """Write a tiny JPEG with optional GPS and Exif sub-IFDs."""
    img = Image.new("RGB", (16, 16), color=(120, 160, 200))
    exif = Image.Exif()
    if gps:
        exif[0x8825] = gps
    if exif_ifd:
        exif[0x8769] = exif_ifd
    img.save(path, "JPEG", exif=exif)
    return path


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def write_oversized_png(path: Path, width: int = 20000, height: int = 20000) -> Path:
    """Write a header-only PNG claiming `width` x `height` pixels."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b""))
    return path


class FakeExtractor:
    """Returns canned metadata per file name and records calls."""

    def __init__(self, by_name: dict[str, PhotoMetadata] | None = None) -> None:
        self.by_name = by_name or {}
        self.calls: list[str] = []

    def extract(self, photo_path: str) -> PhotoMetadata:
        self.calls.append(photo_path)
        return self.by_name.get(Path(photo_path).name, PhotoMetadata())


class FailingStore(SidecarAnnotationRepository):
    """Reads like the real store but every save fails."""

    def save(self, photo_path: str, text: str) -> SaveResult:
        return SaveResult(success=False, path=self.sidecar_path(photo_path), error="disk full")


class ScriptedResolver:
    """Unsaved-changes resolver that returns a fixed answer and counts calls."""

    def __init__(self, answer: UnsavedResolution) -> None:
        self.answer = answer
        self.calls = 0

    def __call__(self, session: PhotoSessionVM) -> UnsavedResolution:
        self.calls += 1
        return self.answer


@pytest.fixture
def photo_dir(tmp_path: Path) -> Path:
    """Folder with a.jpg, b.jpg, c.heic plus files that must be ignored."""
    folder = tmp_path / "photos"
    folder.mkdir()
    for name in ("c.heic", "a.jpg", "b.jpg", "notes.md", "d.gif"):
        (folder / name).write_bytes(b"not really an image")
    (folder / "sub.jpg").mkdir()
    return folder


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor(
        {
            "a.jpg": PhotoMetadata(
                coordinate=Coordinate(latitude=-45.5, longitude=-122.3),
                direction=270.25,
                datetime="2024:05:01 10:20:30",
            ),
            "b.jpg": PhotoMetadata(direction=12.0),
        }
    )


@pytest.fixture
def store() -> SidecarAnnotationRepository:
    return SidecarAnnotationRepository()


@pytest.fixture
def session(extractor: FakeExtractor, store: SidecarAnnotationRepository) -> PhotoSessionVM:
    return PhotoSessionVM(extractor, store, resolver=ScriptedResolver(UnsavedResolution.SAVE))
