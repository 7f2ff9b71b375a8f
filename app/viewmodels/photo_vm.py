"""Lightweight view model wrapper around the current photo and its metadata."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.models import Coordinate, PhotoMetadata


def format_lat_lon(coordinate: Coordinate | None) -> str:
    """Format as "lat, lon" with six decimals; empty when unknown."""
    if coordinate is None:
        return ""
    return f"{coordinate.latitude:.6f}, {coordinate.longitude:.6f}"


@dataclass(frozen=True)
class PhotoVM:
    """Expose convenient display properties for the current photo."""

    file_path: str
    metadata: PhotoMetadata

    @property
    def file_name(self) -> str:
        """Base name of the file path."""
        return Path(self.file_path).name

    @property
    def folder_path(self) -> str:
        """Folder portion of the file path."""
        return str(Path(self.file_path).parent)

    @property
    def has_location(self) -> bool:
        return self.metadata.coordinate is not None

    @property
    def lat_lon_text(self) -> str:
        """Coordinate as handed to the clipboard."""
        return format_lat_lon(self.metadata.coordinate)

    @property
    def direction_text(self) -> str:
        """Heading in degrees with two decimals; empty when unknown."""
        if self.metadata.direction is None:
            return ""
        return f"{self.metadata.direction:6.2f}"

    @property
    def date_text(self) -> str:
        return self.metadata.datetime
