"""Core domain models for photo metadata and session state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in signed decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class MapSpan:
    """Visible extent of the map viewport in degrees."""

    latitude_delta: float
    longitude_delta: float


@dataclass(frozen=True)
class MapRegion:
    """Map center plus the span used to frame it."""

    center: Coordinate
    span: MapSpan


@dataclass(frozen=True)
class PhotoMetadata:
    """Metadata extracted from a single photo.

    `datetime` is the raw EXIF string; an empty string means unknown.
    """

    coordinate: Coordinate | None = None
    direction: float | None = None
    datetime: str = ""


class SessionState(Enum):
    EMPTY = "empty"
    BROWSING = "browsing"


class UnsavedResolution(Enum):
    """Choices offered when leaving a photo with unsaved text."""

    DISCARD = "discard"
    SAVE = "save"


class HistoryPlaceholder:
    """Marker shown first in the history picker; carries no text."""

    _instance: HistoryPlaceholder | None = None
    label = "(Prior Text)"

    def __new__(cls) -> HistoryPlaceholder:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "HISTORY_PLACEHOLDER"

    def __str__(self) -> str:
        return self.label


HISTORY_PLACEHOLDER = HistoryPlaceholder()

DEFAULT_MAP_CENTER = Coordinate(latitude=45.0, longitude=-90.0)
DEFAULT_MAP_SPAN = MapSpan(latitude_delta=0.02, longitude_delta=0.02)
