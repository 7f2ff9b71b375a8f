"""Core service interfaces and shared data structures.

This module defines the result dataclasses and collaborator protocols shared
by the infrastructure adapters, the view-models and the Qt views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from core.models import PhotoMetadata


@dataclass
class SaveResult:
    """Outcome of writing an annotation sidecar.

    Attributes:
        success: True when the sidecar was fully written.
        path: Sidecar path that was targeted.
        error: Failure reason when `success` is False.
    """

    success: bool
    path: str
    error: str | None = None


@dataclass
class SessionEvent:
    """Change notification emitted by the photo session.

    Attributes:
        kind: One of the `EVENT_*` names below.
        detail: Optional payload (e.g. a `SaveResult` for save events).
    """

    kind: str
    detail: object | None = None


EVENT_FOLDER_LOADED = "folder_loaded"
EVENT_PHOTO_CHANGED = "photo_changed"
EVENT_NUMBER_CHANGED = "number_changed"
EVENT_DRAFT_CHANGED = "draft_changed"
EVENT_SAVED = "saved"
EVENT_SAVE_FAILED = "save_failed"
EVENT_HISTORY_CHANGED = "history_changed"
EVENT_MAP_SPAN_CHANGED = "map_span_changed"


class IMetadataExtractor(Protocol):
    """Reads location, heading and capture time from a photo."""

    def extract(self, photo_path: str) -> PhotoMetadata:
        """Return metadata for `photo_path`; must not raise."""
        ...


class IAnnotationStore(Protocol):
    """Persists annotation text next to a photo."""

    def load(self, photo_path: str) -> str:
        """Return saved text or an empty string."""
        ...

    def save(self, photo_path: str, text: str) -> SaveResult:
        """Atomically write `text` for `photo_path`."""
        ...


class IFolderPicker(Protocol):
    def pick_folder(self) -> str | None:
        """Return a directory path, or None when the user cancels."""
        ...


class IClipboard(Protocol):
    def set_text(self, text: str) -> bool:
        """Place `text` on the clipboard and report success."""
        ...
