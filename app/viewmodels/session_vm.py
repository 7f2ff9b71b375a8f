"""ViewModel driving folder browsing, metadata display and annotation editing.

`PhotoSessionVM` is a plain state machine with two states:

- EMPTY: no photos loaded.
- BROWSING: at least one photo, `index` points at the current one.

Every public command runs to completion before another may start. Listeners
registered with `subscribe` receive `SessionEvent`s after the command that
produced them has finished, so they may issue new commands. Events from such
nested commands are delivered after the rest of the current batch. A command
issued while another is still running (for example from the unsaved-changes
resolver) raises `SessionBusyError`.
"""

from __future__ import annotations

from collections.abc import Callable
import functools
import os
from typing import Any, TypeVar

from loguru import logger

from app.viewmodels.photo_vm import PhotoVM, format_lat_lon
from core.models import (
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_SPAN,
    Coordinate,
    MapRegion,
    MapSpan,
    PhotoMetadata,
    SessionState,
    UnsavedResolution,
)
from core.services.interfaces import (
    EVENT_DRAFT_CHANGED,
    EVENT_FOLDER_LOADED,
    EVENT_HISTORY_CHANGED,
    EVENT_MAP_SPAN_CHANGED,
    EVENT_NUMBER_CHANGED,
    EVENT_PHOTO_CHANGED,
    EVENT_SAVE_FAILED,
    EVENT_SAVED,
    IAnnotationStore,
    IClipboard,
    IFolderPicker,
    IMetadataExtractor,
    SaveResult,
    SessionEvent,
)
from core.services.text_history import TextHistory
from infrastructure.utils import list_photo_paths

UnsavedResolver = Callable[["PhotoSessionVM"], UnsavedResolution]
SessionListener = Callable[[SessionEvent], None]

_F = TypeVar("_F", bound=Callable[..., Any])


class SessionBusyError(RuntimeError):
    """Raised when a command starts while another one is still running."""


def _save_on_leave(_session: PhotoSessionVM) -> UnsavedResolution:
    return UnsavedResolution.SAVE


def _command(func: _F) -> _F:
    """Serialize a public command and deliver its events once it finishes."""

    @functools.wraps(func)
    def wrapper(self: PhotoSessionVM, *args: Any, **kwargs: Any) -> Any:
        if self._busy:
            raise SessionBusyError(f"{func.__name__} called while another command is running")
        self._busy = True
        try:
            return func(self, *args, **kwargs)
        finally:
            self._busy = False
            self._flush_events()

    return wrapper  # type: ignore[return-value]


class PhotoSessionVM:
    """Photo session view-model.

    Owns the sorted photo list, the current position, the current metadata,
    and the saved/draft annotation texts. `dirty` is always
    `draft_text != saved_text`.
    """

    def __init__(
        self,
        extractor: IMetadataExtractor,
        store: IAnnotationStore,
        resolver: UnsavedResolver | None = None,
        history: TextHistory | None = None,
        default_center: Coordinate = DEFAULT_MAP_CENTER,
        default_span: MapSpan = DEFAULT_MAP_SPAN,
    ) -> None:
        """Create a session.

        Args:
            extractor: Metadata source, called once per photo change.
            store: Sidecar persistence for annotation text.
            resolver: Decides between discard and save when leaving a photo
                with unsaved text. Defaults to saving.
            history: Saved-text history (defaults to a new `TextHistory`).
            default_center: Map center used until a photo with GPS is shown.
            default_span: Map span used until the viewport reports one.
        """
        self._extractor = extractor
        self._store = store
        self._resolver: UnsavedResolver = resolver or _save_on_leave
        self._history = history if history is not None else TextHistory()

        self._folder: str | None = None
        self._paths: list[str] = []
        self._index = 0
        self._photo_number = 0
        self._metadata = PhotoMetadata()
        self._saved_text = ""
        self._draft_text = ""
        self._dirty = False
        self._can_go_next = False
        self._can_go_prev = False
        self._map_center = default_center
        self._map_span = default_span

        self._listeners: list[SessionListener] = []
        self._pending: list[SessionEvent] = []
        self._busy = False
        self._flushing = False

    # Notifications
    def subscribe(self, listener: SessionListener) -> None:
        """Register `listener(event)` for change notifications."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_resolver(self, resolver: UnsavedResolver) -> None:
        """Replace the unsaved-changes resolver."""
        self._resolver = resolver

    def _emit(self, kind: str, detail: object | None = None) -> None:
        self._pending.append(SessionEvent(kind=kind, detail=detail))

    def _flush_events(self) -> None:
        # Events from commands issued by listeners queue behind the current batch.
        if self._flushing:
            return
        self._flushing = True
        try:
            while self._pending:
                event = self._pending.pop(0)
                for listener in list(self._listeners):
                    listener(event)
        finally:
            self._flushing = False

    # Queries
    @property
    def state(self) -> SessionState:
        return SessionState.BROWSING if self._paths else SessionState.EMPTY

    @property
    def busy(self) -> bool:
        """True while a command is running."""
        return self._busy

    @property
    def folder(self) -> str | None:
        """Last successfully loaded folder."""
        return self._folder

    @property
    def photo_paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    @property
    def count(self) -> int:
        return len(self._paths)

    @property
    def index(self) -> int:
        return self._index

    @property
    def photo_number(self) -> int:
        """One-based number of the current photo; 0 when empty."""
        return self._photo_number

    @property
    def current_path(self) -> str:
        return self._paths[self._index] if self._paths else ""

    @property
    def current_metadata(self) -> PhotoMetadata:
        return self._metadata

    @property
    def current_photo(self) -> PhotoVM | None:
        if not self._paths:
            return None
        return PhotoVM(file_path=self.current_path, metadata=self._metadata)

    @property
    def saved_text(self) -> str:
        return self._saved_text

    @property
    def draft_text(self) -> str:
        return self._draft_text

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def can_save(self) -> bool:
        return self._dirty and bool(self._paths)

    @property
    def can_go_next(self) -> bool:
        return self._can_go_next

    @property
    def can_go_prev(self) -> bool:
        return self._can_go_prev

    @property
    def history(self) -> TextHistory:
        return self._history

    @property
    def lat_lon_string(self) -> str:
        return format_lat_lon(self._metadata.coordinate)

    @property
    def map_span(self) -> MapSpan:
        return self._map_span

    @property
    def map_region(self) -> MapRegion:
        """Region to show: the current photo's position, else the last one shown."""
        return MapRegion(center=self._map_center, span=self._map_span)

    # Derived state
    def _update_dirty(self) -> None:
        self._dirty = self._draft_text != self._saved_text

    def _update_navigation(self) -> None:
        count = len(self._paths)
        self._can_go_next = count > 0 and self._index < count - 1
        self._can_go_prev = count > 0 and self._index > 0

    def _set_photo_number(self, number: int) -> None:
        self._photo_number = number
        self._emit(EVENT_NUMBER_CHANGED, number)

    def _refresh(self) -> None:
        if self._paths:
            path = self._paths[self._index]
            self._metadata = self._extractor.extract(path)
            if self._metadata.coordinate is not None:
                self._map_center = self._metadata.coordinate
            self._saved_text = self._store.load(path)
            logger.debug("Current photo {} / {}: {}", self._index + 1, len(self._paths), path)
        else:
            self._metadata = PhotoMetadata()
            self._saved_text = ""
        self._draft_text = self._saved_text
        self._update_dirty()
        self._update_navigation()
        self._emit(EVENT_PHOTO_CHANGED)

    # Commands
    def select_folder(self, picker: IFolderPicker) -> bool:
        """Ask `picker` for a folder and load it; cancel keeps the current state."""
        folder = picker.pick_folder()
        if not folder:
            logger.info("Folder selection cancelled")
            return False
        return self.load_folder(folder)

    @_command
    def load_folder(self, folder: str) -> bool:
        """Load photos directly inside `folder`.

        Returns False, leaving the session untouched, when the folder cannot
        be read or unsaved text could not be saved.
        """
        try:
            paths = list_photo_paths(folder)
        except OSError as ex:
            logger.error("List photos failed for {}: {}", folder, ex)
            return False
        if not self._guard():
            return False

        self._folder = os.path.abspath(folder)
        self._paths = paths
        self._index = 0
        self._set_photo_number(1 if paths else 0)
        self._refresh()
        self._emit(EVENT_FOLDER_LOADED, self._folder)
        logger.info("Loaded folder {} ({} photos)", self._folder, len(paths))
        return True

    @_command
    def refresh_current(self) -> None:
        """Re-read metadata and saved text for the current photo."""
        self._refresh()

    @_command
    def next_photo(self) -> bool:
        """Move to the next photo. Returns True if the current photo changed."""
        return self._step(1)

    @_command
    def previous_photo(self) -> bool:
        """Move to the previous photo. Returns True if the current photo changed."""
        return self._step(-1)

    def _step(self, delta: int) -> bool:
        if not self._paths:
            return False
        if not self._guard():
            return False
        new_index = min(max(self._index + delta, 0), len(self._paths) - 1)
        changed = new_index != self._index
        self._index = new_index
        self._set_photo_number(self._index + 1)
        if changed:
            self._refresh()
        else:
            self._update_navigation()
        return changed

    @_command
    def jump_to(self, number: int | str) -> bool:
        """Show photo `number` (one-based).

        Out-of-range or non-numeric input keeps the current photo and resets
        the displayed number to it. The current photo is always re-read.
        """
        if not self._guard():
            self._set_photo_number(self._index + 1 if self._paths else 0)
            return False
        try:
            requested = int(number)
        except (TypeError, ValueError):
            requested = 0
        if 1 <= requested <= len(self._paths):
            self._index = requested - 1
        else:
            logger.debug("Photo number {} out of range, reverting", number)
        self._set_photo_number(self._index + 1 if self._paths else 0)
        self._refresh()
        return True

    @_command
    def edit_draft(self, text: str) -> None:
        """Replace the draft annotation text."""
        self._draft_text = text
        self._update_dirty()
        self._emit(EVENT_DRAFT_CHANGED)

    @_command
    def save(self) -> SaveResult | None:
        """Save the draft for the current photo.

        Returns None when there is nothing to save (no photo, or no unsaved
        change); otherwise the store's `SaveResult`.
        """
        return self._save()

    def _save(self) -> SaveResult | None:
        if not self._paths:
            logger.debug("Save ignored: no photo loaded")
            return None
        if not self._dirty:
            return None

        path = self._paths[self._index]
        text = self._draft_text
        previous = self._saved_text
        self._history.insert_front(text)
        self._emit(EVENT_HISTORY_CHANGED)
        self._saved_text = text
        result = self._store.save(path, text)
        if not result.success:
            self._saved_text = previous
        self._update_dirty()
        self._emit(EVENT_SAVED if result.success else EVENT_SAVE_FAILED, result)
        return result

    def _guard(self) -> bool:
        """Resolve unsaved text before leaving the current photo.

        Returns False when the user chose to save and the save failed.
        """
        if not self._dirty:
            return True
        if not self._paths:
            # No photo to save to.
            self._discard()
            return True
        resolution = self._resolver(self)
        if resolution is UnsavedResolution.SAVE:
            result = self._save()
            if result is None or not result.success:
                logger.warning("Navigation cancelled: unsaved text for {}", self.current_path)
                return False
            return True
        if resolution is UnsavedResolution.DISCARD:
            logger.info("Discarded unsaved text for {}", self.current_path)
            self._discard()
            return True
        raise ValueError(f"Unknown unsaved-changes resolution: {resolution!r}")

    def _discard(self) -> None:
        self._draft_text = self._saved_text
        self._update_dirty()
        self._emit(EVENT_DRAFT_CHANGED)

    @_command
    def update_map_span(self, span: MapSpan | None) -> None:
        """Remember the viewport span reported by the map."""
        if span is None:
            return
        self._map_span = span
        self._emit(EVENT_MAP_SPAN_CHANGED, span)

    def copy_lat_lon(self, clipboard: IClipboard) -> bool:
        """Put the current "lat, lon" string on `clipboard`."""
        text = self.lat_lon_string
        ok = bool(clipboard.set_text(text))
        if not ok:
            logger.warning("Clipboard refused lat/lon text: {!r}", text)
        return ok
