"""Qt adapters for the session's external collaborators.

Folder selection, the unsaved-changes prompt and the clipboard are thin
wrappers over Qt dialogs and services so the view-model stays toolkit-free.
"""

from __future__ import annotations

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget
from loguru import logger

from app.viewmodels.session_vm import PhotoSessionVM
from core.models import UnsavedResolution


class QtFolderPicker:
    """Directory chooser backed by `QFileDialog`."""

    def __init__(self, parent: QWidget | None = None, start_dir: str = "") -> None:
        self.parent = parent
        self.start_dir = start_dir

    def pick_folder(self) -> str | None:
        folder = QFileDialog.getExistingDirectory(
            self.parent,
            "Select a folder with images",
            self.start_dir,
            QFileDialog.Option.ShowDirsOnly,
        )
        if not folder:
            return None
        self.start_dir = folder
        return folder


class QtUnsavedChangesPrompt:
    """Modal Discard/Save question shown before leaving an edited photo."""

    def __init__(self, parent: QWidget | None = None) -> None:
        self.parent = parent

    def __call__(self, session: PhotoSessionVM) -> UnsavedResolution:
        box = QMessageBox(self.parent)
        box.setIcon(QMessageBox.Icon.Warning)
        box.setWindowTitle("Unsaved Text")
        box.setText("Text changes not saved.")
        photo = session.current_photo
        if photo is not None:
            box.setInformativeText(f"Save the text for {photo.file_name} before moving on?")
        discard_btn = box.addButton("Discard", QMessageBox.ButtonRole.DestructiveRole)
        save_btn = box.addButton("Save", QMessageBox.ButtonRole.AcceptRole)
        box.setDefaultButton(save_btn)
        box.exec()
        if box.clickedButton() is discard_btn:
            return UnsavedResolution.DISCARD
        return UnsavedResolution.SAVE


class QtClipboard:
    """System clipboard access through `QGuiApplication.clipboard()`."""

    def set_text(self, text: str) -> bool:
        try:
            clipboard = QGuiApplication.clipboard()
            if clipboard is None:
                return False
            clipboard.setText(text)
            return clipboard.text() == text
        except RuntimeError as ex:
            logger.error("Clipboard unavailable: {}", ex)
            return False
