"""MainWindow: text-only front end for the photo session.

Shows the current photo's path, capture date, position and heading, and the
annotation editor with its history picker. Image and map rendering are not
part of this window.
"""

from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtGui import QAction, QDesktopServices, QIntValidator
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.picker_vm import HistoryPickerVM
from app.viewmodels.session_vm import PhotoSessionVM
from app.views.handlers.dialog_handler import QtClipboard, QtFolderPicker, QtUnsavedChangesPrompt
from core.services.interfaces import (
    EVENT_HISTORY_CHANGED,
    EVENT_SAVE_FAILED,
    EVENT_SAVED,
    SaveResult,
    SessionEvent,
)
from infrastructure.logging import find_latest_log_file


class MainWindow(QMainWindow):
    """Main application window bound to a `PhotoSessionVM`."""

    def __init__(self, session: PhotoSessionVM, log_dir: str | None = None) -> None:
        super().__init__()
        self._session = session
        self._picker = HistoryPickerVM(session)
        self._log_dir = log_dir
        self._folder_picker = QtFolderPicker(self)
        self._clipboard = QtClipboard()
        session.set_resolver(QtUnsavedChangesPrompt(self))

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()
        session.subscribe(self._on_session_event)

        self.setWindowTitle("Photo Annotate")
        self.resize(900, 520)
        self._sync_all()

    # UI construction
    def _setup_ui(self) -> None:
        self.lbl_path = QLabel()
        self.lbl_date = QLabel()
        self.lbl_latlon = QLabel()
        self.lbl_direction = QLabel()
        self.lbl_map = QLabel()
        self.btn_copy = QPushButton("Copy LatLon")

        latlon_row = QHBoxLayout()
        latlon_row.addWidget(self.lbl_latlon, 1)
        latlon_row.addWidget(self.btn_copy)

        info = QFormLayout()
        info.addRow("Photo Path:", self.lbl_path)
        info.addRow("Date:", self.lbl_date)
        info.addRow("LatLon:", latlon_row)
        info.addRow("Direction:", self.lbl_direction)
        info.addRow("Map:", self.lbl_map)

        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("Filter")
        self.picker_combo = QComboBox()
        self.editor = QPlainTextEdit()
        self.editor.setFixedHeight(80)

        notes = QFormLayout()
        notes.addRow("Notes Filter:", self.filter_edit)
        notes.addRow("Notes:", self.picker_combo)

        self.btn_folder = QPushButton("Select Folder")
        self.btn_save = QPushButton("Save")
        self.btn_prev = QPushButton("Previous")
        self.btn_next = QPushButton("Next")
        self.number_edit = QLineEdit()
        self.number_edit.setFixedWidth(50)
        self.number_edit.setValidator(QIntValidator(0, 999999, self))
        self.lbl_count = QLabel()

        nav = QHBoxLayout()
        for w in (self.btn_folder, self.btn_save, self.btn_prev, self.btn_next):
            nav.addWidget(w)
        nav.addWidget(QLabel("Photo:"))
        nav.addWidget(self.number_edit)
        nav.addWidget(self.lbl_count)
        nav.addStretch(1)

        root = QVBoxLayout()
        root.addLayout(info)
        root.addStretch(1)
        root.addLayout(notes)
        root.addWidget(self.editor)
        root.addLayout(nav)

        central = QWidget()
        central.setLayout(root)
        self.setCentralWidget(central)

    def _setup_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        act_open = QAction("Select Folder...", self)
        act_open.triggered.connect(self._select_folder)
        file_menu.addAction(act_open)

        help_menu = self.menuBar().addMenu("&Help")
        act_log = QAction("Open Latest Log", self)
        act_log.triggered.connect(self._open_latest_log)
        help_menu.addAction(act_log)

    def _connect_signals(self) -> None:
        self.btn_folder.clicked.connect(self._select_folder)
        self.btn_save.clicked.connect(self._save)
        self.btn_prev.clicked.connect(lambda: self._session.previous_photo())
        self.btn_next.clicked.connect(lambda: self._session.next_photo())
        self.btn_copy.clicked.connect(self._copy_lat_lon)
        self.number_edit.editingFinished.connect(self._on_number_entered)
        self.filter_edit.textChanged.connect(self._on_filter_changed)
        self.picker_combo.currentIndexChanged.connect(self._on_picker_index)
        self.editor.textChanged.connect(
            lambda: self._session.edit_draft(self.editor.toPlainText())
        )

    # Actions
    def _select_folder(self) -> None:
        if self._session.select_folder(self._folder_picker):
            self.statusBar().showMessage(f"{self._session.count} photos", 3000)

    def _save(self) -> None:
        if self._session.can_save:
            self._session.save()

    def _copy_lat_lon(self) -> None:
        if not self._session.copy_lat_lon(self._clipboard):
            self.statusBar().showMessage("Could not copy to clipboard", 3000)

    def _open_latest_log(self) -> None:
        path = find_latest_log_file(self._log_dir)
        if path is None:
            self.statusBar().showMessage("No log file found", 3000)
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(path)))

    def _on_number_entered(self) -> None:
        text = self.number_edit.text()
        if self._session.busy or text == str(self._session.photo_number):
            return
        self._session.jump_to(text)

    def _on_filter_changed(self, text: str) -> None:
        self._picker.set_filter(text)
        self._sync_picker()

    def _on_picker_index(self, row: int) -> None:
        if 0 <= row < len(self._picker.items):
            self._picker.select_index(row)

    # Session -> widgets
    def _on_session_event(self, event: SessionEvent) -> None:
        if event.kind == EVENT_HISTORY_CHANGED:
            self._sync_picker()
        elif event.kind == EVENT_SAVED and isinstance(event.detail, SaveResult):
            self.statusBar().showMessage(f"Saved {event.detail.path}", 3000)
        elif event.kind == EVENT_SAVE_FAILED and isinstance(event.detail, SaveResult):
            logger.warning("Save failed: {}", event.detail.error)
            self.statusBar().showMessage(f"Save failed: {event.detail.error}", 6000)
        self._sync_state()

    def _sync_all(self) -> None:
        self._sync_picker()
        self._sync_state()

    def _sync_picker(self) -> None:
        self.picker_combo.blockSignals(True)
        try:
            self.picker_combo.clear()
            self.picker_combo.addItems([str(item) for item in self._picker.items])
            self.picker_combo.setCurrentIndex(0)
        finally:
            self.picker_combo.blockSignals(False)

    def _sync_state(self) -> None:
        s = self._session
        photo = s.current_photo
        self.lbl_path.setText(photo.file_path if photo else "")
        self.lbl_date.setText(photo.date_text if photo else "")
        self.lbl_latlon.setText(photo.lat_lon_text if photo else "")
        self.lbl_direction.setText(photo.direction_text if photo else "")
        region = s.map_region
        self.lbl_map.setText(
            f"{region.center.latitude:.4f}, {region.center.longitude:.4f} "
            f"(span {region.span.latitude_delta:g} x {region.span.longitude_delta:g})"
        )

        if self.editor.toPlainText() != s.draft_text:
            self.editor.blockSignals(True)
            try:
                self.editor.setPlainText(s.draft_text)
            finally:
                self.editor.blockSignals(False)
        if self.number_edit.text() != str(s.photo_number):
            self.number_edit.setText(str(s.photo_number))
        self.lbl_count.setText(f"of {s.count}")

        self.btn_save.setEnabled(s.can_save)
        self.btn_prev.setEnabled(s.can_go_prev)
        self.btn_next.setEnabled(s.can_go_next)
        self.btn_copy.setEnabled(photo is not None and photo.has_location)
