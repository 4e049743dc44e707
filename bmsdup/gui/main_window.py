from __future__ import annotations
import logging
import threading
from pathlib import Path
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..checker import MESSAGE_NO_DUPLICATES, DuplicateChecker
from ..errors import EngineNotReady
from ..settings import Settings, ensure_app_dirs, save_prefs
from .duplicates_view import DuplicatesView

log = logging.getLogger("bmsdup.gui")

INTRO = (
    "Checks the BMS files loaded by your BMS player for duplicates and lists them.\n"
    "Everything runs locally; the database never leaves this computer."
)
INSTRUCTIONS = (
    "beatoraja: select songdata.db in the beatoraja root directory\n"
    "LR2: select song.db in the LR2files/Database directory"
)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: Settings, checker: DuplicateChecker, initial_path: Optional[Path] = None):
        super().__init__()
        self.settings = settings
        self.checker = checker
        ensure_app_dirs(self.settings)
        self._pending_path = initial_path
        self._worker_error: Optional[str] = None
        self.setWindowTitle("BMS Duplicate Checker")
        self.resize(self.settings.window_width, self.settings.window_height)

        w = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(w)
        heading = QtWidgets.QLabel("BMS Duplicate Checker")
        font = heading.font()
        font.setPointSize(font.pointSize() + 6)
        font.setBold(True)
        heading.setFont(font)
        layout.addWidget(heading)
        intro = QtWidgets.QLabel(INTRO)
        intro.setWordWrap(True)
        layout.addWidget(intro)
        layout.addWidget(QtWidgets.QLabel(INSTRUCTIONS))

        toolbar = QtWidgets.QHBoxLayout()
        self.btn_select = QtWidgets.QPushButton("Select Database...")
        self.btn_select.clicked.connect(self._select_file)
        self.btn_select.setEnabled(False)
        self.status_label = QtWidgets.QLabel("")
        toolbar.addWidget(self.btn_select)
        toolbar.addWidget(self.status_label, 1)
        layout.addLayout(toolbar)

        self.view = DuplicatesView(self, self.settings)
        layout.addWidget(self.view, 1)
        self.no_dup_label = QtWidgets.QLabel(MESSAGE_NO_DUPLICATES)
        self.no_dup_label.setVisible(False)
        layout.addWidget(self.no_dup_label)
        self.setCentralWidget(w)

        self.status = QtWidgets.QStatusBar()
        self.setStatusBar(self.status)
        self._status_engine = QtWidgets.QLabel("SQLite: initializing")
        self.status.addPermanentWidget(self._status_engine)

        self._start_engine()

    # Engine lifecycle
    def _start_engine(self):
        self._set_status(self.checker.status or "Initializing...")

        def worker():
            try:
                self.checker.initialize()
            except EngineNotReady as e:
                log.error(f"Engine initialization failed: {e}")
                self._worker_error = str(e)
            QtCore.QMetaObject.invokeMethod(self, "_engine_done", QtCore.Qt.QueuedConnection)

        threading.Thread(target=worker, daemon=True).start()

    @QtCore.Slot()
    def _engine_done(self):
        if self._worker_error:
            self._set_status(self.checker.status)
            self._status_engine.setText("SQLite: unavailable")
            QtWidgets.QMessageBox.critical(self, "Initialization failed", self._worker_error)
            self._worker_error = None
            return
        self._status_engine.setText(f"SQLite {self.checker.engine.sqlite_version}")
        self._set_status(self.checker.status)
        self.btn_select.setEnabled(True)
        if self._pending_path is not None:
            path, self._pending_path = self._pending_path, None
            self._start_check(path)

    # Checking
    def _select_file(self):
        start = self.settings.last_dir or str(Path.home())
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Select Song Database", start, "Song database (*.db)")
        if not path:
            self.checker.check(None, bytes)
            self._apply_result()
            return
        self.settings.last_dir = str(Path(path).parent)
        self._start_check(Path(path))

    def _start_check(self, path: Path):
        self.btn_select.setEnabled(False)
        self._set_status("Loading...")

        def worker():
            try:
                self.checker.check_path(path)
            except Exception as e:
                log.exception(f"Unexpected error while checking {path}")
                self._worker_error = str(e)
            QtCore.QMetaObject.invokeMethod(self, "_check_done", QtCore.Qt.QueuedConnection)

        threading.Thread(target=worker, daemon=True).start()

    @QtCore.Slot()
    def _check_done(self):
        self.btn_select.setEnabled(True)
        if self._worker_error:
            QtWidgets.QMessageBox.critical(self, "Check failed", self._worker_error)
            self._worker_error = None
        if self.checker.alert:
            QtWidgets.QMessageBox.warning(self, "Unknown file", self.checker.alert)
        self._apply_result()

    def _apply_result(self):
        self._set_status(self.checker.status)
        self.view.set_records(self.checker.songs, self.checker.library_root)
        self.no_dup_label.setVisible(self.checker.no_duplicates)

    def _set_status(self, text: str):
        self.status_label.setText(text)

    def closeEvent(self, event: QtGui.QCloseEvent):
        self.settings.window_width = self.width()
        self.settings.window_height = self.height()
        save_prefs(self.settings)
        super().closeEvent(event)
