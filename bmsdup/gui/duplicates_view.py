from __future__ import annotations
import hashlib
import logging
from pathlib import Path
from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..library import resolve_song_path, trash_song_file
from ..links import links_for
from ..models import SongRecord
from ..settings import Settings

log = logging.getLogger("bmsdup.gui")

HEADERS = ["Title", "Paths", "LR2IR", "Mocha"]
COL_TITLE, COL_PATHS, COL_LR2IR, COL_MOCHA = range(4)

URL_ROLE = QtCore.Qt.UserRole + 1
PATH_ROLE = QtCore.Qt.UserRole + 2


class DuplicatesView(QtWidgets.QWidget):
    """One top-level row per duplicate group, one child row per path."""

    def __init__(self, parent, settings: Settings):
        super().__init__(parent)
        self.settings = settings
        self.root: Optional[Path] = None
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QtWidgets.QHBoxLayout()
        self.search = QtWidgets.QLineEdit()
        self.search.setPlaceholderText("Filter by title or path...")
        self.btn_open_folder = QtWidgets.QPushButton("Open Folder")
        self.btn_open_folder.clicked.connect(self.open_selected_folder)
        self.btn_trash = QtWidgets.QPushButton("Move to Trash")
        self.btn_trash.clicked.connect(self.trash_selected)
        self.btn_trash.setVisible(bool(settings.use_trash))
        toolbar.addWidget(self.search)
        toolbar.addWidget(self.btn_open_folder)
        toolbar.addWidget(self.btn_trash)
        layout.addLayout(toolbar)

        self.model = QtGui.QStandardItemModel()
        self.model.setHorizontalHeaderLabels(HEADERS)
        self.proxy = QtCore.QSortFilterProxyModel(self)
        self.proxy.setFilterCaseSensitivity(QtCore.Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.proxy.setRecursiveFilteringEnabled(True)
        self.proxy.setSourceModel(self.model)
        self.search.textChanged.connect(self.proxy.setFilterFixedString)

        self.tree = QtWidgets.QTreeView()
        self.tree.setModel(self.proxy)
        self.tree.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.tree.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.tree.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.tree.activated.connect(self._on_activated)
        self.tree.selectionModel().selectionChanged.connect(lambda *_: self._update_actions())
        header = self.tree.header()
        header.setStretchLastSection(False)
        header.setSectionResizeMode(COL_TITLE, QtWidgets.QHeaderView.Interactive)
        header.setSectionResizeMode(COL_PATHS, QtWidgets.QHeaderView.Stretch)
        self.tree.setColumnWidth(COL_TITLE, 320)
        layout.addWidget(self.tree)
        self._update_actions()

    def _color_for_group(self, key: str) -> QtGui.QColor:
        # Deterministic pastel color from hash prefix
        h = hashlib.sha1((key or "").encode("utf-8")).digest()
        r = (h[0] + 255) // 2
        g = (h[1] + 255) // 2
        b = (h[2] + 255) // 2
        return QtGui.QColor(r, g, b, 80)

    def _link_item(self, text: str, url: Optional[str]) -> QtGui.QStandardItem:
        if not url:
            return QtGui.QStandardItem("-")
        it = QtGui.QStandardItem(text)
        it.setData(url, URL_ROLE)
        it.setToolTip(url)
        font = it.font()
        font.setUnderline(True)
        it.setFont(font)
        it.setForeground(QtGui.QBrush(QtGui.QColor(0, 102, 204)))
        return it

    def set_records(self, records: List[SongRecord], root: Optional[Path] = None) -> None:
        self.root = root
        self.model.removeRows(0, self.model.rowCount())
        for rec in records:
            links = links_for(rec, self.settings)
            title = QtGui.QStandardItem(rec.display_title)
            count = QtGui.QStandardItem(f"{len(rec.paths)} entries")
            row = [title, count, self._link_item("LR2IR", links.lr2ir), self._link_item("Mocha", links.mocha)]
            bg = self._color_for_group(rec.key)
            for it in row:
                it.setBackground(bg)
            for p in rec.paths:
                path_item = QtGui.QStandardItem(p)
                path_item.setData(p, PATH_ROLE)
                title.appendRow([QtGui.QStandardItem(""), path_item, QtGui.QStandardItem(""), QtGui.QStandardItem("")])
            self.model.appendRow(row)
        self.tree.expandAll()
        self._update_actions()

    def clear(self) -> None:
        self.set_records([], None)

    def _on_activated(self, index: QtCore.QModelIndex) -> None:
        url = index.data(URL_ROLE)
        if url:
            QtGui.QDesktopServices.openUrl(QtCore.QUrl(url))

    def _selected_raw_path(self) -> Optional[str]:
        for idx in self.tree.selectionModel().selectedRows(COL_PATHS):
            raw = idx.data(PATH_ROLE)
            if raw:
                return raw
        return None

    def _selected_file(self) -> Optional[Path]:
        raw = self._selected_raw_path()
        if raw is None:
            return None
        return resolve_song_path(raw, self.root)

    def _update_actions(self) -> None:
        has_path = self._selected_file() is not None
        self.btn_open_folder.setEnabled(has_path)
        self.btn_trash.setEnabled(has_path and bool(self.settings.use_trash))

    def open_selected_folder(self) -> None:
        path = self._selected_file()
        if path is None:
            return
        folder = path.parent
        if not folder.is_dir():
            QtWidgets.QMessageBox.warning(self, "Open Folder", f"Folder not found:\n{folder}")
            return
        QtGui.QDesktopServices.openUrl(QtCore.QUrl.fromLocalFile(str(folder)))

    def trash_selected(self) -> None:
        path = self._selected_file()
        if path is None:
            return
        if QtWidgets.QMessageBox.question(self, "Move to Trash", f"Move this file to trash?\n{path}") != QtWidgets.QMessageBox.Yes:
            return
        try:
            trash_song_file(path)
        except OSError as e:
            log.error(f"Trash failed for {path}: {e}")
            QtWidgets.QMessageBox.warning(self, "Move to Trash", f"Failed: {e}")
            return
        idx = self.proxy.mapToSource(self.tree.selectionModel().selectedRows(COL_PATHS)[0])
        item = self.model.itemFromIndex(idx)
        font = item.font()
        font.setStrikeOut(True)
        item.setFont(font)
        item.setData(None, PATH_ROLE)
        self._update_actions()
        QtWidgets.QMessageBox.information(
            self, "Move to Trash", "File moved to trash.\nRebuild the song database in your player to drop the entry."
        )
