"""Keyboard driven file browser widget."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from PySide6.QtCore import QDir, QEvent, QModelIndex, QObject, Qt, Signal
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFileSystemModel,
    QListView,
    QVBoxLayout,
    QWidget,
)

__all__ = ["COMMAND_KEYS", "FileBrowser"]

logger = logging.getLogger(__name__)

_COMMAND_KEY_NAMES = {
    Qt.Key_Down: "move-next",
    Qt.Key_N: "move-next",
    Qt.Key_J: "move-next",
    Qt.Key_Up: "move-previous",
    Qt.Key_P: "move-previous",
    Qt.Key_K: "move-previous",
    Qt.Key_M: "mark",
    Qt.Key_U: "unmark",
    Qt.Key_Backspace: "unmark-backward",
    Qt.Key_D: "delete-marker",
    Qt.Key_Return: "open-file",
    Qt.Key_Enter: "open-file",
    Qt.Key_AsciiCircum: "up-directory",
}


def _key_value(key: object) -> int:
    return int(getattr(key, "value", key))  # type: ignore[call-overload]


COMMAND_KEYS: dict[int, str] = {_key_value(key): command for key, command in _COMMAND_KEY_NAMES.items()}
"""Key codes handled by the browser and the navigation command each one runs."""


def _expand_path(path: Path | str) -> Path:
    """Resolve *path* to an existing directory, falling back to the home directory."""

    resolved = Path(path).expanduser()
    if resolved.is_dir():
        return resolved.resolve()
    if resolved.exists():
        return resolved.parent.resolve()
    return Path.home().resolve()


class FileBrowser(QWidget):
    """List a directory and report every cursor movement as a command.

    ``navigated`` carries the command id (``"move-next"``, ``"mark"`` …)
    after the command has run, so listeners can read :meth:`current_path`.
    Mouse selection is reported as ``"select"``.
    """

    navigated = Signal(str)
    directoryChanged = Signal(str)
    fileOpened = Signal(str)
    marksChanged = Signal(int)

    def __init__(self, root_path: Path | str | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        self._marked: set[Path] = set()
        self._flagged: set[Path] = set()
        self._pending_command: str | None = None

        self._fs_model = QFileSystemModel(self)
        self._fs_model.setFilter(QDir.AllEntries | QDir.NoDotAndDotDot | QDir.Hidden)
        self._fs_model.setReadOnly(True)

        self._list_view = QListView(self)
        self._list_view.setObjectName("browserList")
        self._list_view.setModel(self._fs_model)
        self._list_view.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self._list_view.setSelectionMode(QAbstractItemView.SingleSelection)
        self._list_view.setUniformItemSizes(True)
        self._list_view.installEventFilter(self)
        self.setFocusProxy(self._list_view)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._list_view)

        selection = self._list_view.selectionModel()
        if selection is not None:
            selection.currentChanged.connect(self._on_current_changed)
        self._list_view.doubleClicked.connect(lambda _index: self.run_command("open-file"))

        self.set_root(root_path or Path.cwd())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def list_view(self) -> QListView:
        return self._list_view

    def current_directory(self) -> Path:
        return Path(self._fs_model.rootPath())

    def current_path(self) -> Path | None:
        """Return the entry under the cursor, if any."""

        index = self._list_view.currentIndex()
        if not index.isValid() or index.parent() != self._list_view.rootIndex():
            return None
        return Path(self._fs_model.filePath(index))

    def marked_paths(self) -> list[Path]:
        return sorted(self._marked)

    def flagged_paths(self) -> list[Path]:
        return sorted(self._flagged)

    def contains_widget(self, widget: QWidget | None) -> bool:
        """Return ``True`` when *widget* is this browser or one of its children."""

        return widget is not None and (widget is self or self.isAncestorOf(widget))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def run_command(self, command: str) -> None:
        """Run navigation *command* and emit :attr:`navigated` once."""

        actions: dict[str, Callable[[], None]] = {
            "move-next": lambda: self._move(1),
            "move-previous": lambda: self._move(-1),
            "mark": lambda: self._set_mark(self._marked, add=True, step=1),
            "unmark": lambda: self._set_mark(self._marked, add=False, step=1),
            "unmark-backward": self._unmark_backward,
            "delete-marker": lambda: self._set_mark(self._flagged, add=True, step=1),
            "open-file": self._open_current,
            "up-directory": self._up_directory,
        }
        action = actions.get(command)
        if action is None:
            raise ValueError(f"Unknown browser command: {command}")
        self._dispatch(command, action)

    def goto_file(self, path: Path | str) -> None:
        """Jump to *path*, switching directory when needed."""

        target = Path(path).expanduser().resolve()

        def _goto() -> None:
            if target.parent != self.current_directory():
                self._apply_root(target.parent)
            self._select(self._fs_model.index(str(target)))

        self._dispatch("goto-file", _goto)

    def set_root(self, root_path: Path | str) -> None:
        """Show the directory *root_path*."""

        self._apply_root(_expand_path(root_path))

    # ------------------------------------------------------------------
    # Qt overrides
    # ------------------------------------------------------------------
    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if watched is self._list_view and event.type() == QEvent.KeyPress:
            key_event: QKeyEvent = event  # type: ignore[assignment]
            if key_event.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
                return False
            command = COMMAND_KEYS.get(_key_value(key_event.key()))
            if command is not None:
                self.run_command(command)
                return True
        return super().eventFilter(watched, event)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _dispatch(self, command: str, action: Callable[[], None]) -> None:
        self._pending_command = command
        try:
            action()
        finally:
            self._pending_command = None
        self.navigated.emit(command)

    def _apply_root(self, root_path: Path) -> None:
        root_index = self._fs_model.setRootPath(str(root_path))
        self._list_view.setRootIndex(root_index)
        self._list_view.setCurrentIndex(QModelIndex())
        self.directoryChanged.emit(str(root_path))

    def _move(self, step: int) -> None:
        root = self._list_view.rootIndex()
        rows = self._fs_model.rowCount(root)
        if rows == 0:
            return
        current = self._list_view.currentIndex()
        row = current.row() + step if current.isValid() else (0 if step > 0 else rows - 1)
        row = max(0, min(rows - 1, row))
        self._select(self._fs_model.index(row, 0, root))

    def _select(self, index: QModelIndex) -> None:
        if index.isValid():
            self._list_view.setCurrentIndex(index)
            self._list_view.scrollTo(index)

    def _set_mark(self, marks: set[Path], *, add: bool, step: int) -> None:
        path = self.current_path()
        if path is not None:
            if add:
                marks.add(path)
            else:
                self._marked.discard(path)
                self._flagged.discard(path)
            self.marksChanged.emit(len(self._marked) + len(self._flagged))
        self._move(step)

    def _unmark_backward(self) -> None:
        self._move(-1)
        path = self.current_path()
        if path is not None:
            self._marked.discard(path)
            self._flagged.discard(path)
            self.marksChanged.emit(len(self._marked) + len(self._flagged))

    def _open_current(self) -> None:
        path = self.current_path()
        if path is None:
            return
        if path.is_dir():
            self._apply_root(path)
            return
        self.fileOpened.emit(str(path))

    def _up_directory(self) -> None:
        current = self.current_directory()
        parent = current.parent
        if parent == current:
            return
        self._apply_root(parent)
        self._select(self._fs_model.index(str(current)))

    def _on_current_changed(self, current: QModelIndex, previous: QModelIndex) -> None:
        del previous, current
        if self._pending_command is None:
            self.navigated.emit("select")
