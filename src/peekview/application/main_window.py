"""Main Qt window for the peekview file browser."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QFileDialog, QInputDialog, QMainWindow

from ..config import get_config
from ..preview import MisuseError, PreviewController, UnreadableError
from ..ui.browser import FileBrowser
from ..ui.qt_host import PanelArea, QtBrowserHost
from .settings import AppSettings, load_app_settings, save_app_settings

WINDOW_TITLE = "peekview"
"""Base title of every browser window."""

STATUS_TIMEOUT_MS = 5000

logger = logging.getLogger(__name__)

__all__ = ["MainWindow", "WINDOW_TITLE"]


class MainWindow(QMainWindow):
    """A browser window; each window is its own preview context."""

    def __init__(
        self,
        controller: PreviewController | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        config = get_config()
        self._settings = settings or load_app_settings(fallback_root=config.start_directory)
        self._controller = controller or PreviewController()

        self._browser = FileBrowser(config.start_directory, self)
        self._browser.setObjectName("fileBrowser")
        self._area = PanelArea(self._browser, self)
        self.setCentralWidget(self._area)

        self._host = QtBrowserHost(self._area, notifier=self._show_status, parent=self)
        self._browser.fileOpened.connect(self._open_file)
        self._browser.directoryChanged.connect(self._update_title)
        self._browser.marksChanged.connect(lambda count: self._show_status(f"{count} marked"))

        self._preview_action = QAction("&Preview Selection", self)
        self._preview_action.setCheckable(True)
        self._preview_action.setShortcut(QKeySequence("Ctrl+P"))
        self._preview_action.triggered.connect(self.toggle_preview)

        self._hex_action = QAction("Toggle &Hex View", self)
        self._hex_action.setShortcut(QKeySequence("Ctrl+H"))
        self._hex_action.triggered.connect(self.toggle_hex_view)

        self._build_menus()
        self.resize(1280, 800)
        self._update_title(str(self._browser.current_directory()))

        if self._settings.preview_enabled:
            self._run_preview_command(lambda: self._controller.enable(self._host))
        self._sync_preview_action()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def host(self) -> QtBrowserHost:
        return self._host

    @property
    def browser(self) -> FileBrowser:
        return self._browser

    @property
    def controller(self) -> PreviewController:
        return self._controller

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def toggle_preview(self) -> None:
        """Enable or disable previews for this window."""

        self._run_preview_command(lambda: self._controller.toggle(self._host))
        self._sync_preview_action()

    def toggle_hex_view(self) -> None:
        """Switch the visible preview between normal and hex rendering."""

        self._run_preview_command(lambda: self._controller.toggle_hex_view(self._host))

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._settings = replace(
            self._settings,
            start_directory=self._browser.current_directory(),
            preview_enabled=self._controller.is_enabled(self._host),
        )
        try:
            save_app_settings(self._settings)
        except Exception:  # noqa: BLE001 - never block closing the window
            logger.exception("Failed to persist settings")
        if self._controller.is_enabled(self._host):
            self._controller.disable(self._host)
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        open_dir_action = QAction("Open &Directory…", self)
        open_dir_action.setShortcut(QKeySequence.Open)
        open_dir_action.triggered.connect(self._choose_directory)
        file_menu.addAction(open_dir_action)

        goto_action = QAction("&Go to File…", self)
        goto_action.setShortcut(QKeySequence("Ctrl+G"))
        goto_action.triggered.connect(self._goto_file)
        file_menu.addAction(goto_action)

        close_panels_action = QAction("&Close Opened Files", self)
        close_panels_action.setShortcut(QKeySequence("Ctrl+W"))
        close_panels_action.triggered.connect(self._close_user_panels)
        file_menu.addAction(close_panels_action)

        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self._preview_action)
        view_menu.addAction(self._hex_action)

    def _run_preview_command(self, command: Callable[[], object]) -> None:
        try:
            command()
        except MisuseError as exc:
            self._show_status(str(exc))

    def _sync_preview_action(self) -> None:
        self._preview_action.setChecked(self._controller.is_enabled(self._host))

    def _show_status(self, message: str) -> None:
        self.statusBar().showMessage(message, STATUS_TIMEOUT_MS)

    def _update_title(self, directory: str) -> None:
        self.setWindowTitle(f"{WINDOW_TITLE} — {directory}")

    def _open_file(self, raw_path: str) -> None:
        path = Path(raw_path)
        try:
            self._host.open_file(path)
        except (OSError, UnreadableError) as exc:
            self._show_status(f"Unable to open {path.name}: {exc}")
            return
        self._browser.setFocus()

    def _close_user_panels(self) -> None:
        for panel in list(self._host.panels()):
            if panel.owner is None:
                self._host.delete_panel(panel)

    def _choose_directory(self) -> None:
        directory = QFileDialog.getExistingDirectory(
            self,
            "Open Directory",
            str(self._browser.current_directory()),
        )
        if directory:
            self._browser.set_root(directory)

    def _goto_file(self) -> None:
        text, accepted = QInputDialog.getText(self, "Go to File", "Path:")
        if accepted and text.strip():
            target = Path(text.strip()).expanduser()
            if not target.exists():
                self._show_status(f"No such file: {target}")
                return
            self._browser.goto_file(target)
