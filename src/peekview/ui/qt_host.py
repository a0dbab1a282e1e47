"""Qt implementation of the :class:`~peekview.preview.host.BrowserHost` protocol."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from PySide6.QtCore import QObject, Qt, QTimer
from PySide6.QtWidgets import QApplication, QSplitter, QVBoxLayout, QWidget

from ..preview.classifier import read_metadata
from ..preview.errors import UnreadableError
from ..preview.models import (
    PanelPlacement,
    PanelSide,
    PathMetadata,
    PreviewKind,
    SelectionEvent,
    ViewportGeometry,
)
from ..preview.panel import PANEL_OWNER
from .browser import FileBrowser
from .documents import (
    Document,
    DocumentKind,
    DocumentStore,
    load_image_document,
    load_listing_document,
    load_text_document,
)
from .preview_widget import PreviewWidget

__all__ = ["PanelArea", "QtBrowserHost"]

logger = logging.getLogger(__name__)

RECENT_FILES_LIMIT = 20


class _QtTimer:
    """Single-shot :class:`QTimer` exposed as a cancellable handle.

    *on_finished* runs once the timer fired or was cancelled so the owner can
    release its reference; the handle must outlive the pending timeout.
    """

    def __init__(
        self,
        parent: QObject,
        delay: float,
        callback: Callable[[], None],
        on_finished: Callable[["_QtTimer"], None] | None = None,
    ) -> None:
        self._callback = callback
        self._on_finished = on_finished
        self._finished = False
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(delay * 1000)))
        self._timer.timeout.connect(self._fire)
        self._timer.start()

    @property
    def active(self) -> bool:
        return not self._finished and self._timer.isActive()

    def cancel(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._timer.stop()
        self._timer.deleteLater()
        self._release()

    def _fire(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._timer.deleteLater()
        self._release()
        self._callback()

    def _release(self) -> None:
        if self._on_finished is not None:
            self._on_finished(self)
            self._on_finished = None


class _SignalSubscription:
    """Disconnect *slot* from *signal* on :meth:`unsubscribe`."""

    def __init__(self, signal: Any, slot: Callable[..., None]) -> None:
        self._signal = signal
        self._slot = slot
        signal.connect(slot)

    def unsubscribe(self) -> None:
        if self._slot is None:
            return
        self._signal.disconnect(self._slot)
        self._slot = None


class PanelArea(QWidget):
    """Lay the browser out with trailing and bottom panel slots."""

    def __init__(self, browser: FileBrowser, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._browser = browser

        self._row = QSplitter(Qt.Horizontal, self)
        self._row.setChildrenCollapsible(False)
        self._row.addWidget(browser)

        self._column = QSplitter(Qt.Vertical, self)
        self._column.setChildrenCollapsible(False)
        self._column.addWidget(self._row)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._column)

    @property
    def browser(self) -> FileBrowser:
        return self._browser

    def add_panel(self, panel: PreviewWidget, placement: PanelPlacement) -> None:
        splitter = self._row if placement.side is PanelSide.RIGHT else self._column
        total = self.width() if placement.side is PanelSide.RIGHT else self.height()
        splitter.addWidget(panel)

        sizes = splitter.sizes()
        total = max(total, sum(sizes), placement.size + 1)
        panel_size = min(placement.size, total - 1)
        others = len(sizes) - 1
        share = (total - panel_size) // others if others else 0
        splitter.setSizes([share] * others + [panel_size])

    def panels(self) -> list[PreviewWidget]:
        found: list[PreviewWidget] = []
        for splitter in (self._row, self._column):
            for index in range(splitter.count()):
                widget = splitter.widget(index)
                if isinstance(widget, PreviewWidget):
                    found.append(widget)
        return found


class QtBrowserHost(QObject):
    """Adapt a :class:`FileBrowser` window to the preview engine."""

    def __init__(
        self,
        area: PanelArea,
        *,
        notifier: Callable[[str], None] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._area = area
        self._browser = area.browser
        self._notifier = notifier
        self._documents = DocumentStore()
        self._recent_files: list[Path] = []
        self._timers: set[_QtTimer] = set()

    @property
    def browser(self) -> FileBrowser:
        return self._browser

    @property
    def documents(self) -> DocumentStore:
        return self._documents

    @property
    def recent_files(self) -> list[Path]:
        """Files the user opened explicitly, most recent first."""

        return list(self._recent_files)

    # ------------------------------------------------------------------
    # Selection and navigation
    # ------------------------------------------------------------------
    def current_selection(self) -> Path | None:
        return self._browser.current_path()

    def subscribe_navigation(self, callback: Callable[[SelectionEvent], None]) -> _SignalSubscription:
        def _forward(command: str) -> None:
            callback(SelectionEvent(self.current_selection(), command))

        return _SignalSubscription(self._browser.navigated, _forward)

    # ------------------------------------------------------------------
    # Filesystem
    # ------------------------------------------------------------------
    def metadata(self, path: Path) -> PathMetadata:
        return read_metadata(path)

    def read_byte_range(self, path: Path, start: int, length: int) -> bytes:
        try:
            with path.open("rb") as handle:
                handle.seek(start)
                return handle.read(length)
        except OSError as exc:
            raise UnreadableError(f"Unable to read {path!s}: {exc}") from exc

    # ------------------------------------------------------------------
    # Content representations
    # ------------------------------------------------------------------
    def existing_representation(self, path: Path) -> Document | None:
        return self._documents.user_document(path)

    def displayed_elsewhere(self, path: Path) -> bool:
        return any(
            panel.owner != PANEL_OWNER and panel.document.path == path
            for panel in self._area.panels()
        )

    def quiet_open(self, path: Path, kind: PreviewKind) -> Document:
        # No recent-files entry and no status message: previews are silent.
        if kind is PreviewKind.IMAGE:
            document = load_image_document(path)
        else:
            document = load_text_document(path)
        return self._documents.add(document)

    def quiet_directory_listing(self, path: Path) -> Document:
        return self._documents.add(load_listing_document(path))

    def create_scratch(self, name: str, text: str, raw: bytes) -> Document:
        document = Document(
            name=name,
            kind=DocumentKind.TEXT,
            raw=raw,
            text=text,
            read_only=True,
            scratch=True,
        )
        return self._documents.add(document)

    def content_size(self, content: Document) -> int:
        return content.size

    def content_bytes(self, content: Document) -> bytes:
        if content.kind is DocumentKind.LISTING:
            return content.text.encode("utf-8")
        return content.raw

    def override_text(self, content: Document, text: str | None) -> None:
        content.override_text = text
        for panel in self._area.panels():
            if panel.document is content:
                panel.refresh()

    def is_live(self, content: Document) -> bool:
        return content.alive

    def destroy(self, content: Document) -> None:
        self._documents.destroy(content)

    def open_file(self, path: Path) -> PreviewWidget:
        """Open *path* for the user in a panel the preview engine never owns."""

        document = self._documents.user_document(path)
        if document is None:
            if path.is_dir():
                document = load_listing_document(path)
            else:
                document = load_text_document(path, read_only=False)
            self._documents.add(document, user_owned=True)

        self._recent_files = [path, *(item for item in self._recent_files if item != path)]
        del self._recent_files[RECENT_FILES_LIMIT:]

        panel = PreviewWidget(document, owner=None, selectable=True)
        self._area.add_panel(panel, PanelPlacement(PanelSide.BOTTOM, max(self._area.height() // 3, 1)))
        self.notify(f"Opened {path}")
        return panel

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------
    def viewport_geometry(self) -> ViewportGeometry:
        return ViewportGeometry(width=self._area.width(), height=self._area.height())

    def create_panel(
        self,
        placement: PanelPlacement,
        content: Document,
        *,
        owner: str,
        selectable: bool = False,
    ) -> PreviewWidget:
        panel = PreviewWidget(content, owner=owner, selectable=selectable)
        self._area.add_panel(panel, placement)
        return panel

    def delete_panel(self, panel: PreviewWidget) -> None:
        shared = any(
            other is not panel and other.document is panel.document for other in self._area.panels()
        )
        if panel.owner is None and not shared:
            self._documents.release_user_document(panel.document)
        panel.hide()
        panel.setParent(None)
        panel.deleteLater()

    def panels(self) -> Sequence[PreviewWidget]:
        return self._area.panels()

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------
    def schedule(self, delay: float, callback: Callable[[], None]) -> _QtTimer:
        timer = _QtTimer(self, delay, callback, self._timers.discard)
        self._timers.add(timer)
        return timer

    def subscribe_focus(self, callback: Callable[[bool], None]) -> _SignalSubscription:
        def _forward(old: QWidget | None, new: QWidget | None) -> None:
            del old
            # Focus leaving the application altogether is not a context switch.
            if new is None:
                return
            callback(self._owns_widget(new))

        app = QApplication.instance()
        return _SignalSubscription(app.focusChanged, _forward)

    def is_active(self) -> bool:
        return self._owns_widget(QApplication.focusWidget())

    def notify(self, message: str) -> None:
        if self._notifier is not None:
            self._notifier(message)
        else:
            logger.info(message)

    def _owns_widget(self, widget: QWidget | None) -> bool:
        if widget is None:
            return False
        if self._browser.contains_widget(widget):
            return True
        return any(
            panel.owner == PANEL_OWNER and (panel is widget or panel.isAncestorOf(widget))
            for panel in self._area.panels()
        )
