"""Panel widget that renders a :class:`~peekview.ui.documents.Document`."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QPlainTextEdit,
    QSizePolicy,
    QStackedLayout,
    QVBoxLayout,
    QWidget,
)

from .documents import Document, DocumentKind

__all__ = ["PreviewWidget"]


class PreviewWidget(QWidget):
    """Show one document as text, an image or a directory listing."""

    def __init__(
        self,
        document: Document,
        *,
        owner: str | None = None,
        selectable: bool = True,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._document = document
        self._owner = owner
        self._current_pixmap: QPixmap | None = None
        self.setProperty("peekviewOwner", owner or "")

        self._title_label = QLabel(document.name, self)
        self._title_label.setObjectName("previewTitle")
        self._title_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)

        self._text_view = QPlainTextEdit(self)
        self._text_view.setObjectName("previewText")
        self._text_view.setLineWrapMode(QPlainTextEdit.NoWrap)

        self._image_label = QLabel(self)
        self._image_label.setObjectName("previewImage")
        self._image_label.setAlignment(Qt.AlignCenter)
        self._image_label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)

        self._listing = QListWidget(self)
        self._listing.setObjectName("previewListing")

        self._stack = QStackedLayout()
        self._stack.addWidget(self._text_view)
        self._stack.addWidget(self._image_label)
        self._stack.addWidget(self._listing)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)
        layout.addWidget(self._title_label)
        layout.addLayout(self._stack, 1)

        if not selectable:
            # Reachable by mouse only; Tab navigation stays in the browser.
            for widget in (self, self._text_view, self._image_label, self._listing):
                widget.setFocusPolicy(Qt.ClickFocus)

        self._text_view.textChanged.connect(self._handle_text_changed)
        self.refresh()

    @property
    def owner(self) -> str | None:
        return self._owner

    @property
    def content(self) -> Document:
        return self._document

    @property
    def document(self) -> Document:
        return self._document

    def current_view(self) -> str:
        """Return which view is visible: ``"text"``, ``"image"`` or ``"listing"``."""

        widget = self._stack.currentWidget()
        if widget is self._image_label:
            return "image"
        if widget is self._listing:
            return "listing"
        return "text"

    def text(self) -> str:
        return self._text_view.toPlainText()

    def refresh(self) -> None:
        """Re-render the document, e.g. after its override text changed."""

        document = self._document
        self._title_label.setText(document.name)

        if document.override_text is None and document.kind is DocumentKind.IMAGE and document.image_png:
            pixmap = QPixmap()
            pixmap.loadFromData(document.image_png)
            if not pixmap.isNull():
                self._current_pixmap = pixmap
                self._image_label.setToolTip(document.text)
                self._update_image_display()
                self._stack.setCurrentWidget(self._image_label)
                return

        if document.override_text is None and document.kind is DocumentKind.LISTING:
            self._listing.clear()
            self._listing.addItems(document.entries)
            self._stack.setCurrentWidget(self._listing)
            return

        self._set_text(document.display_text, read_only=document.read_only or document.override_text is not None)
        self._stack.setCurrentWidget(self._text_view)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._update_image_display()

    def _set_text(self, text: str, *, read_only: bool) -> None:
        self._text_view.blockSignals(True)
        try:
            self._text_view.setPlainText(text)
        finally:
            self._text_view.blockSignals(False)
        self._text_view.setReadOnly(read_only)

    def _update_image_display(self) -> None:
        if self._current_pixmap is None:
            return
        target = self._image_label.size()
        if target.width() <= 0 or target.height() <= 0:
            self._image_label.setPixmap(self._current_pixmap)
            return
        scaled = self._current_pixmap.scaled(target, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self._image_label.setPixmap(scaled)

    def _handle_text_changed(self) -> None:
        document = self._document
        if document.read_only or document.override_text is not None:
            return
        document.text = self._text_view.toPlainText()
        document.modified = True
