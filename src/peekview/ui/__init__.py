"""Reusable Qt widgets for the peekview shell."""

from __future__ import annotations

from .browser import FileBrowser
from .preview_widget import PreviewWidget
from .qt_host import PanelArea, QtBrowserHost

__all__ = [
    "FileBrowser",
    "PanelArea",
    "PreviewWidget",
    "QtBrowserHost",
]
