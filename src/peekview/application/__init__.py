"""Application shell wiring the browser, preview engine and settings together."""

from __future__ import annotations

from .main_window import MainWindow
from .settings import AppSettings, load_app_settings, save_app_settings

__all__ = ["AppSettings", "MainWindow", "load_app_settings", "save_app_settings"]
