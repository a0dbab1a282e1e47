"""Persistence helpers for user-configurable preview settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from PySide6.QtCore import QSettings

from ..config import DEFAULT_IGNORED_EXTENSIONS
from ..utils.paths import coerce_optional_path

__all__ = [
    "APPLICATION_NAME",
    "AppSettings",
    "ORGANIZATION_NAME",
    "load_app_settings",
    "save_app_settings",
]


ORGANIZATION_NAME: Final[str] = "peekview"
"""Organization identifier used when storing Qt settings."""

APPLICATION_NAME: Final[str] = "peekview"
"""Application identifier used when storing Qt settings."""

_MIN_DEBOUNCE_DELAY = 0.0
_MAX_DEBOUNCE_DELAY = 10.0
_MIN_PREVIEWABLE_SIZE = 10_240


@dataclass(slots=True)
class AppSettings:
    """End-user preferences for the browser window."""

    start_directory: Path
    preview_enabled: bool = True
    debounce_delay: float = 0.7
    max_previewable_size: int = 1_048_576
    eviction_size_threshold: int = 1_024_000
    ignored_extensions: str = DEFAULT_IGNORED_EXTENSIONS

    def config_overrides(self) -> dict[str, Any]:
        """Return keyword arguments for :func:`peekview.config.configure`."""

        return {
            "start_directory": self.start_directory,
            "debounce_delay": self.debounce_delay,
            "max_previewable_size": self.max_previewable_size,
            "eviction_size_threshold": self.eviction_size_threshold,
            "ignored_extensions": self.ignored_extensions,
        }


def _coerce_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_int(value: object, default: int, *, minimum: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return max(minimum, value)
    if isinstance(value, str) and value.strip().isdigit():
        return max(minimum, int(value.strip()))
    return default


def _coerce_delay(value: object, default: float) -> float:
    try:
        delay = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return min(_MAX_DEBOUNCE_DELAY, max(_MIN_DEBOUNCE_DELAY, delay))


def _settings_storage() -> QSettings:
    return QSettings(ORGANIZATION_NAME, APPLICATION_NAME)


def load_app_settings(*, fallback_root: Path) -> AppSettings:
    """Return persisted settings falling back to *fallback_root* when needed."""

    store = _settings_storage()
    defaults = AppSettings(start_directory=fallback_root)

    start_directory = coerce_optional_path(store.value("browser/startDirectory"))
    if start_directory is None or not start_directory.is_dir():
        start_directory = fallback_root

    ignored_raw = store.value("preview/ignoredExtensions")
    ignored = ignored_raw.strip() if isinstance(ignored_raw, str) else defaults.ignored_extensions

    return AppSettings(
        start_directory=start_directory,
        preview_enabled=_coerce_bool(store.value("preview/enabled"), defaults.preview_enabled),
        debounce_delay=_coerce_delay(store.value("preview/debounceDelay"), defaults.debounce_delay),
        max_previewable_size=_coerce_int(
            store.value("preview/maxPreviewableSize"),
            defaults.max_previewable_size,
            minimum=_MIN_PREVIEWABLE_SIZE,
        ),
        eviction_size_threshold=_coerce_int(
            store.value("preview/evictionThreshold"),
            defaults.eviction_size_threshold,
            minimum=1,
        ),
        ignored_extensions=ignored,
    )


def save_app_settings(settings: AppSettings) -> None:
    """Persist *settings* using Qt's :class:`~PySide6.QtCore.QSettings`."""

    store = _settings_storage()

    store.beginGroup("browser")
    store.setValue("startDirectory", str(settings.start_directory))
    store.endGroup()

    store.beginGroup("preview")
    store.setValue("enabled", settings.preview_enabled)
    store.setValue("debounceDelay", float(settings.debounce_delay))
    store.setValue("maxPreviewableSize", int(settings.max_previewable_size))
    store.setValue("evictionThreshold", int(settings.eviction_size_threshold))
    store.setValue("ignoredExtensions", settings.ignored_extensions)
    store.endGroup()

    store.sync()
