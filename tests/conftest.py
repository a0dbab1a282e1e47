"""Pytest configuration helpers for peekview tests."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:  # pragma: no cover - dependency availability varies between environments
    from PySide6.QtWidgets import QApplication
except ImportError:  # pragma: no cover - used when Qt is unavailable
    QApplication = None  # type: ignore[assignment]

# Ensure the source directory is importable without requiring an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def reset_preview_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Ensure each test runs with the default preview configuration."""

    from peekview.config import (
        DEBOUNCE_DELAY_ENV_VAR,
        EVICTION_THRESHOLD_ENV_VAR,
        MAX_PREVIEWABLE_SIZE_ENV_VAR,
        START_DIR_ENV_VAR,
        configure,
    )

    env_vars = (
        DEBOUNCE_DELAY_ENV_VAR,
        EVICTION_THRESHOLD_ENV_VAR,
        MAX_PREVIEWABLE_SIZE_ENV_VAR,
        START_DIR_ENV_VAR,
    )
    for name in env_vars:
        monkeypatch.delenv(name, raising=False)

    configure(start_directory=tmp_path)
    yield
    # Tests may leave malformed overrides behind; drop them before rebuilding.
    for name in env_vars:
        monkeypatch.delenv(name, raising=False)
    configure(start_directory=tmp_path)


@pytest.fixture(scope="session")
def qapp():
    """Provide a ``QApplication`` instance for UI-oriented tests."""

    if QApplication is None:
        pytest.skip("PySide6 is unavailable in this environment")

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
