from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from peekview import __version__
from peekview.app import build_parser, main
from peekview.config import get_config


def test_parser_defaults() -> None:
    """Without arguments every option defers to stored settings."""

    args = build_parser().parse_args([])

    assert args.start_dir is None
    assert args.delay is None
    assert args.max_size is None
    assert args.no_preview is False
    assert args.log_level == "WARNING"


def test_parser_options() -> None:
    args = build_parser().parse_args(["/tmp", "--delay", "0.2", "--max-size", "4096", "--no-preview"])

    assert args.start_dir == "/tmp"
    assert args.delay == 0.2
    assert args.max_size == 4096
    assert args.no_preview is True


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--version"])

    assert __version__ in capsys.readouterr().out


def test_invalid_configuration_exits_with_error(qapp, monkeypatch, tmp_path) -> None:
    """A negative delay is rejected before any window is created."""

    from peekview.application.settings import AppSettings

    monkeypatch.setattr(
        "peekview.app.load_app_settings",
        lambda *, fallback_root: AppSettings(start_directory=tmp_path),
    )

    assert main([str(tmp_path), "--delay", "-1"]) == 2


class _StubWindow:
    """Stand-in for :class:`MainWindow` that never touches stored settings."""

    def __init__(self, controller, *, settings) -> None:
        self.controller = controller
        self.settings = settings

    def show(self) -> None:
        pass


@pytest.fixture
def stored_settings(monkeypatch, tmp_path):
    from peekview.application.settings import AppSettings

    stored = AppSettings(start_directory=tmp_path, debounce_delay=0.4, eviction_size_threshold=2_000_000)
    monkeypatch.setattr("peekview.app.load_app_settings", lambda *, fallback_root: stored)
    monkeypatch.setattr("peekview.app.MainWindow", _StubWindow)
    return stored


def test_environment_overrides_stored_settings(qapp, monkeypatch, tmp_path, stored_settings) -> None:
    monkeypatch.setenv("PEEKVIEW_DEBOUNCE_DELAY", "2.5")
    monkeypatch.setenv("PEEKVIEW_EVICTION_THRESHOLD", "5000")

    assert main([str(tmp_path)]) == 0

    config = get_config()
    assert config.debounce_delay == 2.5
    assert config.eviction_size_threshold == 5000
    assert config.max_previewable_size == stored_settings.max_previewable_size


def test_stored_settings_apply_without_environment(qapp, tmp_path, stored_settings) -> None:
    assert main([str(tmp_path)]) == 0

    config = get_config()
    assert config.debounce_delay == 0.4
    assert config.eviction_size_threshold == 2_000_000


def test_command_line_overrides_environment(qapp, monkeypatch, tmp_path, stored_settings) -> None:
    monkeypatch.setenv("PEEKVIEW_DEBOUNCE_DELAY", "2.5")

    assert main([str(tmp_path), "--delay", "0.1"]) == 0

    assert get_config().debounce_delay == 0.1


def test_window_title_is_defined_once() -> None:
    from peekview import app
    from peekview.application import main_window

    assert app.WINDOW_TITLE is main_window.WINDOW_TITLE
