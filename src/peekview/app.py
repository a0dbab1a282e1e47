"""Application bootstrap for the peekview desktop shell."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any, Final

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from . import __version__
from .application.main_window import WINDOW_TITLE, MainWindow
from .application.settings import (
    APPLICATION_NAME,
    ORGANIZATION_NAME,
    AppSettings,
    load_app_settings,
)
from .config import (
    DEBOUNCE_DELAY_ENV_VAR,
    EVICTION_THRESHOLD_ENV_VAR,
    MAX_PREVIEWABLE_SIZE_ENV_VAR,
    START_DIR_ENV_VAR,
    configure,
    get_config,
)
from .preview import PreviewController

ENVIRONMENT_SETTINGS: Final[dict[str, str]] = {
    "debounce_delay": DEBOUNCE_DELAY_ENV_VAR,
    "max_previewable_size": MAX_PREVIEWABLE_SIZE_ENV_VAR,
    "eviction_size_threshold": EVICTION_THRESHOLD_ENV_VAR,
    "start_directory": START_DIR_ENV_VAR,
}
"""Stored settings that yield to their environment variable when it is set."""

__all__ = ["MainWindow", "build_parser", "main", "WINDOW_TITLE"]


def build_parser() -> argparse.ArgumentParser:
    """Return the command line parser for :func:`main`."""

    parser = argparse.ArgumentParser(prog="peekview", description="File browser with live previews.")
    parser.add_argument("start_dir", nargs="?", help="Directory to open (defaults to the last one used).")
    parser.add_argument("--delay", type=float, help="Seconds to wait before previewing a selection.")
    parser.add_argument("--max-size", type=int, help="Files larger than this many bytes are read partially.")
    parser.add_argument("--no-preview", action="store_true", help="Start with previews disabled.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Launch the peekview Qt application."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)

    app = QApplication.instance()
    owns_application = False
    if app is None:
        logger.info("Creating new QApplication")
        app = QApplication(sys.argv[:1])
        owns_application = True

    QCoreApplication.setOrganizationName(ORGANIZATION_NAME)
    QCoreApplication.setApplicationName(APPLICATION_NAME)

    settings = load_app_settings(fallback_root=get_config().start_directory)
    if args.no_preview:
        settings.preview_enabled = False

    try:
        config = configure(**_config_overrides(settings, args))
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    controller = PreviewController(config)
    window = MainWindow(controller, settings=settings)
    window.show()
    logger.info("Browsing %s", config.start_directory)

    if owns_application:
        result = app.exec()
        controller.shutdown()
        logger.info("Qt event loop exited with code: %s", result)
        return result
    return 0


def _config_overrides(settings: AppSettings, args: argparse.Namespace) -> dict[str, Any]:
    """Layer stored settings, then environment variables, then command line flags."""

    overrides = settings.config_overrides()
    for key, env_var in ENVIRONMENT_SETTINGS.items():
        if os.environ.get(env_var):
            overrides[key] = None

    if args.start_dir:
        overrides["start_directory"] = args.start_dir
    if args.delay is not None:
        overrides["debounce_delay"] = args.delay
    if args.max_size:
        overrides["max_previewable_size"] = args.max_size
    return overrides
