"""Debounced preview coordination for a single browsing context."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Final

from ..config import PreviewConfig
from .cache import PreviewCache
from .errors import UnreadableError
from .eviction import EvictionPolicy
from .host import BrowserHost, Subscription, TimerHandle
from .models import PreviewArtifact, SelectionEvent
from .panel import PanelManager

__all__ = ["ENABLE_COMMAND", "PreviewSession", "SessionState"]

logger = logging.getLogger(__name__)

ENABLE_COMMAND: Final[str] = "enable-preview"
"""Command id of the synthetic event emitted when a session starts."""


class SessionState(str, Enum):
    """Observable state of a :class:`PreviewSession`."""

    IDLE = "idle"
    PENDING = "pending"
    DISPLAYED = "displayed"


class PreviewSession:
    """Turn navigation events into previews for one browsing context.

    The first eligible selection after the session starts (or after the
    context regains focus) is rendered immediately. Later selections arm a
    debounce timer; every new event cancels the pending timer first, so
    only the entry selected when the timer fires is ever rendered.
    """

    def __init__(
        self,
        host: BrowserHost,
        config: PreviewConfig,
        *,
        cache: PreviewCache | None = None,
        panels: PanelManager | None = None,
        eviction: EvictionPolicy | None = None,
    ) -> None:
        self._host = host
        self._config = config
        self._cache = cache or PreviewCache(host, config)
        self._panels = panels or PanelManager(host, config)
        self._eviction = eviction or EvictionPolicy(host, config.eviction_size_threshold)

        self._timer: TimerHandle | None = None
        self._navigation: Subscription | None = None
        self._focus: Subscription | None = None
        self._first_render_pending = True
        self._armed = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        if self._timer is not None and self._timer.active:
            return SessionState.PENDING
        if self._panels.current is not None:
            return SessionState.DISPLAYED
        return SessionState.IDLE

    @property
    def running(self) -> bool:
        return self._navigation is not None

    @property
    def cache(self) -> PreviewCache:
        return self._cache

    @property
    def panels(self) -> PanelManager:
        return self._panels

    @property
    def displayed(self) -> PreviewArtifact | None:
        return self._panels.current

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Subscribe to the host and preview the current selection if the context is active."""

        if self.running:
            return

        self._navigation = self._host.subscribe_navigation(self.handle_navigation)
        self._focus = self._host.subscribe_focus(self._handle_focus_changed)
        self._armed = self._host.is_active()
        self._first_render_pending = True
        logger.info("Preview session started")

        # An inactive context stays disarmed until focus or navigation returns to it.
        if self._armed:
            self.handle_navigation(SelectionEvent(self._host.current_selection(), ENABLE_COMMAND))

    def stop(self) -> None:
        """Tear the session down and release every host subscription."""

        self.teardown()
        for subscription in (self._navigation, self._focus):
            if subscription is not None:
                subscription.unsubscribe()
        self._navigation = None
        self._focus = None
        self._armed = False
        logger.info("Preview session stopped")

    def teardown(self) -> None:
        """Cancel pending work, close the panel and reclaim cached previews."""

        self._cancel_timer()
        self._panels.close()
        self._eviction.run(self._cache)

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------
    def handle_navigation(self, event: SelectionEvent) -> None:
        """React to the browser moving its cursor."""

        if not self._armed:
            self._handle_focus_changed(True)

        self._cancel_timer()
        path = event.path

        if not self._is_eligible(path):
            if event.command in self._config.trigger_commands:
                self.close_preview()
            return

        current = self._panels.current
        if current is not None and current.path == path:
            return

        if self._first_render_pending:
            self._first_render_pending = False
            self._show(path)
            return

        self._timer = self._host.schedule(self._config.debounce_delay, self._handle_timer)
        logger.debug("Armed preview timer for %s (%s)", path, event.command)

    def close_preview(self) -> None:
        """Close the preview panel, running one eviction pass if it was open."""

        if self._panels.close() is not None:
            self._eviction.run(self._cache)

    def toggle_hex_view(self) -> bool:
        """Toggle the hex view of the displayed preview."""

        return self._panels.toggle_hex_view()

    def _handle_timer(self) -> None:
        self._timer = None
        path = self._host.current_selection()
        if self._is_eligible(path):
            self._show(path)

    def _handle_focus_changed(self, active: bool) -> None:
        if not active and self._armed:
            self._armed = False
            logger.info("Browser lost focus; closing preview")
            self.teardown()
        elif active and not self._armed:
            self._armed = True
            self._first_render_pending = True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_eligible(self, path: Path | None) -> bool:
        if path is None:
            return False
        try:
            metadata = self._host.metadata(path)
        except UnreadableError:
            return False
        if not metadata.readable or not (metadata.is_file or metadata.is_dir):
            return False
        return not self._host.displayed_elsewhere(path)

    def _show(self, path: Path) -> None:
        try:
            artifact = self._cache.get_or_render(path)
            if artifact is None:
                self.close_preview()
                return
            if self._panels.display(artifact):
                self._eviction.run(self._cache, displayed=artifact)
        except UnreadableError as exc:
            logger.debug("Not previewing %s: %s", path, exc)
            self.close_preview()
        except Exception:  # noqa: BLE001 - previews must never take the browser down
            logger.exception("Failed to preview %s", path)
            self.close_preview()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
