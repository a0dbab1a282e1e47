"""Lifecycle of the single auxiliary panel that hosts the preview."""

from __future__ import annotations

import logging
from typing import Final

from ..config import PlacementPolicy, PreviewConfig
from .errors import MisuseError
from .hexview import format_hex, with_truncation_marker
from .host import BrowserHost, Panel
from .models import PanelPlacement, PanelSide, PreviewArtifact, ViewportGeometry

__all__ = ["PANEL_OWNER", "PanelManager", "split_placement"]

logger = logging.getLogger(__name__)

PANEL_OWNER: Final[str] = "peekview-preview"
"""Ownership tag attached to every panel created by the preview engine."""


def split_placement(geometry: ViewportGeometry, config: PreviewConfig) -> PanelPlacement:
    """Default placement: beside the browser when wide enough, else below it."""

    if geometry.width >= geometry.height and geometry.width >= config.split_width_threshold:
        size = max(geometry.width // 2, config.min_panel_width)
        return PanelPlacement(PanelSide.RIGHT, size)
    return PanelPlacement(PanelSide.BOTTOM, max(geometry.height // 2, 1))


class PanelManager:
    """Keep at most one preview panel on screen.

    Only panels tagged with :data:`PANEL_OWNER` are ever removed; panels the
    user created are left alone.
    """

    def __init__(self, host: BrowserHost, config: PreviewConfig) -> None:
        self._host = host
        self._policy: PlacementPolicy = config.placement_policy or split_placement
        self._config = config
        self._panel: Panel | None = None
        self._artifact: PreviewArtifact | None = None
        self._hex_active = False

    @property
    def current(self) -> PreviewArtifact | None:
        """Return the artifact currently on screen, if any."""

        if self._artifact is not None and not self._panel_alive():
            self._panel = None
            self._artifact = None
            self._hex_active = False
        return self._artifact

    @property
    def hex_view_active(self) -> bool:
        return self._hex_active

    def is_showing(self, artifact: PreviewArtifact) -> bool:
        return self.current is artifact

    def display(self, artifact: PreviewArtifact) -> bool:
        """Show *artifact*, replacing any preview panel already on screen.

        Returns ``False`` when *artifact* was already displayed.
        """

        if self.is_showing(artifact):
            return False

        self._remove_owned_panels()
        placement = self._policy(self._host.viewport_geometry(), self._config)
        self._panel = self._host.create_panel(
            placement,
            artifact.content,
            owner=PANEL_OWNER,
            selectable=False,
        )
        self._artifact = artifact
        logger.debug(
            "Displaying %s in %s panel (%s=%d)",
            artifact.path,
            placement.side.value,
            placement.dimension,
            placement.size,
        )
        return True

    def close(self) -> PreviewArtifact | None:
        """Remove the preview panel and return the artifact it showed."""

        closed = self._artifact
        self._remove_owned_panels()
        return closed

    def toggle_hex_view(self) -> bool:
        """Switch the displayed content between normal and hex rendering.

        Returns ``True`` when the hex view is now active.
        """

        artifact = self.current
        if artifact is None:
            raise MisuseError("No preview is displayed")

        if self._hex_active:
            self._host.override_text(artifact.content, None)
            self._hex_active = False
            return False

        text = format_hex(self._host.content_bytes(artifact.content))
        if artifact.is_partial:
            text = with_truncation_marker(text)
        self._host.override_text(artifact.content, text)
        self._hex_active = True
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _panel_alive(self) -> bool:
        return self._panel is not None and any(
            panel is self._panel for panel in self._host.panels()
        )

    def _remove_owned_panels(self) -> None:
        if self._hex_active and self._artifact is not None:
            if self._host.is_live(self._artifact.content):
                self._host.override_text(self._artifact.content, None)
        self._hex_active = False

        for panel in list(self._host.panels()):
            if panel.owner == PANEL_OWNER:
                self._host.delete_panel(panel)
        self._panel = None
        self._artifact = None
