"""Protocols describing what the preview engine needs from its host browser."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .models import PanelPlacement, PathMetadata, PreviewKind, SelectionEvent, ViewportGeometry

__all__ = [
    "BrowserHost",
    "Panel",
    "Subscription",
    "TimerHandle",
]


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled one-shot callback that can be cancelled before it fires."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


@runtime_checkable
class Subscription(Protocol):
    """Handle returned by event subscriptions."""

    def unsubscribe(self) -> None: ...


class Panel(Protocol):
    """An auxiliary viewport created by the host."""

    @property
    def owner(self) -> str | None: ...

    @property
    def content(self) -> Any: ...


class BrowserHost(Protocol):
    """Collaborator interface implemented by a file browser.

    Every method runs on the host's event loop thread. Methods that touch
    the filesystem raise :class:`~peekview.preview.errors.UnreadableError`
    when the path cannot be read.
    """

    # Selection and navigation -------------------------------------------
    def current_selection(self) -> Path | None: ...

    def subscribe_navigation(self, callback: Callable[[SelectionEvent], None]) -> Subscription: ...

    # Filesystem ---------------------------------------------------------
    def metadata(self, path: Path) -> PathMetadata: ...

    def read_byte_range(self, path: Path, start: int, length: int) -> bytes: ...

    # Content representations --------------------------------------------
    def existing_representation(self, path: Path) -> Any | None: ...

    def displayed_elsewhere(self, path: Path) -> bool: ...

    def quiet_open(self, path: Path, kind: PreviewKind) -> Any: ...

    def quiet_directory_listing(self, path: Path) -> Any: ...

    def create_scratch(self, name: str, text: str, raw: bytes) -> Any: ...

    def content_size(self, content: Any) -> int: ...

    def content_bytes(self, content: Any) -> bytes: ...

    def override_text(self, content: Any, text: str | None) -> None: ...

    def is_live(self, content: Any) -> bool: ...

    def destroy(self, content: Any) -> None: ...

    # Panels -------------------------------------------------------------
    def viewport_geometry(self) -> ViewportGeometry: ...

    def create_panel(
        self,
        placement: PanelPlacement,
        content: Any,
        *,
        owner: str,
        selectable: bool = False,
    ) -> Panel: ...

    def delete_panel(self, panel: Panel) -> None: ...

    def panels(self) -> Sequence[Panel]: ...

    # Event loop ---------------------------------------------------------
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def subscribe_focus(self, callback: Callable[[bool], None]) -> Subscription: ...

    def is_active(self) -> bool: ...

    def notify(self, message: str) -> None: ...
