"""In-memory browser host used to drive the preview engine without Qt."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from peekview.config import PreviewConfig
from peekview.preview.errors import DestroyFailedError, UnreadableError
from peekview.preview.models import (
    PanelPlacement,
    PathMetadata,
    PreviewKind,
    SelectionEvent,
    ViewportGeometry,
)

ROOT = Path("/srv/files")


@dataclass(eq=False)
class FakeContent:
    name: str
    data: bytes
    text: str
    path: Path | None = None
    kind: str = "text"
    alive: bool = True
    override: str | None = None


@dataclass(eq=False)
class FakePanel:
    placement: PanelPlacement
    content: Any
    owner: str | None
    selectable: bool


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class FakeSubscription:
    def __init__(self, registry: list, callback: Callable[..., None]) -> None:
        self._registry = registry
        self._callback = callback
        registry.append(callback)

    def unsubscribe(self) -> None:
        if self._callback in self._registry:
            self._registry.remove(self._callback)


@dataclass
class FakeHost:
    """Browser host whose filesystem, clock and panels live in memory."""

    width: int = 1200
    height: int = 800
    now: float = 0.0
    selection: Path | None = None
    active: bool = True
    files: dict[Path, PathMetadata] = field(default_factory=dict)
    data: dict[Path, bytes] = field(default_factory=dict)
    external: dict[Path, FakeContent] = field(default_factory=dict)
    elsewhere: set[Path] = field(default_factory=set)
    undestroyable: set[Path] = field(default_factory=set)
    panel_list: list[FakePanel] = field(default_factory=list)
    timers: list[FakeTimer] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    open_calls: list[Path] = field(default_factory=list)
    listing_calls: list[Path] = field(default_factory=list)
    scratch_calls: list[str] = field(default_factory=list)
    destroyed: list[FakeContent] = field(default_factory=list)
    navigation_callbacks: list = field(default_factory=list)
    focus_callbacks: list = field(default_factory=list)

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------
    def add_file(
        self,
        name: str,
        data: bytes = b"hello\n",
        *,
        size: int | None = None,
        readable: bool = True,
    ) -> Path:
        path = ROOT / name
        self.files[path] = PathMetadata(
            size=len(data) if size is None else size,
            is_dir=False,
            is_file=True,
            readable=readable,
        )
        self.data[path] = data
        return path

    def add_dir(self, name: str, *, readable: bool = True) -> Path:
        path = ROOT / name
        self.files[path] = PathMetadata(size=4096, is_dir=True, is_file=False, readable=readable)
        return path

    def add_external(self, path: Path, data: bytes = b"edited\n") -> FakeContent:
        content = FakeContent(name=path.name, data=data, text=data.decode(), path=path)
        self.external[path] = content
        return content

    def add_special(self, name: str) -> Path:
        path = ROOT / name
        self.files[path] = PathMetadata(size=0, is_dir=False, is_file=False, readable=True)
        return path

    def select(self, path: Path | None, command: str = "move-next") -> None:
        self.selection = path
        event = SelectionEvent(path, command, timestamp=self.now)
        for callback in list(self.navigation_callbacks):
            callback(event)

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in sorted(self.timers, key=lambda item: item.due):
            if timer.active and timer.due <= self.now:
                timer.fired = True
                timer.callback()

    def set_focus(self, active: bool) -> None:
        self.active = active
        for callback in list(self.focus_callbacks):
            callback(active)

    def pending_timers(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if timer.active]

    def owned_panels(self, owner: str) -> list[FakePanel]:
        return [panel for panel in self.panel_list if panel.owner == owner]

    # ------------------------------------------------------------------
    # BrowserHost protocol
    # ------------------------------------------------------------------
    def current_selection(self) -> Path | None:
        return self.selection

    def subscribe_navigation(self, callback: Callable[[SelectionEvent], None]) -> FakeSubscription:
        return FakeSubscription(self.navigation_callbacks, callback)

    def metadata(self, path: Path) -> PathMetadata:
        try:
            return self.files[path]
        except KeyError:
            raise UnreadableError(f"No such file: {path}") from None

    def read_byte_range(self, path: Path, start: int, length: int) -> bytes:
        if path not in self.data:
            raise UnreadableError(f"No such file: {path}")
        return self.data[path][start : start + length]

    def existing_representation(self, path: Path) -> FakeContent | None:
        return self.external.get(path)

    def displayed_elsewhere(self, path: Path) -> bool:
        return path in self.elsewhere

    def quiet_open(self, path: Path, kind: PreviewKind) -> FakeContent:
        self.open_calls.append(path)
        data = self.data[path]
        return FakeContent(
            name=path.name,
            data=data,
            text=data.decode("utf-8", "replace"),
            path=path,
            kind="image" if kind is PreviewKind.IMAGE else "text",
        )

    def quiet_directory_listing(self, path: Path) -> FakeContent:
        self.listing_calls.append(path)
        entries = sorted(
            candidate.name for candidate in self.files if candidate.parent == path
        )
        text = "\n".join(entries)
        return FakeContent(name=path.name, data=text.encode(), text=text, path=path, kind="listing")

    def create_scratch(self, name: str, text: str, raw: bytes) -> FakeContent:
        self.scratch_calls.append(name)
        return FakeContent(name=name, data=raw, text=text, kind="scratch")

    def content_size(self, content: FakeContent) -> int:
        return len(content.data)

    def content_bytes(self, content: FakeContent) -> bytes:
        return content.data

    def override_text(self, content: FakeContent, text: str | None) -> None:
        content.override = text

    def is_live(self, content: FakeContent) -> bool:
        return content.alive

    def destroy(self, content: FakeContent) -> None:
        if content.path in self.undestroyable:
            raise DestroyFailedError(f"{content.name} has unsaved changes")
        content.alive = False
        self.destroyed.append(content)

    def viewport_geometry(self) -> ViewportGeometry:
        return ViewportGeometry(self.width, self.height)

    def create_panel(
        self,
        placement: PanelPlacement,
        content: FakeContent,
        *,
        owner: str,
        selectable: bool = False,
    ) -> FakePanel:
        panel = FakePanel(placement, content, owner, selectable)
        self.panel_list.append(panel)
        return panel

    def delete_panel(self, panel: FakePanel) -> None:
        self.panel_list.remove(panel)

    def panels(self) -> list[FakePanel]:
        return list(self.panel_list)

    def schedule(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def subscribe_focus(self, callback: Callable[[bool], None]) -> FakeSubscription:
        return FakeSubscription(self.focus_callbacks, callback)

    def is_active(self) -> bool:
        return self.active

    def notify(self, message: str) -> None:
        self.notices.append(message)


@pytest.fixture
def host() -> FakeHost:
    """Return an empty in-memory browser host."""

    return FakeHost()


@pytest.fixture
def make_host() -> Callable[..., FakeHost]:
    """Return a factory for additional independent hosts."""

    return FakeHost


@pytest.fixture
def config() -> PreviewConfig:
    """Return the default preview configuration."""

    return PreviewConfig(start_directory=ROOT)
