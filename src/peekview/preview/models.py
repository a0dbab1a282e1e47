"""Value types shared by the preview engine components."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "ClassifiedTarget",
    "PanelPlacement",
    "PanelSide",
    "PathMetadata",
    "PreviewArtifact",
    "PreviewKind",
    "SelectionEvent",
    "ViewportGeometry",
]


class PreviewKind(str, Enum):
    """Rendering strategy selected for a path."""

    IGNORED = "ignored"
    OVERSIZED = "oversized"
    IMAGE = "image"
    DIRECTORY = "directory"
    DEFAULT = "default"


class PanelSide(str, Enum):
    """Edge of the browser body where the preview panel is attached."""

    RIGHT = "right"
    BOTTOM = "bottom"


@dataclass(frozen=True, slots=True)
class PathMetadata:
    """Live filesystem facts about a path."""

    size: int
    is_dir: bool
    is_file: bool
    readable: bool


@dataclass(frozen=True, slots=True)
class ClassifiedTarget:
    """Result of classifying *path*; recomputed on every request."""

    path: Path
    kind: PreviewKind
    metadata: PathMetadata


@dataclass(eq=False, slots=True)
class PreviewArtifact:
    """A rendered preview for a single path.

    ``content`` is an opaque handle owned by the host. Artifacts compare by
    identity so the cache can hand the very same object back on a hit.
    Unmanaged artifacts wrap representations that existed independently of
    previewing and are never destroyed by the engine.
    """

    path: Path
    kind: PreviewKind
    content: Any
    size: int
    is_partial: bool = False
    is_managed: bool = True


@dataclass(frozen=True, slots=True)
class SelectionEvent:
    """Navigation event emitted by the host browser."""

    path: Path | None
    command: str
    timestamp: float = field(default_factory=time.monotonic)


@dataclass(frozen=True, slots=True)
class ViewportGeometry:
    """Body dimensions of the browser viewport hosting the panel."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class PanelPlacement:
    """Where and how large the preview panel should be."""

    side: PanelSide
    size: int

    @property
    def dimension(self) -> str:
        """Return the axis that ``size`` applies to."""

        return "width" if self.side is PanelSide.RIGHT else "height"
