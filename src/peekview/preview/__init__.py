"""Preview engine: classification, rendering, caching and panel lifecycle."""

from .cache import PreviewCache
from .classifier import classify, read_metadata
from .controller import PreviewController
from .errors import DestroyFailedError, MisuseError, PreviewError, UnreadableError
from .eviction import EvictionPolicy
from .hexview import TRUNCATION_MARKER, decode_text, format_hex
from .host import BrowserHost, Panel, Subscription, TimerHandle
from .models import (
    ClassifiedTarget,
    PanelPlacement,
    PanelSide,
    PathMetadata,
    PreviewArtifact,
    PreviewKind,
    SelectionEvent,
    ViewportGeometry,
)
from .panel import PANEL_OWNER, PanelManager, split_placement
from .renderers import RENDERERS, render_target
from .session import ENABLE_COMMAND, PreviewSession, SessionState

__all__ = [
    "BrowserHost",
    "ClassifiedTarget",
    "DestroyFailedError",
    "ENABLE_COMMAND",
    "EvictionPolicy",
    "MisuseError",
    "PANEL_OWNER",
    "Panel",
    "PanelManager",
    "PanelPlacement",
    "PanelSide",
    "PathMetadata",
    "PreviewArtifact",
    "PreviewCache",
    "PreviewController",
    "PreviewError",
    "PreviewKind",
    "PreviewSession",
    "RENDERERS",
    "SelectionEvent",
    "SessionState",
    "Subscription",
    "TRUNCATION_MARKER",
    "TimerHandle",
    "UnreadableError",
    "ViewportGeometry",
    "classify",
    "decode_text",
    "format_hex",
    "read_metadata",
    "render_target",
    "split_placement",
]
