"""Exceptions raised by the preview engine."""

from __future__ import annotations

__all__ = [
    "DestroyFailedError",
    "MisuseError",
    "PreviewError",
    "UnreadableError",
]


class PreviewError(RuntimeError):
    """Base class for preview engine failures."""


class UnreadableError(PreviewError):
    """Raised when a path cannot be inspected or read for previewing."""


class DestroyFailedError(PreviewError):
    """Raised when a rendered artifact cannot be safely discarded."""


class MisuseError(PreviewError):
    """Raised when a preview command is invoked outside a browsing context."""
