"""Rendering strategies, one per :class:`~peekview.preview.models.PreviewKind`."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from ..config import PreviewConfig
from .errors import UnreadableError
from .hexview import decode_text, format_hex, with_truncation_marker
from .host import BrowserHost
from .models import ClassifiedTarget, PreviewArtifact, PreviewKind

__all__ = [
    "RENDERERS",
    "DirectoryRenderer",
    "FullContentRenderer",
    "IgnoredRenderer",
    "OversizedRenderer",
    "Renderer",
    "render_target",
]

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Produce a preview artifact for a classified target."""

    def render(
        self,
        target: ClassifiedTarget,
        host: BrowserHost,
        config: PreviewConfig,
    ) -> PreviewArtifact | None: ...


class FullContentRenderer:
    """Open the whole file quietly; used for plain files and images."""

    def render(
        self,
        target: ClassifiedTarget,
        host: BrowserHost,
        config: PreviewConfig,
    ) -> PreviewArtifact | None:
        existing = host.existing_representation(target.path)
        if existing is not None:
            return PreviewArtifact(
                path=target.path,
                kind=target.kind,
                content=existing,
                size=host.content_size(existing),
                is_managed=False,
            )

        content = host.quiet_open(target.path, target.kind)
        return PreviewArtifact(
            path=target.path,
            kind=target.kind,
            content=content,
            size=target.metadata.size,
        )


class DirectoryRenderer:
    """Show a listing of the selected directory."""

    def render(
        self,
        target: ClassifiedTarget,
        host: BrowserHost,
        config: PreviewConfig,
    ) -> PreviewArtifact | None:
        content = host.quiet_directory_listing(target.path)
        return PreviewArtifact(
            path=target.path,
            kind=target.kind,
            content=content,
            size=host.content_size(content),
        )


class OversizedRenderer:
    """Read only the leading chunk of a large file into a scratch view.

    The scratch representation is detached from the real file so it can
    neither be saved over it nor collide with the file being opened
    elsewhere.
    """

    def render(
        self,
        target: ClassifiedTarget,
        host: BrowserHost,
        config: PreviewConfig,
    ) -> PreviewArtifact | None:
        data = host.read_byte_range(target.path, 0, config.oversized_chunk_size)
        text = decode_text(data, partial=True)
        if text is None:
            text = format_hex(data)

        name = f"{target.path.name} (first {len(data)} bytes)"
        content = host.create_scratch(name, with_truncation_marker(text), data)
        return PreviewArtifact(
            path=target.path,
            kind=target.kind,
            content=content,
            size=len(data),
            is_partial=True,
        )


class IgnoredRenderer:
    """Produce nothing, only tell the user why."""

    def render(
        self,
        target: ClassifiedTarget,
        host: BrowserHost,
        config: PreviewConfig,
    ) -> PreviewArtifact | None:
        message = f"Skipping preview of ignored file: {target.path}"
        logger.info(message)
        host.notify(message)
        return None


_FULL_CONTENT = FullContentRenderer()

RENDERERS: Mapping[PreviewKind, Renderer] = MappingProxyType(
    {
        PreviewKind.DEFAULT: _FULL_CONTENT,
        PreviewKind.IMAGE: _FULL_CONTENT,
        PreviewKind.DIRECTORY: DirectoryRenderer(),
        PreviewKind.OVERSIZED: OversizedRenderer(),
        PreviewKind.IGNORED: IgnoredRenderer(),
    }
)
"""Renderer for every preview kind."""


def render_target(
    target: ClassifiedTarget,
    host: BrowserHost,
    config: PreviewConfig,
) -> PreviewArtifact | None:
    """Dispatch *target* to its renderer.

    Raises :class:`UnreadableError` when the host cannot read the path.
    """

    renderer = RENDERERS[target.kind]
    try:
        return renderer.render(target, host, config)
    except OSError as exc:
        raise UnreadableError(f"Unable to read {target.path!s}: {exc}") from exc
