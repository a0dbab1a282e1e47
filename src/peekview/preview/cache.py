"""In-memory cache of rendered previews."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable, Iterator
from pathlib import Path

from ..config import PreviewConfig
from .classifier import classify
from .host import BrowserHost
from .models import ClassifiedTarget, PathMetadata, PreviewArtifact
from .renderers import render_target

__all__ = ["PreviewCache"]

logger = logging.getLogger(__name__)

Classifier = Callable[[Path, PreviewConfig, PathMetadata | None], ClassifiedTarget]


class PreviewCache:
    """Deduplicate rendered previews keyed by path.

    Fully rendered artifacts live in an insertion-ordered store that the
    eviction policy walks oldest first. Partial artifacts for oversized
    files live in a separate store that is wiped wholesale whenever the
    preview closes. Unmanaged artifacts are returned but never stored.
    """

    def __init__(
        self,
        host: BrowserHost,
        config: PreviewConfig,
        *,
        classifier: Classifier = classify,
    ) -> None:
        self._host = host
        self._config = config
        self._classifier = classifier
        self._full: OrderedDict[Path, PreviewArtifact] = OrderedDict()
        self._partial: dict[Path, PreviewArtifact] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_or_render(self, path: Path) -> PreviewArtifact | None:
        """Return the preview for *path*, rendering it on a miss.

        Returns ``None`` when the path is classified as ignored. Raises
        :class:`~peekview.preview.errors.UnreadableError` when the path
        cannot be read.
        """

        existing = self._host.existing_representation(path)
        if existing is not None:
            logger.debug("Reusing externally owned content for %s", path)
            return PreviewArtifact(
                path=path,
                kind=self._classifier(path, self._config, self._host.metadata(path)).kind,
                content=existing,
                size=self._host.content_size(existing),
                is_managed=False,
            )

        cached = self.lookup(path)
        if cached is not None:
            logger.debug("Preview cache hit for %s", path)
            return cached

        target = self._classifier(path, self._config, self._host.metadata(path))
        artifact = render_target(target, self._host, self._config)
        if artifact is None:
            return None

        if not artifact.is_managed:
            return artifact

        if artifact.is_partial:
            self._partial[path] = artifact
        else:
            self._full[path] = artifact
        logger.debug("Rendered %s preview for %s (%d bytes)", target.kind.value, path, artifact.size)
        return artifact

    def lookup(self, path: Path) -> PreviewArtifact | None:
        """Return the stored artifact for *path* without rendering."""

        for store in (self._full, self._partial):
            artifact = store.get(path)
            if artifact is None:
                continue
            if self._host.is_live(artifact.content):
                return artifact
            # Closed behind our back; forget it so it gets re-rendered.
            del store[path]
        return None

    def discard(self, artifact: PreviewArtifact) -> None:
        """Forget *artifact* without destroying its content."""

        for store in (self._full, self._partial):
            if store.get(artifact.path) is artifact:
                del store[artifact.path]

    def full_artifacts(self) -> Iterator[PreviewArtifact]:
        """Yield fully rendered artifacts, oldest first."""

        return iter(list(self._full.values()))

    def partial_artifacts(self) -> Iterator[PreviewArtifact]:
        """Yield artifacts for partially read files."""

        return iter(list(self._partial.values()))

    def prune(self) -> None:
        """Drop entries whose content the host no longer holds."""

        for store in (self._full, self._partial):
            for path, artifact in list(store.items()):
                if not self._host.is_live(artifact.content):
                    del store[path]

    def managed_size(self) -> int:
        """Return the cumulative size of live, fully rendered artifacts."""

        return sum(
            artifact.size
            for artifact in self._full.values()
            if artifact.is_managed and self._host.is_live(artifact.content)
        )

    def __contains__(self, path: object) -> bool:
        return path in self._full or path in self._partial

    def __len__(self) -> int:
        return len(self._full) + len(self._partial)
