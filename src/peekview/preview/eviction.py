"""Reclaim cache capacity whenever a preview is closed."""

from __future__ import annotations

import logging

from .cache import PreviewCache
from .errors import DestroyFailedError
from .host import BrowserHost
from .models import PreviewArtifact

__all__ = ["EvictionPolicy"]

logger = logging.getLogger(__name__)


class EvictionPolicy:
    """Destroy cached previews once their cumulative size crosses a threshold.

    Each pass destroys at most one fully rendered artifact, the oldest one
    that is not currently displayed. The total may therefore stay above the
    threshold until later passes catch up.
    """

    def __init__(self, host: BrowserHost, threshold: int) -> None:
        self._host = host
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def run(self, cache: PreviewCache, *, displayed: PreviewArtifact | None = None) -> None:
        """Run one eviction pass after the preview of a path was closed."""

        self.reclaim(cache, displayed=displayed)
        self.wipe_partial(cache, displayed=displayed)

    def reclaim(
        self,
        cache: PreviewCache,
        *,
        displayed: PreviewArtifact | None = None,
    ) -> PreviewArtifact | None:
        """Destroy the oldest evictable artifact when over the threshold.

        Returns the destroyed artifact, or ``None`` when nothing was destroyed.
        """

        cache.prune()
        total = cache.managed_size()
        if total < self._threshold:
            return None

        candidate = next(
            (
                artifact
                for artifact in cache.full_artifacts()
                if artifact.is_managed and artifact is not displayed
            ),
            None,
        )
        if candidate is None:
            return None

        try:
            self._host.destroy(candidate.content)
        except DestroyFailedError as exc:
            logger.warning("Keeping preview of %s: %s", candidate.path, exc)
            return None

        cache.discard(candidate)
        logger.debug(
            "Evicted preview of %s (%d of %d bytes cached)",
            candidate.path,
            candidate.size,
            total,
        )
        return candidate

    def wipe_partial(
        self,
        cache: PreviewCache,
        *,
        displayed: PreviewArtifact | None = None,
    ) -> int:
        """Destroy every partial artifact except *displayed*.

        Returns how many artifacts were dropped from the partial store.
        """

        dropped = 0
        for artifact in cache.partial_artifacts():
            if artifact is displayed:
                continue
            try:
                self._host.destroy(artifact.content)
            except DestroyFailedError as exc:
                logger.warning("Unable to discard partial preview of %s: %s", artifact.path, exc)
            cache.discard(artifact)
            dropped += 1
        return dropped
