"""Map a selected path to the strategy used to preview it."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..config import PreviewConfig
from ..utils.paths import extension_of
from .errors import UnreadableError
from .models import ClassifiedTarget, PathMetadata, PreviewKind

__all__ = ["classify", "read_metadata"]

logger = logging.getLogger(__name__)


def read_metadata(path: Path) -> PathMetadata:
    """Stat *path* and return the facts the classifier depends on."""

    try:
        stat = path.stat()
    except OSError as exc:
        raise UnreadableError(f"Unable to stat {path!s}: {exc}") from exc

    is_dir = path.is_dir()
    return PathMetadata(
        size=int(stat.st_size),
        is_dir=is_dir,
        is_file=path.is_file(),
        readable=os.access(path, os.R_OK | (os.X_OK if is_dir else 0)),
    )


def classify(
    path: Path,
    config: PreviewConfig,
    metadata: PathMetadata | None = None,
) -> ClassifiedTarget:
    """Return the :class:`ClassifiedTarget` for *path*.

    The decision order matters: ignored extensions win over size, size wins
    over the image and directory checks. When *metadata* is omitted the path
    is stat'ed directly.
    """

    if metadata is None:
        metadata = read_metadata(path)

    extension = extension_of(path)

    if not metadata.is_dir and config.is_ignored_extension(extension):
        kind = PreviewKind.IGNORED
    elif metadata.size > config.max_previewable_size:
        kind = PreviewKind.OVERSIZED
    elif config.is_image_extension(extension):
        kind = PreviewKind.IMAGE
    elif metadata.is_dir:
        kind = PreviewKind.DIRECTORY
    else:
        kind = PreviewKind.DEFAULT

    logger.debug("Classified %s as %s", path, kind.value)
    return ClassifiedTarget(path=path, kind=kind, metadata=metadata)
