"""Content representations shown in browser panels."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from ..preview.errors import DestroyFailedError, UnreadableError
from ..preview.hexview import decode_text, format_hex

__all__ = [
    "Document",
    "DocumentKind",
    "DocumentStore",
    "load_image_document",
    "load_listing_document",
    "load_text_document",
]

logger = logging.getLogger(__name__)

try:
    _RESAMPLING_FILTER = Image.Resampling.LANCZOS
except AttributeError:  # pragma: no cover - Pillow < 9 fallback
    _RESAMPLING_FILTER = Image.LANCZOS

IMAGE_PREVIEW_SIZE: tuple[int, int] = (1024, 1024)
"""Largest dimensions an image is scaled to before display."""


class DocumentKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    LISTING = "listing"


@dataclass(eq=False, slots=True)
class Document:
    """A piece of content that can be shown in a panel."""

    name: str
    kind: DocumentKind
    path: Path | None = None
    raw: bytes = b""
    text: str = ""
    image_png: bytes | None = None
    entries: list[str] = field(default_factory=list)
    read_only: bool = True
    scratch: bool = False
    modified: bool = False
    alive: bool = True
    override_text: str | None = None

    @property
    def display_text(self) -> str:
        """Text to show, honouring a temporary override such as a hex dump."""

        if self.override_text is not None:
            return self.override_text
        return self.text

    @property
    def size(self) -> int:
        if self.kind is DocumentKind.LISTING:
            return len(self.text.encode("utf-8"))
        return len(self.raw)


def load_text_document(path: Path, *, read_only: bool = True) -> Document:
    """Read *path* fully; binary files are shown as a hex dump."""

    raw = _read_bytes(path)
    text = decode_text(raw)
    if text is None:
        text = format_hex(raw)
        read_only = True
    return Document(name=path.name, kind=DocumentKind.TEXT, path=path, raw=raw, text=text, read_only=read_only)


def load_image_document(path: Path) -> Document:
    """Load *path* with Pillow and keep a display-sized PNG copy."""

    raw = _read_bytes(path)
    try:
        with Image.open(io.BytesIO(raw)) as img:
            image = ImageOps.exif_transpose(img)
            description = f"{image.format or path.suffix.upper()} {image.width}×{image.height} {image.mode}"
            thumbnail = image.copy()
            thumbnail.thumbnail(IMAGE_PREVIEW_SIZE, _RESAMPLING_FILTER)
            buffer = io.BytesIO()
            thumbnail.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.debug("Falling back to text view for %s: %s", path, exc)
        return load_text_document(path)

    return Document(
        name=path.name,
        kind=DocumentKind.IMAGE,
        path=path,
        raw=raw,
        text=description,
        image_png=buffer.getvalue(),
    )


def load_listing_document(path: Path) -> Document:
    """Return a listing of the entries in directory *path*."""

    try:
        with os.scandir(path) as iterator:
            entries = sorted(
                (entry.name + ("/" if entry.is_dir(follow_symlinks=False) else "") for entry in iterator),
                key=str.casefold,
            )
    except OSError as exc:
        raise UnreadableError(f"Unable to list {path!s}: {exc}") from exc

    text = "\n".join(entries)
    return Document(name=f"{path.name or path}/", kind=DocumentKind.LISTING, path=path, text=text, entries=entries)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise UnreadableError(f"Unable to read {path!s}: {exc}") from exc


class DocumentStore:
    """Track every document a browser window holds.

    Documents opened by the user are the externally owned representations
    the preview engine must reuse but never destroy.
    """

    def __init__(self) -> None:
        self._documents: list[Document] = []
        self._user_documents: dict[Path, Document] = {}

    def add(self, document: Document, *, user_owned: bool = False) -> Document:
        self._documents.append(document)
        if user_owned and document.path is not None:
            self._user_documents[document.path] = document
        return document

    def user_document(self, path: Path) -> Document | None:
        document = self._user_documents.get(path)
        if document is not None and document.alive:
            return document
        return None

    def release_user_document(self, document: Document) -> None:
        """Forget a user document once its panel was closed."""

        if document.path is not None and self._user_documents.get(document.path) is document:
            del self._user_documents[document.path]
        self._discard(document)

    def destroy(self, document: Document) -> None:
        """Discard a document created for previewing."""

        if document.modified:
            raise DestroyFailedError(f"{document.name} has unsaved modifications")
        if document.path is not None and self._user_documents.get(document.path) is document:
            raise DestroyFailedError(f"{document.name} is open for editing")
        self._discard(document)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(list(self._documents))

    def _discard(self, document: Document) -> None:
        document.alive = False
        self._documents = [held for held in self._documents if held is not document]
