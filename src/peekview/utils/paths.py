"""Helpers for turning user input into paths the browser can work with."""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Any

__all__ = ["coerce_optional_path", "coerce_required_path", "extension_of"]


def coerce_required_path(
    value: str | Path | PathLike[str],
    *,
    empty_error: str | None = None,
) -> Path:
    """Return *value* as an absolute, user-expanded :class:`~pathlib.Path`.

    Raises :class:`ValueError` with *empty_error* when *value* is blank.
    """

    text = str(value).strip() if not isinstance(value, Path) else str(value)
    if not text:
        raise ValueError(empty_error or "Path value cannot be empty.")
    return Path(text).expanduser().resolve()


def coerce_optional_path(candidate: Any) -> Path | None:
    """Like :func:`coerce_required_path` but return ``None`` for unusable input."""

    if isinstance(candidate, str | PathLike):
        try:
            return coerce_required_path(candidate)
        except ValueError:
            return None
    return None


def extension_of(path: Path) -> str:
    """Return the extension of *path* without its leading dot.

    Dotfiles such as ``.bashrc`` have no extension and yield ``""``.
    """

    return path.suffix[1:] if path.suffix else ""
