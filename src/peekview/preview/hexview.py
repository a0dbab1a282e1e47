"""Text and hex formatting for raw preview content."""

from __future__ import annotations

import codecs
from typing import Final

__all__ = [
    "TRUNCATION_MARKER",
    "decode_text",
    "format_hex",
    "with_truncation_marker",
]

TRUNCATION_MARKER: Final[str] = "\n\n[… preview truncated]"
"""Appended to partial previews so they are not mistaken for the whole file."""

_BYTES_PER_ROW = 16


def decode_text(data: bytes, *, partial: bool = False) -> str | None:
    """Decode *data* as UTF-8 or return ``None`` when it looks binary.

    When *partial* is set, an incomplete multi-byte sequence at the very end
    is tolerated because the chunk may have been cut mid-character.
    """

    if b"\x00" in data:
        return None

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        return decoder.decode(data, final=not partial)
    except UnicodeDecodeError:
        return None


def format_hex(data: bytes, *, offset: int = 0) -> str:
    """Return an ``xxd``-style dump of *data*."""

    rows: list[str] = []
    for start in range(0, len(data), _BYTES_PER_ROW):
        chunk = data[start : start + _BYTES_PER_ROW]
        pairs = [chunk[index : index + 2].hex() for index in range(0, len(chunk), 2)]
        hex_column = " ".join(pairs)
        ascii_column = "".join(chr(byte) if 32 <= byte < 127 else "." for byte in chunk)
        rows.append(f"{offset + start:08x}: {hex_column:<39}  {ascii_column}")
    return "\n".join(rows)


def with_truncation_marker(text: str) -> str:
    """Return *text* ending with exactly one truncation marker."""

    if text.endswith(TRUNCATION_MARKER):
        return text
    return text + TRUNCATION_MARKER
