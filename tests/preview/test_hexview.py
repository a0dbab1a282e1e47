from __future__ import annotations

from peekview.preview.hexview import (
    TRUNCATION_MARKER,
    decode_text,
    format_hex,
    with_truncation_marker,
)


def test_decode_text_accepts_utf8():
    assert decode_text("héllo".encode()) == "héllo"


def test_decode_text_rejects_binary():
    assert decode_text(b"abc\x00def") is None
    assert decode_text(b"\xff\xfe\xfa") is None


def test_decode_text_tolerates_cut_character_only_when_partial():
    data = "naïve".encode()[:3]

    assert decode_text(data) is None
    assert decode_text(data, partial=True) == "na"


def test_format_hex_layout():
    dump = format_hex(b"0123456789abcdefXY")
    first, second = dump.splitlines()

    assert first == (
        "00000000: 3031 3233 3435 3637 3839 6162 6364 6566  0123456789abcdef"
    )
    assert second.startswith("00000010: 5859")
    assert second.endswith("  XY")


def test_format_hex_masks_unprintable_bytes_and_applies_offset():
    dump = format_hex(b"\x00A\n", offset=0x20)

    assert dump.startswith("00000020: 0041 0a")
    assert dump.endswith(".A.")


def test_format_hex_empty():
    assert format_hex(b"") == ""


def test_truncation_marker_is_idempotent():
    marked = with_truncation_marker("head")

    assert marked == "head" + TRUNCATION_MARKER
    assert with_truncation_marker(marked) == marked
