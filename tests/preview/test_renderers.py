from __future__ import annotations

from pathlib import Path

import pytest

from peekview.preview.errors import UnreadableError
from peekview.preview.hexview import TRUNCATION_MARKER
from peekview.preview.models import ClassifiedTarget, PreviewKind
from peekview.preview.renderers import RENDERERS, render_target


def _target(host, path: Path, kind: PreviewKind) -> ClassifiedTarget:
    return ClassifiedTarget(path=path, kind=kind, metadata=host.metadata(path))


def test_every_kind_has_a_renderer():
    assert set(RENDERERS) == set(PreviewKind)


def test_default_renderer_opens_quietly(host, config):
    path = host.add_file("notes.txt", b"hello world\n")

    artifact = render_target(_target(host, path, PreviewKind.DEFAULT), host, config)

    assert host.open_calls == [path]
    assert artifact.content.text == "hello world\n"
    assert artifact.size == 12
    assert artifact.is_managed
    assert not artifact.is_partial
    assert host.notices == []


def test_default_renderer_reuses_existing_representation(host, config):
    path = host.add_file("notes.txt", b"on disk\n")
    existing = host.add_external(path, b"edited in memory\n")

    artifact = render_target(_target(host, path, PreviewKind.DEFAULT), host, config)

    assert artifact.content is existing
    assert not artifact.is_managed
    assert artifact.size == len(b"edited in memory\n")
    assert host.open_calls == []


def test_image_renderer_marks_image_content(host, config):
    path = host.add_file("photo.png", b"\x89PNG")

    artifact = render_target(_target(host, path, PreviewKind.IMAGE), host, config)

    assert artifact.kind is PreviewKind.IMAGE
    assert artifact.content.kind == "image"


def test_directory_renderer_lists_entries(host, config):
    directory = host.add_dir("src")
    host.files[directory / "main.py"] = host.metadata(host.add_file("main.py"))

    artifact = render_target(_target(host, directory, PreviewKind.DIRECTORY), host, config)

    assert host.listing_calls == [directory]
    assert artifact.content.text == "main.py"
    assert artifact.size == len(b"main.py")


def test_oversized_text_reads_leading_chunk(host, config):
    path = host.add_file("big.log", b"line\n" * 1_000_000)

    artifact = render_target(_target(host, path, PreviewKind.OVERSIZED), host, config)

    assert artifact.is_partial
    assert artifact.size == config.oversized_chunk_size
    assert host.scratch_calls == [f"big.log (first {config.oversized_chunk_size} bytes)"]
    assert artifact.content.text.startswith("line\nline\n")
    assert artifact.content.text.endswith(TRUNCATION_MARKER)
    assert artifact.content.text.count(TRUNCATION_MARKER) == 1
    assert host.open_calls == []


def test_oversized_binary_falls_back_to_hex(host, config):
    path = host.add_file("bigdata.bin", b"\x00\x01\x02\x03" * 1_250_000)

    artifact = render_target(_target(host, path, PreviewKind.OVERSIZED), host, config)

    assert artifact.content.text.startswith("00000000: 0001 0203 0001 0203")
    assert artifact.content.text.endswith(TRUNCATION_MARKER)
    assert artifact.content.data == b"\x00\x01\x02\x03" * (config.oversized_chunk_size // 4)


def test_oversized_tolerates_character_cut_at_chunk_boundary(host, config):
    config = config.with_overrides(oversized_chunk_size=4)
    path = host.add_file("accents.txt", "abcé".encode() * 100)

    artifact = render_target(_target(host, path, PreviewKind.OVERSIZED), host, config)

    assert artifact.content.text == "abc" + TRUNCATION_MARKER


def test_ignored_renderer_only_notifies(host, config):
    path = host.add_file("movie.mkv", b"\x1a\x45\xdf\xa3")

    artifact = render_target(_target(host, path, PreviewKind.IGNORED), host, config)

    assert artifact is None
    assert host.notices == [f"Skipping preview of ignored file: {path}"]
    assert host.open_calls == []


def test_os_errors_become_unreadable(host, config):
    path = host.add_file("gone.txt")

    def _fail(path, kind):
        raise PermissionError("denied")

    host.quiet_open = _fail

    with pytest.raises(UnreadableError):
        render_target(_target(host, path, PreviewKind.DEFAULT), host, config)
