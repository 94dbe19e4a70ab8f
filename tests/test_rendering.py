# tests/test_rendering.py
"""Tests for per-file rendering and binary detection."""

from pathlib import Path

import pytest

from context_dumper.core.binary import is_binary_content
from context_dumper.core.discovery.walker import PathRecord
from context_dumper.core.rendering import (
    FileRenderer,
    RenderedFile,
    Skipped,
    SkipReason,
    format_file_block,
)


class TestFormatting:
    def test_block_layout_is_exact(self):
        assert format_file_block("src/app.py", "print('hi')") == (
            "--- START: src/app.py ---\nprint('hi')\n--- END: src/app.py ---\n\n"
        )

    def test_size_counts_utf8_bytes_not_characters(self):
        rendered = RenderedFile.from_content("é.txt", "héllo")
        assert rendered.size == len(rendered.text.encode("utf-8"))
        assert rendered.size == len(rendered.text) + 3


class TestFileRenderer:
    def test_renders_text_file(self, tmp_path: Path):
        path = tmp_path / "notes.md"
        path.write_text("# Title\nbody\n", encoding="utf-8")

        outcome = FileRenderer().render(PathRecord(path, "notes.md"))

        assert isinstance(outcome, RenderedFile)
        assert outcome.relative_path == "notes.md"
        assert outcome.text == "--- START: notes.md ---\n# Title\nbody\n\n--- END: notes.md ---\n\n"

    def test_binary_file_is_skipped(self, tmp_path: Path):
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")

        outcome = FileRenderer().render(PathRecord(path, "image.png"))

        assert outcome == Skipped("image.png", SkipReason.BINARY)

    def test_missing_file_is_unreadable(self, tmp_path: Path):
        outcome = FileRenderer().render_path(tmp_path / "vanished.txt", "vanished.txt")
        assert isinstance(outcome, Skipped)
        assert outcome.reason is SkipReason.UNREADABLE
        assert outcome.detail

    def test_directory_in_place_of_file_is_unreadable(self, tmp_path: Path):
        outcome = FileRenderer().render_path(tmp_path, "dir")
        assert isinstance(outcome, Skipped)
        assert outcome.reason is SkipReason.UNREADABLE

    def test_utf8_bom_is_kept_in_content(self, tmp_path: Path):
        path = tmp_path / "bom.txt"
        path.write_bytes(b"\xef\xbb\xbfhello")
        outcome = FileRenderer().render_path(path, "bom.txt")
        assert isinstance(outcome, RenderedFile)
        assert outcome.text == "--- START: bom.txt ---\n\ufeffhello\n--- END: bom.txt ---\n\n"
        assert outcome.size == len(outcome.text.encode("utf-8"))

    def test_classifier_is_injectable(self, tmp_path: Path):
        path = tmp_path / "plain.txt"
        path.write_text("perfectly ordinary text")
        renderer = FileRenderer(is_binary=lambda data: True)
        assert renderer.render_path(path, "plain.txt").reason is SkipReason.BINARY


class TestBinaryDetection:
    def test_empty_content_is_text(self):
        assert is_binary_content(b"") is False

    def test_nul_byte_means_binary(self):
        assert is_binary_content(b"abc\x00def") is True

    def test_utf8_text_is_text(self):
        assert is_binary_content("日本語のテキスト\nÄÖÜ".encode("utf-8")) is False

    def test_multibyte_character_cut_by_sample_is_text(self):
        content = ("é" * 5000).encode("utf-8")
        assert is_binary_content(content, sample_size=8191) is False

    def test_latin1_text_is_text(self):
        assert is_binary_content(("café crème " * 20).encode("latin-1")) is False

    @pytest.mark.parametrize("blob", [
        bytes(range(128, 256)) * 4,
        b"\xde\xad\xbe\xef" * 64,
    ])
    def test_high_byte_noise_is_binary(self, blob):
        assert is_binary_content(blob) is True
