"""Unit tests for the mutagen-backed tag probe."""

from __future__ import annotations

from radiorecall.services.tag_probe import log_tags, probe_tags


class TestProbeTags:
    def test_garbage_bytes_yield_no_tags(self):
        assert probe_tags(b"\x00\x01not audio at all", "seg.aac") == {}

    def test_empty_bytes_yield_no_tags(self):
        assert probe_tags(b"", "unknown") == {}

    def test_log_tags_never_raises(self):
        log_tags(b"ID3\x04\x00\x00truncated", "seg.mp3")
