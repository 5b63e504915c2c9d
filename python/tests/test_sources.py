"""Tests for the local filesystem source."""

import os

import pytest

from readcache.sources import LocalFileSource


def test_read_text_adds_trailing_newline(tmp_path):
    f = tmp_path / "no_eol.txt"
    f.write_text("first\nlast")
    assert LocalFileSource().read_text(str(f)) == "first\nlast\n"


def test_read_text_normalizes_line_endings(tmp_path):
    f = tmp_path / "mixed.txt"
    f.write_bytes(b"a\r\nb\rc\n")
    assert LocalFileSource().read_text(str(f)) == "a\nb\nc\n"


def test_read_text_keeps_blank_lines(tmp_path):
    f = tmp_path / "blank.txt"
    f.write_text("a\n\n\nb\n")
    assert LocalFileSource().read_text(str(f)) == "a\n\n\nb\n"


def test_read_text_uses_encoding(tmp_path):
    f = tmp_path / "latin.txt"
    f.write_bytes("café\n".encode("latin-1"))
    assert LocalFileSource(encoding="latin-1").read_text(str(f)) == "café\n"
    with pytest.raises(UnicodeDecodeError):
        LocalFileSource().read_text(str(f))


def test_stat_mtime_ns(tmp_path):
    f = tmp_path / "t.txt"
    f.write_text("x\n")
    os.utime(f, ns=(1_700_000_000_123_456_789, 1_700_000_000_123_456_789))
    assert LocalFileSource().stat_mtime_ns(str(f)) == 1_700_000_000_123_456_789


def test_stat_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalFileSource().stat_mtime_ns(str(tmp_path / "missing.txt"))
