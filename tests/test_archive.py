from __future__ import annotations

import gzip
import sys
from pathlib import Path

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from dexbot.archive import CorruptArchiveError, decode_archive, read_save


def test_plain_save_is_returned_unchanged(tmp_path: Path) -> None:
    target = tmp_path / "ash.pk"
    target.write_bytes(b"player Ash 1:2")

    assert decode_archive(target) == b"player Ash 1:2"
    record = read_save(target)
    assert record.compressed is False
    assert record.text == "player Ash 1:2"


def test_gzip_save_is_inflated(tmp_path: Path) -> None:
    target = tmp_path / "ash.pk"
    target.write_bytes(gzip.compress(b"player Ash 25:2"))

    assert decode_archive(target) == b"player Ash 25:2"
    record = read_save(target)
    assert record.compressed is True
    assert record.raw != record.payload
    assert record.text == "player Ash 25:2"


def test_truncated_gzip_raises_corrupt_archive(tmp_path: Path) -> None:
    target = tmp_path / "broken.pk"
    target.write_bytes(gzip.compress(b"player Ash 25:2" * 20)[:12])

    with pytest.raises(CorruptArchiveError) as excinfo:
        decode_archive(target)

    assert excinfo.value.path == target


def test_magic_without_gzip_body_raises_corrupt_archive(tmp_path: Path) -> None:
    target = tmp_path / "fake.pk"
    target.write_bytes(b"\x1f\x8bnot really gzip")

    with pytest.raises(CorruptArchiveError):
        read_save(target)


def test_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        decode_archive(tmp_path / "missing.pk")


def test_invalid_utf8_is_replaced(tmp_path: Path) -> None:
    target = tmp_path / "odd.pk"
    target.write_bytes(b"player Ash \xff 3:2")

    assert read_save(target).text == "player Ash � 3:2"
