"""Decoding of player save files.

Save files are written either as plain text or as a single gzip member.  The
format is detected from the leading magic bytes rather than the file name.
"""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass
from pathlib import Path

from .constants import GZIP_MAGIC


class CorruptArchiveError(ValueError):
    """Raised when a payload carries the gzip magic but cannot be inflated."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Corrupt gzip archive {self.path}: {reason}")


@dataclass(slots=True, frozen=True)
class SaveRecord:
    path: Path
    raw: bytes
    payload: bytes
    compressed: bool

    @property
    def text(self) -> str:
        return self.payload.decode("utf8", "replace")


def is_compressed(raw: bytes) -> bool:
    return raw[:2] == GZIP_MAGIC


def decode_payload(raw: bytes, *, path: Path | str = "<memory>") -> bytes:
    """Return ``raw`` inflated when it is gzip data, otherwise unchanged."""

    if not is_compressed(raw):
        return raw
    try:
        return gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        raise CorruptArchiveError(path, str(exc) or type(exc).__name__) from exc


def decode_archive(path: Path | str) -> bytes:
    """Read ``path`` and return its decoded bytes.

    ``OSError`` propagates when the file cannot be read and
    :class:`CorruptArchiveError` is raised for damaged gzip payloads.
    """

    target = Path(path)
    raw = target.read_bytes()
    return decode_payload(raw, path=target)


def read_save(path: Path | str) -> SaveRecord:
    target = Path(path)
    raw = target.read_bytes()
    payload = decode_payload(raw, path=target)
    return SaveRecord(
        path=target,
        raw=raw,
        payload=payload,
        compressed=is_compressed(raw),
    )


__all__ = [
    "CorruptArchiveError",
    "SaveRecord",
    "decode_archive",
    "decode_payload",
    "is_compressed",
    "read_save",
]
