"""Scanning of save files for the Pokémon a player has caught."""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import Iterable, Protocol

from .archive import CorruptArchiveError, SaveRecord, read_save
from .constants import OWNED_STATUS, SAVE_FILE_EXTENSION

log = logging.getLogger(__name__)

_ENTRY_PATTERN = re.compile(r"(\d+):(\d+)")


class ExtractionStrategy(Protocol):
    def mentions_player(self, text: str, player_name: str) -> bool: ...

    def acquired_ids(self, text: str) -> set[int]: ...


class SaveTextExtractor:
    """Best-effort extraction over the unstructured save text.

    The save format is owned by the game server and carries no schema we can
    rely on.  A file belongs to a player when the word ``player`` is followed
    somewhere later by the player's name, and every ``<id>:<status>`` pair in
    the file is treated as a Pokédex entry.
    """

    def __init__(self, *, owned_status: int = OWNED_STATUS) -> None:
        self.owned_status = owned_status

    @staticmethod
    def marker_pattern(player_name: str) -> re.Pattern[str]:
        return re.compile(r"player[\s\S]*?" + re.escape(player_name), re.IGNORECASE)

    def mentions_player(self, text: str, player_name: str) -> bool:
        return self.marker_pattern(player_name).search(text) is not None

    def acquired_ids(self, text: str) -> set[int]:
        acquired: set[int] = set()
        for match in _ENTRY_PATTERN.finditer(text):
            pokemon_id, status = int(match.group(1)), int(match.group(2))
            if status == self.owned_status:
                acquired.add(pokemon_id)
        return acquired


def list_save_files(directory: Path | str) -> list[Path]:
    """Return the save files in ``directory`` sorted by name.

    ``OSError`` propagates when the directory itself cannot be listed.
    """

    base = Path(directory)
    with os.scandir(base) as entries:
        names = [entry.name for entry in entries if entry.name.endswith(SAVE_FILE_EXTENSION)]
    return [base / name for name in sorted(names)]


def extract_from_records(
    records: Iterable[SaveRecord],
    player_name: str,
    extractor: ExtractionStrategy,
) -> set[int]:
    acquired: set[int] = set()
    for record in records:
        text = record.text
        if not extractor.mentions_player(text, player_name):
            continue
        found = extractor.acquired_ids(text)
        log.debug("Found %s caught entries for %s in %s", len(found), player_name, record.path.name)
        acquired |= found
    return acquired


async def scan_saves(
    directory: Path | str,
    player_name: str,
    *,
    extractor: ExtractionStrategy | None = None,
) -> set[int]:
    """Collect every identifier ``player_name`` has caught across the save files.

    Each file is decoded off the event loop.  Files that cannot be read,
    inflated or parsed are logged and skipped so a single damaged save never
    hides the others.
    """

    strategy = extractor or SaveTextExtractor()
    paths = await asyncio.to_thread(list_save_files, directory)
    acquired: set[int] = set()
    for path in paths:
        try:
            record = await asyncio.to_thread(read_save, path)
        except CorruptArchiveError as exc:
            log.warning("Skipping corrupt save %s: %s", path.name, exc.reason)
            continue
        except OSError as exc:
            log.warning("Skipping unreadable save %s: %s", path.name, exc)
            continue
        try:
            found = extract_from_records((record,), player_name, strategy)
        except ValueError as exc:
            log.warning("Skipping malformed save %s: %s", path.name, exc)
            continue
        acquired |= found
    log.info(
        "Scanned %s save files for %s: %s caught", len(paths), player_name, len(acquired)
    )
    return acquired


__all__ = [
    "ExtractionStrategy",
    "SaveTextExtractor",
    "extract_from_records",
    "list_save_files",
    "scan_saves",
]
