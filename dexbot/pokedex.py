"""Pipeline turning a player name into a page of uncaught Pokémon."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .catalog import CatalogEntry, CatalogStore
from .constants import DEFAULT_PAGE_SIZE, TOTAL_UNIVERSE_SIZE
from .pagination import paginate, wrap_page
from .scanner import ExtractionStrategy, scan_saves

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PageResult:
    player_name: str
    caught: int
    uncaught: int
    total_pages: int
    current_page: int
    entries: tuple[CatalogEntry, ...]


class PokedexService:
    """Runs the scan, catalog query and pagination for one lookup."""

    def __init__(
        self,
        catalog: CatalogStore,
        save_directory: Path | str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        universe_size: int = TOTAL_UNIVERSE_SIZE,
        extractor: ExtractionStrategy | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.catalog = catalog
        self.save_directory = Path(save_directory)
        self.page_size = page_size
        self.universe_size = universe_size
        self.extractor = extractor

    async def lookup(self, player_name: str, page: int = 1) -> PageResult:
        """Build the page ``page`` of ``player_name``'s uncaught Pokémon.

        ``page`` is wrapped onto the available pages.  ``OSError`` (save
        directory unavailable) and :class:`~dexbot.catalog.QueryError`
        propagate so the caller can report the data as unavailable.
        """

        acquired = await scan_saves(
            self.save_directory, player_name, extractor=self.extractor
        )
        remaining = await self.catalog.complement(acquired)
        first = paginate(remaining, 1, self.page_size)
        current = wrap_page(page, first.total_pages)
        sliced = first if current == 1 else paginate(remaining, current, self.page_size)
        caught = len(acquired)
        return PageResult(
            player_name=player_name,
            caught=caught,
            uncaught=self.universe_size - caught,
            total_pages=sliced.total_pages,
            current_page=current,
            entries=sliced.items,
        )


def describe_page(result: PageResult) -> str:
    lines = [
        f"{result.player_name} has caught {result.caught} Pokemon "
        f"and has {result.uncaught} Pokemon left."
    ]
    if result.entries:
        lines.append(
            f"Uncaught Pokemon Pages {result.current_page}/{result.total_pages}:"
        )
        for entry in result.entries:
            line = f"ID: {entry.identifier}, Name: {entry.name}"
            if entry.evolution:
                line += f", Evolve: {entry.evolution}"
            lines.append(line)
    return "\n".join(lines)


__all__ = ["PageResult", "PokedexService", "describe_page"]
