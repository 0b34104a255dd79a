"""Access to the reference Pokédex table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy import Column, Integer, MetaData, String, Table, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

log = logging.getLogger(__name__)

metadata = MetaData()

pokedex_table = Table(
    "pokedex",
    metadata,
    Column("pokemonid", Integer, primary_key=True, autoincrement=False),
    Column("name", String(64), nullable=False),
    Column("evolve", Integer, nullable=True),
)


class QueryError(RuntimeError):
    """Raised when the catalog cannot be queried."""


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    identifier: int
    name: str
    # Identifier of the evolved form; it may not exist in the catalog.
    evolution: int | None = None


def create_catalog_engine(url: str, **options) -> AsyncEngine:
    options.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **options)


class CatalogStore:
    """Read access to the catalog through a shared async engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def complement(self, acquired: Iterable[int]) -> list[CatalogEntry]:
        """Return every entry whose identifier is not in ``acquired``.

        An empty ``acquired`` set returns the whole catalog; no empty
        ``NOT IN`` clause is ever sent to the database.
        """

        excluded = sorted(set(acquired))
        stmt = select(
            pokedex_table.c.pokemonid,
            pokedex_table.c.name,
            pokedex_table.c.evolve,
        )
        if excluded:
            stmt = stmt.where(pokedex_table.c.pokemonid.not_in(excluded))
        stmt = stmt.order_by(pokedex_table.c.pokemonid)
        return await self._fetch(stmt, excluded=len(excluded))

    async def all_entries(self) -> list[CatalogEntry]:
        return await self.complement(())

    async def create_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as exc:
            raise QueryError(f"Unable to create the catalog schema: {exc}") from exc

    async def load_entries(self, entries: Sequence[CatalogEntry]) -> int:
        if not entries:
            return 0
        rows = [
            {"pokemonid": entry.identifier, "name": entry.name, "evolve": entry.evolution}
            for entry in entries
        ]
        try:
            async with self._engine.begin() as conn:
                await conn.execute(insert(pokedex_table), rows)
        except SQLAlchemyError as exc:
            raise QueryError(f"Unable to load catalog entries: {exc}") from exc
        return len(rows)

    async def close(self) -> None:
        await self._engine.dispose()

    async def _fetch(self, stmt, *, excluded: int) -> list[CatalogEntry]:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            log.exception("Catalog query failed (%s identifiers excluded)", excluded)
            raise QueryError("Unable to query the Pokédex catalog") from exc
        return [
            CatalogEntry(identifier=int(row.pokemonid), name=str(row.name), evolution=row.evolve)
            for row in rows
        ]


__all__ = [
    "CatalogEntry",
    "CatalogStore",
    "QueryError",
    "create_catalog_engine",
    "metadata",
    "pokedex_table",
]
