from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from dexbot.catalog import CatalogEntry, CatalogStore, QueryError, create_catalog_engine

T = TypeVar("T")

ENTRIES = [
    CatalogEntry(identifier=identifier, name=f"Mon {identifier}", evolution=identifier + 1)
    for identifier in (5, 3, 1, 4, 2)
]


def _run(tmp_path: Path, action: Callable[[CatalogStore], Awaitable[T]], *, seed: bool = True) -> T:
    async def _main() -> T:
        store = CatalogStore(create_catalog_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"))
        try:
            if seed:
                await store.create_schema()
                await store.load_entries(ENTRIES)
            return await action(store)
        finally:
            await store.close()

    return asyncio.run(_main())


def test_empty_set_returns_full_catalog_in_order(tmp_path: Path) -> None:
    entries = _run(tmp_path, lambda store: store.complement(set()))

    assert [entry.identifier for entry in entries] == [1, 2, 3, 4, 5]
    assert entries[0] == CatalogEntry(identifier=1, name="Mon 1", evolution=2)


def test_all_entries_matches_empty_complement(tmp_path: Path) -> None:
    entries = _run(tmp_path, lambda store: store.all_entries())

    assert [entry.identifier for entry in entries] == [1, 2, 3, 4, 5]


def test_complement_excludes_acquired(tmp_path: Path) -> None:
    entries = _run(tmp_path, lambda store: store.complement({4, 1, 99}))

    assert [entry.identifier for entry in entries] == [2, 3, 5]


def test_complement_of_everything_is_empty(tmp_path: Path) -> None:
    entries = _run(tmp_path, lambda store: store.complement({1, 2, 3, 4, 5}))

    assert entries == []


def test_evolution_may_be_missing(tmp_path: Path) -> None:
    async def _action(store: CatalogStore) -> list[CatalogEntry]:
        await store.load_entries([CatalogEntry(identifier=10, name="Lonely")])
        return await store.complement({1, 2, 3, 4, 5})

    entries = _run(tmp_path, _action)

    assert entries == [CatalogEntry(identifier=10, name="Lonely", evolution=None)]


def test_missing_table_raises_query_error(tmp_path: Path) -> None:
    with pytest.raises(QueryError):
        _run(tmp_path, lambda store: store.complement({1}), seed=False)
