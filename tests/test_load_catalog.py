from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
for entry in (PROJECT_BASE, PROJECT_BASE / "scripts"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from dexbot.catalog import CatalogEntry, CatalogStore, create_catalog_engine
from load_catalog import load_catalog, parse_catalog


def test_parse_catalog_sorts_and_reads_evolutions() -> None:
    entries = parse_catalog(
        {
            "pokemon": [
                {"id": 4, "name": "Charmander", "evolve": 5},
                {"id": 1, "name": "Bulbasaur"},
            ]
        }
    )

    assert entries == [
        CatalogEntry(identifier=1, name="Bulbasaur", evolution=None),
        CatalogEntry(identifier=4, name="Charmander", evolution=5),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"pokemon": [{"id": 1}]},
        {"pokemon": [{"id": "one", "name": "Bulbasaur"}]},
        {"pokemon": [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}]},
        {"pokemon": {"id": 1}},
    ],
)
def test_parse_catalog_rejects_bad_entries(payload: dict) -> None:
    with pytest.raises(ValueError):
        parse_catalog(payload)


def test_load_catalog_populates_table(tmp_path: Path) -> None:
    source = tmp_path / "catalog.toml"
    source.write_text(
        '[[pokemon]]\nid = 2\nname = "Ivysaur"\nevolve = 3\n\n'
        '[[pokemon]]\nid = 1\nname = "Bulbasaur"\nevolve = 2\n',
        encoding="utf8",
    )
    url = f"sqlite+aiosqlite:///{tmp_path / 'dex.db'}"

    async def _main() -> list[CatalogEntry]:
        loaded = await load_catalog(url, source)
        assert loaded == 2
        store = CatalogStore(create_catalog_engine(url))
        try:
            return await store.all_entries()
        finally:
            await store.close()

    entries = asyncio.run(_main())

    assert [entry.name for entry in entries] == ["Bulbasaur", "Ivysaur"]
