"""Entry point for the Pokédex Discord bot."""

from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from .catalog import CatalogStore, create_catalog_engine
from .config import BotConfig, ConfigError
from .pokedex import PokedexService
from .sessions import SessionRegistry

log = logging.getLogger(__name__)


class DexBot(commands.Bot):
    def __init__(self, config: BotConfig):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(command_prefix=config.command_prefix, intents=intents)
        self.config = config
        self.catalog = CatalogStore(create_catalog_engine(config.database_url))
        self.service = PokedexService(
            self.catalog,
            config.save_directory,
            page_size=config.page_size,
            universe_size=config.universe_size,
        )
        self.sessions = SessionRegistry()

    async def setup_hook(self) -> None:
        await self.load_extension("dexbot.cogs.pokedex")

    async def on_ready(self) -> None:
        if self.user:
            log.info("Connected as %s (%s)", self.user, self.user.id)
        log.info("Reading save files from %s", self.config.save_directory)

    async def close(self) -> None:
        await self.sessions.close_all()
        await super().close()
        await self.catalog.close()


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        config = BotConfig.load()
    except ConfigError as exc:
        log.error("Unable to start: %s", exc)
        raise SystemExit(1) from exc
    bot = DexBot(config)
    async with bot:
        await bot.start(config.token)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
