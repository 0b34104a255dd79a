"""Shared helpers for cogs."""

from __future__ import annotations

from discord.ext import commands

from ..pokedex import PokedexService
from ..sessions import SessionRegistry


class DexCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def service(self) -> PokedexService:
        return self.bot.service  # type: ignore[attr-defined, return-value]

    @property
    def sessions(self) -> SessionRegistry:
        return self.bot.sessions  # type: ignore[attr-defined, return-value]

    @property
    def session_timeout(self) -> float:
        return self.bot.config.session_timeout  # type: ignore[attr-defined, return-value]
