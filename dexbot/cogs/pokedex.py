from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Sequence

from discord.ext import commands

from ..catalog import QueryError
from ..sessions import PokedexSession
from ..views import PokedexView, build_pokedex_embed
from .base import DexCog

log = logging.getLogger(__name__)

USAGE = "Usage: !pokedex <player> [page]"
MISSING_PLAYER = "Please provide a player name."
UNAVAILABLE = "Could not retrieve data for that player."


class UsageError(ValueError):
    """Raised when the command arguments cannot be understood."""


@dataclass(slots=True, frozen=True)
class PokedexRequest:
    player_name: str
    page: int = 1


def parse_pokedex_request(args: Sequence[str]) -> PokedexRequest:
    """Interpret ``!pokedex`` arguments as a player name and optional page."""

    if not args or not args[0].strip():
        raise UsageError(MISSING_PLAYER)
    player_name = args[0].strip()
    if len(args) < 2:
        return PokedexRequest(player_name)
    try:
        page = int(args[1])
    except ValueError as exc:
        raise UsageError(f"Page must be a whole number. {USAGE}") from exc
    return PokedexRequest(player_name, page)


class PokedexCog(DexCog):
    @commands.command(name="pokedex", help="Show the Pokémon a player has yet to catch")
    async def pokedex(self, ctx: commands.Context, *args: str) -> None:
        try:
            request = parse_pokedex_request(args)
        except UsageError as exc:
            await ctx.send(str(exc))
            return

        try:
            result = await self.service.lookup(request.player_name, request.page)
        except QueryError:
            await ctx.send(UNAVAILABLE)
            return
        except OSError as exc:
            log.warning("Save directory unavailable for %s: %s", request.player_name, exc)
            await ctx.send(UNAVAILABLE)
            return

        session = PokedexSession(
            ctx.author.id,
            result,
            partial(self.service.lookup, request.player_name),
            timeout=self.session_timeout,
        )
        view = PokedexView(session)
        message = await ctx.send(embed=build_pokedex_embed(result), view=view)
        view.message = message
        session.start()
        await self.sessions.register(message.id, session)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(PokedexCog(bot))
