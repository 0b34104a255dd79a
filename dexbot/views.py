"""Discord UI components for the Pokédex command."""

from __future__ import annotations

import logging
from typing import Any, Optional

import discord

from .catalog import QueryError
from .constants import EMBED_TITLE, NEXT_EMOJI, PREVIOUS_EMOJI
from .pokedex import PageResult, describe_page
from .sessions import PageDirection, PokedexSession

log = logging.getLogger(__name__)

ERROR_NOTICE = "An error occurred while processing your request."


def build_pokedex_embed(result: PageResult) -> discord.Embed:
    return discord.Embed(title=EMBED_TITLE, description=describe_page(result))


async def send_notice(interaction: discord.Interaction, message: str) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


class OwnedView(discord.ui.View):
    """Base view that restricts interactions to a single Discord user."""

    def __init__(self, owner_id: int | None, *, timeout: float | None = 120.0) -> None:
        super().__init__(timeout=timeout)
        self.owner_id = owner_id

    async def interaction_check(self, interaction: discord.Interaction) -> bool:  # type: ignore[override]
        if self.owner_id is None or interaction.user.id == self.owner_id:
            return True
        await interaction.response.send_message(
            "Only the trainer who opened this Pokédex may turn its pages.",
            ephemeral=True,
        )
        return False


class PokedexView(OwnedView):
    """Previous/next buttons driving a :class:`PokedexSession`.

    The view itself never times out; the session owns the absolute lifetime
    and detaches the buttons when it expires.
    """

    def __init__(self, session: PokedexSession) -> None:
        super().__init__(session.requester_id, timeout=None)
        self.session = session
        self.message: Optional[discord.Message] = None
        session.add_expiry_callback(self._detach)

    @discord.ui.button(emoji=PREVIOUS_EMOJI, style=discord.ButtonStyle.primary)
    async def previous_page(  # type: ignore[override]
        self, interaction: discord.Interaction, button: discord.ui.Button
    ) -> None:
        await self._turn(interaction, PageDirection.PREVIOUS)

    @discord.ui.button(emoji=NEXT_EMOJI, style=discord.ButtonStyle.primary)
    async def next_page(  # type: ignore[override]
        self, interaction: discord.Interaction, button: discord.ui.Button
    ) -> None:
        await self._turn(interaction, PageDirection.NEXT)

    async def _turn(
        self, interaction: discord.Interaction, direction: PageDirection
    ) -> None:
        async def render(result: PageResult) -> None:
            await interaction.response.edit_message(
                embed=build_pokedex_embed(result), view=self
            )

        try:
            result = await self.session.turn(direction, interaction.user.id, render)
        except (QueryError, OSError):
            log.exception(
                "Failed to turn the Pokédex page for %s",
                self.session.result.player_name,
            )
            await send_notice(interaction, ERROR_NOTICE)
            return
        if result is None and not interaction.response.is_done():
            await interaction.response.defer()

    async def on_error(  # type: ignore[override]
        self,
        interaction: discord.Interaction,
        error: Exception,
        item: discord.ui.Item[Any],
    ) -> None:
        log.error("Unhandled error in Pokédex view", exc_info=error)
        try:
            await send_notice(interaction, ERROR_NOTICE)
        except discord.HTTPException:
            log.debug("Could not deliver the error notice", exc_info=True)

    async def _detach(self, session: PokedexSession) -> None:
        self.stop()
        if self.message is None:
            return
        try:
            await self.message.edit(view=None)
        except discord.HTTPException:
            log.debug("Could not detach Pokédex controls from %s", self.message.id)


__all__ = ["OwnedView", "PokedexView", "build_pokedex_embed", "send_notice"]
