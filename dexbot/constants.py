"""Shared constants used across the scanner, pipeline and cogs."""

from __future__ import annotations

# Total number of Pokémon a trainer can catch. The remaining count is derived
# from this figure rather than from the catalog row count.
TOTAL_UNIVERSE_SIZE = 981

# Status code attached to an identifier in a save file once it has been caught.
OWNED_STATUS = 2

# Extension of the per-player save files written by the game server.
SAVE_FILE_EXTENSION = ".pk"

# Leading bytes of every gzip member.
GZIP_MAGIC = b"\x1f\x8b"

DEFAULT_PAGE_SIZE = 15

# Absolute lifetime (in seconds) of the paging buttons on a Pokédex message.
SESSION_TIMEOUT = 60.0

EMBED_TITLE = "Pokedex"
PREVIOUS_EMOJI = "◀️"
NEXT_EMOJI = "▶️"
