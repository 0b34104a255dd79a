"""Pokédex lookup bot for Discord."""
