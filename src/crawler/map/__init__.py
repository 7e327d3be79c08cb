"""Dungeon grid, tile model and level loading."""
