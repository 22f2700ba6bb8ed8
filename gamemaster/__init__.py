"""AI Dungeon Master exploration context service."""

__version__ = "0.1.0"
