"""SQLite storage, configuration, embed and text utilities for a Discord moderation bot."""

__version__ = "0.1.0"