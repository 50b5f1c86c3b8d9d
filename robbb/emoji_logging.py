"""Counting how often each custom emoji is used."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from enum import Enum

from robbb.util import EmojiIdentifier


@dataclass
class EmojiStats:
    """Usage counts of one emoji."""

    emoji: EmojiIdentifier
    reactions: int = 0
    in_text: int = 0


class Ordering(Enum):
    """Sort direction for emoji rankings."""

    ASCENDING = "ASC"
    DESCENDING = "DESC"


def _stats_from_row(row: sqlite3.Row) -> EmojiStats:
    return EmojiStats(
        emoji=EmojiIdentifier(
            id=row["emoji_id"],
            name=row["emoji_name"],
            animated=bool(row["animated"]),
        ),
        reactions=row["reaction_usage"],
        in_text=row["in_text_usage"],
    )


class EmojiLoggingMixin:
    """Emoji usage queries."""

    _conn: sqlite3.Connection
    _lock: threading.RLock

    def alter_emoji_reaction_count(self, amount: int, emoji: EmojiIdentifier) -> EmojiStats:
        """Add ``amount`` to the reaction count, never going below zero."""
        with self._lock:
            self._conn.execute(
                "insert into emoji_stats (emoji_id, emoji_name, reaction_usage, animated) "
                "values (?1, ?2, max(0, ?3), ?4) on conflict(emoji_id) "
                "do update set reaction_usage=max(0, reaction_usage + ?3)",
                (emoji.id, emoji.name, amount, emoji.animated),
            )
            return self.get_emoji_usage_by_id(emoji)

    def alter_emoji_text_count(self, amount: int, emoji: EmojiIdentifier) -> EmojiStats:
        """Add ``amount`` to the in-text count, never going below zero."""
        with self._lock:
            self._conn.execute(
                "insert into emoji_stats (emoji_id, emoji_name, in_text_usage, animated) "
                "values (?1, ?2, max(0, ?3), ?4) on conflict(emoji_id) "
                "do update set in_text_usage=max(0, in_text_usage + ?3)",
                (emoji.id, emoji.name, amount, emoji.animated),
            )
            return self.get_emoji_usage_by_id(emoji)

    def get_emoji_usage_by_id(self, emoji: EmojiIdentifier) -> EmojiStats:
        """Usage of an emoji; zero counts if it was never recorded."""
        with self._lock:
            row = self._conn.execute(
                "select * from emoji_stats where emoji_id=?", (emoji.id,)
            ).fetchone()
        return EmojiStats(emoji) if row is None else _stats_from_row(row)

    def get_emoji_usage_by_name(self, emoji: str) -> EmojiStats:
        """Usage of the emoji with the given name; LookupError if unknown."""
        with self._lock:
            row = self._conn.execute(
                "select * from emoji_stats where emoji_name=?", (emoji,)
            ).fetchone()
        if row is None:
            raise LookupError("Could not find emoji by that name")
        return _stats_from_row(row)

    def get_top_emoji_stats(self, count: int, ordering: Ordering) -> list[EmojiStats]:
        """Up to ``count`` emojis ranked by total usage."""
        direction = Ordering(ordering).value
        with self._lock:
            rows = self._conn.execute(
                "select *, in_text_usage + reaction_usage as usage from emoji_stats "
                f"order by usage {direction} limit ?",
                (count,),
            ).fetchall()
        return [_stats_from_row(row) for row in rows]