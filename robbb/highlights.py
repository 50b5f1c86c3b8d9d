"""Highlights: words that notify the users who watch for them."""

from __future__ import annotations

import re
import sqlite3
import string
import threading
from collections.abc import Iterable, Iterator

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_NEVER_MATCHES = re.compile(r"(?!)")


def _ascii_lower(s: str) -> str:
    return s.translate(_ASCII_LOWER)


def _combine_multitrigger_regex(words: Iterable[str]) -> re.Pattern[str]:
    escaped = [re.escape(word) for word in words]
    if not escaped:
        return _NEVER_MATCHES
    try:
        return re.compile(rf"\b(?:{'|'.join(escaped)})\b", re.IGNORECASE)
    except re.error as error:
        raise ValueError("Failed to compile highlight trigger regex") from error


class HighlightsData:
    """Triggers mapped to the users watching them, with one pattern matching them all."""

    def __init__(self) -> None:
        self.entries: dict[str, list[int]] = {}
        self._regex: re.Pattern[str] = _NEVER_MATCHES

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, Iterable[int]]]) -> HighlightsData:
        """Build from (trigger, users) pairs; triggers are compared ignoring case."""
        data = cls()
        for trigger, users in entries:
            data.entries.setdefault(trigger.lower(), []).extend(users)
        data._rebuild()
        return data

    def _rebuild(self) -> None:
        self._regex = _combine_multitrigger_regex(self.entries)

    def _copy(self) -> HighlightsData:
        data = HighlightsData()
        data.entries = {trigger: list(users) for trigger, users in self.entries.items()}
        data._regex = self._regex
        return data

    def get_triggers_for_message(self, s: str) -> list[tuple[str, list[int]]]:
        """Each trigger found in ``s``, as written there, with the users watching it."""
        found: list[tuple[str, list[int]]] = []
        for match in self._regex.finditer(s):
            trigger = match.group(0)
            users = self.entries.get(trigger.lower())
            if users is not None:
                found.append((trigger, list(users)))
        return found

    def triggers_for_user(self, user_id: int) -> Iterator[str]:
        """The triggers a user watches."""
        return (trigger for trigger, users in self.entries.items() if user_id in users)

    def remove_entry(self, trigger: str, user: int) -> None:
        """Stop ``user`` watching ``trigger``; LookupError if nobody watches it."""
        key = trigger.lower()
        users = self.entries.get(key)
        if users is None:
            raise LookupError("No entry with that trigger")
        users[:] = [u for u in users if u != user]
        if not users:
            del self.entries[key]
            self._rebuild()

    def add_entry(self, trigger: str, user: int) -> None:
        """Make ``user`` watch ``trigger``."""
        key = trigger.lower()
        already_in_regex = key in self.entries
        self.entries.setdefault(key, []).append(user)
        if not already_in_regex:
            self._rebuild()

    def remove_entries_of(self, user: int) -> None:
        """Remove every trigger of ``user``."""
        old_length = len(self.entries)
        self.entries = {
            trigger: remaining
            for trigger, users in self.entries.items()
            if (remaining := [u for u in users if u != user])
        }
        if len(self.entries) != old_length:
            self._rebuild()


class HighlightsMixin:
    """Highlight queries, with the highlights cached after their first read."""

    _conn: sqlite3.Connection
    _lock: threading.RLock
    _highlight_cache: HighlightsData | None

    # Words too common to be highlights, compared ignoring ASCII case.
    forbidden_highlight_words: frozenset[str] = frozenset()

    def _forbidden_lower(self) -> set[str]:
        return {_ascii_lower(word) for word in self.forbidden_highlight_words}

    def get_highlights(self) -> HighlightsData:
        """All highlights."""
        with self._lock:
            if self._highlight_cache is None:
                grouped: dict[str, list[int]] = {}
                for row in self._conn.execute("select word, usr from highlights"):
                    grouped.setdefault(row["word"], []).append(row["usr"])
                self._highlight_cache = HighlightsData.from_entries(grouped.items())
            return self._highlight_cache._copy()

    def remove_highlight(self, user: int, trigger: str) -> None:
        """Stop ``user`` watching ``trigger``."""
        with self._lock:
            self._conn.execute(
                "delete from highlights where word=? and usr=?", (trigger, user)
            )
            if self._highlight_cache is not None:
                self._highlight_cache.remove_entry(trigger, user)

    def set_highlight(self, user: int, word: str) -> None:
        """Make ``user`` watch ``word``; ValueError for forbidden words."""
        if _ascii_lower(word) in self._forbidden_lower():
            raise ValueError(
                f"Refused to set a highlight for common word {word} (requested by user {user})"
            )
        with self._lock:
            self._conn.execute("insert into highlights (word, usr) values (?, ?)", (word, user))
            if self._highlight_cache is not None:
                self._highlight_cache.add_entry(word, user)

    def rm_highlights_of(self, user: int) -> None:
        """Remove every highlight of ``user``."""
        with self._lock:
            self._conn.execute("delete from highlights where usr=?", (user,))
            if self._highlight_cache is not None:
                self._highlight_cache.remove_entries_of(user)

    def remove_forbidden_highlights(self) -> None:
        """Delete stored highlights whose word is forbidden."""
        words = sorted(self._forbidden_lower())
        if not words:
            return
        placeholders = ", ".join("?" for _ in words)
        with self._lock:
            self._conn.execute(
                f"delete from highlights where lower(word) in ({placeholders})", tuple(words)
            )
            self._highlight_cache = None