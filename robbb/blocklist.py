"""Storage of the blocked-message patterns."""

from __future__ import annotations

import re
import sqlite3
import threading


class BlocklistMixin:
    """Blocklist queries, with the list cached after its first read."""

    _conn: sqlite3.Connection
    _lock: threading.RLock
    _blocklist_cache: list[str] | None

    def get_combined_blocklist_regex(self) -> re.Pattern[str]:
        """One case-insensitive pattern matching any blocklist entry."""
        blocklist = self.get_blocklist()
        if not blocklist:
            return re.compile("a^")
        return re.compile("|".join(blocklist), re.IGNORECASE)

    def get_blocklist(self) -> list[str]:
        """All blocklist patterns."""
        with self._lock:
            if self._blocklist_cache is None:
                rows = self._conn.execute("select pattern from blocked_regexes").fetchall()
                self._blocklist_cache = [row["pattern"] for row in rows]
            return list(self._blocklist_cache)

    def add_blocklist_entry(self, user_id: int, s: str) -> None:
        """Add a pattern, recording who added it."""
        with self._lock:
            self._conn.execute(
                "insert into blocked_regexes(pattern, added_by) values (?, ?)", (s, user_id)
            )
            if self._blocklist_cache is not None:
                self._blocklist_cache.append(s)

    def remove_blocklist_entry(self, s: str) -> None:
        """Remove a pattern."""
        with self._lock:
            self._conn.execute("delete from blocked_regexes where pattern=?", (s,))
            if self._blocklist_cache is not None and s in self._blocklist_cache:
                self._blocklist_cache.remove(s)