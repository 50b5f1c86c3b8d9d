"""Storage of tags: named snippets of text that users can recall."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

from robbb.core import _decode_datetime, _encode_datetime


@dataclass
class Tag:
    """A named piece of text."""

    name: str
    moderator: int
    content: str
    official: bool
    create_date: datetime | None = None


class TagMixin:
    """Tag queries, with the tag names cached after their first listing."""

    _conn: sqlite3.Connection
    _lock: threading.RLock
    _tag_name_cache: set[str] | None

    def set_tag(
        self,
        moderator: int,
        name: str,
        content: str,
        official: bool,
        create_date: datetime | None,
    ) -> Tag:
        """Create a tag or replace the one with the same name."""
        stored_date = _encode_datetime(create_date)
        with self._lock:
            self._conn.execute(
                "insert into tag (name, moderator, content, official, create_date) "
                "values (?1, ?2, ?3, ?4, ?5) "
                "on conflict(name) do update set moderator=?2, content=?3, official=?4, "
                "create_date=?5",
                (name, moderator, content, official, stored_date),
            )
            if self._tag_name_cache is not None:
                self._tag_name_cache.add(name)
        return Tag(name, moderator, content, official, create_date)

    def get_tag(self, name: str) -> Tag | None:
        """Find a tag by name, ignoring case."""
        with self._lock:
            row = self._conn.execute(
                "select name, moderator, content, official, create_date from tag "
                "where name=? COLLATE NOCASE",
                (name,),
            ).fetchone()
        if row is None:
            return None
        return Tag(
            name=row["name"],
            moderator=row["moderator"],
            content=row["content"],
            official=bool(row["official"]),
            create_date=_decode_datetime(row["create_date"]),
        )

    def delete_tag(self, name: str) -> None:
        """Delete a tag by name, ignoring case."""
        with self._lock:
            self._conn.execute("delete from tag where name=? COLLATE NOCASE", (name,))
            if self._tag_name_cache is not None:
                self._tag_name_cache.discard(name)

    def list_tags(self) -> list[str]:
        """The names of all tags."""
        with self._lock:
            if self._tag_name_cache is not None:
                return list(self._tag_name_cache)
            names = [row["name"] for row in self._conn.execute("select name from tag")]
            self._tag_name_cache = set(names)
            return names