"""Storage of users' system fetches."""

from __future__ import annotations

import json
import sqlite3
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from robbb.core import _decode_datetime, _encode_datetime
from robbb.fetch_field import FETCH_KEY_ORDER, FetchField


@dataclass
class Fetch:
    """A user's fetch: what they run, field by field."""

    user: int
    info: dict[FetchField, str] = field(default_factory=dict)
    create_date: datetime | None = None

    def get_values_ordered(self) -> list[tuple[FetchField, str]]:
        """The filled-in fields, in display order."""
        return [(key, self.info[key]) for key in FETCH_KEY_ORDER if key in self.info]


def _encode_info(info: Mapping[FetchField, str]) -> str:
    return json.dumps({key.value: value for key, value in info.items()})


def _decode_info(text: str) -> dict[FetchField, str]:
    try:
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError("fetch data is not an object")
        info: dict[FetchField, str] = {}
        for key, value in raw.items():
            if not isinstance(value, str):
                raise ValueError(f"fetch value for {key!r} is not a string")
            info[FetchField(key)] = value
        return info
    except ValueError as error:
        raise ValueError("Failed to deserialize fetch data") from error


def _fetch_from_row(row: sqlite3.Row) -> Fetch:
    return Fetch(
        user=row["usr"],
        info=_decode_info(row["info"]),
        create_date=_decode_datetime(row["create_date"]),
    )


class FetchMixin:
    """Fetch queries."""

    _conn: sqlite3.Connection
    _lock: threading.RLock

    def set_fetch(
        self,
        user: int,
        info: Mapping[FetchField, str],
        create_date: datetime | None,
    ) -> Fetch:
        """Store a user's fetch, replacing any earlier one."""
        with self._lock:
            self._conn.execute(
                "insert into fetch (usr, info, create_date) values (?1, ?2, ?3) "
                "on conflict(usr) do update set info=?2, create_date=?3",
                (user, _encode_info(info), _encode_datetime(create_date)),
            )
        return Fetch(user, dict(info), create_date)

    def get_fetch(self, user: int) -> Fetch | None:
        """A user's fetch, or None if they have none."""
        with self._lock:
            row = self._conn.execute("select * from fetch where usr=?", (user,)).fetchone()
        return None if row is None else _fetch_from_row(row)

    def update_fetch(self, user: int, new_values: Mapping[FetchField, str]) -> Fetch:
        """Change some fields of a user's fetch, stamping it with the current time."""
        with self._lock:
            current = self.get_fetch(user)
            info = dict(current.info) if current is not None else {}
            info.update(new_values)
            return self.set_fetch(user, info, datetime.now(timezone.utc))

    def get_all_fetches(self) -> list[Fetch]:
        """Every stored fetch."""
        with self._lock:
            rows = self._conn.execute("select * from fetch").fetchall()
        return [_fetch_from_row(row) for row in rows]