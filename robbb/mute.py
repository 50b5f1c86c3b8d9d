"""Queries over mutes and their state."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

from robbb.core import _decode_datetime

_SELECT_MUTES = (
    "select mod_action.id as id, moderator, usr, reason, create_date, context, end_time "
    "from mute join mod_action on mute.mod_action = mod_action.id "
)


@dataclass
class Mute:
    """A mute given to a user."""

    id: int
    moderator: int
    user: int
    reason: str
    start_time: datetime
    end_time: datetime
    context: str | None


def _mute_from_row(row: sqlite3.Row) -> Mute:
    start_time = _decode_datetime(row["create_date"])
    if start_time is None:
        raise ValueError("no create date")
    end_time = _decode_datetime(row["end_time"])
    if end_time is None:
        raise ValueError("no end time")
    return Mute(
        id=row["id"],
        moderator=row["moderator"],
        user=row["usr"],
        reason=row["reason"] or "",
        start_time=start_time,
        end_time=end_time,
        context=row["context"],
    )


class MuteMixin:
    """Mute queries."""

    _conn: sqlite3.Connection
    _lock: threading.RLock

    def get_newly_expired_mutes(self) -> list[Mute]:
        """Active mutes whose end time has passed."""
        with self._lock:
            rows = self._conn.execute(
                _SELECT_MUTES
                + "where cast(strftime('%s', end_time) as integer) "
                "< cast(strftime('%s', 'now') as integer) and active"
            ).fetchall()
        return [_mute_from_row(row) for row in rows]

    def get_mutes(self, user_id: int) -> list[Mute]:
        """All mutes of a user."""
        with self._lock:
            rows = self._conn.execute(_SELECT_MUTES + "where usr=?", (user_id,)).fetchall()
        return [_mute_from_row(row) for row in rows]

    def get_active_mute(self, user_id: int) -> Mute | None:
        """A user's active mute, if any."""
        with self._lock:
            row = self._conn.execute(
                _SELECT_MUTES + "where usr=? and active=1", (user_id,)
            ).fetchone()
        return None if row is None else _mute_from_row(row)

    def remove_active_mutes(self, user_id: int) -> None:
        """Mark all of a user's mutes inactive."""
        with self._lock:
            self._conn.execute(
                "update mute set active=0 where active=1 and mod_action in "
                "(select id from mod_action where usr=?)",
                (user_id,),
            )

    def set_mute_inactive(self, id: int) -> None:
        """Mark the mute of the given action inactive."""
        with self._lock:
            self._conn.execute("update mute set active=0 where mod_action=?", (id,))