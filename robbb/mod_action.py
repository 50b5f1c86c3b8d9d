"""Storage of moderator actions: notes, warnings, mutes, kicks and bans."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from robbb.core import _decode_datetime, _encode_datetime


class ModActionType(Enum):
    """The kind of a moderator action, stored as its integer value."""

    MANUAL_NOTE = 0
    BLOCKLIST_VIOLATION = 1
    WARN = 2
    MUTE = 3
    BAN = 4
    KICK = 5

    @classmethod
    def from_int(cls, n: int) -> ModActionType:
        """The type stored as ``n``; ValueError for unknown values."""
        try:
            return cls(n)
        except ValueError:
            raise ValueError(f"Invalid mod action type: {n}") from None

    def __str__(self) -> str:
        return _DISPLAY[self]


_DISPLAY = {
    ModActionType.MANUAL_NOTE: "Moderator Note",
    ModActionType.BLOCKLIST_VIOLATION: "[AUTO] - Blocklist Violation",
    ModActionType.WARN: "Warning",
    ModActionType.MUTE: "Mute",
    ModActionType.BAN: "Ban",
    ModActionType.KICK: "Kick",
}


@dataclass(frozen=True)
class ModActionKind:
    """The kind of an action, with the end time and state a mute carries."""

    action_type: ModActionType
    end_time: datetime | None = None
    active: bool | None = None

    def __post_init__(self) -> None:
        is_mute = self.action_type is ModActionType.MUTE
        has_mute_data = self.end_time is not None and self.active is not None
        if is_mute and not has_mute_data:
            raise ValueError("A mute needs an end time and an active state")
        if not is_mute and (self.end_time is not None or self.active is not None):
            raise ValueError(f"{self.action_type} carries no end time or active state")

    def to_action_type(self) -> ModActionType:
        """The type of this action."""
        return self.action_type


@dataclass
class ModAction:
    """A recorded moderator action."""

    id: int
    moderator: int
    user: int
    reason: str
    create_date: datetime | None
    context: str | None
    kind: ModActionKind


_SELECT_ACTIONS = (
    "select mod_action.id as id, moderator, usr, reason, create_date, context, action_type, "
    "mute.end_time as end_time, mute.active as active "
    "from mod_action left join mute on mod_action.id = mute.mod_action "
)


def _action_from_row(row: sqlite3.Row) -> ModAction:
    action_type = ModActionType.from_int(row["action_type"])
    if action_type is ModActionType.MUTE:
        if row["end_time"] is None or row["active"] is None:
            raise ValueError("no mute item for mute in database")
        kind = ModActionKind(
            action_type, end_time=_decode_datetime(row["end_time"]), active=bool(row["active"])
        )
    else:
        kind = ModActionKind(action_type)
    return ModAction(
        id=row["id"],
        moderator=row["moderator"],
        user=row["usr"],
        reason=row["reason"] or "",
        create_date=_decode_datetime(row["create_date"]),
        context=row["context"],
        kind=kind,
    )


def _newest_first_key(action: ModAction) -> tuple[bool, datetime | None]:
    return (action.create_date is not None, action.create_date)


class ModActionMixin:
    """Moderator action queries."""

    _conn: sqlite3.Connection
    _lock: threading.RLock

    def add_mod_action(
        self,
        moderator: int,
        user: int,
        reason: str,
        create_date: datetime,
        context: str,
        kind: ModActionKind,
    ) -> ModAction:
        """Record an action, and its mute details for a mute, in one transaction."""
        with self._lock:
            self._conn.execute("BEGIN")
            try:
                cursor = self._conn.execute(
                    "insert into mod_action "
                    "(moderator, usr, reason, create_date, context, action_type) "
                    "values (?, ?, ?, ?, ?, ?)",
                    (
                        moderator,
                        user,
                        reason,
                        _encode_datetime(create_date),
                        context,
                        kind.to_action_type().value,
                    ),
                )
                action_id = cursor.lastrowid
                if kind.action_type is ModActionType.MUTE:
                    self._conn.execute(
                        "insert into mute (mod_action, end_time, active) values (?, ?, ?)",
                        (action_id, _encode_datetime(kind.end_time), int(bool(kind.active))),
                    )
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")
        return ModAction(action_id, moderator, user, reason, create_date, context, kind)

    def get_mod_actions(
        self, user_id: int, filter: ModActionType | None = None
    ) -> list[ModAction]:
        """A user's actions, optionally of one type only, newest first."""
        type_value = None if filter is None else filter.value
        with self._lock:
            rows = self._conn.execute(
                _SELECT_ACTIONS + "where usr=?1 and (?2 is null or action_type=?2)",
                (user_id, type_value),
            ).fetchall()
        actions = [_action_from_row(row) for row in rows]
        actions.sort(key=_newest_first_key, reverse=True)
        return actions

    def get_mod_action(self, id: int) -> ModAction:
        """The action with the given id; LookupError if there is none."""
        with self._lock:
            row = self._conn.execute(_SELECT_ACTIONS + "where mod_action.id=?", (id,)).fetchone()
        if row is None:
            raise LookupError(f"No mod action with id {id}")
        return _action_from_row(row)

    def count_mod_actions(self, user: int, action_type: ModActionType) -> int:
        """How many actions of one type a user has."""
        with self._lock:
            row = self._conn.execute(
                "select count(*) from mod_action where usr=? and action_type=?",
                (user, action_type.value),
            ).fetchone()
        return row[0]

    def count_all_mod_actions(self, user: int) -> dict[ModActionType, int]:
        """How many actions of each type a user has; absent types are left out."""
        with self._lock:
            rows = self._conn.execute(
                "select action_type, count(*) as count from mod_action "
                "where usr=? group by action_type",
                (user,),
            ).fetchall()
        return {ModActionType.from_int(row["action_type"]): row["count"] for row in rows}

    def remove_mod_action(self, user: int, id: int) -> bool:
        """Delete an action of ``user``; True if one was deleted."""
        with self._lock:
            cursor = self._conn.execute(
                "delete from mod_action where id=? and usr=?", (id, user)
            )
        return cursor.rowcount > 0

    def edit_mod_action_reason(self, id: int, moderator: int, new_reason: str) -> bool:
        """Replace an action's reason and moderator; True if the action exists."""
        with self._lock:
            cursor = self._conn.execute(
                "update mod_action set reason=?, moderator=? where id=?",
                (new_reason, moderator, id),
            )
        return cursor.rowcount > 0