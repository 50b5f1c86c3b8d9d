import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from robbb.core import DbBase
from robbb.mod_action import ModAction, ModActionKind, ModActionMixin, ModActionType


class _Db(DbBase, ModActionMixin):
    pass


SCHEMA = """
create table mod_action (
    id integer primary key autoincrement,
    moderator integer not null,
    usr integer not null,
    reason text,
    create_date datetime,
    context text,
    action_type integer not null
);
create table mute (
    mod_action integer not null,
    end_time datetime not null,
    active boolean not null
);
"""

T0 = datetime(2022, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    connection = sqlite3.connect(":memory:", check_same_thread=False, isolation_level=None)
    connection.executescript(SCHEMA)
    database = _Db(connection)
    yield database
    connection.close()


def test_from_int_round_trip():
    for member in ModActionType:
        assert ModActionType.from_int(member.value) is member


def test_from_int_invalid():
    with pytest.raises(ValueError):
        ModActionType.from_int(6)


@pytest.mark.parametrize(
    "number, display",
    [
        (0, "Moderator Note"),
        (1, "[AUTO] - Blocklist Violation"),
        (2, "Warning"),
        (3, "Mute"),
        (4, "Ban"),
        (5, "Kick"),
    ],
)
def test_display_names(number, display):
    assert str(ModActionType.from_int(number)) == display


def test_kind_to_action_type():
    kind = ModActionKind(ModActionType.MUTE, end_time=T0, active=True)
    assert kind.to_action_type() is ModActionType.MUTE


def test_mute_kind_requires_details():
    with pytest.raises(ValueError):
        ModActionKind(ModActionType.MUTE)


def test_non_mute_kind_rejects_details():
    with pytest.raises(ValueError):
        ModActionKind(ModActionType.WARN, end_time=T0, active=True)


def test_add_and_get_round_trip(db):
    kind = ModActionKind(ModActionType.WARN)
    added = db.add_mod_action(1, 2, "spam", T0, "ctx", kind)
    fetched = db.get_mod_action(added.id)
    assert fetched == ModAction(added.id, 1, 2, "spam", T0, "ctx", kind)
    assert added == fetched


def test_mute_round_trip(db):
    kind = ModActionKind(ModActionType.MUTE, end_time=T0 + timedelta(hours=2), active=True)
    added = db.add_mod_action(1, 2, "loud", T0, "ctx", kind)
    assert db.get_mod_action(added.id).kind == kind


def test_get_missing_action(db):
    added = db.add_mod_action(1, 2, "a", T0, "c", ModActionKind(ModActionType.WARN))
    with pytest.raises(LookupError):
        db.get_mod_action(added.id + 1)


def test_mute_without_mute_row_is_an_error(db):
    mute_type = ModActionType.from_int(3)
    assert mute_type is ModActionType.MUTE
    db._conn.execute(
        "insert into mod_action (id, moderator, usr, action_type) values (5, 1, 2, ?)",
        (mute_type.value,),
    )
    with pytest.raises(ValueError):
        db.get_mod_action(5)


def test_get_mod_actions_newest_first_and_filtered(db):
    warn = ModActionKind(ModActionType.WARN)
    note = ModActionKind(ModActionType.MANUAL_NOTE)
    first = db.add_mod_action(1, 2, "a", T0, "c", warn)
    second = db.add_mod_action(1, 2, "b", T0 + timedelta(days=1), "c", note)
    db.add_mod_action(1, 3, "other user", T0, "c", warn)
    assert [a.id for a in db.get_mod_actions(2)] == [second.id, first.id]
    assert [a.id for a in db.get_mod_actions(2, ModActionType.WARN)] == [first.id]


def test_missing_reason_reads_as_empty(db):
    db._conn.execute(
        "insert into mod_action (id, moderator, usr, action_type) values (9, 1, 2, ?)",
        (ModActionType.KICK.value,),
    )
    action = db.get_mod_action(9)
    assert action == ModAction(9, 1, 2, "", None, None, ModActionKind(ModActionType.KICK))
    assert action.reason == ""
    assert action.create_date is None


def test_counts(db):
    warn = ModActionKind(ModActionType.WARN)
    ban = ModActionKind(ModActionType.BAN)
    db.add_mod_action(1, 2, "a", T0, "c", warn)
    db.add_mod_action(1, 2, "b", T0, "c", warn)
    db.add_mod_action(1, 2, "c", T0, "c", ban)
    assert db.count_mod_actions(2, ModActionType.WARN) == 2
    assert db.count_mod_actions(2, ModActionType.KICK) == 0
    assert db.count_all_mod_actions(2) == {ModActionType.WARN: 2, ModActionType.BAN: 1}


def test_remove_mod_action(db):
    added = db.add_mod_action(1, 2, "a", T0, "c", ModActionKind(ModActionType.WARN))
    assert db.remove_mod_action(3, added.id) is False
    assert db.remove_mod_action(2, added.id) is True
    assert db.remove_mod_action(2, added.id) is False
    assert db.get_mod_actions(2) == []


def test_edit_reason(db):
    added = db.add_mod_action(1, 2, "a", T0, "c", ModActionKind(ModActionType.WARN))
    assert db.edit_mod_action_reason(added.id, 7, "better reason") is True
    edited = db.get_mod_action(added.id)
    assert (edited.reason, edited.moderator) == ("better reason", 7)
    assert db.edit_mod_action_reason(added.id + 100, 7, "x") is False