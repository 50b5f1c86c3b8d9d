"""The database handle: connection, migrations and the shared caches."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType
from typing import Any

from robbb.util import required_env_var

_MIGRATIONS_TABLE = "_migrations"


def _database_path(database_url: str) -> str:
    url = database_url
    for prefix in ("sqlite://", "sqlite:"):
        if url.startswith(prefix):
            url = url[len(prefix) :]
            break
    path, _, _ = url.partition("?")
    if not path:
        raise ValueError(f"No database path in {database_url!r}")
    return path


def _encode_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(sep=" ")


def _decode_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _discover_migrations(directory: Path) -> list[tuple[int, str, Path]]:
    if not directory.is_dir():
        raise FileNotFoundError(f"No migrations directory at {directory}")
    found: dict[int, tuple[int, str, Path]] = {}
    for path in directory.glob("*.sql"):
        name = path.name
        if name.endswith(".down.sql"):
            continue
        stem = name.removesuffix(".sql").removesuffix(".up")
        version_text, _, description = stem.partition("_")
        version = int(version_text)
        if version in found:
            raise ValueError(f"Duplicate migration version {version}")
        found[version] = (version, description.replace("_", " "), path)
    return [found[version] for version in sorted(found)]


class DbBase:
    """A SQLite database together with the caches kept in front of it."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        connection.row_factory = sqlite3.Row
        connection.isolation_level = None
        self._conn = connection
        self._lock = threading.RLock()
        self._blocklist_cache: list[str] | None = None
        self._highlight_cache: Any = None
        self._tag_name_cache: set[str] | None = None

    @classmethod
    def connect(cls, database_url: str):
        """Open the database named by a ``sqlite:`` URL or a plain path."""
        path = _database_path(database_url)
        return cls(sqlite3.connect(path, check_same_thread=False, isolation_level=None))

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None):
        """Open the database named by the DATABASE_URL environment variable."""
        return cls.connect(required_env_var("DATABASE_URL", environ))

    def run_migrations(self, migrations_dir: str | Path) -> list[int]:
        """Apply the not yet applied ``<version>_<name>.sql`` scripts, in version order.

        Returns the versions that were applied by this call.
        """
        try:
            return self._apply_migrations(Path(migrations_dir))
        except (sqlite3.Error, OSError, ValueError) as error:
            raise RuntimeError("Failed to run database migrations") from error

    def _apply_migrations(self, directory: Path) -> list[int]:
        migrations = _discover_migrations(directory)
        applied_now: list[int] = []
        with self._lock:
            self._conn.execute(
                f"create table if not exists {_MIGRATIONS_TABLE} ("
                "version integer primary key, description text not null, "
                "installed_on text not null)"
            )
            applied = {
                row[0] for row in self._conn.execute(f"select version from {_MIGRATIONS_TABLE}")
            }
            for version, description, path in migrations:
                if version in applied:
                    continue
                script = path.read_text(encoding="utf-8")
                try:
                    self._conn.executescript(f"BEGIN;\n{script}\n")
                    self._conn.execute(
                        f"insert into {_MIGRATIONS_TABLE} (version, description, installed_on) "
                        "values (?, ?, ?)",
                        (version, description, _encode_datetime(datetime.now(timezone.utc))),
                    )
                    self._conn.execute("COMMIT")
                except BaseException:
                    if self._conn.in_transaction:
                        self._conn.execute("ROLLBACK")
                    raise
                applied_now.append(version)
        return applied_now

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            self._conn.execute("BEGIN")
            try:
                yield self._conn
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            else:
                self._conn.execute("COMMIT")

    def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._conn.execute(sql, params)

    def _fetchall(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def close(self) -> None:
        """Close the connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()