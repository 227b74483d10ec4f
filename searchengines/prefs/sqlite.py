# SPDX-License-Identifier: AGPL-3.0-or-later
"""Preference store in a SQLite database.

The DB has one table::

    CREATE TABLE IF NOT EXISTS prefs (
      key   TEXT NOT NULL PRIMARY KEY,
      value TEXT NOT NULL,
      mtime INTEGER NOT NULL
    )

A value is written in its own transaction (``INSERT OR REPLACE``), other
processes reading the same DB never see a partial update of a value.
"""

from __future__ import annotations

__all__ = ["SQLitePreferenceStore"]

import pathlib
import sqlite3
import threading
import time

from searchengines import logger
from searchengines.exceptions import PersistenceError
from .store import PreferenceStore

log = logger.getChild("prefs.sqlite")

DB_SCHEMA = 1
"""Version of the DB schema, stored in ``PRAGMA user_version``."""

SQL_CREATE = """\
CREATE TABLE IF NOT EXISTS prefs (
  key   TEXT NOT NULL PRIMARY KEY,
  value TEXT NOT NULL,
  mtime INTEGER NOT NULL
)"""


class SQLitePreferenceStore(PreferenceStore):
    """Preference store in a SQLite DB file ``db_url``.  The special name
    ``:memory:`` creates a (private) DB in memory."""

    def __init__(self, db_url: str):
        self.db_url = db_url
        self._lock = threading.Lock()
        self._db: sqlite3.Connection | None = None

    @property
    def DB(self) -> sqlite3.Connection:  # pylint: disable=invalid-name
        """Connection to the DB, the connection is opened and the schema is
        created on first access."""
        if self._db is None:
            self._db = self.connect()
        return self._db

    def connect(self) -> sqlite3.Connection:
        log.debug("open DB %s", self.db_url)
        con = None
        try:
            if self.db_url != ":memory:":
                pathlib.Path(self.db_url).parent.mkdir(parents=True, exist_ok=True)
            con = sqlite3.connect(self.db_url, check_same_thread=False)
            user_version = con.execute("PRAGMA user_version").fetchone()[0]
            if user_version not in (0, DB_SCHEMA):
                con.close()
                raise PersistenceError(f"DB {self.db_url} has unknown schema version {user_version}")
            with con:
                con.execute(SQL_CREATE)
                con.execute(f"PRAGMA user_version = {DB_SCHEMA}")
        except (sqlite3.Error, OSError) as exc:
            if con is not None:
                con.close()
            log.error("can't open DB %s: %s", self.db_url, exc)
            raise PersistenceError(f"can't open DB {self.db_url}: {exc}") from exc
        return con

    def close(self):
        if self._db is not None:
            self._db.close()
            self._db = None

    def get_value(self, key: str) -> str | None:
        with self._lock:
            try:
                row = self.DB.execute("SELECT value FROM prefs WHERE key = ?", (key,)).fetchone()
            except sqlite3.Error as exc:
                log.error("can't read %s from DB %s: %s", key, self.db_url, exc)
                raise PersistenceError(f"can't read from DB {self.db_url}: {exc}", key=key) from exc
        if row is None:
            return None
        return row[0]

    def set_value(self, key: str, value: str) -> None:
        with self._lock:
            try:
                with self.DB:
                    self.DB.execute(
                        "INSERT OR REPLACE INTO prefs (key, value, mtime) VALUES (?, ?, ?)",
                        (key, value, int(time.time())),
                    )
            except sqlite3.Error as exc:
                log.error("can't write %s to DB %s: %s", key, self.db_url, exc)
                raise PersistenceError(f"can't write to DB {self.db_url}: {exc}", key=key) from exc

    def delete(self, key: str) -> None:
        with self._lock:
            try:
                with self.DB:
                    self.DB.execute("DELETE FROM prefs WHERE key = ?", (key,))
            except sqlite3.Error as exc:
                raise PersistenceError(f"can't delete from DB {self.db_url}: {exc}", key=key) from exc
