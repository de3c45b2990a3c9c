"""
SQLite document store and simple migration system.

``Database`` owns a single SQLite connection.  The application builds
one instance at startup (see ``main.lifespan``), hands it to the
services through request dependencies and closes it on shutdown; no
module keeps a global connection.

Users and todos are stored one document per row.  A user's token list
is kept as a JSON array in the ``tokens`` column so that every write
touches exactly one row.

Applied migration versions are recorded in the ``migrations`` table
and new migrations are executed in order by ``init_db``.
"""

import logging
import os
import re
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            tokens TEXT NOT NULL DEFAULT '[]',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS todos (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            text TEXT NOT NULL,
            completed INTEGER NOT NULL DEFAULT 0,
            completed_at INTEGER,
            creator TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_todos_creator ON todos (creator);
        """,
    ),
]

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    """Generate a new opaque document identifier."""
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Return True if ``value`` looks like an identifier from ``new_id``."""
    return bool(_ID_RE.match(value))


class Database:
    """Handle to the SQLite store shared by all requests.

    Parameters
    ----------
    url : str
        Path to the database file, or ``:memory:``.
    """

    def __init__(self, url: str):
        self.url = url
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> str:
        if self.url == ":memory:" or os.path.isabs(self.url):
            return self.url
        return os.path.abspath(self.url)

    def connect(self) -> None:
        """Open the connection and apply pending migrations."""
        if self._conn is not None:
            return
        logger.info("Opening database %s", self.path)
        # Rows are returned as dict‑like objects keyed by column name.
        # Requests are served from the event loop thread while the
        # connection may have been opened elsewhere (e.g. a test portal).
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self.init_db()

    def close(self) -> None:
        if self._conn is not None:
            logger.info("Closing database %s", self.path)
            self._conn.close()
            self._conn = None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside a transaction.

        The transaction is committed when the block exits normally and
        rolled back if it raises.
        """
        conn = self.connection
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()

    def init_db(self) -> None:
        """Create the ``migrations`` table and apply new migrations."""
        with self.cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    logger.info("Applying migration %d", version)
                    cursor.executescript(sql)
                    cursor.execute(
                        "INSERT INTO migrations (version) VALUES (?)", (version,)
                    )
                    current_version = version
