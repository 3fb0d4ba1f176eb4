"""SQLite implementation of the link index."""

import asyncio
import logging
import os
import sqlite3
import threading
from typing import Any, Callable, List, Optional

from .base import URLIndex
from .models import LinkEntry
from ..common.logging_config import get_logger
from ..exceptions import NotFound, StorageError
from ..shortcode import MAX_ID


JOURNAL_MODES = {"delete", "truncate", "persist", "memory", "wal", "off"}


class SQLiteIndex(URLIndex):
    """Link index backed by a single long-lived SQLite handle.

    All reads and writes go through one lock per instance, so an
    ``add_url`` insert and its read-back can never interleave with another
    request's statements. Blocking sqlite3 calls run in worker threads to
    keep the event loop free.
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS links (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        longURL TEXT UNIQUE NOT NULL
    )
    """

    def __init__(
        self,
        db_path: str,
        journal_mode: Optional[str] = "wal",
        logger: Optional[logging.Logger] = None,
    ):
        """Open the database and make sure the links table exists.

        Args:
            db_path: Path of the database file, or ``:memory:``
            journal_mode: SQLite journal mode to switch to (None keeps the default)
            logger: Optional logger instance

        Raises:
            ValueError: If journal_mode is not a SQLite journal mode
            StorageError: If the database cannot be opened
        """
        self.logger = logger or get_logger(__name__)
        self.db_path = db_path
        self._lock = threading.Lock()

        if journal_mode is not None and journal_mode.lower() not in JOURNAL_MODES:
            raise ValueError(f"unknown SQLite journal mode: {journal_mode}")

        if db_path != ":memory:" and not db_path.startswith("file:"):
            directory = os.path.dirname(os.path.abspath(db_path))
            os.makedirs(directory, exist_ok=True)

        try:
            # autocommit: every statement is its own transaction
            self._conn = sqlite3.connect(
                db_path,
                check_same_thread=False,
                isolation_level=None,
                uri=db_path.startswith("file:"),
            )
            if journal_mode is not None:
                mode = self._conn.execute(f"PRAGMA journal_mode={journal_mode.lower()}").fetchone()[0]
                self.logger.debug(f"SQLite journal mode for {db_path}: {mode}")
            self._conn.execute(self.CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            raise StorageError(f"could not open SQLite database {db_path}", e) from e

        self.logger.info(f"Opened SQLite index at {db_path}")

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking operation in a worker thread inside the critical section."""
        def _run_sync():
            with self._lock:
                return func(*args)

        return await asyncio.to_thread(_run_sync)

    def _lookup_id(self, link_id: int) -> str:
        try:
            row = self._conn.execute(
                "SELECT longURL FROM links WHERE id = ?",
                (link_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"error resolving ID {link_id} to long URL in database", e) from e

        if row is None:
            raise NotFound(link_id)
        return row[0]

    def _add_url(self, long_url: str) -> int:
        # INSERT OR IGNORE would still advance sqlite_sequence on a conflict
        try:
            self._conn.execute(
                """
                INSERT INTO links (longURL)
                SELECT ? WHERE NOT EXISTS (SELECT 1 FROM links WHERE longURL = ?)
                """,
                (long_url, long_url),
            )
        except sqlite3.Error as e:
            raise StorageError("error adding shortlink to database", e) from e

        try:
            row = self._conn.execute(
                "SELECT id FROM links WHERE longURL = ?",
                (long_url,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError("error getting ID of added URL from database", e) from e

        if row is None:
            raise StorageError(f"URL '{long_url}' missing from database right after insert")
        return row[0]

    def _list_entries(self, limit: int) -> List[LinkEntry]:
        try:
            rows = self._conn.execute(
                "SELECT id, longURL FROM links ORDER BY id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError("error listing links in database", e) from e

        return [LinkEntry(id=row[0], long_url=row[1]) for row in rows]

    def _health_check(self) -> bool:
        try:
            self._conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def lookup_id(self, link_id: int) -> str:
        """Get the long URL mapped to an ID."""
        # IDs outside the SQLite INTEGER range cannot be stored
        if link_id < 1 or link_id > MAX_ID:
            raise NotFound(link_id)
        return await self._run(self._lookup_id, link_id)

    async def add_url(self, long_url: str) -> int:
        """Insert the URL if necessary, then return its ID."""
        return await self._run(self._add_url, long_url)

    async def list_entries(self, limit: int = 100) -> List[LinkEntry]:
        return await self._run(self._list_entries, limit)

    async def health_check(self) -> bool:
        return await self._run(self._health_check)

    async def close(self) -> None:
        """Close the database handle."""
        await self._run(self._conn.close)
        self.logger.debug(f"Closed SQLite index at {self.db_path}")
