from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Full, Queue
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


class SqliteConnectionPool:
    """Connection pool for the local draft database.

    Browser tabs sharing one storage become processes sharing one file here, so
    the database runs in WAL mode with a busy timeout.
    """

    def __init__(self, db_path: Path, max_connections: int = 5) -> None:
        self._db_path = db_path
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=max_connections)
        self._schema_lock = threading.Lock()
        self._schema_initialized = False

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        if self._schema_initialized:
            return
        with self._schema_lock:
            if self._schema_initialized:
                return
            conn.execute(
                "CREATE TABLE IF NOT EXISTS local_state ("
                "  namespace TEXT NOT NULL,"
                "  key TEXT NOT NULL,"
                "  value TEXT NOT NULL,"
                "  PRIMARY KEY (namespace, key)"
                ")"
            )
            conn.commit()
            self._schema_initialized = True

    def _create_connection(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA busy_timeout=5000")
        conn.execute("PRAGMA journal_mode=WAL")
        self._ensure_schema(conn)
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Acquire a connection from the pool, returning it when done."""
        try:
            conn = self._pool.get_nowait()
        except Empty:
            conn = self._create_connection()

        try:
            yield conn
        finally:
            try:
                self._pool.put_nowait(conn)
            except Full:
                conn.close()

    def close(self) -> None:
        while True:
            try:
                conn = self._pool.get_nowait()
            except Empty:
                return
            conn.close()


class SqliteLocalStore:
    """Namespaced key/value store that survives restarts.

    Values are opaque strings (JSON in practice); records are written and deleted
    one key at a time so concurrent writers only ever clobber the same key.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._pool = SqliteConnectionPool(db_path)

    def get(self, namespace: str, key: str) -> str | None:
        with self._pool.connection() as conn:
            row = conn.execute(
                "SELECT value FROM local_state WHERE namespace = ? AND key = ?",
                (namespace, key),
            ).fetchone()
            return None if row is None else row[0]

    def put(self, namespace: str, key: str, value: str) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO local_state (namespace, key, value) VALUES (?, ?, ?)",
                (namespace, key, value),
            )
            conn.commit()

    def delete(self, namespace: str, key: str) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM local_state WHERE namespace = ? AND key = ?", (namespace, key))
            conn.commit()

    def items(self, namespace: str) -> list[tuple[str, str]]:
        with self._pool.connection() as conn:
            rows = conn.execute(
                "SELECT key, value FROM local_state WHERE namespace = ? ORDER BY key",
                (namespace,),
            ).fetchall()
            return [(key, value) for key, value in rows]

    def clear(self, namespace: str) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM local_state WHERE namespace = ?", (namespace,))
            conn.commit()

    def close(self) -> None:
        self._pool.close()
