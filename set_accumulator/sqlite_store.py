"""
SQLite Storage for the Set Accumulator

Durable Store implementation. Accumulator parameters and state live in a
``meta`` table as hex strings; members live in a ``members`` table keyed by
the raw value bytes.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .errors import InvalidParametersError

logger = logging.getLogger(__name__)

META_GENERATOR = "generator"
META_MODULUS = "modulus"
META_STATE = "state"


class SQLiteStore:
    """
    Store backed by an SQLite database file.

    Opening an existing database reuses the parameters stored in it. A new
    database needs a generator and modulus; its state starts at the
    generator (the empty accumulator).

    Example:
        >>> store = SQLiteStore("acc.db", generator=4, modulus=209)
        >>> reopened = SQLiteStore("acc.db")
        >>> assert reopened.get_modulus() == 209
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        generator: Optional[int] = None,
        modulus: Optional[int] = None,
    ):
        self.db_path = Path(db_path)
        self.init_db()

        stored_generator = self._get_meta_int(META_GENERATOR)
        stored_modulus = self._get_meta_int(META_MODULUS)

        if stored_generator is None or stored_modulus is None:
            if generator is None or modulus is None:
                raise InvalidParametersError(
                    f"{self.db_path} holds no accumulator; generator and modulus are required"
                )
            with self.get_connection() as conn:
                self._set_meta(conn, META_GENERATOR, generator)
                self._set_meta(conn, META_MODULUS, modulus)
                self._set_meta(conn, META_STATE, generator)
                conn.commit()
            logger.info(f"Created accumulator in {self.db_path}")
        elif (generator is not None and generator != stored_generator) or (
            modulus is not None and modulus != stored_modulus
        ):
            raise InvalidParametersError(
                f"{self.db_path} already holds an accumulator with different parameters"
            )
        else:
            logger.info(f"Opened accumulator in {self.db_path}")

    def __repr__(self) -> str:
        return f"SQLiteStore({str(self.db_path)!r})"

    def init_db(self) -> None:
        """Create the tables if they do not exist."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS members (
                    value BLOB PRIMARY KEY,
                    nonce BLOB NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
        finally:
            conn.close()

    # Metadata

    def _get_meta_int(self, key: str) -> Optional[int]:
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM meta WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return int(row[0], 16)
        except ValueError as e:
            raise InvalidParametersError(f"Malformed {key} in {self.db_path}: {e}")

    @staticmethod
    def _set_meta(conn: sqlite3.Connection, key: str, value: int) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
            (key, hex(value)),
        )

    # Store protocol

    def get_generator(self) -> int:
        return self._get_meta_int(META_GENERATOR)

    def get_modulus(self) -> int:
        return self._get_meta_int(META_MODULUS)

    def get_state(self) -> int:
        return self._get_meta_int(META_STATE)

    def set_state(self, state: int) -> None:
        with self.get_connection() as conn:
            self._set_meta(conn, META_STATE, state)
            conn.commit()

    def get_members(self) -> Dict[bytes, bytes]:
        return dict(self.iter_members())

    def get_nonce(self, value: bytes) -> Optional[bytes]:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT nonce FROM members WHERE value = ?", (bytes(value),)
            ).fetchone()
        return bytes(row[0]) if row else None

    def has_member(self, value: bytes) -> bool:
        return self.get_nonce(value) is not None

    def set_member(self, value: bytes, nonce: bytes) -> None:
        with self.get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO members (value, nonce) VALUES (?, ?)",
                (bytes(value), bytes(nonce)),
            )
            conn.commit()

    def record_addition(self, state: int, value: bytes, nonce: bytes) -> None:
        """Write the new state and the member row in a single transaction."""
        with self.get_connection() as conn:
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO members (value, nonce) VALUES (?, ?)",
                    (bytes(value), bytes(nonce)),
                )
                self._set_meta(conn, META_STATE, state)
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                logger.error(f"Rolled back addition of {bytes(value)[:16]!r} in {self.db_path}")
                raise

    def iter_members(self) -> Iterator[Tuple[bytes, bytes]]:
        with self.get_connection() as conn:
            rows = conn.execute("SELECT value, nonce FROM members").fetchall()
        for value, nonce in rows:
            yield bytes(value), bytes(nonce)

    def member_count(self) -> int:
        with self.get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM members").fetchone()[0]
