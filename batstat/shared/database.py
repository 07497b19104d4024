"""SQLite storage for per-device battery logs."""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import BatstatError
from .models import ATTRIBUTES, Sample

logger = logging.getLogger(__name__)

LOG_COLUMNS = ("id", "time") + ATTRIBUTES

CREATE_LOG_SQL = """
    CREATE TABLE log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        time INTEGER,
        present INTEGER NOT NULL,
        cycle_count INTEGER NOT NULL,
        capacity INTEGER NOT NULL,
        charge_full INTEGER NOT NULL,
        charge_now INTEGER NOT NULL,
        current_now INTEGER,
        voltage_now INTEGER NOT NULL
    )
"""

INSERT_LOG_SQL = (
    "INSERT INTO log "
    "(time,present,cycle_count,capacity,charge_full,charge_now,current_now,voltage_now) "
    "VALUES (?,?,?,?,?,?,?,?)"
)


class StoreError(BatstatError):
    """Base class for log store failures."""

    pass


class SchemaError(StoreError):
    """Raised when a new store cannot be created and initialized."""

    pass


class StoreOpenError(StoreError):
    """Raised when an existing store cannot be opened for appending."""

    pass


class WriteError(StoreError):
    """Raised when a sample could not be appended to a store."""

    def __init__(self, device: str, message: str, code: Optional[str] = None):
        self.device = device
        self.message = message
        self.code = code
        super().__init__(f"{device}: store error {code or 'unknown'}: {message}")


def _error_code(error: Exception) -> Optional[str]:
    # sqlite_errorname is only present on Python 3.11+
    return getattr(error, "sqlite_errorname", None)


def _connect_uri(path: Union[str, Path], mode: str) -> sqlite3.Connection:
    uri = f"{Path(path).resolve().as_uri()}?mode={mode}"
    return sqlite3.connect(uri, uri=True)


def initialize_schema(path: Union[str, Path]) -> None:
    """Create a new store at ``path`` and its log table.

    Args:
        path: Location of the store file; created if absent.

    Raises:
        SchemaError: If the store cannot be opened or the table created.
    """
    try:
        conn = sqlite3.connect(str(path))
    except sqlite3.Error as e:
        raise SchemaError(f"Cannot create store {path}: {e}") from e
    try:
        conn.execute(CREATE_LOG_SQL)
        conn.commit()
    except sqlite3.Error as e:
        raise SchemaError(f"Cannot initialize schema in {path}: {e}") from e
    finally:
        conn.close()
    logger.info(f"Initialized log store {path}")


class LogStore:
    """An open, append-only log store for a single device.

    The connection and its cursor stay open for the lifetime of the process;
    every append reuses the same parameterized insert statement.
    """

    def __init__(self, name: str, path: Path, connection: sqlite3.Connection):
        self.name = name
        self.path = path
        self._connection: Optional[sqlite3.Connection] = connection
        self._cursor: Optional[sqlite3.Cursor] = connection.cursor()

    @classmethod
    def open_for_append(cls, path: Union[str, Path], name: str) -> "LogStore":
        """Open an already-initialized store.

        Args:
            path: Location of an existing store file.
            name: Device name, used to attribute errors.

        Returns:
            The open store.

        Raises:
            StoreOpenError: If the file cannot be opened or its log table does
                not have the expected columns.
        """
        path = Path(path)
        try:
            conn = _connect_uri(path, "rw")
        except sqlite3.Error as e:
            raise StoreOpenError(f"Cannot open store {path}: {e}") from e

        try:
            rows = conn.execute("PRAGMA table_info(log)").fetchall()
        except sqlite3.Error as e:
            conn.close()
            raise StoreOpenError(f"Cannot read schema of {path}: {e}") from e

        columns = tuple(row[1] for row in rows)
        if columns != LOG_COLUMNS:
            conn.close()
            raise StoreOpenError(
                f"Unexpected log table in {path}: columns {columns or 'missing'}"
            )

        return cls(name, path, conn)

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def append(self, sample: Sample) -> None:
        """Append one sample as a new row.

        Args:
            sample: The sample to store.

        Raises:
            WriteError: If the insert fails; nothing is committed.
        """
        if self._connection is None or self._cursor is None:
            raise WriteError(self.name, "store is closed")

        try:
            self._cursor.execute(INSERT_LOG_SQL, sample.as_row())
            self._connection.commit()
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: a value outside the 64-bit INTEGER range
            try:
                self._connection.rollback()
            except sqlite3.Error:
                pass
            raise WriteError(self.name, str(e), _error_code(e)) from e

    def close(self) -> None:
        """Close the cursor and connection; safe to call more than once."""
        if self._cursor is not None:
            try:
                self._cursor.close()
            except sqlite3.Error:
                pass
            self._cursor = None
        if self._connection is not None:
            try:
                self._connection.close()
            except sqlite3.Error:
                pass
            self._connection = None


def count_rows(path: Union[str, Path]) -> int:
    """Return the number of rows in a store, opened read-only."""
    conn = _connect_uri(path, "ro")
    try:
        return conn.execute("SELECT COUNT(*) FROM log").fetchone()[0]
    finally:
        conn.close()


def fetch_recent(path: Union[str, Path], limit: int = 10) -> List[Tuple]:
    """Fetch the most recent rows of a store, newest first.

    Args:
        path: Location of the store file.
        limit: Maximum number of rows to return.

    Returns:
        List of row tuples in LOG_COLUMNS order.
    """
    conn = _connect_uri(path, "ro")
    try:
        return conn.execute(
            f"SELECT {', '.join(LOG_COLUMNS)} FROM log ORDER BY id DESC LIMIT ?",
            (limit,),
        ).fetchall()
    finally:
        conn.close()
