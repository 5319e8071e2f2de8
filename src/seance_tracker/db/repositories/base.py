"""Connection handling shared by the SQLite repositories.

SQLiteStore resolves the database path from settings and wraps each
operation in a connection that commits on success and rolls back on error.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ...exceptions import DatabaseError

logger = logging.getLogger(__name__)


class SQLiteStore:
    """Connection handling shared by the SQLite-backed repositories."""

    def __init__(self, db_path: Optional[str] = None, timeout: float = 5.0):
        """
        Args:
            db_path: Path to SQLite database file. If None, uses the
                    configured database_path setting.
            timeout: Seconds to wait on a locked database.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            from ...config import get_settings
            self.db_path = Path(get_settings().database_path)
        self._timeout = timeout

        self._ensure_table_exists()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with context manager."""
        conn = sqlite3.connect(str(self.db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"SQLite error on {self.db_path.name}: {e}")
            raise DatabaseError(operation=type(self).__name__) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_table_exists(self) -> None:
        raise NotImplementedError
