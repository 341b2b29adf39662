from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConflictError, StoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, with_database: bool = True):
    """Yield ``(conn, cursor)`` and commit on success.

    Connector errors are translated: duplicate keys become ``ConflictError``,
    everything else becomes ``StoreError``.
    """
    try:
        conn = conn_factory.connect(with_database=with_database)
    except mysql_errors.Error as e:
        logger.error("Could not connect to the record store: %s", e)
        raise StoreError("Record store unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql_errors.IntegrityError as e:
        conn.rollback()
        raise ConflictError("Record already exists") from e
    except mysql_errors.Error as e:
        logger.error("Record store operation failed: %s", e, exc_info=True)
        conn.rollback()
        raise StoreError("Record store operation failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
