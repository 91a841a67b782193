from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode, errors

from ..core.exceptions import DuplicateKeyError, ServiceUnavailableError, StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _open(conn_factory: DatabaseConnection):
    try:
        return conn_factory.connect()
    except errors.Error as exc:
        logger.error("Database connection failed: %s", exc)
        raise ServiceUnavailableError("Database connection failed. Please try again later.") from exc


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cur)`` inside one transaction.

    mysql-connector errors are translated: duplicate keys to DuplicateKeyError,
    connectivity/timeouts to ServiceUnavailableError, the rest to StorageError.
    """
    conn = _open(conn_factory)
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except errors.IntegrityError as exc:
        _safe_rollback(conn)
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateKeyError(str(exc)) from exc
        raise StorageError(str(exc)) from exc
    except (errors.InterfaceError, errors.OperationalError) as exc:
        _safe_rollback(conn)
        logger.error("Database unavailable: %s", exc)
        raise ServiceUnavailableError("Database operation timed out. Please try again later.") from exc
    except errors.Error as exc:
        _safe_rollback(conn)
        raise StorageError(str(exc)) from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except errors.Error as exc:
        logger.debug("Rollback failed on broken connection: %s", exc)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
