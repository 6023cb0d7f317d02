from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import MONEY_QUANT
from ..core.exceptions import RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True, passthrough_integrity: bool = False):
    """One connection, one transaction: commit on success, rollback on error.

    Driver errors surface as RepositoryError. With ``passthrough_integrity``
    an IntegrityError is re-raised as is, for callers that treat a duplicate
    key as the outcome of a guarded insert.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("cannot connect to store: %s", exc)
        raise RepositoryError(f"cannot connect to store: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        conn.rollback()
        if passthrough_integrity:
            raise
        logger.error("integrity error: %s", exc)
        raise RepositoryError(f"integrity error: {exc}") from exc
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.error("store error: %s", exc)
        raise RepositoryError(f"store error: {exc}") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def is_duplicate_key(exc: mysql.connector.Error) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def map_row(row: Dict[str, Any], mapper: Callable[[Dict[str, Any]], T]) -> T:
    """Build an entity from a row; a row of unexpected shape is a store fault."""

    try:
        return mapper(row)
    except (KeyError, TypeError, ValueError) as exc:
        raise RepositoryError(f"unexpected row shape: {exc!r}") from exc


def map_rows(rows: Iterable[Dict[str, Any]], mapper: Callable[[Dict[str, Any]], T]) -> List[T]:
    return [map_row(r, mapper) for r in rows]


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0").quantize(Decimal(MONEY_QUANT))
    return Decimal(str(value)).quantize(Decimal(MONEY_QUANT))


def to_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise TypeError(f"Unsupported DATETIME value type: {type(value)!r}")


def to_time(value: Any) -> Optional[time]:
    """TIME columns come back as timedelta from the pure-Python connector."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        return (datetime.min + value % timedelta(days=1)).time()
    if isinstance(value, str):
        return time.fromisoformat(value)
    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")
