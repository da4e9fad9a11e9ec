"""
PostgreSQL connection helper.
Provides the pooled Database handle that the stores are built on.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extensions import connection as PgConnection
from psycopg2.extras import DictCursor
from psycopg2.pool import ThreadedConnectionPool

from backend.config import DATABASE_URL, DB_POOL_MAX_CONN, DB_POOL_MIN_CONN


class Database:
    """
    Pool of psycopg2 connections with dictionary-based row access.

    Usage:
        with db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    The connection is committed when the block exits cleanly, rolled back
    when it raises, and returned to the pool either way.
    """

    def __init__(self, dsn: str, min_conn: int = DB_POOL_MIN_CONN, max_conn: int = DB_POOL_MAX_CONN):
        try:
            self._pool = ThreadedConnectionPool(min_conn, max_conn, dsn, cursor_factory=DictCursor)
        except psycopg2.Error as e:
            logging.error(f"Error connecting to database: {e}")
            # Re-raise the exception so the caller knows the connection failed
            raise

    @contextmanager
    def connection(self) -> Iterator[PgConnection]:
        conn = self._pool.getconn()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def close(self) -> None:
        self._pool.closeall()


def get_db(dsn: Optional[str] = None) -> Database:
    """
    Build a Database from the given DSN, or from DATABASE_URL.

    Raises:
        RuntimeError: If no DSN is configured.
    """
    dsn = dsn or DATABASE_URL
    if not dsn:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")
    return Database(dsn)
