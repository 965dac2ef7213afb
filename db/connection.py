"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool, since FastAPI serves sync
endpoints from a worker thread pool.

A `Database` is created once at startup and handed explicitly to the
repositories; nothing in the app reaches for a module-level pool.
"""

import time
from typing import Any, Optional, Sequence

import psycopg2
from psycopg2 import pool, extras

import config
from utils.logger import get_logger

logger = get_logger(__name__)


class QueryError(Exception):
    """
    Raised when the driver fails to execute a statement.

    Attributes:
        pgcode: SQLSTATE reported by the server, if any (e.g. 23505).
    """

    def __init__(self, message: str, pgcode: Optional[str] = None):
        super().__init__(message)
        self.pgcode = pgcode


class Database:
    """Record store gateway: a bounded pool plus one generic `query` call."""

    def __init__(
        self,
        host: str,
        port: int,
        name: str,
        user: str,
        password: str,
        min_conn: int = 1,
        max_conn: int = 5,
    ):
        self.host = host
        self.port = port
        self.name = name
        self.user = user
        self.password = password
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: Optional[pool.ThreadedConnectionPool] = None

    @classmethod
    def from_config(cls) -> "Database":
        """Build a gateway from the DB_* settings in config.py."""
        return cls(
            host=config.DB_HOST,
            port=config.DB_PORT,
            name=config.DB_NAME,
            user=config.DB_USER,
            password=config.DB_PASS,
            min_conn=config.DB_POOL_MIN,
            max_conn=config.DB_POOL_MAX,
        )

    def open(self) -> None:
        """
        Initialize the connection pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.ThreadedConnectionPool(
                self.min_conn,
                self.max_conn,
                host=self.host,
                port=self.port,
                dbname=self.name,
                user=self.user,
                password=self.password,
            )
            logger.info(
                f"Database connection pool initialized "
                f"({self.user}@{self.host}:{self.port}/{self.name}, max={self.max_conn})."
            )
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[dict]:
        """
        Execute one parameterized statement on a pooled connection.

        Args:
            sql: Statement with ``%s`` positional placeholders.
            params: Values bound to the placeholders, in order.

        Returns:
            Result rows as dicts. Empty for a read with no matches, or for
            a write without ``RETURNING``.

        Raises:
            QueryError: On any driver-level failure, including a parameter the
                driver cannot send (it raises ValueError for those).
            RuntimeError: If the pool has not been opened.
        """
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")

        logger.debug("Getting database connection...")
        try:
            conn = self._pool.getconn()
        except pool.PoolError as e:
            logger.error(f"Could not get a pooled connection: {e}")
            raise QueryError(str(e)) from e

        try:
            logger.debug(f"Executing query: {sql.strip()} | params={params}")
            started = time.perf_counter()
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                rows = [dict(r) for r in cur.fetchall()] if cur.description else []
            conn.commit()
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"Query executed in {elapsed_ms:.1f}ms, returned {len(rows)} rows")
            return rows
        except (psycopg2.Error, ValueError) as e:
            # ValueError: the driver refused to adapt a parameter (e.g. a NUL in a string)
            conn.rollback()
            logger.error(f"Database query error: {e}")
            raise QueryError(
                str(e).strip() or e.__class__.__name__, pgcode=getattr(e, "pgcode", None)
            ) from e
        finally:
            self._pool.putconn(conn)
