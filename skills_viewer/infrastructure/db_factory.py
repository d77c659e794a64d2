"""
Database connection factory for the Skills Viewer dashboard.

Provides a single process-wide PostgreSQL connection pool and the query
capability built on top of it. The PoolManager singleton creates the pool
lazily on first use, hands out the same instance afterwards, and closes it on
application exit.

Query-issuing code never reaches for the pool directly: it receives a
`QueryRunner` so that list operations can be exercised against fakes.
"""

from __future__ import annotations

import atexit
import threading
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout

from skills_viewer.config import Settings, get_settings
from skills_viewer.utils.logging import get_logger

log = get_logger(__name__)

Row = Dict[str, Any]


@runtime_checkable
class QueryRunner(Protocol):
    """
    Capability to run a parameterized read query.

    Implementations return every row as a column-name-to-value mapping.
    """

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Row]:
        ...


def build_conninfo(settings: Optional[Settings] = None) -> str:
    """
    Compose a libpq connection string from settings.

    TLS is either required without certificate verification (`sslmode=require`)
    or disabled.
    """
    settings = settings or get_settings()
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        user=settings.db_user,
        password=settings.db_password,
        dbname=settings.db_name,
        sslmode="require" if settings.db_ssl else "disable",
        connect_timeout=settings.db_connect_timeout_s,
    )


class PoolManager:
    """
    Thread-safe singleton owning the process-wide connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._pool: Optional[ConnectionPool] = None
                atexit.register(cls._instance.close)
            return cls._instance

    def get_pool(self, settings: Optional[Settings] = None) -> ConnectionPool:
        """
        Get or create the connection pool.

        The first connection must be established within
        `db_connect_timeout_s`, which also bounds how long a query waits for a
        free connection. Construction errors (bad configuration, unreachable
        host) propagate to the caller as `PoolTimeout` or the driver error;
        nothing is memoized when construction fails.
        """
        with self._lock:
            if self._pool is None:
                settings = settings or get_settings()
                pool = ConnectionPool(
                    conninfo=build_conninfo(settings),
                    min_size=1,
                    max_size=settings.db_conn_limit,
                    max_idle=settings.db_idle_timeout_s,
                    max_waiting=0,  # unlimited queue
                    kwargs={"row_factory": dict_row},
                    name="skills_viewer",
                    timeout=settings.db_connect_timeout_s,
                    open=True,
                )
                try:
                    pool.wait(timeout=settings.db_connect_timeout_s)
                except PoolTimeout:
                    pool.close()
                    log.error(
                        "Connection pool could not connect",
                        extra={"db_host": settings.db_host, "timeout_s": settings.db_connect_timeout_s},
                    )
                    raise
                self._pool = pool
                log.info(
                    "Connection pool created",
                    extra={
                        "db_host": settings.db_host,
                        "db_name": settings.db_name,
                        "max_size": settings.db_conn_limit,
                    },
                )
            return self._pool

    def close(self) -> None:
        """
        Close the managed pool and release its sockets.

        Called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._pool is not None:
                try:
                    self._pool.close()
                finally:
                    self._pool = None


def get_connection_pool(settings: Optional[Settings] = None) -> ConnectionPool:
    """
    Return the process-wide connection pool, creating it on first call.

    Parameters
    ----------
    settings : Settings, optional
        Overrides the cached settings; only consulted on the creating call.

    Returns
    -------
    ConnectionPool
        The same pool instance for the life of the process.
    """
    return PoolManager().get_pool(settings)


def close_connection_pool() -> None:
    """Close the process-wide pool if it was created."""
    PoolManager().close()


class PooledQueryRunner:
    """
    `QueryRunner` backed by a psycopg connection pool.

    Every call checks a connection out for the duration of one statement.
    Without an explicit pool the process-wide one is used, fetched on each
    call so that a failed pool creation surfaces as a query error.
    """

    def __init__(self, pool: Optional[ConnectionPool] = None, settings: Optional[Settings] = None) -> None:
        self._pool = pool
        self._settings = settings

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Row]:
        pool = self._pool or get_connection_pool(self._settings)
        with pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, tuple(params) or None)
                return list(cur.fetchall())


__all__ = [
    "PoolManager",
    "PooledQueryRunner",
    "QueryRunner",
    "Row",
    "build_conninfo",
    "close_connection_pool",
    "get_connection_pool",
]
