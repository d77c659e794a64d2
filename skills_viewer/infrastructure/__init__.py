"""
Infrastructure package for the Skills Viewer dashboard.

Centralizes database connectivity concerns (pool construction, the query
capability). Keep this layer focused on I/O and resource management,
decoupled from query composition and presentation.
"""

from skills_viewer.infrastructure.db_factory import (
    PooledQueryRunner,
    QueryRunner,
    build_conninfo,
    close_connection_pool,
    get_connection_pool,
)

__all__ = [
    "PooledQueryRunner",
    "QueryRunner",
    "build_conninfo",
    "close_connection_pool",
    "get_connection_pool",
]
