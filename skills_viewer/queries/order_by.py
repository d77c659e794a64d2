"""
Discovery of a stable sort column through the information schema.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from skills_viewer.infrastructure.db_factory import QueryRunner

# Highest priority first.
ORDER_COLUMN_CANDIDATES = (
    "id",
    "user_id",
    "license_id",
    "uid",
    "seq",
    "updated_at",
    "update_at",
    "updatedAt",
    "created_at",
    "create_at",
    "createdAt",
)


def pick_order_column(runner: QueryRunner, table: str, schema: str) -> Optional[str]:
    """
    Return the highest-priority candidate column present on `schema.table`.

    Priority comes from ORDER_COLUMN_CANDIDATES, not from the order in which
    the catalog returns rows. Returns None when no candidate exists; database
    errors propagate.
    """
    placeholders = ", ".join(["%s"] * len(ORDER_COLUMN_CANDIDATES))
    rows = runner.fetch_all(
        f"""
        SELECT column_name
        FROM information_schema.columns
        WHERE table_schema = %s AND table_name = %s AND column_name IN ({placeholders})
        """,
        [schema, table, *ORDER_COLUMN_CANDIDATES],
    )
    if not rows:
        return None

    names = {row["column_name"] for row in rows}
    return next((c for c in ORDER_COLUMN_CANDIDATES if c in names), None)


@runtime_checkable
class OrderColumnResolver(Protocol):
    def resolve(self, table: str) -> Optional[str]:
        ...


class CatalogOrderColumnResolver:
    """OrderColumnResolver backed by the live information schema."""

    def __init__(self, runner: QueryRunner, schema: str) -> None:
        self.runner = runner
        self.schema = schema

    def resolve(self, table: str) -> Optional[str]:
        return pick_order_column(self.runner, table, self.schema)


__all__ = [
    "CatalogOrderColumnResolver",
    "ORDER_COLUMN_CANDIDATES",
    "OrderColumnResolver",
    "pick_order_column",
]
