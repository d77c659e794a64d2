"""
Read operations behind the `/users`, `/licenses` and `/db-check` endpoints.

Every operation takes a `QueryRunner` and converts database failures into a
failure envelope at this boundary: full detail goes to the server log, the
caller gets a short message. Nothing is retried.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from skills_viewer.domain.models import Record, ResultEnvelope, UserQuery
from skills_viewer.infrastructure.db_factory import QueryRunner
from skills_viewer.queries.filters import build_user_filters, quote_identifier
from skills_viewer.queries.order_by import OrderColumnResolver
from skills_viewer.queries.pagination import parse_flag, parse_page_request, total_pages
from skills_viewer.utils.logging import get_logger

log = get_logger(__name__)

USER_TABLE = "user"
LICENSE_TABLE = "license"
LICENSE_LIMIT = 100

SENSITIVE_FIELDS = frozenset({"password"})
GENERIC_ERROR = "Database query failed"


def _sql(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _error_message(exc: Exception, expose_errors: bool) -> str:
    if expose_errors:
        return str(exc) or GENERIC_ERROR
    return GENERIC_ERROR


def strip_sensitive(records: Iterable[Record]) -> List[Record]:
    """Copy records without sensitive keys (absent keys are fine)."""
    return [{k: v for k, v in record.items() if k not in SENSITIVE_FIELDS} for record in records]


def order_clause(resolver: Optional[OrderColumnResolver], table: str) -> str:
    """
    `ORDER BY "<column>"` for the resolved column, or "" for storage order.

    A failed catalog probe degrades to storage order instead of failing the
    list request.
    """
    if resolver is None:
        return ""
    try:
        column = resolver.resolve(table)
    except Exception:  # noqa: BLE001 - ordering is best-effort
        log.warning("Order column probe failed; results left unordered", exc_info=True, extra={"table": table})
        return ""
    if column is None:
        log.debug("No order column candidate found", extra={"table": table})
        return ""
    return f"ORDER BY {quote_identifier(column)}"


def list_users(
    runner: QueryRunner,
    query: Optional[UserQuery] = None,
    order_resolver: Optional[OrderColumnResolver] = None,
    expose_errors: bool = False,
) -> ResultEnvelope:
    """
    Filtered, paginated page of the `user` table.

    Parameters
    ----------
    runner : QueryRunner
        Executes the count and page queries.
    query : UserQuery, optional
        Raw query-string inputs (page, pageSize, school, excludeTest, q).
    order_resolver : OrderColumnResolver, optional
        When given, pages are ordered by the resolved column.
    expose_errors : bool
        Return the driver's error message instead of a generic one.

    Returns
    -------
    ResultEnvelope
        `data`, `page`, `pageSize`, `total` and `totalPages` on success;
        `error` on failure. `password` never appears in `data`.
    """
    query = query or UserQuery()
    page_request = parse_page_request(query.page, query.page_size)
    filters = build_user_filters(
        school=query.school,
        exclude_test=parse_flag(query.exclude_test),
        q=query.q,
    )
    where_sql, params = filters.render()
    table = quote_identifier(USER_TABLE)
    order_sql = order_clause(order_resolver, USER_TABLE)

    try:
        count_rows = runner.fetch_all(_sql(f"SELECT COUNT(*) AS total FROM {table}", where_sql), params)
        total = int(count_rows[0]["total"]) if count_rows else 0

        rows = runner.fetch_all(
            _sql(f"SELECT * FROM {table}", where_sql, order_sql, "LIMIT %s OFFSET %s"),
            [*params, page_request.page_size, page_request.offset],
        )
    except Exception as exc:  # noqa: BLE001 - converted into a failure envelope
        log.exception(
            "[GET /users] query failed",
            extra={"table": USER_TABLE, "filters": len(filters), "page": page_request.page},
        )
        return ResultEnvelope.failure(_error_message(exc, expose_errors))

    log.debug(
        "Users page fetched",
        extra={"total": total, "rows": len(rows), "page": page_request.page},
    )
    return ResultEnvelope(
        success=True,
        data=strip_sensitive(rows),
        page=page_request.page,
        page_size=page_request.page_size,
        total=total,
        total_pages=total_pages(total, page_request.page_size),
    )


def list_licenses(
    runner: QueryRunner,
    order_resolver: Optional[OrderColumnResolver] = None,
    expose_errors: bool = False,
) -> ResultEnvelope:
    """First LICENSE_LIMIT rows of the `license` table, unpaginated."""
    table = quote_identifier(LICENSE_TABLE)
    order_sql = order_clause(order_resolver, LICENSE_TABLE)
    try:
        rows = runner.fetch_all(_sql(f"SELECT * FROM {table}", order_sql, "LIMIT %s"), [LICENSE_LIMIT])
    except Exception as exc:  # noqa: BLE001 - converted into a failure envelope
        log.exception("[GET /licenses] query failed", extra={"table": LICENSE_TABLE})
        return ResultEnvelope.failure(_error_message(exc, expose_errors))
    return ResultEnvelope(success=True, data=strip_sensitive(rows))


def check_database(runner: QueryRunner, expose_errors: bool = False) -> Dict[str, Any]:
    """Liveness probe: `{"success": True, "rows": [...]}` or `{"success": False, "error": ...}`."""
    try:
        rows = runner.fetch_all("SELECT 1 AS ok, NOW() AS now")
    except Exception as exc:  # noqa: BLE001 - converted into a failure payload
        log.exception("[GET /db-check] probe failed")
        return {"success": False, "error": _error_message(exc, expose_errors)}
    return {"success": True, "rows": rows}


__all__ = [
    "GENERIC_ERROR",
    "LICENSE_LIMIT",
    "LICENSE_TABLE",
    "SENSITIVE_FIELDS",
    "USER_TABLE",
    "check_database",
    "list_licenses",
    "list_users",
    "order_clause",
    "strip_sensitive",
]
