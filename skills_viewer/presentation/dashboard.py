"""
Dashboard assembly: fetch both list endpoints and build the page model.

The users and licenses calls go out concurrently over HTTP and are evaluated
independently, so a failure in one section never blocks rendering of the
other. Pagination links carry every active filter and differ only in `page`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

import httpx

from skills_viewer.domain.models import Record
from skills_viewer.queries.listing import SENSITIVE_FIELDS
from skills_viewer.queries.pagination import (
    display_range,
    parse_flag,
    parse_page_request,
)
from skills_viewer.utils.logging import get_logger

log = get_logger(__name__)

PREVIEW_CHARS = 400
PAGE_WINDOW = 5
PAGE_SIZE_CHOICES = (10, 20, 50, 100)


class UpstreamError(Exception):
    """A list endpoint answered with a non-2xx status or an unusable body."""


async def fetch_json(client: httpx.AsyncClient, path: str) -> Dict[str, Any]:
    """
    GET `path` and decode the JSON body.

    Raises UpstreamError for non-success statuses, unparseable bodies and
    bodies that are not a JSON object, with a preview of the body for
    diagnostics. Transport errors from httpx propagate unchanged.
    """
    response = await client.get(path)
    text = response.text
    if not response.is_success:
        raise UpstreamError(
            f"HTTP {response.status_code} {response.reason_phrase}\n{text[:PREVIEW_CHARS]}"
        )
    try:
        body = response.json()
    except ValueError as exc:
        raise UpstreamError(f"JSON parse failed. Response preview:\n{text[:PREVIEW_CHARS]}") from exc
    if not isinstance(body, dict):
        raise UpstreamError(f"Unexpected response shape. Response preview:\n{text[:PREVIEW_CHARS]}")
    return body


@dataclass(frozen=True)
class DashboardFilters:
    page: int = 1
    page_size: int = 20
    school: str = ""
    exclude_test: str = ""
    q: str = ""

    @classmethod
    def from_query(
        cls,
        page: Optional[str] = None,
        page_size: Optional[str] = None,
        school: Optional[str] = None,
        exclude_test: Optional[str] = None,
        q: Optional[str] = None,
    ) -> "DashboardFilters":
        page_request = parse_page_request(page, page_size)
        return cls(
            page=page_request.page,
            page_size=page_request.page_size,
            school=school or "",
            exclude_test=(exclude_test or "").lower(),
            q=q or "",
        )

    @property
    def exclude_test_enabled(self) -> bool:
        return parse_flag(self.exclude_test)

    def query_params(self, page: Optional[int] = None) -> Dict[str, str]:
        params = {
            "page": str(self.page if page is None else page),
            "pageSize": str(self.page_size),
        }
        if self.school:
            params["school"] = self.school
        if self.exclude_test:
            params["excludeTest"] = self.exclude_test
        if self.q:
            params["q"] = self.q
        return params

    def href(self, page: int) -> str:
        return "/?" + urlencode(self.query_params(page))


@dataclass
class Section:
    rows: List[Record] = field(default_factory=list)
    error: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def columns(self) -> List[str]:
        if not self.rows:
            return []
        return [c for c in self.rows[0] if c not in SENSITIVE_FIELDS]


def _section(result: Union[Dict[str, Any], BaseException]) -> Section:
    if isinstance(result, BaseException):
        return Section(error=str(result) or "Request failed")
    if not result.get("success"):
        return Section(error=result.get("error") or "Unknown error", payload=result)
    rows = result.get("data") or []
    if not isinstance(rows, list):
        return Section(error="Unexpected response shape: data is not a list", payload=result)
    return Section(rows=rows, payload=result)


@dataclass
class DashboardView:
    filters: DashboardFilters
    users: Section
    licenses: Section
    page: int
    page_size: int
    total: int
    total_pages: int
    start: int
    end: int
    updated_at: datetime

    @property
    def pages(self) -> List[int]:
        first = max(1, self.page - PAGE_WINDOW // 2)
        last = min(self.total_pages, first + PAGE_WINDOW - 1)
        return list(range(first, last + 1))

    @property
    def prev_page(self) -> int:
        return max(1, self.page - 1)

    @property
    def next_page(self) -> int:
        return min(self.total_pages, self.page + 1)

    def href(self, page: int) -> str:
        return self.filters.href(page)


def build_view(
    filters: DashboardFilters,
    users_result: Union[Dict[str, Any], BaseException],
    licenses_result: Union[Dict[str, Any], BaseException],
) -> DashboardView:
    users = _section(users_result)
    licenses = _section(licenses_result)

    page = users.payload.get("page") or filters.page
    page_size = users.payload.get("pageSize") or filters.page_size
    total = users.payload.get("total")
    if total is None:
        total = len(users.rows)
    start, end = display_range(total, page, page_size)

    return DashboardView(
        filters=filters,
        users=users,
        licenses=licenses,
        page=page,
        page_size=page_size,
        total=total,
        total_pages=users.payload.get("totalPages") or 1,
        start=start,
        end=end,
        updated_at=datetime.now(),
    )


async def load_dashboard(client: httpx.AsyncClient, filters: DashboardFilters) -> DashboardView:
    """Fetch users and licenses concurrently and assemble the view."""
    users_result, licenses_result = await asyncio.gather(
        fetch_json(client, "/users?" + urlencode(filters.query_params())),
        fetch_json(client, "/licenses"),
        return_exceptions=True,
    )
    for name, result in (("users", users_result), ("licenses", licenses_result)):
        if isinstance(result, BaseException):
            log.warning(
                "Dashboard upstream call failed",
                extra={"section": name, "error": str(result)},
            )
    return build_view(filters, users_result, licenses_result)


def format_cell(value: Any) -> str:
    """Display form of a record value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return f"{value:,}"
    if isinstance(value, str) and len(value) >= 11 and value[4] == "-" and value[10] == "T":
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


__all__ = [
    "DashboardFilters",
    "DashboardView",
    "PAGE_SIZE_CHOICES",
    "Section",
    "UpstreamError",
    "build_view",
    "fetch_json",
    "format_cell",
    "load_dashboard",
]
