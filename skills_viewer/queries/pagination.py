"""
Page request parsing and page arithmetic.

Query-string values are tolerated in any shape: missing or non-numeric input
falls back to the defaults and numeric input is clamped into range, so a page
request is always valid by the time it reaches SQL.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_TRUTHY_FLAGS = frozenset({"1", "true"})


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def _to_int(raw: Optional[str], default: int) -> int:
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def parse_page_request(page: Optional[str] = None, page_size: Optional[str] = None) -> PageRequest:
    """
    Build a PageRequest from raw query-string values.

    `page` is clamped to >= 1 and `page_size` to [1, MAX_PAGE_SIZE].
    """
    effective_page = max(1, _to_int(page, DEFAULT_PAGE))
    effective_size = min(max(1, _to_int(page_size, DEFAULT_PAGE_SIZE)), MAX_PAGE_SIZE)
    return PageRequest(page=effective_page, page_size=effective_size)


def parse_flag(raw: Optional[str]) -> bool:
    """True for "1" or "true" (any case), False for anything else."""
    return (raw or "").strip().lower() in _TRUTHY_FLAGS


def total_pages(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def display_range(total: int, page: int, page_size: int) -> Tuple[int, int]:
    """
    1-based inclusive range of rows shown on `page`, or (0, 0) for no rows.

    Example: total=25, page=2, page_size=10 -> (11, 20).
    """
    if total <= 0:
        return (0, 0)
    start = (page - 1) * page_size + 1
    end = min(total, page * page_size)
    return (start, end)


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PageRequest",
    "display_range",
    "parse_flag",
    "parse_page_request",
    "total_pages",
]
