from __future__ import annotations

import math

import pytest

from skills_viewer.queries.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PageRequest,
    display_range,
    parse_flag,
    parse_page_request,
    total_pages,
)


@pytest.mark.parametrize("raw", [None, "", "0", "-3", "abc", "  "])
def test_page_below_one_or_invalid_becomes_one(raw) -> None:
    assert parse_page_request(page=raw).page == 1


def test_page_is_kept_when_valid() -> None:
    assert parse_page_request(page=" 7 ").page == 7


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, DEFAULT_PAGE_SIZE),
        ("abc", DEFAULT_PAGE_SIZE),
        ("0", 1),
        ("-10", 1),
        ("1", 1),
        ("55", 55),
        ("100", 100),
        ("101", MAX_PAGE_SIZE),
        ("100000", MAX_PAGE_SIZE),
    ],
)
def test_page_size_is_clamped(raw, expected) -> None:
    assert parse_page_request(page_size=raw).page_size == expected


@pytest.mark.parametrize(("page", "size"), [(1, 1), (1, 20), (2, 10), (9, 100)])
def test_offset_matches_page_and_size(page: int, size: int) -> None:
    request = PageRequest(page=page, page_size=size)
    assert request.offset == (page - 1) * size
    assert request.offset >= 0


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 25, 100, 101])
@pytest.mark.parametrize("size", [1, 10, 20, 100])
def test_total_pages_formula(total: int, size: int) -> None:
    assert total_pages(total, size) == max(1, math.ceil(total / size))


def test_total_pages_is_at_least_one_for_empty_results() -> None:
    assert total_pages(0, 20) == 1


def test_display_range_for_middle_page() -> None:
    assert display_range(total=25, page=2, page_size=10) == (11, 20)


def test_display_range_for_last_partial_page() -> None:
    assert display_range(total=25, page=3, page_size=10) == (21, 25)


def test_display_range_for_no_rows() -> None:
    assert display_range(total=0, page=1, page_size=20) == (0, 0)


@pytest.mark.parametrize("raw", ["1", "true", "TRUE", "True", " true "])
def test_truthy_flags(raw: str) -> None:
    assert parse_flag(raw) is True


@pytest.mark.parametrize("raw", [None, "", "0", "false", "yes", "on"])
def test_falsy_flags(raw) -> None:
    assert parse_flag(raw) is False
