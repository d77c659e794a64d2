"""
Query package for the Skills Viewer dashboard.

Re-exports the filter composition, pagination, order-column discovery and
list operations so callers can import from `skills_viewer.queries` directly.
"""

from skills_viewer.queries.filters import FilterSet, Predicate, build_user_filters
from skills_viewer.queries.listing import check_database, list_licenses, list_users
from skills_viewer.queries.order_by import (
    ORDER_COLUMN_CANDIDATES,
    CatalogOrderColumnResolver,
    OrderColumnResolver,
    pick_order_column,
)
from skills_viewer.queries.pagination import (
    PageRequest,
    display_range,
    parse_flag,
    parse_page_request,
    total_pages,
)

__all__ = [
    # Filters
    "FilterSet",
    "Predicate",
    "build_user_filters",
    # Pagination
    "PageRequest",
    "display_range",
    "parse_flag",
    "parse_page_request",
    "total_pages",
    # Ordering
    "ORDER_COLUMN_CANDIDATES",
    "CatalogOrderColumnResolver",
    "OrderColumnResolver",
    "pick_order_column",
    # Operations
    "check_database",
    "list_licenses",
    "list_users",
]
