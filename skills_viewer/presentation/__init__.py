"""
Presentation package: dashboard assembly over the list endpoints and its
HTML rendering.
"""

from skills_viewer.presentation.dashboard import (
    DashboardFilters,
    DashboardView,
    UpstreamError,
    fetch_json,
    load_dashboard,
)
from skills_viewer.presentation.render import render_dashboard

__all__ = [
    "DashboardFilters",
    "DashboardView",
    "UpstreamError",
    "fetch_json",
    "load_dashboard",
    "render_dashboard",
]
