"""
HTML rendering of the dashboard with Jinja2.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from skills_viewer.presentation.dashboard import PAGE_SIZE_CHOICES, DashboardView, format_cell

TEMPLATES_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["cell"] = format_cell
    env.filters["thousands"] = lambda n: f"{n:,}"
    return env


def render_dashboard(view: DashboardView, title: str = "Nursing Skills Viewer") -> str:
    template = get_environment().get_template("dashboard.html")
    return template.render(view=view, title=title, page_size_choices=PAGE_SIZE_CHOICES)


__all__ = ["render_dashboard"]
