"""
Skills Viewer - read-only dashboard over the `user` and `license` tables.

The package is organized in layers:

- `infrastructure`: the process-wide PostgreSQL pool and the query capability
- `queries`: filter composition, pagination, order-column discovery and the
  list operations
- `api`: FastAPI routes serving JSON envelopes and the HTML dashboard
- `presentation`: concurrent dashboard assembly and Jinja2 rendering
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from skills_viewer.config import Settings, get_settings
from skills_viewer.domain.models import ResultEnvelope, UserQuery
from skills_viewer.queries.listing import check_database, list_licenses, list_users
from skills_viewer.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Contracts
    "ResultEnvelope",
    "UserQuery",
    # Operations
    "check_database",
    "list_licenses",
    "list_users",
    # Logging
    "configure_logging",
    "get_logger",
]
