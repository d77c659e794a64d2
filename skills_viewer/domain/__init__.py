"""
Domain package for the Skills Viewer dashboard.

Exports the request/response contracts shared by the query layer, the HTTP
API and the dashboard. Keep this package focused on data definitions and
validation concerns.
"""

from skills_viewer.domain.models import Record, ResultEnvelope, UserQuery

__all__ = [
    "Record",
    "ResultEnvelope",
    "UserQuery",
]
