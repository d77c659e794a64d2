"""
Domain models for the Skills Viewer dashboard.

Records themselves stay untyped mappings (their shape is whatever the `user`
and `license` tables hold at runtime); these models describe the request and
response contracts around them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

Record = Dict[str, Any]


class ResultEnvelope(BaseModel):
    """
    Success/error wrapper returned by every list operation.

    Serialized with camelCase keys and without unset optional fields, e.g.
    `{"success": true, "data": [...], "page": 1, "pageSize": 20, ...}`.
    """

    success: bool
    data: Optional[List[Record]] = None
    error: Optional[str] = None
    page: Optional[int] = Field(None, ge=1)
    page_size: Optional[int] = Field(None, ge=1, le=100, alias="pageSize")
    total: Optional[int] = Field(None, ge=0)
    total_pages: Optional[int] = Field(None, ge=1, alias="totalPages")

    model_config = {
        "populate_by_name": True,
    }

    @classmethod
    def failure(cls, message: str) -> "ResultEnvelope":
        return cls(success=False, error=message)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict (dates and decimals rendered as strings)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class UserQuery(BaseModel):
    """
    Raw user-list inputs as they arrive on the query string.

    Values stay strings here; clamping and flag parsing happen in
    `skills_viewer.queries.pagination`.
    """

    page: Optional[str] = None
    page_size: Optional[str] = Field(None, alias="pageSize")
    school: Optional[str] = None
    exclude_test: Optional[str] = Field(None, alias="excludeTest")
    q: Optional[str] = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


__all__ = ["Record", "ResultEnvelope", "UserQuery"]
