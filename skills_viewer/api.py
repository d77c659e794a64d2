"""
HTTP surface of the Skills Viewer dashboard.

Routes:
- `GET /users`     paginated, filtered user list (result envelope)
- `GET /licenses`  first 100 licenses (result envelope)
- `GET /db-check`  `SELECT 1` liveness probe
- `GET /`          HTML dashboard built from the two list endpoints

Run with:
    uvicorn --factory skills_viewer.api:create_app --port 3001
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse

from skills_viewer.config import Settings, get_settings
from skills_viewer.domain.models import ResultEnvelope, UserQuery
from skills_viewer.infrastructure.db_factory import (
    PooledQueryRunner,
    QueryRunner,
    close_connection_pool,
)
from skills_viewer.presentation.dashboard import DashboardFilters, load_dashboard
from skills_viewer.presentation.render import render_dashboard
from skills_viewer.queries.listing import check_database, list_licenses, list_users
from skills_viewer.queries.order_by import CatalogOrderColumnResolver
from skills_viewer.utils.logging import get_logger

log = get_logger(__name__)

NO_STORE = {"cache-control": "no-store"}


def _envelope_response(envelope: ResultEnvelope) -> JSONResponse:
    return JSONResponse(
        content=envelope.to_payload(),
        status_code=200 if envelope.success else 500,
        headers=NO_STORE,
    )


def create_app(
    runner: Optional[QueryRunner] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    runner : QueryRunner, optional
        Query capability for the list endpoints. When omitted, the
        process-wide connection pool is created on first use and closed on
        shutdown.
    http_client : httpx.AsyncClient, optional
        Client the dashboard uses to call the list endpoints. When omitted,
        one is created against `settings.base_url` for the app's lifetime.
    settings : Settings, optional
        Defaults to the cached environment settings.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_client = http_client is None
        app.state.http_client = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.upstream_timeout_s,
        )
        log.info("Skills Viewer started", extra={"env": settings.app_env, "base_url": settings.base_url})
        try:
            yield
        finally:
            if owns_client:
                await app.state.http_client.aclose()
            if runner is None:
                close_connection_pool()

    app = FastAPI(title="Skills Viewer", lifespan=lifespan)

    def query_runner(request: Request) -> QueryRunner:
        current = getattr(request.app.state, "runner", None) or runner
        if current is None:
            current = PooledQueryRunner(settings=settings)
        request.app.state.runner = current
        return current

    def upstream_client(request: Request) -> httpx.AsyncClient:
        client = getattr(request.app.state, "http_client", None) or http_client
        if client is None:
            raise RuntimeError("Dashboard HTTP client is created by the app lifespan; none is running")
        return client

    @app.get("/users")
    def users(
        page: Optional[str] = None,
        page_size: Optional[str] = Query(None, alias="pageSize"),
        school: Optional[str] = None,
        exclude_test: Optional[str] = Query(None, alias="excludeTest"),
        q: Optional[str] = None,
        runner: QueryRunner = Depends(query_runner),
    ) -> JSONResponse:
        query = UserQuery(page=page, page_size=page_size, school=school, exclude_test=exclude_test, q=q)
        envelope = list_users(
            runner,
            query,
            order_resolver=CatalogOrderColumnResolver(runner, settings.db_schema),
            expose_errors=settings.expose_error_details,
        )
        return _envelope_response(envelope)

    @app.get("/licenses")
    def licenses(runner: QueryRunner = Depends(query_runner)) -> JSONResponse:
        envelope = list_licenses(
            runner,
            order_resolver=CatalogOrderColumnResolver(runner, settings.db_schema),
            expose_errors=settings.expose_error_details,
        )
        return _envelope_response(envelope)

    @app.get("/db-check")
    def db_check(runner: QueryRunner = Depends(query_runner)) -> JSONResponse:
        result = check_database(runner, expose_errors=settings.expose_error_details)
        return JSONResponse(
            content=jsonable_encoder(result),
            status_code=200 if result["success"] else 500,
            headers=NO_STORE,
        )

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(
        request: Request,
        page: Optional[str] = None,
        page_size: Optional[str] = Query(None, alias="pageSize"),
        school: Optional[str] = None,
        exclude_test: Optional[str] = Query(None, alias="excludeTest"),
        q: Optional[str] = None,
    ) -> HTMLResponse:
        filters = DashboardFilters.from_query(page, page_size, school, exclude_test, q)
        view = await load_dashboard(upstream_client(request), filters)
        return HTMLResponse(render_dashboard(view), headers=NO_STORE)

    return app


__all__ = ["create_app"]
